"""
Position Tracker 테스트
"""
import math

import pytest

from gcode_octave.models import MoveTokens, ParserState
from gcode_octave.parser import tokenize_move
from gcode_octave.tracker import advance, extrusion_rate


def step(state, line, rate_mode=False):
    return advance(state, tokenize_move(line), rate_mode)


class TestAdvance:
    """advance() 상태 갱신"""

    def test_initial_state_is_zero(self):
        """초기 상태는 모두 0"""
        state = ParserState()
        assert (state.x, state.y, state.z, state.e, state.f) == (0.0, 0.0, 0.0, 0.0, 0.0)

    def test_sticky_fields(self):
        """F 가 없는 두 번째 라인은 이전 F 를 사용"""
        state, first = step(ParserState(), "G1 X10 Y1 Z0.2 E1 F1200")
        state, second = step(state, "G1 X20")
        assert second.feed_rate == first.feed_rate == 1200.0
        assert (second.y, second.z, second.extrusion) == (1.0, 0.2, 1.0)

    def test_input_state_is_not_modified(self):
        """입력 상태는 변경되지 않음"""
        state = ParserState()
        new, _ = step(state, "G1 X5")
        assert state.x == 0.0
        assert new.x == 5.0

    def test_distance_is_euclidean(self):
        """3차원 유클리드 거리"""
        state, point = step(ParserState(x=1, y=1, z=1), "G1 X4 Y5 Z13")
        assert point.distance == pytest.approx(13.0)

    def test_raw_extrusion_recorded_by_default(self):
        """기본값은 누적 압출량"""
        _, point = step(ParserState(e=3.0), "G1 X10 E4")
        assert point.extrusion == 4.0

    def test_extrusion_rate_mode(self):
        """rate 모드: 거리당 압출량"""
        _, point = step(ParserState(e=3.0), "G1 X10 E4", rate_mode=True)
        assert point.extrusion == pytest.approx(0.1)

    def test_zero_distance_rate_is_zero(self):
        """이동 없이 압출만 (retract/prime)"""
        _, point = step(ParserState(e=1.0), "G1 E5 F1800", rate_mode=True)
        assert point.distance == 0.0
        assert point.extrusion == 0.0

    def test_unknown_fields_are_ignored(self):
        """알 수 없는 태그는 상태에 영향 없음"""
        state, _ = advance(ParserState(), MoveTokens(params={"X": 1.0}, unknown_tags=["Q"]))
        assert state.x == 1.0

    def test_nan_propagates_without_error(self):
        """잘못된 값(NaN)은 예외 없이 전파"""
        state, point = step(ParserState(), "G1 Xabc Y1")
        assert math.isnan(state.x)
        assert math.isnan(point.distance)
        assert point.y == 1.0


class TestExtrusionRate:
    """extrusion_rate() 계산"""

    @pytest.mark.parametrize("e_old,e_new,distance,expected", [
        (0.0, 1.0, 10.0, 0.1),
        (2.0, 1.0, 4.0, -0.25),
        (0.0, 5.0, 0.0, 0.0),
    ])
    def test_rate(self, e_old, e_new, distance, expected):
        """거리 0 이면 0"""
        assert extrusion_rate(e_old, e_new, distance) == pytest.approx(expected)
