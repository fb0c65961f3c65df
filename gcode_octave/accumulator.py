"""
Segment Accumulator
이동 포인트를 (layer, type) 라벨별 세그먼트로 묶는 상태 머신

상태:
- ACCUMULATING: 이동 라인을 현재 세그먼트 버퍼에 추가
- FLUSH_PENDING: 마커가 flush 를 요청했으나 아직 실행되지 않음
- FLUSHED: flush 직후 (다음 추가 전)

flush 조건: FLUSH_PENDING 이고 (이전 세그먼트 코드가 비어있지 않음 또는 현재 레이어 == 0).
라벨 없는 세그먼트는 flush 하지 않고 다음 라벨 세그먼트에 합쳐진다.
"""
from typing import Optional
import logging

from .models import (
    AccumulatorState,
    FlushReason,
    Marker,
    MarkerKind,
    SEED_FEED_RATE,
    Segment,
    Waypoint,
)

logger = logging.getLogger(__name__)

_REASONS = {
    MarkerKind.LAYER: FlushReason.LAYER,
    MarkerKind.TYPE: FlushReason.TYPE,
    MarkerKind.END: FlushReason.FINAL,
}


class SegmentAccumulator:
    def __init__(self, extrusion_rate_mode: bool = False):
        self.extrusion_rate_mode = extrusion_rate_mode
        self.state = AccumulatorState.ACCUMULATING
        self.reason: Optional[FlushReason] = None
        self.terminated = False      # END 마커 이후 flush 가 끝나면 입력 처리 종료
        self.dropped = 0             # guard 로 버려진 final 세그먼트 수
        self.flushes = 0             # 실행된 flush 수

        self.layer = 0               # 현재 레이어
        self.type_code = ""          # 현재 타입 코드
        self.prev_layer = 0          # flush 될 세그먼트의 라벨
        self.prev_type_code = ""

        # 원점 (첫 flush 후 시드)
        self.last_point = Waypoint(x=0.0, y=0.0, z=0.0, extrusion=0.0, feed_rate=0.0, distance=0.0)
        self.last_extrusion = 0.0    # 마지막 누적 압출량 (rate 모드에서도 시드용으로 유지)
        self.moves = 0               # 현재 세그먼트의 실제 이동 수 (시드 제외)
        self.segment = Segment(layer=0)   # 첫 세그먼트는 빈 버퍼로 시작

    @property
    def current_label(self) -> str:
        return f"{self.layer}{self.type_code}"

    def on_marker(self, marker: Marker):
        """마커 처리: 이전 라벨 기억, 새 라벨 설정, flush 요청"""
        self.prev_layer = self.layer
        self.prev_type_code = self.type_code

        if marker.kind == MarkerKind.LAYER:
            self.layer = marker.layer or 0
            self.type_code = ""
        elif marker.kind == MarkerKind.TYPE:
            self.type_code = marker.short_code
        elif marker.kind == MarkerKind.END:
            self.terminated = True

        # flush 이전의 레이어 마커는 첫 세그먼트를 닫지 않는다
        if marker.kind == MarkerKind.LAYER and self.flushes == 0 and self.state != AccumulatorState.FLUSH_PENDING:
            return

        self.state = AccumulatorState.FLUSH_PENDING
        self.reason = _REASONS[marker.kind]

    def append(self, point: Waypoint, cumulative_extrusion: Optional[float] = None):
        """이동 포인트 추가. 대기 중인 flush 는 유지"""
        self.segment.append(point)
        self.moves += 1
        self.last_point = point
        if cumulative_extrusion is None:
            cumulative_extrusion = point.extrusion
        self.last_extrusion = cumulative_extrusion
        if self.state == AccumulatorState.FLUSHED:
            self.state = AccumulatorState.ACCUMULATING

    def flush_allowed(self) -> bool:
        if self.state != AccumulatorState.FLUSH_PENDING:
            return False
        return self.prev_type_code != "" or self.layer == 0

    def flush(self) -> Optional[Segment]:
        """
        조건을 만족하면 현재 세그먼트를 닫고 반환, 버퍼는 마지막 포인트로 시드

        final flush 가 조건을 만족하지 못하면 세그먼트는 버려진다.

        Returns:
            닫힌 세그먼트 (실제 이동이 없거나 조건 불만족이면 None)
        """
        if self.state != AccumulatorState.FLUSH_PENDING:
            return None
        if not self.flush_allowed():
            if self.reason == FlushReason.FINAL:
                self._drop()
            return None

        closed = self.segment
        closed.layer = self.prev_layer
        closed.type_code = self.prev_type_code
        moves = self.moves
        self._reseed()
        self.flushes += 1

        if moves == 0:
            logger.debug(f"[Accumulator] Segment {closed.label} has no moves, skipped")
            return None
        return closed

    def finish(self) -> Optional[Segment]:
        """
        입력 종료 처리. M84 없이 끝났으면 final 마커로 간주한다.

        라벨 없는 마지막 세그먼트 (layer != 0) 는 버려진다.
        """
        if self.state == AccumulatorState.FLUSH_PENDING and self.reason == FlushReason.FINAL:
            return self.flush()
        if self.terminated:
            return None
        self.on_marker(Marker(kind=MarkerKind.END))
        return self.flush()

    def seed_point(self) -> Waypoint:
        """이전 세그먼트의 마지막 포인트 복제 (distance 0, feed rate -1)"""
        return Waypoint(
            x=self.last_point.x,
            y=self.last_point.y,
            z=self.last_point.z,
            extrusion=0.0 if self.extrusion_rate_mode else self.last_extrusion,
            feed_rate=SEED_FEED_RATE,
            distance=0.0,
        )

    def _reseed(self):
        self.segment = Segment(layer=self.layer, type_code=self.type_code)
        self.segment.append(self.seed_point())
        self.moves = 0
        self.state = AccumulatorState.FLUSHED
        self.reason = None

    def _drop(self):
        if self.moves > 0:
            self.dropped += 1
            logger.info(f"[Accumulator] Unlabeled trailing segment dropped "
                        f"(layer {self.layer}, {self.moves} moves)")
        self._reseed()
