import math
from typing import Tuple

from .models import MoveTokens, ParserState, Waypoint

# 토큰 필드 → ParserState 속성
_FIELD_ATTRS = {"X": "x", "Y": "y", "Z": "z", "E": "e", "F": "f"}


def advance(state: ParserState, tokens: MoveTokens, extrusion_rate_mode: bool = False) -> Tuple[ParserState, Waypoint]:
    """
    한 이동 라인을 적용한 새 상태와 Waypoint 반환 (state 는 변경하지 않음)

    라인에 없는 필드는 이전 값을 유지한다 (sticky).
    distance 와 압출률은 갱신 전 상태 기준으로 계산한다.
    """
    updates = {_FIELD_ATTRS[tag]: value for tag, value in tokens.params.items() if tag in _FIELD_ATTRS}
    new = state.model_copy(update=updates)

    distance = math.sqrt((new.x - state.x) ** 2 + (new.y - state.y) ** 2 + (new.z - state.z) ** 2)
    rate = extrusion_rate(state.e, new.e, distance)

    point = Waypoint(
        x=new.x,
        y=new.y,
        z=new.z,
        extrusion=rate if extrusion_rate_mode else new.e,
        feed_rate=new.f,
        distance=distance,
    )
    return new, point


def extrusion_rate(e_old: float, e_new: float, distance: float) -> float:
    """이동 거리당 압출량. 거리가 0 이면 0"""
    if distance > 0:
        return (e_new - e_old) / distance
    return 0.0
