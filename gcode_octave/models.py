from enum import Enum
from typing import List, Optional, Dict
from dataclasses import dataclass, field

import numpy as np
from pydantic import BaseModel, ConfigDict

# 세그먼트 버퍼 태그 (출력 배열 이름의 첫 글자)
BUFFER_TAGS = ("x", "y", "z", "d", "e", "f")

# 시드 포인트의 feed rate (실제 이동이 아님을 표시)
SEED_FEED_RATE = -1.0


# --- From Tokenizer ---
class MoveTokens(BaseModel):
    params: Dict[str, float] = {}      # {"X": 10.0, "E": 1.2} - 라인에 있는 필드만
    comment: Optional[str] = None      # trailing ; comment
    unknown_tags: List[str] = []       # 인식하지 못한 태그 (예: "Q")
    bad_values: Dict[str, str] = {}    # 숫자가 아닌 값 {"X": "1.2.3"}


# --- From Position Tracker ---
class ParserState(BaseModel):
    """마지막으로 본 좌표/압출/속도 값 (sticky)"""
    model_config = ConfigDict(frozen=True)

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    e: float = 0.0
    f: float = 0.0


class Waypoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    x: float
    y: float
    z: float
    extrusion: float   # 누적 압출량 또는 압출률 (extrusionrate 설정에 따름)
    feed_rate: float
    distance: float


# --- From Marker Classifier ---
class MarkerKind(str, Enum):
    LAYER = "layer"    # ;LAYER:<n>
    TYPE = "type"      # ;TYPE:<label>
    END = "end"        # M84


class Marker(BaseModel):
    kind: MarkerKind
    layer: Optional[int] = None
    label: Optional[str] = None
    short_code: str = ""


# --- Segment Accumulator ---
class AccumulatorState(str, Enum):
    ACCUMULATING = "accumulating"
    FLUSH_PENDING = "flush_pending"
    FLUSHED = "flushed"


class FlushReason(str, Enum):
    LAYER = "layer"
    TYPE = "type"
    FINAL = "final"


@dataclass
class Segment:
    """같은 (layer, type) 라벨을 공유하는 연속 이동 구간"""
    layer: int
    type_code: str = ""
    x: List[float] = field(default_factory=list)
    y: List[float] = field(default_factory=list)
    z: List[float] = field(default_factory=list)
    d: List[float] = field(default_factory=list)
    e: List[float] = field(default_factory=list)
    f: List[float] = field(default_factory=list)

    @property
    def label(self) -> str:
        return f"{self.layer}{self.type_code}"

    def __len__(self) -> int:
        return len(self.x)

    def append(self, point: Waypoint):
        self.x.append(point.x)
        self.y.append(point.y)
        self.z.append(point.z)
        self.d.append(point.distance)
        self.e.append(point.extrusion)
        self.f.append(point.feed_rate)

    def arrays(self) -> Dict[str, np.ndarray]:
        """버퍼를 태그별 float64 배열로 반환 (x, y, z, d, e, f 순서)"""
        return {tag: np.asarray(getattr(self, tag), dtype=np.float64) for tag in BUFFER_TAGS}


# --- Final Result ---
class ConversionResult(BaseModel):
    lines_read: int = 0
    moves: int = 0
    segments_emitted: int = 0
    segments_dropped: int = 0
    diagnostics: List[str] = []
    labels: List[str] = []          # 출력된 세그먼트 라벨 (순서대로)
    terminated: bool = False        # M84 를 만나 처리를 종료했는지
