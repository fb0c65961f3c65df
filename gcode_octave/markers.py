"""
구조 마커 분류기
;LAYER:<n> / ;TYPE:<label> / M84 (프로그램 종료) 감지

슬라이서 주석 구조에 의존한다 (Cura 형식).
"""
from typing import Dict, Optional
import logging
import re

from .models import Marker, MarkerKind

logger = logging.getLogger(__name__)

LAYER_RE = re.compile(r"LAYER:\s*(\S*)")
TYPE_RE = re.compile(r"TYPE:\s*(.*)")
END_RE = re.compile(r"\bM84\b")

# TYPE 라벨 → 짧은 코드 (앞에서부터 부분 일치, 일치 없으면 "")
TYPE_SHORT_CODES: Dict[str, str] = {
    "SKIN": "sn",
    "SKIRT": "st",
    "WALL-INNER": "wi",
    "WALL-OUTER": "wo",
    "FILL": "fi",
}


def short_code(label: str) -> str:
    label = label.strip().upper()
    for key, code in TYPE_SHORT_CODES.items():
        if key in label:
            return code
    return ""


def _layer_number(text: str, line: str) -> int:
    match = re.match(r"-?\d+", text)
    if not match:
        logger.warning(f"[Marker] LAYER without number, using 0: {line.strip()}")
        return 0
    return int(match.group(0))


def classify_line(line: str) -> Optional[Marker]:
    """
    라인을 마커로 분류 (LAYER > TYPE > END 우선순위)

    Returns:
        Marker 또는 마커가 아니면 None
    """
    match = LAYER_RE.search(line)
    if match:
        return Marker(kind=MarkerKind.LAYER, layer=_layer_number(match.group(1), line))

    match = TYPE_RE.search(line)
    if match:
        label = match.group(1).strip()
        return Marker(kind=MarkerKind.TYPE, label=label, short_code=short_code(label))

    if END_RE.search(line):
        return Marker(kind=MarkerKind.END)

    return None
