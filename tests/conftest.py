"""
공용 fixture / 헬퍼
"""
import io
import re
from typing import Dict, List

import pytest

from gcode_octave.config import ConverterConfig
from gcode_octave.converter import convert_lines

ARRAY_RE = re.compile(r"^([xyzdef])(\w+)=\[(.*)\];$")


def run(lines: List[str], **settings) -> str:
    """라인 목록을 변환하여 출력 텍스트 반환"""
    out = io.StringIO()
    convert_lines(lines, out, ConverterConfig(**settings))
    return out.getvalue()


def parse_arrays(text: str) -> Dict[str, List[float]]:
    """출력 텍스트에서 배열 선언 추출 {"x0fi": [0.0, 10.0, ...]}"""
    arrays = {}
    for line in text.splitlines():
        match = ARRAY_RE.match(line)
        if match:
            tag, label, body = match.groups()
            arrays[tag + label] = [float(v) for v in body.split()]
    return arrays


def plot_labels(text: str) -> List[str]:
    return re.findall(r"^plot3\( x(\w+),", text, re.MULTILINE)


@pytest.fixture
def scenario_a():
    """LAYER:0 / TYPE:FILL 에서 두 번 이동 후 종료"""
    return [
        ";LAYER:0",
        ";TYPE:FILL",
        "G1 X10 Y0 Z0.2 E1 F1200",
        "G1 X20 Y0 Z0.2 E2 F1200",
        "M84",
    ]


@pytest.fixture
def cura_program():
    """Cura 형식의 2 레이어 프로그램"""
    return [
        ";FLAVOR:Marlin",
        "G28 ;Home",
        "G1 Z15.0 F6000",
        ";LAYER_COUNT:2",
        ";LAYER:0",
        "G0 F3600 X5 Y5 Z0.3",
        ";TYPE:SKIRT",
        "G1 F1200 X15 Y5 E0.5",
        "G1 X15 Y15 E1.0",
        ";TYPE:WALL-OUTER",
        "G1 X5 Y15 E1.5",
        "G1 X5 Y5 E2.0",
        ";LAYER:1",
        "G0 X6 Y6 Z0.5",
        ";TYPE:WALL-INNER",
        "G1 X14 Y6 E2.4",
        ";TYPE:FILL",
        "G1 X14 Y14 E2.8",
        "M107",
        "M84",
        "G1 X100 Y100",
    ]
