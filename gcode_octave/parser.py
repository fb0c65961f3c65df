from typing import List
from dataclasses import dataclass
import logging
import math
import re

from .models import MoveTokens

logger = logging.getLogger(__name__)

# G0/G1 (G00/G01 포함), G10/G11 등은 제외
MOVE_RE = re.compile(r"^\s*G0?[01](?![0-9.])", re.IGNORECASE)

# 태그 문자 + 값. 태그끼리 붙어 있어도 분리된다 (X10Y5)
# 지수 표기는 소문자 e + 부호만 값으로 인정 (1e-3). "X10E-2" 는 X10, E-2
WORD_RE = re.compile(r"([A-Za-z])\s*([-+]?[\d.]+e[-+]\d+|[^A-Za-z;\s]*)")

MOVE_FIELDS = ("X", "Y", "Z", "E", "F")


@dataclass
class ParseResult:
    """G-code 파일 읽기 결과"""
    lines: List[str]
    encoding: str
    is_fallback: bool  # latin-1 fallback으로 디코딩되었는지


def is_move_line(line: str) -> bool:
    return MOVE_RE.match(line) is not None


def tokenize_move(line: str) -> MoveTokens:
    """Extract X/Y/Z/E/F fields and the trailing comment from a G0/G1 line.

    Unknown tags are collected (not fatal) and the rest of the line is still
    parsed. A non-numeric value is recorded in bad_values and becomes NaN.
    """
    match = MOVE_RE.match(line)
    body = line[match.end():] if match else line

    comment = None
    if ";" in body:
        body, comment = body.split(";", 1)
        comment = comment.strip()

    tokens = MoveTokens(comment=comment)
    for tag, text in WORD_RE.findall(body):
        tag = tag.upper()
        if tag not in MOVE_FIELDS:
            tokens.unknown_tags.append(tag)
            continue
        try:
            tokens.params[tag] = float(text)
        except ValueError:
            tokens.bad_values[tag] = text
            tokens.params[tag] = math.nan

    return tokens


def read_gcode(file_path: str) -> ParseResult:
    """Read a G-code file into lines, trying several encodings.

    Returns:
        ParseResult with lines (without line endings), encoding used, and fallback flag
    """
    # 시도할 인코딩 목록 (우선순위 순)
    encodings = ['utf-8', 'cp949', 'euc-kr']

    content = None
    used_encoding = None
    is_fallback = False

    with open(file_path, 'rb') as f:
        raw_bytes = f.read()

    for encoding in encodings:
        try:
            content = raw_bytes.decode(encoding)
            used_encoding = encoding
            break
        except (UnicodeDecodeError, LookupError):
            continue

    # 모든 인코딩 실패 시 latin-1로 강제 디코딩 (항상 성공)
    if content is None:
        content = raw_bytes.decode('latin-1', errors='replace')
        used_encoding = 'latin-1 (fallback)'
        is_fallback = True
        logger.warning(f"[Parser] {file_path}: decoded with latin-1 fallback")

    lines = content.replace('\r\n', '\n').replace('\r', '\n').split('\n')
    # 마지막 개행 뒤의 빈 문자열은 라인이 아님
    if lines and lines[-1] == "":
        lines.pop()

    return ParseResult(lines=lines, encoding=used_encoding, is_fallback=is_fallback)
