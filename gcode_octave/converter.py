"""
G-code → Octave 변환 파이프라인

입력 라인 → 마커 분류 (또는 토크나이저 → 위치 추적) → 세그먼트 누적 → 출력
"""
import getpass
import logging
import socket
from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Optional, TextIO, Union

from .accumulator import SegmentAccumulator
from .config import ConverterConfig, get_default_config
from .emitter import OctaveEmitter
from .markers import classify_line
from .models import ConversionResult, ParserState
from .parser import is_move_line, read_gcode, tokenize_move
from .tracker import advance

logger = logging.getLogger(__name__)


class ConversionError(Exception):
    """변환 실패"""
    pass


class GCodeFileError(ConversionError):
    """입력 파일을 읽을 수 없음"""
    pass


def convert_lines(
    lines: Iterable[str],
    stream: TextIO,
    config: Optional[ConverterConfig] = None,
) -> ConversionResult:
    """
    G-code 라인을 Octave 스크립트로 변환하여 stream 에 기록

    Args:
        lines: 입력 라인 (개행 포함 여부 무관)
        stream: 출력 텍스트 스트림
        config: 변환 설정 (없으면 기본값)

    Returns:
        ConversionResult (통계 + 진단 메시지)
    """
    config = config or get_default_config()
    emitter = OctaveEmitter(stream, lnum=config.lnum)
    acc = SegmentAccumulator(extrusion_rate_mode=config.extrusionrate)
    state = ParserState()
    result = ConversionResult()

    def emit(segment):
        if segment is None:
            return
        emitter.emit_segment(segment)
        result.segments_emitted += 1
        result.labels.append(segment.label)

    for line_number, line in enumerate(lines, 1):
        raw = line.rstrip("\r\n")
        result.lines_read = line_number

        marker = classify_line(raw)
        if marker is not None:
            acc.on_marker(marker)
        elif is_move_line(raw):
            tokens = tokenize_move(raw)
            for tag in tokens.unknown_tags:
                message = f"unknown {tag}"
                logger.warning(f"[Converter] line {line_number}: {message}: {raw}")
                emitter.emit_diagnostic(message)
                result.diagnostics.append(f"{line_number}: {message}")
            for tag, text in tokens.bad_values.items():
                message = f"bad value {tag}={text}"
                logger.warning(f"[Converter] line {line_number}: {message}: {raw}")
                emitter.emit_diagnostic(message)
                result.diagnostics.append(f"{line_number}: {message}")

            state, point = advance(state, tokens, config.extrusionrate)
            acc.append(point, cumulative_extrusion=state.e)
            result.moves += 1

        emit(acc.flush())

        if config.debug:
            emitter.emit_comment(raw, line_number)

        if acc.terminated:
            result.terminated = True
            logger.debug(f"[Converter] End of program at line {line_number}")
            break

    emit(acc.finish())
    result.segments_dropped = acc.dropped
    return result


def _user() -> str:
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        # uid 에 해당하는 passwd 항목이 없는 컨테이너 등
        return "unknown"


def header_lines(gcode_path: Union[str, Path], m_path: Union[str, Path], command_line: str = "") -> List[str]:
    """출력 파일 머리말 (user@host 날짜, 명령줄, 입력 -> 출력)"""
    stamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    return [
        "matlab/octave file",
        f"{_user()}@{socket.gethostname()} {stamp}",
        command_line,
        f"{gcode_path} -> {m_path}",
        "",
    ]


def convert_file(
    gcode_path: Union[str, Path],
    m_path: Union[str, Path],
    config: Optional[ConverterConfig] = None,
    command_line: str = "",
) -> ConversionResult:
    """
    G-code 파일 하나를 .m 파일로 변환 (기존 출력 파일은 덮어쓴다)

    Raises:
        GCodeFileError: 입력 파일이 없거나 읽을 수 없음
    """
    config = config or get_default_config()
    try:
        parsed = read_gcode(str(gcode_path))
    except OSError as e:
        raise GCodeFileError(f"Cannot read {gcode_path}: {e}") from e

    logger.info(f"[Converter] converting {gcode_path} to {m_path} ({parsed.encoding})")

    try:
        with open(m_path, "w", encoding="utf-8", newline="\n") as out:
            if config.header:
                OctaveEmitter(out).emit_header(header_lines(gcode_path, m_path, command_line))
            result = convert_lines(parsed.lines, out, config)
    except OSError as e:
        raise ConversionError(f"Cannot write {m_path}: {e}") from e

    logger.info(f"[Converter] {m_path}: {result.segments_emitted} segments, "
                f"{result.moves} moves, {len(result.diagnostics)} diagnostics")
    return result
