"""
G-code → Octave converter configuration
기본값 < 환경변수(.env) < CLI 플래그 < key=value 오버라이드 순으로 적용
"""
import os
import logging
from pathlib import Path
from typing import Dict, Iterable, Optional, Union

import dotenv
from pydantic import BaseModel, ConfigDict, ValidationError

logger = logging.getLogger(__name__)

ENV_PREFIX = "G2M_"


class ConfigError(ValueError):
    """잘못된 설정 값"""
    pass


class ConverterConfig(BaseModel):
    """변환 설정 (코어에서는 읽기 전용)"""
    model_config = ConfigDict(frozen=True)

    debug: bool = False          # 모든 입력 라인을 주석으로 출력
    lnum: bool = False           # 주석에 라인 번호 추가
    extrusionrate: bool = False  # 누적 압출량 대신 압출률 출력
    gext: str = "dagoma0.g"      # SD 카드 출력용 G-code 확장자 (출력 파일명에서 제거)
    header: bool = True          # 출력 파일 머리말
    dry_run: bool = False        # 테스트 실행: *.mecho 로 출력


def get_default_config() -> ConverterConfig:
    return ConverterConfig()


def config_from_env(env_file: Optional[str] = None) -> ConverterConfig:
    """환경변수(G2M_DEBUG, G2M_LNUM ...)에서 설정 로드. .env 파일이 있으면 먼저 읽는다."""
    dotenv.load_dotenv(env_file or dotenv.find_dotenv(usecwd=True))
    values = {}
    for key in ConverterConfig.model_fields:
        value = os.getenv(ENV_PREFIX + key.upper())
        if value is not None:
            values[key] = value
    return apply_overrides(get_default_config(), values)


def apply_overrides(config: ConverterConfig, overrides: Dict[str, str]) -> ConverterConfig:
    """
    key=value 오버라이드 적용

    Args:
        config: 기준 설정
        overrides: {"debug": "1", "gext": "g"} 형태

    Returns:
        새 ConverterConfig (원본은 변경하지 않음)

    Raises:
        ConfigError: 값 검증 실패
    """
    known = {}
    for key, value in overrides.items():
        if key not in ConverterConfig.model_fields:
            logger.warning(f"[Config] Unknown setting ignored: {key}={value}")
            continue
        # header= (빈 값)은 끄기
        if value == "" and ConverterConfig.model_fields[key].annotation is bool:
            value = False
        known[key] = value

    if not known:
        return config

    try:
        return ConverterConfig.model_validate({**config.model_dump(), **known})
    except ValidationError as e:
        raise ConfigError(f"Invalid setting: {e}") from e


def parse_override(arg: str) -> Optional[tuple]:
    """'key=value' 인자를 (key, value) 로 분리. 형식이 아니면 None"""
    if "=" not in arg or arg.startswith("="):
        return None
    key, value = arg.split("=", 1)
    return key.strip(), value.strip()


def output_path_for(gcode_path: Union[str, Path], config: ConverterConfig) -> Path:
    """
    입력 파일명에서 출력 .m 파일명 생성

    foo.dagoma0.g -> foo.m, bar.g -> bar.g.m (gext 가 일치하지 않으면 그대로 붙임)
    dry run 에서는 .mecho
    """
    path = Path(gcode_path)
    name = path.name
    suffix = f".{config.gext}" if config.gext else ""
    if suffix and name.endswith(suffix) and len(name) > len(suffix):
        name = name[: -len(suffix)]
    ext = ".mecho" if config.dry_run else ".m"
    return path.with_name(name + ext)


def find_latest_gcode(directory: Union[str, Path] = ".", pattern: str = "*.g") -> Optional[Path]:
    """디렉토리에서 가장 최근에 수정된 G-code 파일"""
    candidates = [p for p in Path(directory).glob(pattern) if p.is_file()]
    if not candidates:
        return None
    return max(candidates, key=lambda p: p.stat().st_mtime)


def describe(config: ConverterConfig) -> Iterable[str]:
    """설정 목록 (key="value" 형식, 정렬)"""
    for key, value in sorted(config.model_dump().items()):
        if isinstance(value, bool):
            value = int(value)
        yield f'{key}="{value}"'
