from .config import ConverterConfig, ConfigError, apply_overrides, get_default_config
from .converter import (
    convert_lines,
    convert_file,
    ConversionError,
    GCodeFileError,
)
from .models import ConversionResult, Segment, Waypoint

__all__ = [
    'convert_lines',
    'convert_file',
    'ConversionError',
    'GCodeFileError',
    'ConversionResult',
    'ConverterConfig',
    'ConfigError',
    'Segment',
    'Waypoint',
    'apply_overrides',
    'get_default_config',
]
