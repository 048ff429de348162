"""Calendar source management module."""

from .exceptions import SourceConfigError, SourceError, SourceNotFoundError, SourceReadError
from .file_source import ICSFileSourceHandler, parse_source
from .manager import SourceManager
from .models import SourceConfig, SourceLoadResult

__all__ = [
    "ICSFileSourceHandler",
    "SourceConfig",
    "SourceConfigError",
    "SourceError",
    "SourceLoadResult",
    "SourceManager",
    "SourceNotFoundError",
    "SourceReadError",
    "parse_source",
]
