"""Source-specific exceptions."""

from typing import Optional


class SourceError(Exception):
    """Base exception for source-related errors."""

    def __init__(self, message: str, source_name: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.source_name = source_name


class SourceConfigError(SourceError):
    """Exception raised when source configuration is invalid."""



class SourceNotFoundError(SourceError):
    """Exception raised when a source path does not exist."""



class SourceReadError(SourceError):
    """Exception raised when a calendar file cannot be read."""
