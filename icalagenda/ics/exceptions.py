"""ICS-specific exceptions for error handling."""

from typing import Optional


class ICSError(Exception):
    """Base exception for ICS-related errors."""

    def __init__(self, message: str, source_path: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.source_path = source_path


class ICSParseError(ICSError):
    """Exception raised when ICS content cannot be parsed."""



class ICSFileError(ICSError):
    """Exception raised when an ICS file cannot be read."""



class RRuleParseError(ICSError):
    """Exception raised when an RRULE string is unusable."""

