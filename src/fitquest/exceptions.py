"""
Custom exceptions for the FitQuest engine.

The scoring functions themselves never raise on malformed log data; they
degrade to zero contributions. These exceptions cover the boundaries around
the engine: loading exported documents and reading configuration. Each
exception includes:
- A descriptive message
- An error code
- Optional details for debugging
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(str, Enum):
    """Error codes for consistent error reporting."""

    INTERNAL_ERROR = "INTERNAL_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    DATA_LOAD_ERROR = "DATA_LOAD_ERROR"
    DATA_NOT_FOUND = "DATA_NOT_FOUND"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"


class FitQuestError(Exception):
    """
    Base exception for all FitQuest errors.

    Attributes:
        message: Human-readable error message
        code: Error code from ErrorCode enum
        details: Optional dictionary with additional error details
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for structured output."""
        result: Dict[str, Any] = {
            "error": {
                "code": self.code.value,
                "message": self.message,
            }
        }
        if self.details:
            result["error"]["details"] = self.details
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code.value}, message={self.message!r})"


class DataLoadError(FitQuestError):
    """Raised when an exported document cannot be read or validated."""

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        details = dict(details or {})
        if path:
            details["path"] = path
        super().__init__(
            message=message,
            code=ErrorCode.DATA_LOAD_ERROR,
            details=details,
        )


class DataNotFoundError(FitQuestError):
    """Raised when a requested input file does not exist."""

    def __init__(self, path: str) -> None:
        super().__init__(
            message=f"File not found: {path}",
            code=ErrorCode.DATA_NOT_FOUND,
            details={"path": path},
        )


class ConfigurationError(FitQuestError):
    """Raised when settings hold an unusable value."""

    def __init__(self, message: str, setting: Optional[str] = None) -> None:
        super().__init__(
            message=message,
            code=ErrorCode.CONFIGURATION_ERROR,
            details={"setting": setting} if setting else None,
        )
