"""
Exceptions for recovery-coach.

The computation engines never raise for missing or corrupt data; they fall
back to neutral values. Exceptions are raised at the edges only: loading
catalog and snapshot files, and by data sources, whose failures the
pipeline turns back into neutral inputs.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(str, Enum):
    """Error codes for consistent error reporting."""

    INTERNAL_ERROR = "INTERNAL_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # File formats
    SNAPSHOT_FORMAT_ERROR = "SNAPSHOT_FORMAT_ERROR"
    SNAPSHOT_NOT_FOUND = "SNAPSHOT_NOT_FOUND"
    EXERCISE_LIBRARY_ERROR = "EXERCISE_LIBRARY_ERROR"

    # Upstream collaborators
    DATA_SOURCE_ERROR = "DATA_SOURCE_ERROR"


class RecoveryCoachError(Exception):
    """
    Base exception for all recovery-coach errors.

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
        """Convert exception to a dictionary for structured output."""
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


class ValidationError(RecoveryCoachError):
    """Raised when caller-supplied arguments are invalid."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        error_details = details or {}
        if field:
            error_details["field"] = field
        super().__init__(message=message, code=ErrorCode.VALIDATION_ERROR, details=error_details)


class SnapshotFormatError(RecoveryCoachError):
    """Raised when a snapshot bundle cannot be read or parsed."""

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        code: ErrorCode = ErrorCode.SNAPSHOT_FORMAT_ERROR,
    ) -> None:
        error_details = details or {}
        if path:
            error_details["path"] = path
        super().__init__(message=message, code=code, details=error_details)


class ExerciseLibraryError(RecoveryCoachError):
    """Raised when the exercise catalog cannot be loaded."""

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        error_details = details or {}
        if path:
            error_details["path"] = path
        super().__init__(message=message, code=ErrorCode.EXERCISE_LIBRARY_ERROR, details=error_details)


class DataSourceError(RecoveryCoachError):
    """Raised by a data source when a fetch fails."""

    def __init__(
        self,
        source: str,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        code: ErrorCode = ErrorCode.DATA_SOURCE_ERROR,
    ) -> None:
        error_details = details or {}
        error_details["source"] = source
        self.source = source
        super().__init__(message=message, code=code, details=error_details)
