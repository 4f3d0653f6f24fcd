# slide_restore/domain/common/errors.py

"""
Domain-specific error types for standardized error handling.

Restore failures are reported to the user as a single RestoreFailedError;
the concrete cause (external call or malformed response) travels with it
so it can be logged.
"""
from enum import Enum
from typing import Optional, Dict, Any


class ErrorCategory(Enum):
    """Categories of errors in the application."""
    VALIDATION = "Validation"
    CONFIGURATION = "Configuration"
    DECODE = "Decode"
    EXTERNAL = "External"
    RESTORE = "Restore"
    RESOURCE = "Resource"
    UI = "UI"
    UNKNOWN = "Unknown"


class ErrorSeverity(Enum):
    """Severity levels for errors."""
    INFO = "Info"
    WARNING = "Warning"
    ERROR = "Error"
    CRITICAL = "Critical"


class DomainError:
    """
    Base class for domain-specific errors.

    Carries structured information for logging and user feedback.
    """

    def __init__(self,
                 message: str,
                 category: ErrorCategory = ErrorCategory.UNKNOWN,
                 severity: ErrorSeverity = ErrorSeverity.ERROR,
                 code: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None,
                 inner_error: Optional[Exception] = None):
        """
        Initialize a domain error.

        Args:
            message: Human-readable error message
            category: Error category
            severity: Error severity
            code: Optional error code for programmatic handling
            details: Optional additional error details
            inner_error: Optional original exception
        """
        self.message = message
        self.category = category
        self.severity = severity
        self.code = code
        self.details = details or {}
        self.inner_error = inner_error

    @staticmethod
    def from_exception(ex: Exception,
                       category: ErrorCategory = ErrorCategory.UNKNOWN,
                       severity: ErrorSeverity = ErrorSeverity.ERROR) -> 'DomainError':
        """Create a domain error from an exception."""
        return DomainError(
            message=str(ex),
            category=category,
            severity=severity,
            inner_error=ex
        )

    def __str__(self) -> str:
        return f"{self.category.value} Error: {self.message}"


class ValidationError(DomainError):
    """Error for validation failures."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None, inner_error: Optional[Exception] = None):
        super().__init__(
            message=message,
            category=ErrorCategory.VALIDATION,
            severity=ErrorSeverity.WARNING,
            details=details,
            inner_error=inner_error
        )


class ConfigurationError(DomainError):
    """Error for configuration issues."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None, inner_error: Optional[Exception] = None):
        super().__init__(
            message=message,
            category=ErrorCategory.CONFIGURATION,
            severity=ErrorSeverity.ERROR,
            details=details,
            inner_error=inner_error
        )


class ResourceError(DomainError):
    """Error for file or resource access issues."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None, inner_error: Optional[Exception] = None):
        super().__init__(
            message=message,
            category=ErrorCategory.RESOURCE,
            severity=ErrorSeverity.ERROR,
            details=details,
            inner_error=inner_error
        )


class UIError(DomainError):
    """Error for UI-related issues."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None, inner_error: Optional[Exception] = None):
        super().__init__(
            message=message,
            category=ErrorCategory.UI,
            severity=ErrorSeverity.WARNING,
            details=details,
            inner_error=inner_error
        )


class DecodeError(DomainError):
    """Uploaded bytes are not a readable image or PDF."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None, inner_error: Optional[Exception] = None):
        super().__init__(
            message=message,
            category=ErrorCategory.DECODE,
            severity=ErrorSeverity.WARNING,
            code="decode_failed",
            details=details,
            inner_error=inner_error
        )


class EmptyInstructionError(DomainError):
    """No region carries replacement text, so there is nothing to restore."""

    def __init__(self, message: str = "Enter replacement text for at least one region",
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            category=ErrorCategory.VALIDATION,
            severity=ErrorSeverity.WARNING,
            code="empty_instruction",
            details=details
        )


class ExternalCallError(DomainError):
    """The generative model call failed (network, auth, quota or model error)."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None, inner_error: Optional[Exception] = None):
        super().__init__(
            message=message,
            category=ErrorCategory.EXTERNAL,
            severity=ErrorSeverity.ERROR,
            code="external_call_failed",
            details=details,
            inner_error=inner_error
        )


class MalformedResponseError(DomainError):
    """The model answered, but no usable image payload was found."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None, inner_error: Optional[Exception] = None):
        super().__init__(
            message=message,
            category=ErrorCategory.EXTERNAL,
            severity=ErrorSeverity.ERROR,
            code="malformed_response",
            details=details,
            inner_error=inner_error
        )


class RestoreFailedError(DomainError):
    """
    User-visible failure of a restore run.

    Attributes:
        cause: The underlying error (model call, image payload or local encoding)
    """

    def __init__(self, cause: DomainError,
                 message: str = "Restore failed. Try narrower regions or check your API key."):
        super().__init__(
            message=message,
            category=ErrorCategory.RESTORE,
            severity=ErrorSeverity.ERROR,
            code="restore_failed",
            details={"cause": cause.code or cause.category.value, "reason": cause.message},
            inner_error=cause.inner_error
        )
        self.cause = cause
