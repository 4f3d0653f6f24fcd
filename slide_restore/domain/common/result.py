# slide_restore/domain/common/result.py

"""
Result pattern implementation for error handling.

Services return either a success value or a DomainError instead of raising
for expected failures (bad uploads, empty instructions, model failures).
"""
from typing import TypeVar, Generic, Optional, Union, Callable

from slide_restore.domain.common.errors import DomainError, ErrorCategory

T = TypeVar('T')
U = TypeVar('U')


class Result(Generic[T]):
    """
    Result type for representing success or failure of an operation.

    Attributes:
        value: The result value (if successful)
        error: Error object (if failed)
        is_success: Whether the operation was successful
        is_failure: Whether the operation failed
    """

    def __init__(self, value: Optional[T], error: Optional[Union[str, DomainError]]):
        """
        Initialize a Result object.

        Args:
            value: The result value (or None if failed)
            error: Error object or message (or None if successful)
        """
        self._value = value

        # Plain strings become uncategorised domain errors
        if isinstance(error, str):
            self._error = DomainError(message=error, category=ErrorCategory.UNKNOWN)
        else:
            self._error = error

    @classmethod
    def ok(cls, value: T) -> 'Result[T]':
        """Create a successful result with a value."""
        return cls(value, None)

    @classmethod
    def fail(cls, error: Union[str, DomainError]) -> 'Result[T]':
        """Create a failed result with an error message or DomainError."""
        return cls(None, error)

    @property
    def is_success(self) -> bool:
        """Whether the result represents a successful operation."""
        return self._error is None

    @property
    def is_failure(self) -> bool:
        """Whether the result represents a failed operation."""
        return not self.is_success

    @property
    def value(self) -> T:
        """
        Get the success value.

        Raises:
            ValueError: If the result is a failure
        """
        if self.is_failure:
            raise ValueError(f"Cannot access value of a failed result: {self._error}")
        return self._value

    @property
    def error(self) -> DomainError:
        """
        Get the error.

        Raises:
            ValueError: If the result is a success
        """
        if self.is_success:
            raise ValueError("Cannot access error of a successful result")
        return self._error

    def map(self, func: Callable[[T], U]) -> 'Result[U]':
        """
        Transform the value if successful.

        Exceptions raised by func become a failed Result.
        """
        if self.is_failure:
            return Result.fail(self._error)
        try:
            return Result.ok(func(self._value))
        except Exception as e:
            return Result.fail(DomainError.from_exception(e))

    @classmethod
    def from_operation(cls, operation_func, logger, error_type, error_message, **kwargs):
        """
        Create a Result from an operation that might raise.

        Args:
            operation_func: The function to execute
            logger: Logger to use for errors
            error_type: The domain error type to create on failure
            error_message: Error message prefix
            **kwargs: Context information for error details

        Returns:
            A Result holding the operation's return value or the error
        """
        try:
            result = operation_func()
            if isinstance(result, Result):
                return result
            return cls.ok(result)
        except Exception as e:
            error = error_type(
                message=f"{error_message}: {e}",
                details=kwargs,
                inner_error=e
            )
            logger.error(str(error))
            return cls.fail(error)

    def __repr__(self) -> str:
        if self.is_success:
            return f"Result.ok({self._value!r})"
        return f"Result.fail({self._error})"
