"""
Typed errors for sqltemplate.

Every failure the template itself detects while talking to a driver is a
``DataAccessError``: one channel the caller can catch, with the subclass
naming the lifecycle phase that failed and ``cause`` holding the driver's
original exception. Errors raised by caller-supplied mappers and extractors
are never rewrapped.

Manifesto:
    - **One subclass per phase:** acquire, prepare, bind, execute, release
    - **Explicit Retry Semantics:** Each error knows if it's retryable
    - **Statement context:** Errors carry the SQL, phase and parameter index
    - **Driver errors kept:** The original exception is ``cause``

Architecture:
    ::

        TemplateError (category, retryable, context, cause)
        ├── DataAccessError            DATABASE
        │   ├── AcquisitionError       retryable
        │   ├── PreparationError
        │   ├── BindingError
        │   ├── ExecutionError
        │   └── ReleaseError           logged, never raised by the template
        ├── MappingError               VALIDATION
        │   └── IncorrectResultSizeError
        └── ConfigError                CONFIG

Examples:
    Chaining a driver error:

    >>> try:
    ...     raise sqlite3.OperationalError("no such table: users")
    ... except sqlite3.Error as e:
    ...     raise ExecutionError("Statement failed", cause=e)
    Traceback (most recent call last):
    ...
    ExecutionError: Statement failed

    Adding context fluently:

    >>> error = BindingError("Unsupported value").with_context(parameter_index=2)
    >>> error.context.parameter_index
    2

Guardrails:
    ❌ DON'T: Wrap exceptions raised by a caller's RowMapper or extractor
    ✅ DO: Let them propagate untouched, the caller knows what they mean

    ❌ DON'T: Raise ReleaseError out of a template call
    ✅ DO: Log it; the call's primary outcome is already decided

Tags:
    error-handling, exception-hierarchy, data-access, error-context,
    sqltemplate
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Coarse classification used in logs and ``to_dict()``."""

    DATABASE = "DATABASE"  # connection, statement, cursor
    VALIDATION = "VALIDATION"  # malformed rows, unexpected result sizes
    CONFIG = "CONFIG"  # missing drivers, bad settings
    INTERNAL = "INTERNAL"
    UNKNOWN = "UNKNOWN"


@dataclass
class ErrorContext:
    """
    Where in a template call an error happened.

    Attributes:
        sql: Statement text being executed
        phase: acquire, prepare, bind, execute, fetch or release
        parameter_index: 1-based bind index, for binding failures
        resource: Resource being released (cursor, statement, connection)
        metadata: Anything else worth logging
    """

    sql: str | None = None
    phase: str | None = None
    parameter_index: int | None = None
    resource: str | None = None

    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def field_names(cls) -> tuple[str, ...]:
        return tuple(f.name for f in fields(cls) if f.name != "metadata")

    def to_dict(self) -> dict[str, Any]:
        """Set fields plus metadata, flattened for a log event."""
        data = {
            name: getattr(self, name)
            for name in self.field_names()
            if getattr(self, name) is not None
        }
        return {**data, **self.metadata}


class TemplateError(Exception):
    """
    Base exception for all sqltemplate errors.

    Subclasses pick their ``default_category`` and ``default_retryable``;
    both can be overridden per instance.

    Examples:
        >>> error = TemplateError("Something went wrong")
        >>> error.category
        <ErrorCategory.INTERNAL: 'INTERNAL'>
        >>> error.retryable
        False
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL
    default_retryable: bool = False

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        retryable: bool | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category if category is not None else self.default_category
        self.retryable = self.default_retryable if retryable is None else retryable
        self.context = context if context is not None else ErrorContext()
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> TemplateError:
        """
        Set context fields; unknown keys land in ``metadata``. Returns self.

        Usage:
            raise BindingError("Bad value").with_context(
                sql="select * from users where id = ?",
                parameter_index=1,
            )
        """
        known = ErrorContext.field_names()
        for key, value in kwargs.items():
            if key in known:
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def with_defaults(self, **kwargs: Any) -> TemplateError:
        """Like ``with_context`` but only fills fields that are still unset."""
        missing = {
            key: value
            for key, value in kwargs.items()
            if getattr(self.context, key, None) is None and key not in self.context.metadata
        }
        return self.with_context(**missing)

    def to_dict(self) -> dict[str, Any]:
        """Flatten into a log / serialization friendly dict."""
        data: dict[str, Any] = {
            "error_type": type(self).__name__,
            "message": self.message,
            "category": self.category.value,
            "retryable": self.retryable,
        }
        context = self.context.to_dict()
        if context:
            data["context"] = context
        if self.cause is not None:
            data["cause"] = str(self.cause)
        return data

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# DATA ACCESS ERRORS
# =============================================================================


class DataAccessError(TemplateError):
    """
    Uniform error channel for driver-level failures.

    Raised (through a subclass) whenever acquiring a connection, preparing,
    binding or running a statement fails. ``cause`` holds the original
    driver exception.
    """

    default_category = ErrorCategory.DATABASE
    default_retryable = False


class AcquisitionError(DataAccessError):
    """Connection factory failed to supply a connection."""

    default_retryable = True


class PreparationError(DataAccessError):
    """Driver rejected the statement text."""


class BindingError(DataAccessError):
    """A parameter could not be bound (unsupported type, bad index)."""


class ExecutionError(DataAccessError):
    """Running the statement or fetching its rows failed."""


class ReleaseError(DataAccessError):
    """Releasing a cursor, statement or connection failed.

    Only ever logged. A release failure never replaces the outcome of the
    call that owned the resource.
    """


# =============================================================================
# MAPPING ERRORS
# =============================================================================


class MappingError(TemplateError):
    """
    A row could not be turned into a domain object.

    Raised by cursor accessors for unknown columns or wrongly typed values,
    and by mappers on malformed data. Never retryable.
    """

    default_category = ErrorCategory.VALIDATION

    def __init__(self, message: str, *, column: str | None = None, value: Any = None, **kwargs: Any):
        super().__init__(message, **kwargs)
        self.column = column
        self.value = value

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        if self.column:
            data["column"] = self.column
        if self.value is not None:
            data["value"] = repr(self.value)
        return data


class IncorrectResultSizeError(MappingError):
    """The cursor yielded a different number of rows than required."""

    def __init__(self, expected: int, actual: int, message: str | None = None):
        self.expected = expected
        self.actual = actual
        super().__init__(message or f"Incorrect result size: expected {expected}, actual {actual}")

    def to_dict(self) -> dict[str, Any]:
        return {**super().to_dict(), "expected": self.expected, "actual": self.actual}


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================


class ConfigError(TemplateError):
    """Unknown factory, unsupported URL, missing driver or bad settings."""

    default_category = ErrorCategory.CONFIG


# Transient OS-level failures a caller may reasonably retry
_RETRYABLE_BUILTINS = (ConnectionError, TimeoutError)


def is_retryable(error: BaseException) -> bool:
    """Whether repeating the failed call may succeed.

    Template errors answer for themselves; of the rest, only connection
    failures and timeouts count.
    """
    if isinstance(error, TemplateError):
        return error.retryable
    return isinstance(error, _RETRYABLE_BUILTINS)


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "TemplateError",
    # Data access
    "DataAccessError",
    "AcquisitionError",
    "PreparationError",
    "BindingError",
    "ExecutionError",
    "ReleaseError",
    # Mapping
    "MappingError",
    "IncorrectResultSizeError",
    # Config
    "ConfigError",
    # Utilities
    "is_retryable",
]
