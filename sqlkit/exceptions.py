from typing import Any, Optional

__all__ = (
    "DataError",
    "DatabaseConnectionError",
    "ExecutionError",
    "ExtraParameterError",
    "ForeignKeyViolationError",
    "ImproperConfigurationError",
    "IntegrityError",
    "MissingParameterError",
    "NotNullViolationError",
    "ParameterError",
    "ParameterTypeError",
    "PreparationError",
    "SQLKitError",
    "SQLParsingError",
    "UniqueViolationError",
)


class SQLKitError(Exception):
    """Base exception class from which all sqlkit exceptions inherit."""

    detail: str

    def __init__(self, *args: Any, detail: str = "") -> None:
        """Initialize ``SQLKitError``.

        Args:
            *args: args are converted to :class:`str` before passing to :class:`Exception`
            detail: detail of the exception.
        """
        str_args = [str(arg) for arg in args if arg]
        if not detail:
            if str_args:
                detail, *str_args = str_args
            elif hasattr(self, "detail"):
                detail = self.detail
        self.detail = detail
        super().__init__(*str_args)

    def __repr__(self) -> str:
        if self.detail:
            return f"{self.__class__.__name__} - {self.detail}"
        return self.__class__.__name__

    def __str__(self) -> str:
        return " ".join((*self.args, self.detail)).strip()


class ImproperConfigurationError(SQLKitError):
    """Improper Configuration error.

    Raised when connection settings are invalid or incomplete.
    """


class DatabaseConnectionError(SQLKitError):
    """Opening, authenticating or closing a database connection failed."""

    def __init__(self, message: Optional[str] = None) -> None:
        if message is None:
            message = "Could not connect to the database."
        super().__init__(message)


# -- Preparation Errors --
class PreparationError(SQLKitError):
    """A statement could not be prepared or one of its parameters could not be bound."""

    sql: Optional[str]

    def __init__(self, message: Optional[str] = None, sql: Optional[str] = None) -> None:
        """Initialize with optional SQL context."""
        detail_message = message or "Issues preparing SQL statement."
        if sql:
            detail_message = f"{detail_message}\nSQL: {sql}"
        super().__init__(detail=detail_message)
        self.sql = sql


class ParameterError(PreparationError):
    """Base class for parameter-related errors."""


class ParameterTypeError(ParameterError):
    """Raised when a parameter value does not match its declared kind."""


class SQLParsingError(PreparationError):
    """The server rejected the SQL text."""


# -- Execution Errors --
class ExecutionError(SQLKitError):
    """Base class for failures while running a prepared statement."""

    sql: Optional[str]

    def __init__(self, message: Optional[str] = None, sql: Optional[str] = None) -> None:
        detail_message = message or "Issues executing SQL statement."
        if sql:
            detail_message = f"{detail_message}\nSQL: {sql}"
        super().__init__(detail=detail_message)
        self.sql = sql


class MissingParameterError(ExecutionError):
    """Raised when a placeholder has no bound value."""


class ExtraParameterError(ExecutionError):
    """Raised when values are bound beyond the last placeholder."""


class IntegrityError(ExecutionError):
    """Data integrity error."""


class UniqueViolationError(IntegrityError):
    """A unique or primary key constraint was violated."""


class ForeignKeyViolationError(IntegrityError):
    """A foreign key constraint was violated."""


class NotNullViolationError(IntegrityError):
    """A NOT NULL constraint was violated."""


class DataError(ExecutionError):
    """A value was out of range or otherwise invalid for its column."""
