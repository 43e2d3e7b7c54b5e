"""PyMySQL adapter helpers: connection opening and exception mapping."""

from typing import TYPE_CHECKING, Any, Optional

import pymysql

from sqlkit.exceptions import (
    DatabaseConnectionError,
    DataError,
    ExecutionError,
    ForeignKeyViolationError,
    IntegrityError,
    NotNullViolationError,
    PreparationError,
    SQLKitError,
    SQLParsingError,
    UniqueViolationError,
)

if TYPE_CHECKING:
    from sqlkit.config import ConnectionConfig
    from sqlkit.protocols import ConnectionFactory, ConnectionProtocol

__all__ = (
    "close_connection",
    "is_connection_open",
    "map_pymysql_exception",
    "open_connection",
    "ping_connection",
)

MYSQL_ER_ACCESS_DENIED = 1045
MYSQL_ER_BAD_DB = 1049
MYSQL_ER_BAD_NULL = 1048
MYSQL_ER_DUP_ENTRY = 1062
MYSQL_ER_PARSE_ERROR = 1064
MYSQL_ER_NO_DEFAULT_FOR_FIELD = 1364
MYSQL_CONNECTION_ERROR_CODES = frozenset({2002, 2003, 2005, 2006, 2013})
MYSQL_FOREIGN_KEY_ERROR_CODES = frozenset({1216, 1217, 1451, 1452})
MYSQL_SYNTAX_ERROR_CODES = frozenset({MYSQL_ER_PARSE_ERROR, 1149})


def _error_code(error: BaseException) -> Optional[int]:
    args = getattr(error, "args", ())
    if args and isinstance(args[0], int):
        return args[0]
    return None


def map_pymysql_exception(
    error: BaseException, default: type[SQLKitError] = ExecutionError, sql: Optional[str] = None
) -> SQLKitError:
    """Translate a PyMySQL exception into the matching sqlkit error.

    Args:
        error: The exception raised by PyMySQL.
        default: Error class used when no specific mapping applies.
        sql: Optional SQL text for context.

    Returns:
        The sqlkit error, chained to ``error`` by the caller.
    """
    code = _error_code(error)
    code_str = f"[{code}]" if code is not None else ""

    def _build(error_class: type[SQLKitError], description: str) -> SQLKitError:
        msg = f"MySQL {description} {code_str}: {error}" if code_str else f"MySQL {description}: {error}"
        if issubclass(error_class, (ExecutionError, PreparationError)):
            return error_class(msg, sql)  # type: ignore[call-arg]
        return error_class(msg)

    if code in MYSQL_CONNECTION_ERROR_CODES or code in {MYSQL_ER_ACCESS_DENIED, MYSQL_ER_BAD_DB}:
        return _build(DatabaseConnectionError, "connection error")
    if code == MYSQL_ER_DUP_ENTRY:
        return _build(UniqueViolationError, "unique constraint violation")
    if code in MYSQL_FOREIGN_KEY_ERROR_CODES:
        return _build(ForeignKeyViolationError, "foreign key constraint violation")
    if code in {MYSQL_ER_BAD_NULL, MYSQL_ER_NO_DEFAULT_FOR_FIELD}:
        return _build(NotNullViolationError, "not-null constraint violation")
    if code in MYSQL_SYNTAX_ERROR_CODES:
        return _build(SQLParsingError, "SQL syntax error")
    if isinstance(error, pymysql.err.ProgrammingError):
        return _build(SQLParsingError, "programming error")
    if isinstance(error, pymysql.err.IntegrityError):
        return _build(IntegrityError, "integrity constraint violation")
    if isinstance(error, pymysql.err.DataError):
        return _build(DataError, "data error")
    return _build(default, "database error")


def open_connection(config: "ConnectionConfig", factory: "Optional[ConnectionFactory]" = None) -> "ConnectionProtocol":
    """Open a connection for ``config``.

    Args:
        config: The connection descriptor.
        factory: Connection primitive; defaults to ``pymysql.connect``.

    Raises:
        DatabaseConnectionError: If the server cannot be reached, rejects the credentials,
            or the driver rejects the connection options.

    Returns:
        An open connection.
    """
    connect = factory or pymysql.connect
    try:
        return connect(**config.connect_kwargs())
    except (pymysql.err.Error, OSError, TypeError, ValueError) as exc:
        msg = f"Could not connect to {config.hostname}:{config.port}: {exc}"
        raise DatabaseConnectionError(msg) from exc


def is_connection_open(connection: Any) -> bool:
    """Whether ``connection`` reports itself open.

    Connections that expose no ``open`` attribute are assumed open.
    """
    return bool(getattr(connection, "open", True))


def ping_connection(connection: Any) -> None:
    """Check ``connection`` with a round trip, reconnecting if the server dropped it.

    Connections that expose no ``ping`` method are left untouched.

    Raises:
        DatabaseConnectionError: If the server cannot be reached again.
    """
    ping = getattr(connection, "ping", None)
    if ping is None:
        return
    try:
        ping(reconnect=True)
    except (pymysql.err.Error, OSError) as exc:
        msg = f"Lost connection and could not reconnect: {exc}"
        raise DatabaseConnectionError(msg) from exc


def close_connection(connection: Any) -> None:
    """Close ``connection``.

    Raises:
        DatabaseConnectionError: If the driver fails to close it.
    """
    try:
        connection.close()
    except (pymysql.err.Error, OSError) as exc:
        msg = f"Error while closing connection: {exc}"
        raise DatabaseConnectionError(msg) from exc
