import contextlib
import datetime
from collections.abc import Generator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Optional

import pymysql

from sqlkit.adapters.pymysql.core import map_pymysql_exception
from sqlkit.exceptions import (
    ExecutionError,
    ExtraParameterError,
    MissingParameterError,
    ParameterError,
    PreparationError,
    SQLKitError,
)
from sqlkit.utils.logging import get_logger
from sqlkit.utils.text import count_qmark_placeholders, qmark_to_pyformat

if TYPE_CHECKING:
    from sqlkit.protocols import ConnectionProtocol, CursorProtocol

__all__ = ("PreparedStatement", "PymysqlCursor")

logger = get_logger("adapters.pymysql")


class PymysqlCursor:
    """Context manager for PyMySQL cursor management."""

    def __init__(self, connection: "ConnectionProtocol") -> None:
        self.connection = connection
        self.cursor: Optional[CursorProtocol] = None

    def __enter__(self) -> "CursorProtocol":
        self.cursor = self.connection.cursor()
        return self.cursor

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if self.cursor is not None:
            with contextlib.suppress(Exception):
                self.cursor.close()


class PreparedStatement:
    """A statement bound to one connection, accepting typed values by 1-based position.

    The SQL text uses ``?`` placeholders; it is rewritten once for PyMySQL's
    ``%s`` style. Values are sent when one of the execution methods runs.
    """

    __slots__ = ("_values", "connection", "driver_sql", "placeholder_count", "sql")

    def __init__(self, connection: "ConnectionProtocol", sql: str) -> None:
        if not isinstance(sql, str) or not sql.strip():
            msg = "Cannot prepare an empty statement"
            raise PreparationError(msg)
        self.connection = connection
        self.sql = sql
        self.driver_sql = qmark_to_pyformat(sql)
        self.placeholder_count = count_qmark_placeholders(sql)
        self._values: dict[int, Any] = {}

    def __repr__(self) -> str:
        return f"{type(self).__name__}(sql={self.sql!r}, bound={sorted(self._values)!r})"

    def _bind(self, position: int, value: Any) -> None:
        if not isinstance(position, int) or isinstance(position, bool) or position < 1:
            msg = f"Parameter positions are 1-based integers, got {position!r}"
            raise ParameterError(msg, self.sql)
        self._values[position] = value

    def bind_string(self, position: int, value: str) -> None:
        self._bind(position, value)

    def bind_int(self, position: int, value: int) -> None:
        self._bind(position, value)

    def bind_double(self, position: int, value: float) -> None:
        self._bind(position, value)

    def bind_long(self, position: int, value: int) -> None:
        self._bind(position, value)

    def bind_blob(self, position: int, value: bytes) -> None:
        self._bind(position, value)

    def bind_float(self, position: int, value: float) -> None:
        self._bind(position, value)

    def bind_boolean(self, position: int, value: bool) -> None:
        self._bind(position, value)

    def bind_date(self, position: int, value: datetime.date) -> None:
        self._bind(position, value)

    def clear_parameters(self) -> None:
        self._values.clear()

    @property
    def parameters(self) -> "tuple[Any, ...]":
        """Bound values in placeholder order.

        Raises:
            MissingParameterError: If a placeholder has no bound value.
            ExtraParameterError: If a value is bound past the last placeholder.
        """
        missing = [p for p in range(1, self.placeholder_count + 1) if p not in self._values]
        if missing:
            msg = f"No value bound for placeholder position(s) {missing}"
            raise MissingParameterError(msg, self.sql)
        extra = sorted(p for p in self._values if p > self.placeholder_count)
        if extra:
            msg = f"Statement has {self.placeholder_count} placeholder(s) but values are bound at {extra}"
            raise ExtraParameterError(msg, self.sql)
        return tuple(self._values[p] for p in range(1, self.placeholder_count + 1))

    @contextmanager
    def handle_database_exceptions(self) -> Generator[None, None, None]:
        """Wrap PyMySQL exceptions raised while executing.

        Values the driver cannot encode (``UnicodeEncodeError`` included) become :class:`ExecutionError`.
        """
        try:
            yield
        except SQLKitError:
            raise
        except pymysql.err.Error as e:
            raise map_pymysql_exception(e, default=ExecutionError, sql=self.sql) from e
        except (ValueError, TypeError) as e:
            msg = f"Could not encode statement arguments: {e}"
            raise ExecutionError(msg, self.sql) from e

    def execute_query(self) -> Any:
        """Run the statement on the row-returning path.

        Returns:
            The rows exactly as the cursor's ``fetchall()`` returns them.
        """
        with self.handle_database_exceptions(), PymysqlCursor(self.connection) as cursor:
            cursor.execute(self.driver_sql, self.parameters)
            rows = cursor.fetchall()
        logger.debug("Query executed: %s", self.sql)
        return rows

    def execute_update(self) -> int:
        """Run the statement on the row-affecting path.

        Returns:
            The number of affected rows.
        """
        with self.handle_database_exceptions(), PymysqlCursor(self.connection) as cursor:
            cursor.execute(self.driver_sql, self.parameters)
            rowcount = cursor.rowcount
        count = rowcount if isinstance(rowcount, int) and rowcount > 0 else 0
        logger.debug("Update affected %d row(s)", count)
        return count

    def close(self) -> None:
        """Release the bound values; the connection stays open."""
        self._values.clear()
