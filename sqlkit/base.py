"""The ``Database`` entry point: one lazily opened connection, statement preparation and dispatch."""

import logging
from typing import TYPE_CHECKING, Any, Optional, Union, overload

from sqlkit.adapters.pymysql.core import close_connection, is_connection_open, open_connection, ping_connection
from sqlkit.adapters.pymysql.driver import PreparedStatement
from sqlkit.config import ConnectionConfig, DatabaseOptions
from sqlkit.exceptions import DatabaseConnectionError, PreparationError, SQLKitError
from sqlkit.parameters import Parameter, bind_parameter
from sqlkit.statement import Query, Statement, Update
from sqlkit.utils.logging import get_logger, log_with_context

if TYPE_CHECKING:
    from types import TracebackType

    from typing_extensions import Self

    from sqlkit.protocols import ConnectionFactory, ConnectionProtocol

__all__ = ("Database",)

logger = get_logger("base")


class Database:
    """A MySQL database reached through a single, lazily opened connection.

    Failures never escape the public operations. They are logged, kept in
    :attr:`last_error`, and reported as ``None`` (or ``False`` for :meth:`connect`).

    Instances are not thread-safe; use one per thread or synchronize externally.

    Example::

        with Database.options().auth("app", "secret").database("shop").build() as db:
            statement = Update("UPDATE t SET a = ? WHERE id = ?", {1: Parameter.string("x"), 2: Parameter.long(7)})
            count = db.send(statement)
    """

    __slots__ = ("_connection", "_connection_factory", "config", "last_error")

    def __init__(
        self,
        config: "Optional[ConnectionConfig]" = None,
        *,
        connection_factory: "Optional[ConnectionFactory]" = None,
        **settings: Any,
    ) -> None:
        """Initialize the database.

        Args:
            config: The connection descriptor. When omitted it is built from ``settings``.
            connection_factory: Replacement for ``pymysql.connect``.
            **settings: :class:`~sqlkit.config.ConnectionConfig` fields, used when ``config`` is omitted.
        """
        if config is None:
            config = ConnectionConfig(**settings)
        elif settings:
            config = config.replace(**settings)
        self.config = config
        self.last_error: Optional[SQLKitError] = None
        self._connection_factory = connection_factory
        self._connection: Optional[ConnectionProtocol] = None

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.config.name!r}, connected={self.is_connected})"

    def __enter__(self) -> "Self":
        return self

    def __exit__(
        self,
        exc_type: "Optional[type[BaseException]]",
        exc_val: "Optional[BaseException]",
        exc_tb: "Optional[TracebackType]",
    ) -> None:
        self.close()

    @staticmethod
    def options() -> DatabaseOptions:
        """Start a fluent :class:`~sqlkit.config.DatabaseOptions` builder."""
        return DatabaseOptions()

    @property
    def name(self) -> Optional[str]:
        return self.config.name

    @property
    def is_connected(self) -> bool:
        return self._connection is not None and is_connection_open(self._connection)

    def _report(self, error: SQLKitError, message: str) -> None:
        self.last_error = error
        log_with_context(
            logger,
            logging.ERROR,
            message,
            exc_info=error,
            database=self.config.name,
            hostname=self.config.hostname,
            error_type=type(error).__name__,
            sql=getattr(error, "sql", None),
        )

    def connect(self) -> bool:
        """Open the connection unless an open one already exists.

        An existing connection is pinged and reconnected by the driver if the server dropped it.

        Returns:
            Whether a usable connection is available.
        """
        self.last_error = None
        if self._connection is not None and is_connection_open(self._connection):
            try:
                ping_connection(self._connection)
            except DatabaseConnectionError as exc:
                self._connection = None
                self._report(exc, f"Lost connection to database {self.config.name or self.config.hostname!r}")
                return False
            return True
        try:
            self._connection = open_connection(self.config, self._connection_factory)
        except DatabaseConnectionError as exc:
            self._connection = None
            self._report(exc, f"Failed to connect to database {self.config.name or self.config.hostname!r}")
            return False
        log_with_context(
            logger,
            logging.DEBUG,
            "Connected to database",
            database=self.config.name,
            hostname=self.config.hostname,
            port=self.config.port,
            schema=self.config.database,
            username=self.config.username,
        )
        return True

    def get_connection(self) -> "Optional[ConnectionProtocol]":
        """Return the open connection, connecting first if needed.

        Returns:
            The connection, or ``None`` when it cannot be opened.
        """
        if self.connect():
            return self._connection
        return None

    @overload
    def prepare(self, statement: Statement) -> Optional[PreparedStatement]: ...

    @overload
    def prepare(self, statement: str) -> Optional[PreparedStatement]: ...

    def prepare(self, statement: Union[Statement, str]) -> Optional[PreparedStatement]:
        """Create a prepared statement and bind every parameter of ``statement``.

        A plain SQL string is prepared without bindings.

        Args:
            statement: The statement to prepare, or ad-hoc SQL text.

        Returns:
            The bound prepared statement, or ``None`` when not connected or preparation fails.
        """
        if not self.connect():
            return None
        try:
            return self._prepare(statement)
        except SQLKitError as exc:
            self._report(exc, "Failed to prepare statement")
            return None

    def _prepare(self, statement: Union[Statement, str]) -> PreparedStatement:
        connection = self._connection
        if connection is None:
            msg = "No open connection"
            raise DatabaseConnectionError(msg)
        if isinstance(statement, str):
            return PreparedStatement(connection, statement)
        if not isinstance(statement, Statement):
            msg = f"Cannot prepare {type(statement).__name__}; expected Query, Update or SQL text"
            raise PreparationError(msg)

        prepared = PreparedStatement(connection, statement.sql)
        for position, parameter in statement.parameters.items():
            bind_parameter(prepared, position, parameter)
        return prepared

    def send(self, statement: Statement) -> "Optional[Union[Any, int]]":
        """Prepare and execute ``statement``.

        Args:
            statement: A :class:`~sqlkit.statement.Query` or :class:`~sqlkit.statement.Update`.

        Returns:
            The row set for a query, the affected-row count for an update, or ``None`` on failure.
        """
        if not isinstance(statement, Statement):
            msg = f"Cannot send {type(statement).__name__}; expected Query or Update"
            self._report(PreparationError(msg), "Failed to send statement")
            return None
        prepared = self.prepare(statement)
        if prepared is None:
            return None
        log_with_context(
            logger,
            logging.DEBUG,
            "Dispatching statement",
            variant=type(statement).__name__,
            parameter_count=len(statement.parameters),
        )
        try:
            if isinstance(statement, Query):
                return prepared.execute_query()
            return prepared.execute_update()
        except SQLKitError as exc:
            self._report(exc, "Failed to execute statement")
            return None
        finally:
            prepared.close()

    def _build_statement(
        self, variant: "type[Statement]", sql: str, parameters: "tuple[Parameter, ...]"
    ) -> Optional[Statement]:
        try:
            return variant(sql, dict(enumerate(parameters, start=1)))
        except SQLKitError as exc:
            self._report(exc, "Failed to build statement")
            return None

    def query(self, sql: str, *parameters: Parameter) -> Any:
        """Send a :class:`~sqlkit.statement.Query` whose parameters bind positionally from 1."""
        statement = self._build_statement(Query, sql, parameters)
        return None if statement is None else self.send(statement)

    def update(self, sql: str, *parameters: Parameter) -> Optional[int]:
        """Send an :class:`~sqlkit.statement.Update` whose parameters bind positionally from 1."""
        statement = self._build_statement(Update, sql, parameters)
        return None if statement is None else self.send(statement)

    def close(self) -> None:
        """Close the connection. Errors while closing are logged, not raised."""
        self.last_error = None
        connection, self._connection = self._connection, None
        if connection is None:
            return
        try:
            close_connection(connection)
        except DatabaseConnectionError as exc:
            self._report(exc, "Failed to close database connection")
        else:
            logger.debug("Closed connection to %s:%s", self.config.hostname, self.config.port)
