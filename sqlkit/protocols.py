"""Runtime-checkable protocols for the collaborators sqlkit consumes.

The connection primitive and cursor shapes follow PEP 249 as implemented by
PyMySQL; the bindable statement shape is what :func:`sqlkit.parameters.bind_parameter`
dispatches onto.
"""

import datetime
from typing import Any, Protocol, runtime_checkable

__all__ = ("BindableStatement", "ConnectionFactory", "ConnectionProtocol", "CursorProtocol")


@runtime_checkable
class CursorProtocol(Protocol):
    """Protocol for DB-API cursors."""

    rowcount: int

    def execute(self, query: str, args: Any = None) -> Any:
        """Execute a statement."""
        ...

    def fetchall(self) -> Any:
        """Fetch all remaining rows."""
        ...

    def close(self) -> None:
        """Close the cursor."""
        ...


@runtime_checkable
class ConnectionProtocol(Protocol):
    """Protocol for DB-API connections."""

    def cursor(self, *args: Any, **kwargs: Any) -> Any:
        """Create a cursor."""
        ...

    def close(self) -> None:
        """Close the connection."""
        ...


class ConnectionFactory(Protocol):
    """Callable opening a connection from keyword settings (``pymysql.connect``)."""

    def __call__(self, **kwargs: Any) -> ConnectionProtocol: ...


@runtime_checkable
class BindableStatement(Protocol):
    """Protocol for prepared statements supporting typed positional binding."""

    def bind_string(self, position: int, value: str) -> None: ...

    def bind_int(self, position: int, value: int) -> None: ...

    def bind_double(self, position: int, value: float) -> None: ...

    def bind_long(self, position: int, value: int) -> None: ...

    def bind_blob(self, position: int, value: bytes) -> None: ...

    def bind_float(self, position: int, value: float) -> None: ...

    def bind_boolean(self, position: int, value: bool) -> None: ...

    def bind_date(self, position: int, value: datetime.date) -> None: ...

    def execute_query(self) -> Any: ...

    def execute_update(self) -> int: ...

    def close(self) -> None: ...
