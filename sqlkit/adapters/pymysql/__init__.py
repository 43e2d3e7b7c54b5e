"""PyMySQL adapter for sqlkit."""

from sqlkit.adapters.pymysql.core import (
    close_connection,
    is_connection_open,
    map_pymysql_exception,
    open_connection,
    ping_connection,
)
from sqlkit.adapters.pymysql.driver import PreparedStatement, PymysqlCursor

__all__ = (
    "PreparedStatement",
    "PymysqlCursor",
    "close_connection",
    "is_connection_open",
    "map_pymysql_exception",
    "open_connection",
    "ping_connection",
)
