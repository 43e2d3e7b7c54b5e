"""sqlkit: typed prepared statements over a single lazily opened MySQL connection."""

from sqlkit import adapters, base, config, exceptions, parameters, statement, utils
from sqlkit.__metadata__ import __version__
from sqlkit.adapters.pymysql import PreparedStatement
from sqlkit.base import Database
from sqlkit.config import ConnectionConfig, DatabaseOptions
from sqlkit.exceptions import (
    DatabaseConnectionError,
    ExecutionError,
    ParameterError,
    ParameterTypeError,
    PreparationError,
    SQLKitError,
)
from sqlkit.parameters import Parameter, ParameterKind
from sqlkit.statement import Query, Statement, Update

__all__ = (
    "ConnectionConfig",
    "Database",
    "DatabaseConnectionError",
    "DatabaseOptions",
    "ExecutionError",
    "Parameter",
    "ParameterError",
    "ParameterKind",
    "ParameterTypeError",
    "PreparationError",
    "PreparedStatement",
    "Query",
    "SQLKitError",
    "Statement",
    "Update",
    "__version__",
    "adapters",
    "base",
    "config",
    "exceptions",
    "parameters",
    "statement",
    "utils",
)
