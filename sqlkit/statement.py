"""Statement contracts: SQL text plus typed positional parameters."""

from abc import ABC
from collections.abc import Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING, Optional

from sqlkit.exceptions import ParameterError
from sqlkit.parameters import Parameter
from sqlkit.utils.text import count_qmark_placeholders

if TYPE_CHECKING:
    from typing_extensions import Self

__all__ = ("Query", "Statement", "Update")


class Statement(ABC):
    """SQL text with an ordered mapping of 1-based positions to :class:`Parameter` objects.

    Use one of the concrete variants: :class:`Query` for statements returning rows
    and :class:`Update` for statements returning an affected-row count.
    """

    __slots__ = ("_parameters", "_sql")

    def __new__(cls, *args: object, **kwargs: object) -> "Self":
        if cls is Statement:
            msg = "Statement is abstract; use Query or Update"
            raise TypeError(msg)
        return super().__new__(cls)

    def __init__(self, sql: str, parameters: "Optional[Mapping[int, Parameter]]" = None) -> None:
        """Initialize the statement.

        Args:
            sql: SQL text with ``?`` positional placeholders.
            parameters: Mapping of 1-based position to parameter.

        Raises:
            ParameterError: If a position is not a positive integer or a value is not a Parameter.
        """
        validated: dict[int, Parameter] = {}
        for position, parameter in (parameters or {}).items():
            if not isinstance(position, int) or isinstance(position, bool) or position < 1:
                msg = f"Parameter positions are 1-based integers, got {position!r}"
                raise ParameterError(msg, sql)
            if not isinstance(parameter, Parameter):
                msg = f"Position {position} must hold a Parameter, got {type(parameter).__name__}"
                raise ParameterError(msg, sql)
            validated[position] = parameter
        self._sql = sql
        self._parameters = MappingProxyType(dict(sorted(validated.items())))

    @property
    def sql(self) -> str:
        return self._sql

    @property
    def parameters(self) -> "Mapping[int, Parameter]":
        """Read-only mapping of position to parameter, ordered by position."""
        return self._parameters

    @property
    def placeholder_count(self) -> int:
        """Number of ``?`` placeholders in the SQL text."""
        return count_qmark_placeholders(self._sql)

    @property
    def returns_rows(self) -> bool:
        return isinstance(self, Query)

    def with_parameter(self, position: int, parameter: Parameter) -> "Self":
        """Return a copy of this statement with ``parameter`` set at ``position``."""
        return self.with_parameters({position: parameter})

    def with_parameters(self, parameters: "Mapping[int, Parameter]") -> "Self":
        """Return a copy of this statement with ``parameters`` merged over the existing ones."""
        return type(self)(self._sql, {**self._parameters, **parameters})

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return False
        return self._sql == other._sql and dict(self._parameters) == dict(other._parameters)  # type: ignore[attr-defined]

    def __hash__(self) -> int:
        return hash((type(self), self._sql, tuple(self._parameters.items())))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(sql={self._sql!r}, parameters={dict(self._parameters)!r})"


class Query(Statement):
    """Statement executed on the row-returning path."""

    __slots__ = ()


class Update(Statement):
    """Statement executed on the affected-row-count path."""

    __slots__ = ()
