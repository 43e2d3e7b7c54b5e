"""Typed statement parameters and the kind-to-bind dispatch table."""

import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Final

from sqlkit.exceptions import ParameterTypeError

if TYPE_CHECKING:
    from sqlkit.protocols import BindableStatement

__all__ = (
    "MAX_32BIT_INT",
    "MAX_64BIT_INT",
    "PARAMETER_BINDERS",
    "Parameter",
    "ParameterKind",
    "bind_parameter",
)

MAX_32BIT_INT: Final[int] = 2**31 - 1
MAX_64BIT_INT: Final[int] = 2**63 - 1


class ParameterKind(str, Enum):
    """Kind of value carried by a :class:`Parameter`."""

    STRING = "string"
    INTEGER = "integer"
    DOUBLE = "double"
    LONG = "long"
    BLOB = "blob"
    FLOAT = "float"
    BOOLEAN = "boolean"
    DATE = "date"

    def __str__(self) -> str:
        """String representation for better error messages.

        Returns:
            The enum value as a string.
        """
        return self.value


def _is_integer(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_real(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_date(value: Any) -> bool:
    return isinstance(value, datetime.date) and not isinstance(value, datetime.datetime)


_VALUE_CHECKS: "dict[ParameterKind, Callable[[Any], bool]]" = {
    ParameterKind.STRING: lambda v: isinstance(v, str),
    ParameterKind.INTEGER: lambda v: _is_integer(v) and -MAX_32BIT_INT - 1 <= v <= MAX_32BIT_INT,
    ParameterKind.LONG: lambda v: _is_integer(v) and -MAX_64BIT_INT - 1 <= v <= MAX_64BIT_INT,
    ParameterKind.DOUBLE: _is_real,
    ParameterKind.FLOAT: _is_real,
    ParameterKind.BLOB: lambda v: isinstance(v, (bytes, bytearray, memoryview)),
    ParameterKind.BOOLEAN: lambda v: isinstance(v, bool),
    ParameterKind.DATE: _is_date,
}

_NATIVE_CASTS: "dict[ParameterKind, Callable[[Any], Any]]" = {
    ParameterKind.STRING: str,
    ParameterKind.INTEGER: int,
    ParameterKind.LONG: int,
    ParameterKind.DOUBLE: float,
    ParameterKind.FLOAT: float,
    ParameterKind.BLOB: bytes,
    ParameterKind.BOOLEAN: bool,
    ParameterKind.DATE: lambda v: v,
}

PARAMETER_BINDERS: "Final[dict[ParameterKind, str]]" = {
    ParameterKind.STRING: "bind_string",
    ParameterKind.INTEGER: "bind_int",
    ParameterKind.DOUBLE: "bind_double",
    ParameterKind.LONG: "bind_long",
    ParameterKind.BLOB: "bind_blob",
    ParameterKind.FLOAT: "bind_float",
    ParameterKind.BOOLEAN: "bind_boolean",
    ParameterKind.DATE: "bind_date",
}
"""Name of the single :class:`~sqlkit.protocols.BindableStatement` method used for each kind."""


class Parameter:
    """One bound SQL argument: a value tagged with its :class:`ParameterKind`.

    Instances are immutable. The value is not checked against the kind until it
    is bound, where a mismatch raises :class:`~sqlkit.exceptions.ParameterTypeError`.
    """

    __slots__ = ("kind", "value")

    kind: ParameterKind
    value: Any

    def __init__(self, kind: "ParameterKind | str", value: Any) -> None:
        object.__setattr__(self, "kind", ParameterKind(kind))
        object.__setattr__(self, "value", value)

    def __setattr__(self, name: str, value: Any) -> None:
        msg = f"{type(self).__name__} is immutable"
        raise AttributeError(msg)

    def __delattr__(self, name: str) -> None:
        msg = f"{type(self).__name__} is immutable"
        raise AttributeError(msg)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Parameter):
            return False
        return self.kind is other.kind and type(self.value) is type(other.value) and self.value == other.value

    def __hash__(self) -> int:
        try:
            value_hash = hash(self.value)
        except TypeError:
            value_hash = hash(repr(self.value))
        return hash((self.kind, value_hash))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind!r}, value={self.value!r})"

    @property
    def is_valid(self) -> bool:
        """Whether the value's runtime type matches the kind."""
        return _VALUE_CHECKS[self.kind](self.value)

    def native_value(self) -> Any:
        """Return the value in the kind's native Python representation.

        Raises:
            ParameterTypeError: If the value does not match the kind.

        Returns:
            The value cast for binding.
        """
        if not self.is_valid:
            msg = f"Parameter of kind {self.kind} cannot carry {type(self.value).__name__} value {self.value!r}"
            raise ParameterTypeError(msg)
        return _NATIVE_CASTS[self.kind](self.value)

    @classmethod
    def string(cls, value: str) -> "Parameter":
        return cls(ParameterKind.STRING, value)

    @classmethod
    def integer(cls, value: int) -> "Parameter":
        return cls(ParameterKind.INTEGER, value)

    @classmethod
    def double(cls, value: float) -> "Parameter":
        return cls(ParameterKind.DOUBLE, value)

    @classmethod
    def long(cls, value: int) -> "Parameter":
        return cls(ParameterKind.LONG, value)

    @classmethod
    def blob(cls, value: bytes) -> "Parameter":
        return cls(ParameterKind.BLOB, value)

    @classmethod
    def float(cls, value: float) -> "Parameter":
        return cls(ParameterKind.FLOAT, value)

    @classmethod
    def boolean(cls, value: bool) -> "Parameter":
        return cls(ParameterKind.BOOLEAN, value)

    @classmethod
    def date(cls, value: datetime.date) -> "Parameter":
        return cls(ParameterKind.DATE, value)


def bind_parameter(prepared: "BindableStatement", position: int, parameter: Parameter) -> None:
    """Bind ``parameter`` at ``position`` with exactly one kind-specific bind call.

    Args:
        prepared: Statement exposing the ``bind_*`` operations.
        position: 1-based placeholder position.
        parameter: The typed value to bind.

    Raises:
        ParameterTypeError: If the value does not match the parameter kind.
    """
    binder = getattr(prepared, PARAMETER_BINDERS[parameter.kind])
    binder(position, parameter.native_value())
