from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from pqs.constants import INT64_MAX, INT64_MIN
from pqs.core.enums import CastType
from pqs.core.exceptions import InternalInvariantError, UninformativeCaseException


class DataType(Enum):
    NULL = "null"
    INTEGER = "int"
    TEXT = "text"

    @classmethod
    def _missing_(cls, value):
        strval = str(value).lower()
        if strval in ("integer", "signed", "bigint"):
            return DataType.INTEGER
        elif strval in ("varchar", "string", "char"):
            return DataType.TEXT
        elif strval != str(value):
            return cls(strval)
        return super()._missing_(value)


LEADING_BLANKS = " \t"

INTEGER_PREFIX = re.compile(r"[+-]?(\d+)")
NUMERIC_PREFIX = re.compile(r"[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?")
INTEGER_LITERAL = re.compile(r"[+-]?\d+")

MAX_DOUBLE = 1.7976931348623157e308
MAX_INT64_DIGITS = 19


def skip_leading_blanks(text: str) -> str:
    return text.lstrip(LEADING_BLANKS)


def text_to_signed(text: str) -> int:
    """MySQL CAST(text AS SIGNED): integer prefix after leading blanks, 0 when
    there is none."""
    stripped = skip_leading_blanks(text)
    if stripped.startswith("\n"):
        raise UninformativeCaseException(
            f"Leading newline in integer conversion of {text!r}"
        )
    match = INTEGER_PREFIX.match(stripped)
    if not match:
        return 0
    if len(match.group(1).lstrip("0")) > MAX_INT64_DIGITS:
        raise UninformativeCaseException(f"Integer prefix of {text!r} is out of range")
    value = int(match.group(0))
    if not INT64_MIN <= value <= INT64_MAX:
        raise UninformativeCaseException(f"Integer prefix of {text!r} is out of range")
    return value


def text_to_double(text: str) -> float:
    """Numeric context conversion: the longest decimal prefix, as a double."""
    stripped = skip_leading_blanks(text)
    if stripped.startswith("\n"):
        raise UninformativeCaseException(
            f"Leading newline in numeric conversion of {text!r}"
        )
    match = NUMERIC_PREFIX.match(stripped)
    if not match:
        return 0.0
    try:
        value = Decimal(match.group(0))
    except InvalidOperation:
        raise UninformativeCaseException(f"Numeric prefix of {text!r} overflows")
    if abs(value) > Decimal(MAX_DOUBLE):
        raise UninformativeCaseException(f"Numeric prefix of {text!r} overflows")
    return float(value)


def is_integer_literal(text: str) -> bool:
    return INTEGER_LITERAL.fullmatch(text) is not None


class Scalar(BaseModel):
    model_config = ConfigDict(frozen=True)

    @property
    def datatype(self) -> DataType:
        raise NotImplementedError

    def is_null(self) -> bool:
        return False

    def is_string(self) -> bool:
        return False

    def cast_as_signed(self) -> Scalar:
        raise NotImplementedError

    def cast_as_text(self) -> Scalar:
        raise NotImplementedError

    def cast_as(self, cast_type: CastType) -> Scalar:
        if cast_type == CastType.SIGNED:
            return self.cast_as_signed()
        elif cast_type == CastType.TEXT:
            return self.cast_as_text()
        raise InternalInvariantError(f"Unhandled cast type {cast_type}")

    def as_boolean_not_null(self) -> bool:
        raise NotImplementedError

    def as_number(self) -> int | float:
        """Value in a numeric comparison context."""
        raise NotImplementedError

    def get_int(self) -> int:
        raise InternalInvariantError(f"{self} is not an integer")

    def get_text(self) -> str:
        raise InternalInvariantError(f"{self} is not text")


class NullScalar(Scalar):
    kind: Literal["null"] = "null"

    def __str__(self) -> str:
        return "NULL"

    @property
    def datatype(self) -> DataType:
        return DataType.NULL

    def is_null(self) -> bool:
        return True

    def cast_as_signed(self) -> Scalar:
        return self

    def cast_as_text(self) -> Scalar:
        return self

    def as_boolean_not_null(self) -> bool:
        raise InternalInvariantError("NULL has no boolean value; check is_null first")

    def as_number(self) -> int | float:
        raise InternalInvariantError("NULL has no numeric value; check is_null first")


class IntScalar(Scalar):
    kind: Literal["int"] = "int"
    value: int

    @field_validator("value")
    @classmethod
    def validate_range(cls, v: int) -> int:
        if not INT64_MIN <= v <= INT64_MAX:
            raise ValueError(f"{v} is outside the signed 64-bit range")
        return v

    def __str__(self) -> str:
        return str(self.value)

    @property
    def datatype(self) -> DataType:
        return DataType.INTEGER

    def cast_as_signed(self) -> Scalar:
        return self

    def cast_as_text(self) -> Scalar:
        return TextScalar(value=str(self.value))

    def as_boolean_not_null(self) -> bool:
        return self.value != 0

    def as_number(self) -> int | float:
        return self.value

    def get_int(self) -> int:
        return self.value


class TextScalar(Scalar):
    kind: Literal["text"] = "text"
    value: str

    def __str__(self) -> str:
        escaped = self.value.replace("'", "''")
        return f"'{escaped}'"

    @property
    def datatype(self) -> DataType:
        return DataType.TEXT

    def is_string(self) -> bool:
        return True

    def cast_as_signed(self) -> Scalar:
        return IntScalar(value=text_to_signed(self.value))

    def cast_as_text(self) -> Scalar:
        return self

    def as_boolean_not_null(self) -> bool:
        return text_to_double(self.value) != 0

    def as_number(self) -> int | float:
        return text_to_double(self.value)

    def get_text(self) -> str:
        return self.value


SCALAR_TYPES = Annotated[
    Union[NullScalar, IntScalar, TextScalar], Field(discriminator="kind")
]

NULL = NullScalar()
TRUE = IntScalar(value=1)
FALSE = IntScalar(value=0)


def create_boolean(value: bool) -> Scalar:
    return TRUE if value else FALSE


def to_scalar(arg: Any) -> Scalar:
    if isinstance(arg, Scalar):
        return arg
    elif arg is None:
        return NULL
    elif isinstance(arg, bool):
        return create_boolean(arg)
    elif isinstance(arg, int):
        return IntScalar(value=arg)
    elif isinstance(arg, str):
        return TextScalar(value=arg)
    elif isinstance(arg, (bytes, bytearray, memoryview)):
        return TextScalar(value=bytes(arg).decode("utf-8", errors="surrogateescape"))
    elif isinstance(arg, float) and arg.is_integer():
        return IntScalar(value=int(arg))
    elif (
        isinstance(arg, Decimal)
        and arg.is_finite()
        and arg == arg.to_integral_value()
    ):
        return IntScalar(value=int(arg))
    raise ValueError(
        f"Cannot convert value of raw type {type(arg)} value {arg} to a scalar"
    )
