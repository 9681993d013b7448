from enum import Enum


class CastType(Enum):
    SIGNED = "signed"
    TEXT = "text"

    @classmethod
    def _missing_(cls, value):
        strval = str(value).lower()
        if strval in ("integer", "int"):
            return CastType.SIGNED
        elif strval in ("char", "varchar"):
            return CastType.TEXT
        elif strval != str(value):
            return cls(strval)
        return super()._missing_(value)


class FunctionType(Enum):
    # math
    ABS = "abs"
    BIT_COUNT = "bit_count"

    # side effecting
    BENCHMARK = "benchmark"

    # control flow
    COALESCE = "coalesce"
    IF = "if"
    IIF = "iif"
    IFNULL = "ifnull"

    @classmethod
    def _missing_(cls, value):
        strval = str(value)
        if strval.lower() != strval:
            return cls(strval.lower())
        return super()._missing_(value)


class UnaryOperator(Enum):
    NOT = "NOT"
    MINUS = "-"
    PLUS = "+"


class PostfixOperator(Enum):
    IS_NULL = "IS NULL"
    IS_NOT_NULL = "IS NOT NULL"
    IS_TRUE = "IS TRUE"
    IS_NOT_TRUE = "IS NOT TRUE"
    IS_FALSE = "IS FALSE"
    IS_NOT_FALSE = "IS NOT FALSE"


class ArithmeticOperator(Enum):
    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "*"


class ComparisonOperator(Enum):
    EQ = "="
    NE = "!="
    LT = "<"
    LTE = "<="
    GT = ">"
    GTE = ">="
    NULL_SAFE_EQ = "<=>"

    @classmethod
    def _missing_(cls, value):
        if value == "<>":
            return ComparisonOperator.NE
        return super()._missing_(value)


class BooleanOperator(Enum):
    AND = "and"
    OR = "or"
    XOR = "xor"

    @classmethod
    def _missing_(cls, value):
        strval = str(value)
        if strval == "&&":
            return BooleanOperator.AND
        elif strval == "||":
            return BooleanOperator.OR
        elif strval.lower() != strval:
            return cls(strval.lower())
        return super()._missing_(value)


class JoinType(Enum):
    INNER = "inner"
    LEFT_OUTER = "left outer"
    RIGHT_OUTER = "right outer"


class Ordering(Enum):
    ASCENDING = "asc"
    DESCENDING = "desc"
