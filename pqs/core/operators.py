"""Scalar semantics of the non-function operators.

Booleans are integers 1/0 and NULL is the unknown truth value. MySQL and SQLite
disagree on how text behaves next to numbers and on how text is ordered, so
every rule takes the dialect it predicts for. Anything the engine would compute
through DOUBLE arithmetic or a collation we do not model marks the case as
uninformative instead of guessing."""

import operator
import re
from typing import Callable, Iterable

from pqs.constants import INT64_MAX, INT64_MIN
from pqs.core.enums import (
    ArithmeticOperator,
    BooleanOperator,
    CastType,
    ComparisonOperator,
    PostfixOperator,
    UnaryOperator,
)
from pqs.core.exceptions import UninformativeCaseException
from pqs.core.models.core import (
    FALSE,
    NULL,
    TRUE,
    IntScalar,
    Scalar,
    create_boolean,
    is_integer_literal,
    skip_leading_blanks,
)
from pqs.dialect.enums import Dialects

MAX_EXACT_DOUBLE = 2**53

COLLATION_SAFE_TEXT = re.compile(r"[A-Za-z0-9 ]*")


def check_leading_text(value: Scalar) -> None:
    # workaround for https://bugs.mysql.com/bug.php?id=95938
    if not value.is_string():
        return
    text = skip_leading_blanks(value.get_text())
    if text.startswith("\n") or text.startswith("."):
        raise UninformativeCaseException(
            f"Text {value.get_text()!r} starts with a newline or period after leading blanks"
        )


def sqlite_text_to_integer(text: str) -> int:
    """SQLite's numeric reading of text, for the texts where it is certain:
    plain integer literals, and text with no numeric prefix at all, which
    reads as 0."""
    if is_integer_literal(text):
        value = int(text)
        if not INT64_MIN <= value <= INT64_MAX:
            raise UninformativeCaseException(f"Text {text!r} is read as REAL")
        return value
    if text == "" or (text[0].isascii() and text[0].isalpha()):
        return 0
    raise UninformativeCaseException(f"Numeric reading of {text!r} is not modeled")


def integer_operand(value: Scalar, dialect: Dialects = Dialects.MYSQL) -> int:
    if value.is_string():
        if dialect == Dialects.SQLITE:
            # '1.5' and friends turn the whole expression REAL
            if not is_integer_literal(value.get_text()):
                raise UninformativeCaseException(
                    f"Text operand {value} is evaluated as REAL"
                )
            return sqlite_text_to_integer(value.get_text())
        text = skip_leading_blanks(value.get_text())
        if not is_integer_literal(text):
            raise UninformativeCaseException(
                f"Text operand {value} is evaluated as DOUBLE"
            )
        result = value.cast_as_signed().get_int()
        if abs(result) > MAX_EXACT_DOUBLE:
            raise UninformativeCaseException(
                f"Text operand {value} loses precision as DOUBLE"
            )
        return result
    return value.cast_as_signed().get_int()


def checked_integer(value: int) -> Scalar:
    if not INT64_MIN <= value <= INT64_MAX:
        raise UninformativeCaseException(f"BIGINT value {value} is out of range")
    return IntScalar(value=value)


def truth_value(value: Scalar, dialect: Dialects = Dialects.MYSQL) -> bool | None:
    if value.is_null():
        return None
    if dialect == Dialects.SQLITE and value.is_string():
        return sqlite_text_to_integer(value.get_text()) != 0
    return value.as_boolean_not_null()


def cast_value(
    value: Scalar, cast_type: CastType, dialect: Dialects = Dialects.MYSQL
) -> Scalar:
    if dialect == Dialects.SQLITE and cast_type == CastType.SIGNED and value.is_string():
        return IntScalar(value=sqlite_text_to_integer(value.get_text()))
    return value.cast_as(cast_type)


ARITHMETIC_MAP: dict[ArithmeticOperator, Callable[[int, int], int]] = {
    ArithmeticOperator.ADD: operator.add,
    ArithmeticOperator.SUBTRACT: operator.sub,
    ArithmeticOperator.MULTIPLY: operator.mul,
}

COMPARISON_MAP: dict[ComparisonOperator, Callable[[int], bool]] = {
    ComparisonOperator.EQ: lambda x: x == 0,
    ComparisonOperator.NULL_SAFE_EQ: lambda x: x == 0,
    ComparisonOperator.NE: lambda x: x != 0,
    ComparisonOperator.LT: lambda x: x < 0,
    ComparisonOperator.LTE: lambda x: x <= 0,
    ComparisonOperator.GT: lambda x: x > 0,
    ComparisonOperator.GTE: lambda x: x >= 0,
}

POSTFIX_MAP: dict[PostfixOperator, Callable[[bool | None], bool]] = {
    PostfixOperator.IS_NULL: lambda x: x is None,
    PostfixOperator.IS_NOT_NULL: lambda x: x is not None,
    PostfixOperator.IS_TRUE: lambda x: x is True,
    PostfixOperator.IS_NOT_TRUE: lambda x: x is not True,
    PostfixOperator.IS_FALSE: lambda x: x is False,
    PostfixOperator.IS_NOT_FALSE: lambda x: x is not False,
}


def apply_unary(
    op: UnaryOperator, value: Scalar, dialect: Dialects = Dialects.MYSQL
) -> Scalar:
    if op == UnaryOperator.PLUS:
        # the server drops a unary plus while parsing
        return value
    if value.is_null():
        return NULL
    if op == UnaryOperator.NOT:
        return create_boolean(not truth_value(value, dialect))
    return checked_integer(-integer_operand(value, dialect))


def apply_postfix(
    op: PostfixOperator, value: Scalar, dialect: Dialects = Dialects.MYSQL
) -> Scalar:
    return create_boolean(POSTFIX_MAP[op](truth_value(value, dialect)))


def apply_arithmetic(
    op: ArithmeticOperator,
    left: Scalar,
    right: Scalar,
    dialect: Dialects = Dialects.MYSQL,
) -> Scalar:
    if left.is_null() or right.is_null():
        return NULL
    return checked_integer(
        ARITHMETIC_MAP[op](
            integer_operand(left, dialect), integer_operand(right, dialect)
        )
    )


def compare_text(left: Scalar, right: Scalar, dialect: Dialects) -> int:
    lval = left.get_text()
    rval = right.get_text()
    if dialect == Dialects.SQLITE:
        # BINARY collation is memcmp over UTF-8, which orders like code points
        return (lval > rval) - (lval < rval)
    if not (COLLATION_SAFE_TEXT.fullmatch(lval) and COLLATION_SAFE_TEXT.fullmatch(rval)):
        raise UninformativeCaseException(
            f"Collation order of {left} and {right} is not modeled"
        )
    lcmp, rcmp = lval.casefold(), rval.casefold()
    return (lcmp > rcmp) - (lcmp < rcmp)


def compare_not_null(
    left: Scalar,
    right: Scalar,
    dialect: Dialects = Dialects.MYSQL,
    affinity: bool = True,
) -> int:
    """Three-way comparison of two non-NULL scalars.

    For SQLite, ``affinity`` says whether either operand carries a column
    affinity that would convert the other one before comparing."""
    if left.is_string() and right.is_string():
        return compare_text(left, right, dialect)
    if dialect == Dialects.SQLITE:
        if left.is_string() or right.is_string():
            if affinity:
                raise UninformativeCaseException(
                    f"Affinity conversion between {left} and {right} is not modeled"
                )
            # every INTEGER sorts before every TEXT
            return 1 if left.is_string() else -1
        lint, rint = left.get_int(), right.get_int()
        return (lint > rint) - (lint < rint)
    lnum, rnum = left.as_number(), right.as_number()
    if isinstance(lnum, float) or isinstance(rnum, float):
        lnum, rnum = float(lnum), float(rnum)
    return (lnum > rnum) - (lnum < rnum)


def apply_comparison(
    op: ComparisonOperator,
    left: Scalar,
    right: Scalar,
    dialect: Dialects = Dialects.MYSQL,
    affinity: bool = True,
    collated: bool = False,
) -> Scalar:
    if op == ComparisonOperator.NULL_SAFE_EQ:
        if left.is_null() or right.is_null():
            return create_boolean(left.is_null() and right.is_null())
    elif left.is_null() or right.is_null():
        return NULL
    if collated and left.is_string() and right.is_string():
        raise UninformativeCaseException(
            f"Explicit collation between {left} and {right} is not modeled"
        )
    return create_boolean(
        COMPARISON_MAP[op](compare_not_null(left, right, dialect, affinity))
    )


def apply_boolean(
    op: BooleanOperator,
    left: Scalar,
    right: Scalar,
    dialect: Dialects = Dialects.MYSQL,
) -> Scalar:
    lval, rval = truth_value(left, dialect), truth_value(right, dialect)
    if op == BooleanOperator.AND:
        if lval is False or rval is False:
            return FALSE
        if lval is None or rval is None:
            return NULL
        return TRUE
    elif op == BooleanOperator.OR:
        if lval is True or rval is True:
            return TRUE
        if lval is None or rval is None:
            return NULL
        return FALSE
    if lval is None or rval is None:
        return NULL
    return create_boolean(lval != rval)


def negate(value: Scalar, negated: bool) -> Scalar:
    if not negated or value.is_null():
        return value
    return create_boolean(not value.as_boolean_not_null())


def apply_between(
    value: Scalar,
    low: Scalar,
    high: Scalar,
    negated: bool = False,
    dialect: Dialects = Dialects.MYSQL,
) -> Scalar:
    result = apply_boolean(
        BooleanOperator.AND,
        apply_comparison(ComparisonOperator.GTE, value, low, dialect),
        apply_comparison(ComparisonOperator.LTE, value, high, dialect),
        dialect,
    )
    return negate(result, negated)


def apply_in(
    value: Scalar,
    candidates: Iterable[Scalar],
    negated: bool = False,
    dialect: Dialects = Dialects.MYSQL,
) -> Scalar:
    if value.is_null():
        return NULL
    saw_null = False
    for candidate in candidates:
        result = apply_comparison(ComparisonOperator.EQ, value, candidate, dialect)
        if result.is_null():
            saw_null = True
        elif result.as_boolean_not_null():
            return negate(TRUE, negated)
    if saw_null:
        return NULL
    return negate(FALSE, negated)
