from typing import Sequence

from pqs.core.exceptions import InternalInvariantError
from pqs.core.models.core import DataType, Scalar
from pqs.core.models.expressions import ColumnReference, Expression
from pqs.core.models.schema import declared_type


def get_expression_type(expr: Expression) -> DataType:
    if isinstance(expr, ColumnReference):
        return declared_type(expr.column)
    return expr.predicted_value().datatype


def get_most_general_type(expressions: Sequence[Expression]) -> DataType | None:
    """Fold the static types of the candidate expressions; TEXT dominates.

    NULL carries no type, so a NULL-valued expression never seeds or
    overrides the result. Returns None when every candidate was NULL."""
    result: DataType | None = None
    for expr in expressions:
        expr_type = get_expression_type(expr)
        if expr_type == DataType.NULL:
            continue
        if result is None:
            result = expr_type
        elif expr_type == DataType.TEXT:
            result = DataType.TEXT
    return result


def cast_to_most_general_type(
    value: Scalar, type_expressions: Sequence[Expression]
) -> Scalar:
    if value.is_null():
        return value
    target = get_most_general_type(type_expressions)
    if target == DataType.INTEGER:
        return value.cast_as_signed()
    elif target == DataType.TEXT:
        return value.cast_as_text()
    raise InternalInvariantError(
        f"Cannot coerce {value} to most general type {target} of {len(type_expressions)} expressions"
    )
