from __future__ import annotations

from typing import Annotated, Any, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from pqs.core.enums import (
    ArithmeticOperator,
    BooleanOperator,
    CastType,
    ComparisonOperator,
    FunctionType,
    JoinType,
    Ordering,
    PostfixOperator,
    UnaryOperator,
)
from pqs.core.exceptions import InternalInvariantError, UninformativeCaseException
from pqs.core.models.core import (
    NULL,
    SCALAR_TYPES,
    Scalar,
    create_boolean,
    to_scalar,
)
from pqs.core.models.schema import Column, Table
from pqs.core.operators import (
    apply_arithmetic,
    apply_between,
    apply_boolean,
    apply_comparison,
    apply_in,
    apply_postfix,
    apply_unary,
    cast_value,
    check_leading_text,
    truth_value,
)
from pqs.dialect.enums import Dialects


def scalar_validator(v: Any) -> Any:
    if isinstance(v, (Scalar, dict)):
        return v
    return to_scalar(v)


class Expression(BaseModel):
    model_config = ConfigDict(frozen=True)

    def predicted_value(self, dialect: Dialects = Dialects.MYSQL) -> Scalar:
        raise NotImplementedError(type(self))


class Constant(Expression):
    kind: Literal["constant"] = "constant"
    value: SCALAR_TYPES

    @field_validator("value", mode="before")
    @classmethod
    def value_validator(cls, v):
        return scalar_validator(v)

    def predicted_value(self, dialect: Dialects = Dialects.MYSQL) -> Scalar:
        check_leading_text(self.value)
        return self.value


class ColumnReference(Expression):
    """A column of the pivot row; its value is the row's value."""

    kind: Literal["column"] = "column"
    column: Column
    value: SCALAR_TYPES = NULL

    @field_validator("value", mode="before")
    @classmethod
    def value_validator(cls, v):
        return scalar_validator(v)

    def predicted_value(self, dialect: Dialects = Dialects.MYSQL) -> Scalar:
        check_leading_text(self.value)
        return self.value


class UnaryOperation(Expression):
    kind: Literal["unary"] = "unary"
    operator: UnaryOperator
    expression: Expr

    def predicted_value(self, dialect: Dialects = Dialects.MYSQL) -> Scalar:
        return apply_unary(
            self.operator, self.expression.predicted_value(dialect), dialect
        )


class PostfixOperation(Expression):
    kind: Literal["postfix"] = "postfix"
    operator: PostfixOperator
    expression: Expr

    def predicted_value(self, dialect: Dialects = Dialects.MYSQL) -> Scalar:
        return apply_postfix(
            self.operator, self.expression.predicted_value(dialect), dialect
        )


class BinaryOperation(Expression):
    kind: Literal["binary"] = "binary"
    operator: ArithmeticOperator
    left: Expr
    right: Expr

    def predicted_value(self, dialect: Dialects = Dialects.MYSQL) -> Scalar:
        return apply_arithmetic(
            self.operator,
            self.left.predicted_value(dialect),
            self.right.predicted_value(dialect),
            dialect,
        )


class Comparison(Expression):
    kind: Literal["comparison"] = "comparison"
    operator: ComparisonOperator
    left: Expr
    right: Expr

    def predicted_value(self, dialect: Dialects = Dialects.MYSQL) -> Scalar:
        return apply_comparison(
            self.operator,
            self.left.predicted_value(dialect),
            self.right.predicted_value(dialect),
            dialect,
            affinity=has_affinity(self.left) or has_affinity(self.right),
            collated=isinstance(self.left, CollateOperation)
            or isinstance(self.right, CollateOperation),
        )


class Conditional(Expression):
    kind: Literal["conditional"] = "conditional"
    operator: BooleanOperator
    left: Expr
    right: Expr

    def predicted_value(self, dialect: Dialects = Dialects.MYSQL) -> Scalar:
        return apply_boolean(
            self.operator,
            self.left.predicted_value(dialect),
            self.right.predicted_value(dialect),
            dialect,
        )


class CollateOperation(Expression):
    kind: Literal["collate"] = "collate"
    expression: Expr
    collation: str

    def predicted_value(self, dialect: Dialects = Dialects.MYSQL) -> Scalar:
        return self.expression.predicted_value(dialect)


class TypeLiteral(Expression):
    kind: Literal["type"] = "type"
    type: CastType

    def predicted_value(self, dialect: Dialects = Dialects.MYSQL) -> Scalar:
        raise InternalInvariantError(f"Type literal {self.type} has no value")


class Cast(Expression):
    kind: Literal["cast"] = "cast"
    expression: Expr
    type: TypeLiteral

    @field_validator("type", mode="before")
    @classmethod
    def type_validator(cls, v):
        if isinstance(v, (CastType, str)):
            return TypeLiteral(type=CastType(v))
        return v

    def predicted_value(self, dialect: Dialects = Dialects.MYSQL) -> Scalar:
        return cast_value(
            self.expression.predicted_value(dialect), self.type.type, dialect
        )


class Between(Expression):
    kind: Literal["between"] = "between"
    expression: Expr
    low: Expr
    high: Expr
    negated: bool = False

    def predicted_value(self, dialect: Dialects = Dialects.MYSQL) -> Scalar:
        return apply_between(
            self.expression.predicted_value(dialect),
            self.low.predicted_value(dialect),
            self.high.predicted_value(dialect),
            negated=self.negated,
            dialect=dialect,
        )


class InOperation(Expression):
    kind: Literal["in"] = "in"
    expression: Expr
    candidates: List[Expr]
    negated: bool = False

    def predicted_value(self, dialect: Dialects = Dialects.MYSQL) -> Scalar:
        value = self.expression.predicted_value(dialect)
        candidates = [x.predicted_value(dialect) for x in self.candidates]
        return apply_in(value, candidates, negated=self.negated, dialect=dialect)


class OrderingTerm(Expression):
    kind: Literal["ordering"] = "ordering"
    expression: Expr
    ordering: Ordering = Ordering.ASCENDING

    def predicted_value(self, dialect: Dialects = Dialects.MYSQL) -> Scalar:
        return self.expression.predicted_value(dialect)


class Join(Expression):
    kind: Literal["join"] = "join"
    table: Table
    on_clause: Expr
    join_type: JoinType = JoinType.INNER

    def predicted_value(self, dialect: Dialects = Dialects.MYSQL) -> Scalar:
        return self.on_clause.predicted_value(dialect)


class SelectStatement(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["select"] = "select"
    columns: List[Expr] = Field(default_factory=list)
    tables: List[Table] = Field(default_factory=list)
    joins: List[Join] = Field(default_factory=list)
    where_clause: Optional[Expr] = None
    order_by: List[OrderingTerm] = Field(default_factory=list)
    limit: Optional[int] = None

    def contains_pivot_row(self, dialect: Dialects = Dialects.MYSQL) -> bool:
        conditions: list[Expression] = [join.on_clause for join in self.joins]
        if self.where_clause is not None:
            conditions.append(self.where_clause)
        for condition in conditions:
            if truth_value(condition.predicted_value(dialect), dialect) is not True:
                return False
        return True


class Exists(Expression):
    kind: Literal["exists"] = "exists"
    select: SelectStatement
    negated: bool = False

    def predicted_value(self, dialect: Dialects = Dialects.MYSQL) -> Scalar:
        if not self.select.contains_pivot_row(dialect):
            raise UninformativeCaseException(
                "Pivot row is filtered out of the EXISTS subquery; other rows may match"
            )
        return create_boolean(not self.negated)


class Subquery(Expression):
    """A scalar subquery whose single value the generator guarantees."""

    kind: Literal["subquery"] = "subquery"
    select: SelectStatement
    expected_value: Expr

    def predicted_value(self, dialect: Dialects = Dialects.MYSQL) -> Scalar:
        return self.expected_value.predicted_value(dialect)


class Function(Expression):
    kind: Literal["function"] = "function"
    function: FunctionType
    arguments: List[Expr]

    def predicted_value(self, dialect: Dialects = Dialects.MYSQL) -> Scalar:
        from pqs.core.functions import get_function_config

        config = get_function_config(dialect, self.function)
        config.validate_arguments(self.arguments)
        evaluated = []
        for arg in self.arguments:
            value = arg.predicted_value(dialect)
            check_leading_text(value)
            evaluated.append(value)
        return config.evaluate(evaluated, self.arguments)


def has_affinity(expression: Expression) -> bool:
    """Whether SQLite attaches a column affinity to the expression's value,
    which converts the other side of a comparison first."""
    if isinstance(expression, (ColumnReference, Cast, Subquery)):
        return True
    if isinstance(expression, (CollateOperation, OrderingTerm)):
        return has_affinity(expression.expression)
    if (
        isinstance(expression, UnaryOperation)
        and expression.operator == UnaryOperator.PLUS
    ):
        return has_affinity(expression.expression)
    return False


Expr = Annotated[
    Union[
        Constant,
        ColumnReference,
        UnaryOperation,
        PostfixOperation,
        BinaryOperation,
        Comparison,
        Conditional,
        CollateOperation,
        TypeLiteral,
        Cast,
        Between,
        InOperation,
        OrderingTerm,
        Join,
        Exists,
        Subquery,
        Function,
    ],
    Field(discriminator="kind"),
]

for model in (
    UnaryOperation,
    PostfixOperation,
    BinaryOperation,
    Comparison,
    Conditional,
    CollateOperation,
    Cast,
    Between,
    InOperation,
    OrderingTerm,
    Join,
    SelectStatement,
    Exists,
    Subquery,
    Function,
):
    model.model_rebuild()
