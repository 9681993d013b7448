from typing import Any, Callable, Mapping, Union

from jinja2 import Template

from pqs.constants import CONFIG, Rendering
from pqs.core.enums import (
    BooleanOperator,
    CastType,
    ComparisonOperator,
    FunctionType,
    JoinType,
    UnaryOperator,
)
from pqs.core.exceptions import ConfigurationException
from pqs.core.models.core import Scalar
from pqs.core.models.expressions import (
    Between,
    BinaryOperation,
    Cast,
    CollateOperation,
    ColumnReference,
    Comparison,
    Conditional,
    Constant,
    Exists,
    Expression,
    Function,
    InOperation,
    Join,
    OrderingTerm,
    PostfixOperation,
    SelectStatement,
    Subquery,
    TypeLiteral,
    UnaryOperation,
)
from pqs.core.models.schema import Column, Table
from pqs.dialect.enums import Dialects

COMPARISON_MAP: Mapping[ComparisonOperator, str] = {
    ComparisonOperator.EQ: "=",
    ComparisonOperator.NE: "!=",
    ComparisonOperator.LT: "<",
    ComparisonOperator.LTE: "<=",
    ComparisonOperator.GT: ">",
    ComparisonOperator.GTE: ">=",
    ComparisonOperator.NULL_SAFE_EQ: "<=>",
}

BOOLEAN_OPERATOR_MAP: Mapping[BooleanOperator, str] = {
    BooleanOperator.AND: "AND",
    BooleanOperator.OR: "OR",
    BooleanOperator.XOR: "XOR",
}

CAST_TYPE_MAP: Mapping[CastType, str] = {
    CastType.SIGNED: "SIGNED",
    CastType.TEXT: "CHAR",
}

JOIN_TYPE_MAP: Mapping[JoinType, str] = {
    JoinType.INNER: "INNER JOIN",
    JoinType.LEFT_OUTER: "LEFT OUTER JOIN",
    JoinType.RIGHT_OUTER: "RIGHT OUTER JOIN",
}

FUNCTION_MAP: Mapping[FunctionType, Callable[[list[str]], str]] = {
    FunctionType.ABS: lambda x: f"ABS({x[0]})",
    FunctionType.BIT_COUNT: lambda x: f"BIT_COUNT({x[0]})",
    FunctionType.BENCHMARK: lambda x: f"BENCHMARK({x[0]}, {x[1]})",
    FunctionType.COALESCE: lambda x: f"COALESCE({', '.join(x)})",
    FunctionType.IF: lambda x: f"IF({x[0]}, {x[1]}, {x[2]})",
    FunctionType.IFNULL: lambda x: f"IFNULL({x[0]}, {x[1]})",
}

GENERIC_SQL_TEMPLATE = Template(
    """SELECT {% if columns %}{{ columns | join(', ') }}{% else %}*{% endif %}
{%- if tables %} FROM {{ tables | join(', ') }}{% endif %}
{%- for join in joins %} {{ join }}{% endfor %}
{%- if where %} WHERE {{ where }}{% endif %}
{%- if order_by %} ORDER BY {{ order_by | join(', ') }}{% endif %}
{%- if limit is not none %} LIMIT {{ limit }}{% endif %}"""
)

RENDERABLE = Union[Expression, SelectStatement, Scalar, Column, Table]


class BaseDialect:
    DIALECT = Dialects.MYSQL
    COMPARISON_MAP = COMPARISON_MAP
    BOOLEAN_OPERATOR_MAP = BOOLEAN_OPERATOR_MAP
    CAST_TYPE_MAP = CAST_TYPE_MAP
    JOIN_TYPE_MAP = JOIN_TYPE_MAP
    FUNCTION_MAP = FUNCTION_MAP
    QUOTE_CHARACTER = "`"
    ESCAPE_BACKSLASH = True
    SQL_TEMPLATE = GENERIC_SQL_TEMPLATE
    EXPLAIN_KEYWORD = "EXPLAIN"
    EXPLAIN_FLAG = "FORMAT=TRADITIONAL"

    def __init__(self, rendering: Rendering | None = None):
        self.rendering = rendering or CONFIG.rendering

    def lookup(self, mapping: Mapping[Any, Any], key: Any) -> Any:
        if key not in mapping:
            raise NotImplementedError(
                f"{key} is not supported by {self.__class__.__name__}"
            )
        return mapping[key]

    def quote(self, identifier: str) -> str:
        q = self.QUOTE_CHARACTER
        return f"{q}{identifier.replace(q, q * 2)}{q}"

    def render_scalar(self, value: Scalar) -> str:
        if value.is_string():
            text = value.get_text()
            if self.ESCAPE_BACKSLASH:
                text = text.replace("\\", "\\\\")
            escaped = text.replace("'", "''")
            return f"'{escaped}'"
        return str(value)

    def render_select(self, select: SelectStatement) -> str:
        return self.SQL_TEMPLATE.render(
            columns=[self.render_expr(c) for c in select.columns],
            tables=[self.render_expr(t) for t in select.tables],
            joins=[self.render_expr(j) for j in select.joins],
            where=(
                self.render_expr(select.where_clause)
                if select.where_clause is not None
                else None
            ),
            order_by=[self.render_expr(o) for o in select.order_by],
            limit=select.limit,
        )

    def validate(self, e: RENDERABLE) -> str:
        """Render the node, rejecting any construct this dialect cannot express."""
        try:
            return self.render_expr(e)
        except NotImplementedError as exc:
            raise ConfigurationException(str(exc)) from exc

    def render_expression_query(self, e: Expression) -> str:
        """The statement whose single value is compared with the prediction."""
        return f"SELECT {self.render_expr(e)}"

    def render_expr(self, e: RENDERABLE) -> str:
        if isinstance(e, Scalar):
            return self.render_scalar(e)
        elif isinstance(e, Table):
            return self.quote(e.name)
        elif isinstance(e, Column):
            return f"{self.quote(e.table)}.{self.quote(e.name)}"
        elif isinstance(e, SelectStatement):
            return self.render_select(e)
        elif isinstance(e, Constant):
            return self.render_scalar(e.value)
        elif isinstance(e, ColumnReference):
            return self.render_expr(e.column)
        elif isinstance(e, UnaryOperation):
            if e.operator == UnaryOperator.NOT:
                return f"NOT ({self.render_expr(e.expression)})"
            return f"{e.operator.value}({self.render_expr(e.expression)})"
        elif isinstance(e, PostfixOperation):
            return f"({self.render_expr(e.expression)}) {e.operator.value}"
        elif isinstance(e, BinaryOperation):
            return f"({self.render_expr(e.left)}) {e.operator.value} ({self.render_expr(e.right)})"
        elif isinstance(e, Comparison):
            operator = self.lookup(self.COMPARISON_MAP, e.operator)
            return f"({self.render_expr(e.left)}) {operator} ({self.render_expr(e.right)})"
        elif isinstance(e, Conditional):
            operator = self.lookup(self.BOOLEAN_OPERATOR_MAP, e.operator)
            return f"({self.render_expr(e.left)}) {operator} ({self.render_expr(e.right)})"
        elif isinstance(e, CollateOperation):
            return f"({self.render_expr(e.expression)}) COLLATE {e.collation}"
        elif isinstance(e, TypeLiteral):
            return self.lookup(self.CAST_TYPE_MAP, e.type)
        elif isinstance(e, Cast):
            return f"CAST({self.render_expr(e.expression)} AS {self.render_expr(e.type)})"
        elif isinstance(e, Between):
            keyword = "NOT BETWEEN" if e.negated else "BETWEEN"
            return f"({self.render_expr(e.expression)}) {keyword} ({self.render_expr(e.low)}) AND ({self.render_expr(e.high)})"
        elif isinstance(e, InOperation):
            keyword = "NOT IN" if e.negated else "IN"
            candidates = ", ".join(self.render_expr(c) for c in e.candidates)
            return f"({self.render_expr(e.expression)}) {keyword} ({candidates})"
        elif isinstance(e, OrderingTerm):
            return f"{self.render_expr(e.expression)} {e.ordering.value.upper()}"
        elif isinstance(e, Join):
            join_type = self.lookup(self.JOIN_TYPE_MAP, e.join_type)
            return f"{join_type} {self.render_expr(e.table)} ON {self.render_expr(e.on_clause)}"
        elif isinstance(e, Exists):
            keyword = "NOT EXISTS" if e.negated else "EXISTS"
            return f"{keyword} ({self.render_select(e.select)})"
        elif isinstance(e, Subquery):
            return f"({self.render_select(e.select)})"
        elif isinstance(e, Function):
            renderer = self.lookup(self.FUNCTION_MAP, e.function)
            return renderer([self.render_expr(arg) for arg in e.arguments])
        raise ValueError(f"Unable to render type {type(e)} {e}")
