from typing import Union

from pqs.core.exceptions import UninformativeCaseException
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
from pqs.dialect.base import BaseDialect
from pqs.dialect.enums import Dialects


class ExpectedValueTracer:
    """Writes one line per visited node: its SQL text followed by the value
    the node is expected to produce. Used to diagnose oracle mismatches."""

    def __init__(self, dialect: Dialects | BaseDialect = Dialects.MYSQL):
        if isinstance(dialect, Dialects):
            dialect = dialect.default_renderer()
        self.renderer = dialect
        self.dialect = dialect.DIALECT
        self.lines: list[str] = []

    def print(self, node: Expression):
        try:
            value = node.predicted_value(self.dialect)
            annotation = self.renderer.render_scalar(value)
        except UninformativeCaseException as e:
            annotation = f"UNINFORMATIVE ({e.reason})"
        self.lines.append(
            f"{self.renderer.render_expr(node)}{self.renderer.rendering.trace_separator}{annotation}\n"
        )

    def visit(self, node: Union[Expression, SelectStatement]):
        if isinstance(node, SelectStatement):
            if node.where_clause is not None:
                self.visit(node.where_clause)
            return
        # type literals have no value of their own
        if isinstance(node, TypeLiteral):
            return
        self.print(node)
        if isinstance(node, (Constant, ColumnReference)):
            return
        elif isinstance(node, (BinaryOperation, Comparison, Conditional)):
            self.visit(node.left)
            self.visit(node.right)
        elif isinstance(node, Between):
            self.visit(node.expression)
            self.visit(node.low)
            self.visit(node.high)
        elif isinstance(node, InOperation):
            self.visit(node.expression)
            for candidate in node.candidates:
                self.visit(candidate)
        elif isinstance(node, Function):
            for arg in node.arguments:
                self.visit(arg)
        elif isinstance(
            node,
            (UnaryOperation, PostfixOperation, CollateOperation, Cast, OrderingTerm),
        ):
            self.visit(node.expression)
        elif isinstance(node, Subquery):
            self.visit(node.expected_value)
        elif isinstance(node, Exists):
            self.visit(node.select)
        elif isinstance(node, Join):
            self.visit(node.on_clause)
        else:
            raise ValueError(f"Unable to trace type {type(node)} {node}")

    def get(self) -> str:
        return "".join(self.lines)


def trace(
    node: Union[Expression, SelectStatement],
    dialect: Dialects | BaseDialect = Dialects.MYSQL,
) -> str:
    tracer = ExpectedValueTracer(dialect)
    # fail before any output on constructs the dialect cannot render
    tracer.renderer.validate(node)
    tracer.visit(node)
    return tracer.get()
