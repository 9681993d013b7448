from pytest import raises

from pqs.core.enums import (
    BooleanOperator,
    ComparisonOperator,
    FunctionType,
    JoinType,
    Ordering,
    PostfixOperator,
    UnaryOperator,
)
from pqs.core.exceptions import ConfigurationException
from pqs.core.models.expressions import (
    Cast,
    CollateOperation,
    ColumnReference,
    Comparison,
    Conditional,
    Constant,
    Function,
    InOperation,
    Join,
    OrderingTerm,
    PostfixOperation,
    SelectStatement,
    UnaryOperation,
)
from pqs.dialect.base import BaseDialect
from pqs.dialect.enums import Dialects
from pqs.dialect.mysql import MySQLDialect
from pqs.dialect.sqlite import SQLiteDialect
from pqs.render import get_dialect_generator

MYSQL = MySQLDialect()
SQLITE = SQLiteDialect()


def c(value):
    return Constant(value=value)


def test_get_dialect_generator():
    assert isinstance(get_dialect_generator(Dialects.MYSQL), MySQLDialect)
    assert isinstance(Dialects("SQLite3").default_renderer(), SQLiteDialect)
    assert isinstance(Dialects("MYSQL").default_renderer(), BaseDialect)


def test_cast_types():
    expr = Cast(expression=c("a"), type="signed")
    assert MYSQL.render_expr(expr) == "CAST('a' AS SIGNED)"
    assert SQLITE.render_expr(expr) == "CAST('a' AS INTEGER)"
    assert SQLITE.render_expr(Cast(expression=c(1), type="text")) == "CAST(1 AS TEXT)"


def test_null_safe_equality():
    expr = Comparison(
        operator=ComparisonOperator.NULL_SAFE_EQ, left=c(1), right=c(None)
    )
    assert MYSQL.render_expr(expr) == "(1) <=> (NULL)"
    assert SQLITE.render_expr(expr) == "(1) IS (NULL)"


def test_unsupported_in_sqlite():
    with raises(NotImplementedError):
        SQLITE.render_expr(
            Conditional(operator=BooleanOperator.XOR, left=c(1), right=c(0))
        )
    with raises(NotImplementedError):
        SQLITE.render_expr(Function(function=FunctionType.BIT_COUNT, arguments=[c(1)]))
    with raises(NotImplementedError):
        MYSQL.render_expr(
            Function(function=FunctionType.IIF, arguments=[c(1), c(2), c(3)])
        )


def test_validate_rejects_nested_unsupported_nodes():
    nested = Comparison(
        operator=ComparisonOperator.EQ,
        left=c(1),
        right=Function(function=FunctionType.BIT_COUNT, arguments=[c(1)]),
    )
    with raises(ConfigurationException, match="BIT_COUNT is not supported"):
        SQLITE.validate(nested)
    assert MYSQL.validate(nested) == "(1) = (BIT_COUNT(1))"


def test_string_escaping():
    assert MYSQL.render_expr(c("a\\b'c")) == "'a\\\\b''c'"
    assert SQLITE.render_expr(c("a\\b'c")) == "'a\\b''c'"


def test_operators():
    assert MYSQL.render_expr(
        UnaryOperation(operator=UnaryOperator.NOT, expression=c(1))
    ) == "NOT (1)"
    assert MYSQL.render_expr(
        UnaryOperation(operator=UnaryOperator.MINUS, expression=c(1))
    ) == "-(1)"
    assert MYSQL.render_expr(
        PostfixOperation(operator=PostfixOperator.IS_NOT_NULL, expression=c(1))
    ) == "(1) IS NOT NULL"
    assert MYSQL.render_expr(
        CollateOperation(expression=c("a"), collation="utf8mb4_bin")
    ) == "('a') COLLATE utf8mb4_bin"
    assert MYSQL.render_expr(
        InOperation(expression=c(1), candidates=[c(2)], negated=True)
    ) == "(1) NOT IN (2)"


def test_functions():
    expr = Function(function=FunctionType.COALESCE, arguments=[c(None), c(1), c("a")])
    assert MYSQL.render_expr(expr) == "COALESCE(NULL, 1, 'a')"
    expr = Function(
        function=FunctionType.IIF,
        arguments=[c(1), c(2), c(3)],
    )
    assert SQLITE.render_expr(expr) == "IIF(1, 2, 3)"


def test_select(pivot_table, int_column):
    reference = ColumnReference(column=int_column, value=5)
    select = SelectStatement(
        columns=[reference],
        tables=[pivot_table],
        joins=[
            Join(
                table=pivot_table,
                on_clause=c(1),
                join_type=JoinType.LEFT_OUTER,
            )
        ],
        where_clause=c(1),
        order_by=[OrderingTerm(expression=reference, ordering=Ordering.DESCENDING)],
        limit=3,
    )
    assert MYSQL.render_expr(select) == (
        "SELECT `t0`.`c0` FROM `t0` LEFT OUTER JOIN `t0` ON 1 WHERE 1 "
        "ORDER BY `t0`.`c0` DESC LIMIT 3"
    )
    assert SQLITE.render_select(SelectStatement(tables=[pivot_table])) == (
        'SELECT * FROM "t0"'
    )


def test_expression_query():
    assert MYSQL.render_expression_query(c(1)) == "SELECT 1"


def test_identifier_quoting():
    assert MYSQL.quote("we`ird") == "`we``ird`"
    assert SQLITE.quote('we"ird') == '"we""ird"'
