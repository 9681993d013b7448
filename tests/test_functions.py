from pytest import mark, raises

from pqs.constants import INT64_MAX, INT64_MIN
from pqs.core.enums import FunctionType
from pqs.core.evaluate import Discard, predict
from pqs.core.exceptions import InternalInvariantError, UninformativeCaseException
from pqs.core.functions import (
    FUNCTION_REGISTRY,
    MYSQL_FUNCTIONS,
    get_function_config,
    random_function,
)
from pqs.core.models.core import NULL, IntScalar, TextScalar
from pqs.core.models.expressions import ColumnReference, Constant, Function
from pqs.dialect.enums import Dialects
from pqs.randomly import Randomly


def c(value):
    return Constant(value=value)


def call(function: FunctionType, *args, dialect=Dialects.MYSQL):
    return Function(
        function=function,
        arguments=[c(a) for a in args],
    ).predicted_value(dialect)


def test_abs():
    assert call(FunctionType.ABS, -5) == IntScalar(value=5)
    assert call(FunctionType.ABS, 5) == IntScalar(value=5)
    assert call(FunctionType.ABS, "-7") == IntScalar(value=7)
    assert call(FunctionType.ABS, INT64_MAX) == IntScalar(value=INT64_MAX)
    assert call(FunctionType.ABS, None) == NULL


def test_abs_minimum_integer_is_uninformative():
    with raises(UninformativeCaseException):
        call(FunctionType.ABS, INT64_MIN)
    outcome = predict(Function(function=FunctionType.ABS, arguments=[c(INT64_MIN)]))
    assert isinstance(outcome, Discard)
    assert "out of BIGINT range" in outcome.reason


def test_bit_count():
    assert call(FunctionType.BIT_COUNT, 5) == IntScalar(value=2)
    assert call(FunctionType.BIT_COUNT, 0) == IntScalar(value=0)
    assert call(FunctionType.BIT_COUNT, None) == NULL
    # two's complement of -1 has every bit set
    assert call(FunctionType.BIT_COUNT, -1) == IntScalar(value=64)
    assert call(FunctionType.BIT_COUNT, INT64_MIN) == IntScalar(value=1)


def test_benchmark():
    assert call(FunctionType.BENCHMARK, None, 1) == NULL
    assert call(FunctionType.BENCHMARK, -1, 1) == NULL
    assert call(FunctionType.BENCHMARK, 5, "x") == IntScalar(value=0)
    assert call(FunctionType.BENCHMARK, 0, None) == IntScalar(value=0)


@mark.parametrize(
    "function,args",
    [
        (FunctionType.ABS, [None]),
        (FunctionType.BIT_COUNT, [None]),
        (FunctionType.BENCHMARK, [None, 1]),
        (FunctionType.COALESCE, [None, None, None]),
        (FunctionType.IFNULL, [None, None]),
    ],
)
def test_null_absorption(function, args):
    assert call(function, *args) == NULL


def test_coalesce():
    assert call(FunctionType.COALESCE, None, None) == NULL
    assert call(FunctionType.COALESCE, None, "x") == TextScalar(value="x")
    assert call(FunctionType.COALESCE, None, 1, 2) == IntScalar(value=1)


def test_coalesce_uses_type_of_all_arguments():
    # the selected branch is an integer but a later argument is text
    assert call(FunctionType.COALESCE, None, 1, "a") == TextScalar(value="1")
    assert call(FunctionType.COALESCE, "12ab", 1) == TextScalar(value="12ab")


def test_coalesce_arity():
    with raises(InternalInvariantError):
        call(FunctionType.COALESCE, 1)


def test_if():
    assert call(FunctionType.IF, None, 1, 2) == IntScalar(value=2)
    assert call(FunctionType.IF, 0, 1, 2) == IntScalar(value=2)
    assert call(FunctionType.IF, 1, 1, 2) == IntScalar(value=1)
    assert call(FunctionType.IF, "abc", 1, 2) == IntScalar(value=2)


def test_if_type_ignores_condition():
    assert call(FunctionType.IF, 1, 1, "a") == TextScalar(value="1")
    assert call(FunctionType.IF, 0, 1, "a") == TextScalar(value="a")
    assert call(FunctionType.IF, "x", 1, 2) == IntScalar(value=2)


def test_ifnull():
    assert call(FunctionType.IFNULL, None, 5) == IntScalar(value=5)
    assert call(FunctionType.IFNULL, 3, 5) == IntScalar(value=3)
    assert call(FunctionType.IFNULL, 3, "x") == TextScalar(value="3")


def test_ifnull_with_column_type(text_column):
    expr = Function(
        function=FunctionType.IFNULL,
        arguments=[c(3), ColumnReference(column=text_column, value=None)],
    )
    assert expr.predicted_value() == TextScalar(value="3")


@mark.parametrize("text", ["\n1", " \t\n1", ".5", "  .x"])
def test_leading_text_workaround(text):
    with raises(UninformativeCaseException):
        call(FunctionType.IFNULL, None, text)
    assert isinstance(
        predict(Function(function=FunctionType.ABS, arguments=[c(text)])), Discard
    )


def test_function_outside_dialect():
    with raises(InternalInvariantError):
        call(FunctionType.IIF, 1, 2, 3)
    with raises(InternalInvariantError):
        get_function_config(Dialects.SQLITE, FunctionType.BIT_COUNT)


def test_wrong_arity():
    with raises(InternalInvariantError):
        call(FunctionType.IF, 1, 2)
    with raises(InternalInvariantError):
        call(FunctionType.ABS, 1, 2)


def test_sqlite_functions():
    assert call(FunctionType.ABS, -3, dialect=Dialects.SQLITE) == IntScalar(value=3)
    assert call(FunctionType.ABS, None, dialect=Dialects.SQLITE) == NULL
    assert call(FunctionType.IIF, 0, 1, "a", dialect=Dialects.SQLITE) == TextScalar(
        value="a"
    )
    # no static coercion of the selected branch
    assert call(FunctionType.IIF, 1, 1, "a", dialect=Dialects.SQLITE) == IntScalar(
        value=1
    )
    assert call(
        FunctionType.COALESCE, None, 1, "a", dialect=Dialects.SQLITE
    ) == IntScalar(value=1)
    assert call(FunctionType.IFNULL, None, 5, dialect=Dialects.SQLITE) == IntScalar(
        value=5
    )


def test_sqlite_abs_uninformative():
    with raises(UninformativeCaseException):
        call(FunctionType.ABS, "5", dialect=Dialects.SQLITE)
    with raises(UninformativeCaseException):
        call(FunctionType.ABS, INT64_MIN, dialect=Dialects.SQLITE)


def test_registry_is_closed():
    assert set(FUNCTION_REGISTRY[Dialects.MYSQL]) == {
        FunctionType.ABS,
        FunctionType.BIT_COUNT,
        FunctionType.BENCHMARK,
        FunctionType.COALESCE,
        FunctionType.IF,
        FunctionType.IFNULL,
    }
    assert set(FUNCTION_REGISTRY) == set(Dialects)


def test_registry_matches_renderers():
    # anything a renderer accepts must also be predictable for that dialect
    for dialect in Dialects:
        renderer = dialect.default_renderer()
        assert renderer.DIALECT == dialect
        assert set(renderer.FUNCTION_MAP) == set(FUNCTION_REGISTRY[dialect])


def test_random_function():
    first = [random_function(Randomly(seed=3)) for _ in range(5)]
    second = [random_function(Randomly(seed=3)) for _ in range(5)]
    assert first == second
    randomly = Randomly(seed=11)
    for _ in range(50):
        assert random_function(randomly) in MYSQL_FUNCTIONS
        assert (
            random_function(randomly, Dialects.SQLITE)
            in FUNCTION_REGISTRY[Dialects.SQLITE]
        )
