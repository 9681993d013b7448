from itertools import cycle

from pytest import raises

from pqs.constants import CONFIG
from pqs.core.enums import ComparisonOperator, FunctionType
from pqs.core.exceptions import OracleMismatchException
from pqs.core.models.expressions import Comparison, Constant, Function
from pqs.oracle.loop import run_checks
from pqs.randomly import Randomly


def c(value):
    return Constant(value=value)


def test_discards_are_regenerated(sqlite_oracle):
    cases = cycle([c("\nabc"), c(1)])
    summary = run_checks(lambda randomly: next(cases), sqlite_oracle, Randomly(1), 5)
    assert summary.checked == 5
    assert summary.discarded == 5
    assert summary.exhausted == 0


def test_exhausted_cases(sqlite_oracle):
    summary = run_checks(
        lambda randomly: c(".5"),
        sqlite_oracle,
        Randomly(1),
        2,
        max_discard_attempts=3,
    )
    assert summary.checked == 0
    assert summary.discarded == 6
    assert summary.exhausted == 2


def test_random_cases(sqlite_oracle):
    def factory(randomly: Randomly):
        return Function(
            function=FunctionType.ABS,
            arguments=[c(randomly.get_integer(-1000, 1000))],
        )

    summary = run_checks(factory, sqlite_oracle, Randomly(42), 20)
    assert summary.checked == 20
    assert summary.discarded == 0


def test_mismatch_propagates(mismatching_oracle):
    def factory(randomly: Randomly):
        return Comparison(operator=ComparisonOperator.EQ, left=c("b"), right=c("B"))

    with raises(OracleMismatchException):
        run_checks(factory, mismatching_oracle, Randomly(1), 3)
    assert len(mismatching_oracle.connection.queries) == 1


def test_configured_seed_is_default(sqlite_oracle):
    def run() -> list[int]:
        seen: list[int] = []

        def factory(randomly: Randomly):
            seen.append(randomly.get_integer(-1000, 1000))
            return c(seen[-1])

        run_checks(factory, sqlite_oracle, None, 5)
        return seen

    expected = Randomly(CONFIG.seed)
    assert run() == run() == [expected.get_integer(-1000, 1000) for _ in range(5)]
