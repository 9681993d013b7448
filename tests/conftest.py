from pytest import fixture
from sqlalchemy import text

from pqs.core.models.core import DataType
from pqs.core.models.schema import Column, Table
from pqs.dialect.enums import Dialects
from pqs.oracle.comparison import ComparisonOracle


@fixture(scope="session")
def int_column() -> Column:
    return Column(name="c0", table="t0", datatype=DataType.INTEGER)


@fixture(scope="session")
def text_column() -> Column:
    return Column(name="c1", table="t0", datatype=DataType.TEXT)


@fixture(scope="session")
def pivot_table(int_column, text_column) -> Table:
    return Table(name="t0", columns=(int_column, text_column))


@fixture
def sqlite_connection():
    engine = Dialects.SQLITE.default_engine()
    with engine.connect() as connection:
        connection.execute(text("CREATE TABLE t0 (c0 INTEGER, c1 TEXT)"))
        connection.execute(text("INSERT INTO t0 VALUES (5, 'abc')"))
        yield connection


@fixture
def sqlite_oracle(sqlite_connection) -> ComparisonOracle:
    return ComparisonOracle(sqlite_connection, Dialects.SQLITE)


class FixedResultConnection:
    """Answers every query with the same single value."""

    def __init__(self, value):
        self.value = value
        self.queries: list[str] = []

    def execute(self, statement, *args, **kwargs):
        self.queries.append(str(statement))
        return self

    def fetchone(self):
        return (self.value,)


@fixture
def mismatching_oracle() -> ComparisonOracle:
    # every query answers 0, so any predicted 1 is a mismatch
    return ComparisonOracle(FixedResultConnection(0), Dialects.MYSQL)
