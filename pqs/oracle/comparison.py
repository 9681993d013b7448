from sqlalchemy import text

from pqs.constants import logger
from pqs.core.evaluate import Discard, Outcome, predict
from pqs.core.exceptions import OracleMismatchException
from pqs.core.models.core import Scalar, to_scalar
from pqs.core.models.expressions import Expression
from pqs.core.trace import trace
from pqs.dialect.enums import Dialects
from pqs.oracle.report import MismatchReport

LOGGER_PREFIX = "[ORACLE]"


class ComparisonOracle:
    """Issues an expression to a live engine and compares the single value
    it returns with the predicted one."""

    def __init__(self, connection, dialect: Dialects = Dialects.MYSQL):
        self.connection = connection
        self.dialect = dialect
        self.renderer = dialect.default_renderer()

    def execute(self, query: str) -> Scalar:
        logger.debug(f"{LOGGER_PREFIX} executing {query}")
        # colons inside string literals would otherwise parse as bind parameters
        row = self.connection.execute(text(query.replace(":", "\\:"))).fetchone()
        if row is None:
            raise ValueError(f"Query returned no rows: {query}")
        return to_scalar(row[0])

    def check(self, expression: Expression) -> Outcome:
        self.renderer.validate(expression)
        outcome = predict(expression, self.dialect)
        if isinstance(outcome, Discard):
            return outcome
        query = self.renderer.render_expression_query(expression)
        actual = self.execute(query)
        if actual != outcome.value:
            report = MismatchReport(
                query=query,
                predicted=outcome.value,
                actual=actual,
                trace=trace(expression, self.renderer),
                dialect=self.dialect.value,
            )
            logger.error(f"{LOGGER_PREFIX} {report.render()}")
            raise OracleMismatchException(report)
        logger.debug(f"{LOGGER_PREFIX} {query} matched {outcome.value}")
        return outcome
