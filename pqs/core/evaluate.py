from dataclasses import dataclass
from typing import Union

from pqs.constants import logger
from pqs.core.exceptions import UninformativeCaseException
from pqs.core.models.core import Scalar
from pqs.core.models.expressions import Expression
from pqs.dialect.enums import Dialects

LOGGER_PREFIX = "[EVALUATION]"


@dataclass(frozen=True)
class Prediction:
    value: Scalar


@dataclass(frozen=True)
class Discard:
    """The case cannot be predicted faithfully and should be regenerated."""

    reason: str


Outcome = Union[Prediction, Discard]


def predict(expression: Expression, dialect: Dialects = Dialects.MYSQL) -> Outcome:
    try:
        return Prediction(value=expression.predicted_value(dialect))
    except UninformativeCaseException as e:
        logger.debug(f"{LOGGER_PREFIX} discarding case: {e.reason}")
        return Discard(reason=e.reason)


def predicted_value(
    expression: Expression, dialect: Dialects = Dialects.MYSQL
) -> Scalar:
    """Evaluate an expression, raising UninformativeCaseException for cases
    that cannot be predicted."""
    return expression.predicted_value(dialect)
