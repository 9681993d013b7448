from dataclasses import dataclass
from typing import Callable

from pqs.constants import CONFIG, logger
from pqs.core.evaluate import Discard
from pqs.core.models.expressions import Expression
from pqs.oracle.comparison import ComparisonOracle
from pqs.randomly import Randomly

LOGGER_PREFIX = "[LOOP]"

CaseFactory = Callable[[Randomly], Expression]


@dataclass
class CheckSummary:
    checked: int = 0
    discarded: int = 0
    # cases where every attempt was discarded
    exhausted: int = 0


def run_checks(
    factory: CaseFactory,
    oracle: ComparisonOracle,
    randomly: Randomly | None,
    cases: int,
    max_discard_attempts: int | None = None,
) -> CheckSummary:
    """Generate and check cases until `cases` have been compared against the
    engine. Discarded cases are regenerated; mismatches propagate. Without
    an explicit source of randomness the configured seed is used."""
    if randomly is None:
        randomly = Randomly.from_config()
    if max_discard_attempts is None:
        max_discard_attempts = CONFIG.evaluation.max_discard_attempts
    summary = CheckSummary()
    for idx in range(cases):
        for _ in range(max_discard_attempts):
            outcome = oracle.check(factory(randomly))
            if isinstance(outcome, Discard):
                summary.discarded += 1
                continue
            summary.checked += 1
            break
        else:
            summary.exhausted += 1
            logger.warning(
                f"{LOGGER_PREFIX} case {idx} discarded {max_discard_attempts} times, skipping"
            )
    logger.info(
        f"{LOGGER_PREFIX} checked {summary.checked} cases, discarded {summary.discarded}"
    )
    return summary
