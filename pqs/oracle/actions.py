from dataclasses import dataclass, field
from typing import Callable, Mapping

from pqs.constants import EXPLAIN_ACTION, logger
from pqs.core.exceptions import ConfigurationException
from pqs.dialect.enums import Dialects
from pqs.randomly import Randomly

LOGGER_PREFIX = "[ACTIONS]"


@dataclass(frozen=True)
class Query:
    query: str
    expected_errors: frozenset[str] = field(default_factory=frozenset)

    def __str__(self) -> str:
        return self.query


Action = Callable[["GlobalState"], Query]


@dataclass
class GlobalState:
    randomly: Randomly
    dialect: Dialects
    actions: Mapping[str, Action] = field(default_factory=dict)

    def run_action(self, name: str) -> Query:
        if name not in self.actions:
            raise ConfigurationException(f"Unknown action {name}")
        return self.actions[name](self)


def explain(state: GlobalState) -> Query:
    """Prefix a query from any other action with EXPLAIN. The expected
    errors of the wrapped query carry over unchanged."""
    renderer = state.dialect.default_renderer()
    prefix = f"{renderer.EXPLAIN_KEYWORD} "
    if state.randomly.get_boolean():
        prefix += f"{renderer.EXPLAIN_FLAG} "
    candidates = sorted(name for name in state.actions if name != EXPLAIN_ACTION)
    if not candidates:
        raise ConfigurationException("explain needs at least one other action to wrap")
    name = state.randomly.from_options(candidates)
    logger.debug(f"{LOGGER_PREFIX} explaining action {name}")
    query = state.run_action(name)
    return Query(query=f"{prefix}{query.query}", expected_errors=query.expected_errors)
