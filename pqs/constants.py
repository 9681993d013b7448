from contextlib import contextmanager
from dataclasses import dataclass, field
from logging import getLogger
from typing import Any

logger = getLogger("pqs")

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1
UINT64_MASK = 2**64 - 1

EXPLAIN_ACTION = "explain"


@dataclass
class Rendering:
    """Control how traces and queries are rendered"""

    trace_separator: str = " -- "

    @contextmanager
    def temporary(self, **kwargs: Any):
        """
        Context manager to temporarily set attributes and revert them afterwards.

        Usage:
            r = Rendering()
            with r.temporary(trace_separator=" => "):
                do_something()
        """
        original_values = {key: getattr(self, key) for key in kwargs}

        for key, value in kwargs.items():
            setattr(self, key, value)

        try:
            yield self
        finally:
            for key, value in original_values.items():
                setattr(self, key, value)


@dataclass
class Evaluation:
    """Control the generation loop around evaluation"""

    max_discard_attempts: int = 100


@dataclass
class Config:
    seed: int | None = 42
    rendering: Rendering = field(default_factory=Rendering)
    evaluation: Evaluation = field(default_factory=Evaluation)


CONFIG = Config()
