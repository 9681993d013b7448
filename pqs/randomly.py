import random
from typing import Sequence, TypeVar

from pqs.constants import CONFIG, Config

T = TypeVar("T")


class Randomly:
    """Seedable source of randomness, passed explicitly to anything that
    makes a random choice."""

    def __init__(self, seed: int | None = None):
        self.seed = seed
        self._random = random.Random(seed)

    @classmethod
    def from_config(cls, config: Config | None = None) -> "Randomly":
        config = config or CONFIG
        return cls(seed=config.seed)

    def get_boolean(self) -> bool:
        return self._random.random() < 0.5

    def get_integer(self, low: int, high: int) -> int:
        return self._random.randint(low, high)

    def from_options(self, options: Sequence[T]) -> T:
        if not options:
            raise ValueError("Cannot choose from an empty set of options")
        return self._random.choice(options)
