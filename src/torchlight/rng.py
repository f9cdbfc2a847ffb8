from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Protocol

logger = logging.getLogger(__name__)


class RandomLike(Protocol):
    """The subset of random.Random the generator and lighting draw from."""

    def randint(self, a: int, b: int) -> int: ...
    def random(self) -> float: ...
    def gauss(self, mu: float, sigma: float) -> float: ...


@dataclass
class RandomSource:
    """
    A thin wrapper around random.Random to:
    - centralize RNG handling for generation and lighting
    - support optional deterministic seeding for tests
    - expose only the draws the engine needs
    """

    seed: int | None = None

    def __post_init__(self) -> None:
        if self.seed is not None:
            self._rng = random.Random(self.seed)
            logger.debug("Initialized RandomSource with deterministic seed=%s", self.seed)
        else:
            # Non-deterministic seed using system random state
            self._rng = random.Random()
            logger.debug("Initialized RandomSource with non-deterministic seed")

    def randint(self, a: int, b: int) -> int:
        return self._rng.randint(a, b)

    def random(self) -> float:
        return self._rng.random()

    def gauss(self, mu: float, sigma: float) -> float:
        if sigma <= 0:
            return mu
        return self._rng.gauss(mu, sigma)


__all__ = ["RandomLike", "RandomSource"]
