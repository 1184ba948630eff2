"""Injectable source of randomness for the synthetic quote generators.

Every sampler in the core takes a ``RandomSource`` so callers can pin
implied volatility, spreads and liquidity in tests. ``random.Random``
satisfies the protocol as-is.
"""

import random
from typing import Optional, Protocol


class RandomSource(Protocol):
    """Subset of ``random.Random`` the core relies on."""

    def random(self) -> float: ...

    def uniform(self, a: float, b: float) -> float: ...

    def randint(self, a: int, b: int) -> int: ...


_default_source = random.Random()


def default_random_source() -> RandomSource:
    """Return the process-wide unseeded random source."""
    return _default_source


def resolve_random_source(rng: Optional[RandomSource]) -> RandomSource:
    return rng if rng is not None else default_random_source()
