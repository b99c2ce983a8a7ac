"""
Linear congruential PRNG used by every generation phase.

Each phase (noise, rivers, cities) builds its own instance from the run's
seed, so the phases are reproducible independently of one another.
"""

_MODULUS = 2**32
_MULTIPLIER = 1664525
_INCREMENT = 1013904223


class LcgPRNG:
    """
    Deterministic stream of floats in [0, 1).

    state = (state * 1664525 + 1013904223) mod 2^32, output = state / 2^32.
    """

    def __init__(self, seed: int = 123456):
        """Initialize with an integer seed (reduced to 32 bits)."""
        self.seed = int(seed) % _MODULUS
        self.state = self.seed
        # Number of values drawn so far
        self.call_count = 0

    def next(self) -> float:
        """Advance the state and return the next value in [0, 1)."""
        self.call_count += 1
        self.state = (self.state * _MULTIPLIER + _INCREMENT) % _MODULUS
        return self.state / _MODULUS

    # Samplers take a plain callable, matching the rest of the codebase
    random = next

    def randint(self, upper: int) -> int:
        """Integer in [0, upper) scaled from one draw."""
        return int(self.next() * upper)
