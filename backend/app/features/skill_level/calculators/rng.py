"""
Deterministic pseudo-random generator for k-means++ seeding.

32-bit xorshift (Marsaglia 2003, shifts 13/17/5). Passed explicitly into
the clustering code so identical inputs and seed give identical tiers.
"""

MASK_32 = 0xFFFFFFFF

# Xorshift has a fixed point at 0; substitute a non-zero state
ZERO_SEED_REPLACEMENT = 0x9E3779B9


class XorShiftRandom:
    """
    Seeded xorshift32 generator.

    Usage:
        rng = XorShiftRandom(42)
        rng.random()      # float in [0, 1)
        rng.randrange(10) # int in [0, 10)
    """

    def __init__(self, seed: int = 42):
        state = int(seed) & MASK_32
        self.state = state or ZERO_SEED_REPLACEMENT

    def next_uint32(self) -> int:
        x = self.state
        x ^= (x << 13) & MASK_32
        x ^= x >> 17
        x ^= (x << 5) & MASK_32
        self.state = x & MASK_32
        return self.state

    def random(self) -> float:
        """Float in [0, 1)."""
        return self.next_uint32() / (MASK_32 + 1)

    def randrange(self, n: int) -> int:
        """Integer in [0, n)."""
        if n <= 0:
            raise ValueError("n must be positive")
        return min(n - 1, int(self.random() * n))
