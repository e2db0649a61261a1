"""
XorShift128 RNG - Seedable random source threaded through the simulation.

Every procedural decision (map layout, enemy AI, shop rolls, deck shuffles)
draws from an explicit Random handle instead of ambient global randomness,
so a run can be replayed from its seed.

Typical streams owned by a run:
- map_rng: Map layout, encounter types, node rewards
- ai_rng: Enemy decisions and intents
- shuffle_rng: Deck shuffles and draws
- merchant_rng: Shop listings and discounts
"""

from typing import List, Optional, Sequence, TypeVar
import time
import uuid

T = TypeVar("T")

_MASK64 = 0xFFFFFFFFFFFFFFFF


class XorShift128:
    """
    XorShift128 PRNG.

    State is two 64-bit integers (seed0, seed1).
    """

    def __init__(self, seed: int, seed1: Optional[int] = None):
        """
        Initialize with a 64-bit seed or explicit (seed0, seed1) state.

        Args:
            seed: Either the initial seed (if seed1 is None) or seed0 state
            seed1: If provided, use (seed, seed1) as direct state values
        """
        if seed1 is not None:
            self.seed0 = seed & _MASK64
            self.seed1 = seed1 & _MASK64
        else:
            # A zero state would never leave zero
            if seed == 0:
                seed = -0x8000000000000000
            self.seed0 = self._murmur_hash3(seed)
            self.seed1 = self._murmur_hash3(self.seed0)

    @staticmethod
    def _murmur_hash3(x: int) -> int:
        """MurmurHash3 finalizer - spreads the seed over both state words."""
        x = x & _MASK64
        x ^= x >> 33
        x = (x * 0xff51afd7ed558ccd) & _MASK64
        x ^= x >> 33
        x = (x * 0xc4ceb9fe1a85ec53) & _MASK64
        x ^= x >> 33
        return x

    def _next_long(self) -> int:
        """Generate next unsigned 64-bit value."""
        s1 = self.seed0
        s0 = self.seed1
        self.seed0 = s0
        s1 ^= (s1 << 23) & _MASK64
        self.seed1 = (s1 ^ s0 ^ (s1 >> 17) ^ (s0 >> 26)) & _MASK64
        return (self.seed0 + self.seed1) & _MASK64

    def next_int(self, bound: int) -> int:
        """Random int in [0, bound), rejection-sampled to avoid modulo bias."""
        if bound <= 0:
            raise ValueError("bound must be positive")

        while True:
            bits = self._next_long() >> 1
            val = bits % bound
            if bits - val + (bound - 1) < (1 << 63):
                return int(val)

    def next_float(self) -> float:
        """Random float in [0, 1) with 24 bits of precision."""
        return (self._next_long() >> 40) / (1 << 24)

    def next_double(self) -> float:
        """Random double in [0, 1) with 53 bits of precision."""
        return (self._next_long() >> 11) / (1 << 53)

    def next_boolean(self) -> bool:
        """Random boolean - checks least significant bit."""
        return (self._next_long() & 1) != 0

    def get_state(self, index: int) -> int:
        """Get state value (0 = seed0, 1 = seed1)."""
        if index == 0:
            return self.seed0
        return self.seed1

    def copy(self) -> 'XorShift128':
        """Create a copy with same state."""
        return XorShift128(self.seed0, self.seed1)


class Random:
    """
    Random source used by every simulation component.

    Wraps XorShift128 and counts draws, so two handles built from the
    same seed produce the same sequence and can be compared by counter.

    Provides the primitive helpers the engine needs:
    - random_int_range(start, end) -> [start, end] inclusive
    - random_float() -> [0, 1)
    - random_boolean(chance) -> True with probability `chance`
    - choice(items) -> uniform element
    - weighted_choice(items, weights) -> element proportional to weight
    - shuffle(items) -> new shuffled list (Fisher-Yates)
    """

    def __init__(self, seed: int, counter: int = 0):
        """
        Initialize RNG with seed and optional counter.

        Args:
            seed: 64-bit seed value
            counter: Number of draws to skip (resume a stream mid-run)
        """
        self.seed = seed
        self._rng = XorShift128(seed)
        self.counter = 0

        for _ in range(counter):
            self.random_int(999)

    def random_int(self, range_val: int) -> int:
        """Random int in [0, range_val] INCLUSIVE."""
        self.counter += 1
        return self._rng.next_int(range_val + 1)

    def random_int_range(self, start: int, end: int) -> int:
        """Random int in [start, end] INCLUSIVE."""
        if end < start:
            raise ValueError(f"empty range [{start}, {end}]")
        self.counter += 1
        return start + self._rng.next_int(end - start + 1)

    def random_float(self) -> float:
        """Random float in [0, 1)."""
        self.counter += 1
        return self._rng.next_double()

    def random_float_range(self, start: float, end: float) -> float:
        """Random float in [start, end)."""
        self.counter += 1
        return start + self._rng.next_double() * (end - start)

    def random_boolean(self, chance: Optional[float] = None) -> bool:
        """
        Random boolean.

        With no argument: fair coin flip.
        With a probability: True when a uniform draw falls below `chance`.
        """
        self.counter += 1
        if chance is None:
            return self._rng.next_boolean()
        return self._rng.next_double() < chance

    def choice(self, items: Sequence[T]) -> T:
        """Uniformly pick one element of a non-empty sequence."""
        if not items:
            raise ValueError("cannot choose from an empty sequence")
        return items[self.random_int_range(0, len(items) - 1)]

    def weighted_choice(self, items: Sequence[T], weights: Sequence[float]) -> T:
        """
        Pick an element with probability proportional to its weight.

        Draws r uniform in [0, total) and subtracts each weight in order
        until r drops below zero, so zero-weight items are never returned
        while any weight is positive.
        """
        if not items:
            raise ValueError("cannot choose from an empty sequence")
        if len(items) != len(weights):
            raise ValueError("items and weights must have the same length")
        total = sum(weights)
        if total <= 0:
            raise ValueError("at least one weight must be positive")

        r = self.random_float() * total
        for item, weight in zip(items, weights):
            r -= weight
            if r < 0:
                return item

        # Float rounding can leave r == 0 after the last subtraction
        for item, weight in zip(reversed(items), reversed(weights)):
            if weight > 0:
                return item
        return items[-1]

    def shuffle(self, items: Sequence[T]) -> List[T]:
        """Return a shuffled copy of `items` (Fisher-Yates, back to front)."""
        result = list(items)
        for i in range(len(result) - 1, 0, -1):
            j = self.random_int_range(0, i)
            result[i], result[j] = result[j], result[i]
        return result

    def copy(self) -> 'Random':
        """Create a copy with same state."""
        new = Random.__new__(Random)
        new.seed = self.seed
        new._rng = self._rng.copy()
        new.counter = self.counter
        return new


SEED_CHARACTERS = "0123456789ABCDEFGHIJKLMNPQRSTUVWXYZ"


def seed_to_long(seed_string: str) -> int:
    """
    Convert a seed string (e.g., "ABC123XYZ") to its numeric value.

    Seeds are base-35: 0-9 + A-Z excluding O, which is read as 0.
    Pure numeric strings (including negatives) are taken as plain integers.
    """
    if seed_string.lstrip('-').isdigit():
        return int(seed_string)

    seed_string = seed_string.upper().replace("O", "0")

    result = 0
    for char in seed_string:
        remainder = SEED_CHARACTERS.find(char)
        if remainder == -1:
            continue
        result = result * len(SEED_CHARACTERS) + remainder

    return result


def long_to_seed(seed_long: int) -> str:
    """Convert a numeric seed back to its base-35 string."""
    if seed_long == 0:
        return "0"

    leftover = seed_long & _MASK64
    result = []
    while leftover != 0:
        leftover, remainder = divmod(leftover, len(SEED_CHARACTERS))
        result.append(SEED_CHARACTERS[remainder])

    return ''.join(reversed(result))


def random_seed() -> int:
    """Fresh seed for callers that do not supply one."""
    return time.time_ns() & _MASK64


def make_id(prefix: str = "") -> str:
    """Unique identifier for log entries, card copies and shop items."""
    token = uuid.uuid4().hex[:12]
    return f"{prefix}-{token}" if prefix else token
