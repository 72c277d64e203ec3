from __future__ import annotations
import string
from typing import List, Sequence
import numpy as np # type: ignore

ALPHABET = string.ascii_lowercase + string.ascii_uppercase + string.digits + "-"
MIN_LENGTH = 5
MAX_LENGTH = 30


class StreamGenerator:
    """Generates streams of random strings for cardinality experiments.

    Strings are drawn from ``ALPHABET`` with lengths uniform in
    ``[MIN_LENGTH, MAX_LENGTH]``. The same seed always yields the same
    sequence of streams.
    """

    def __init__(self, seed: int = 42,
                 min_length: int = MIN_LENGTH,
                 max_length: int = MAX_LENGTH,
                 alphabet: str = ALPHABET):
        if min_length < 0 or max_length < min_length:
            raise ValueError(f"Invalid length range [{min_length}, {max_length}]")
        if not alphabet:
            raise ValueError("alphabet must not be empty")
        self.seed = seed
        self.min_length = min_length
        self.max_length = max_length
        self.alphabet = np.array(list(alphabet))
        self.rng = np.random.default_rng(seed)

    def make_string(self) -> str:
        """Draw one random string."""
        length = int(self.rng.integers(self.min_length, self.max_length + 1))
        return "".join(self.rng.choice(self.alphabet, size=length))

    def make_stream(self, n: int) -> List[str]:
        """Draw a stream of ``n`` random strings (duplicates possible)."""
        if n < 0:
            raise ValueError(f"Stream size must be non-negative, got {n}")
        lengths = self.rng.integers(self.min_length, self.max_length + 1, size=n)
        chars = self.rng.choice(self.alphabet, size=int(lengths.sum()))
        stream = []
        pos = 0
        for length in lengths:
            stream.append("".join(chars[pos:pos + length]))
            pos += length
        return stream


def split_stream(stream: Sequence[str], percents: Sequence[int]) -> List[List[str]]:
    """Return the prefixes of ``stream`` holding each given percentage.

    The prefix for percentage ``p`` has ``len(stream) * p // 100`` elements.

    Args:
        stream: Full stream
        percents: Percentages in [0, 100]

    Returns:
        One prefix list per percentage, in the given order
    """
    parts = []
    for p in percents:
        if not 0 <= p <= 100:
            raise ValueError(f"Percent must be between 0 and 100, got {p}")
        n = len(stream) * p // 100
        parts.append(list(stream[:n]))
    return parts
