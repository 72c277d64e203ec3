from __future__ import annotations
from typing import Iterable, Set, Union
from hllcount.lib.abstractsketch import AbstractSketch, Element


class ExactCounter(AbstractSketch):
    """Exact distinct counter, used as ground truth for sketches."""

    def __init__(self):
        """Initialize exact counter."""
        super().__init__()
        self.elements: Set[bytes] = set()

    def add(self, element: Element) -> None:
        """Add a byte sequence to the counter."""
        self.elements.add(self._as_bytes(element))

    def estimate(self) -> float:
        """Return exact cardinality."""
        return float(len(self.elements))

    def clear(self) -> None:
        self.elements.clear()

    def __len__(self) -> int:
        return len(self.elements)


def count_unique(stream: Iterable[Union[str, bytes]]) -> int:
    """Count the distinct elements of a stream exactly."""
    return len(set(stream))
