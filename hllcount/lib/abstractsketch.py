from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Iterable, Union

Element = Union[bytes, bytearray, memoryview]


class AbstractSketch(ABC):
    """Base class for distinct-count sketches."""

    @abstractmethod
    def add(self, element: Element) -> None:
        """Add a byte sequence to the sketch."""
        pass

    @abstractmethod
    def estimate(self) -> float:
        """Return the (approximate) number of distinct elements added."""
        pass

    def add_string(self, s: str) -> None:
        """Add a string to the sketch, encoded as UTF-8."""
        self.add(s.encode('utf-8'))

    def add_batch(self, elements: Iterable[Union[Element, str]]) -> None:
        """Add multiple elements to the sketch.

        Args:
            elements: Byte sequences or strings to add to the sketch
        """
        for element in elements:
            if isinstance(element, str):
                self.add_string(element)
            else:
                self.add(element)

    def estimate_cardinality(self) -> float:
        """Alias of :meth:`estimate`."""
        return self.estimate()

    @staticmethod
    def _as_bytes(element: Element) -> bytes:
        if isinstance(element, bytes):
            return element
        if isinstance(element, (bytearray, memoryview)):
            return bytes(element)
        raise TypeError(f"Elements must be bytes-like, got {type(element).__name__}; use add_string() for str")
