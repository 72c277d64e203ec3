from __future__ import annotations
from typing import Callable, Union
import xxhash # type: ignore

HASH_MASK = 0xFFFFFFFF

HashCallable = Callable[[bytes], int]


class PolynomialHash:
    """Polynomial rolling hash over the bytes of an element.

    Computes ``h = h * 31 + byte`` for each byte, wrapping modulo 2**32.
    Deterministic across calls and processes; not cryptographically secure.
    """

    def __init__(self, seed: int = 0):
        """Initialize the hash.

        Args:
            seed: Stored for interface compatibility. It does not take part
                  in the computation.
        """
        self.seed = seed

    def hash(self, data: bytes) -> int:
        """Hash a byte sequence to an unsigned 32-bit integer.

        Args:
            data: Bytes to hash

        Returns:
            Hash value in [0, 2**32)
        """
        h = 0
        for c in data:
            h = (h * 31 + c) & HASH_MASK
        return h

    def __call__(self, data: bytes) -> int:
        return self.hash(data)

    def __repr__(self) -> str:
        return f"PolynomialHash(seed={self.seed})"


class XXHash32:
    """32-bit xxhash, seeded."""

    def __init__(self, seed: int = 0):
        self.seed = seed

    def hash(self, data: bytes) -> int:
        hasher = xxhash.xxh32(seed=self.seed)
        hasher.update(data)
        return hasher.intdigest()

    def __call__(self, data: bytes) -> int:
        return self.hash(data)

    def __repr__(self) -> str:
        return f"XXHash32(seed={self.seed})"


def resolve_hash_function(hash_function: Union[object, HashCallable, None]) -> HashCallable:
    """Turn a hash capability into a plain ``bytes -> int`` callable.

    Accepts an object exposing ``hash(bytes)``, a bare callable, or None
    (which selects :class:`PolynomialHash`).

    Raises:
        TypeError: If the argument offers neither a ``hash`` method nor is callable
    """
    if hash_function is None:
        return PolynomialHash().hash
    method = getattr(hash_function, 'hash', None)
    if callable(method):
        return method
    if callable(hash_function):
        return hash_function
    raise TypeError(f"hash_function must be callable or expose a hash() method, got {type(hash_function).__name__}")
