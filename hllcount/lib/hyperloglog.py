from __future__ import annotations
import math
import numbers
import numpy as np # type: ignore
from hllcount.lib.abstractsketch import AbstractSketch, Element
from hllcount.lib.hashing import HASH_MASK, PolynomialHash, XXHash32, resolve_hash_function
from hllcount.lib.registers import create_registers

HASH_BITS = 32
MIN_PRECISION = 4
MAX_PRECISION = 16

# Asymptotic bias constant 1/(2 ln 2), used for every register count.
ALPHA = 0.7213
SMALL_RANGE_FACTOR = 2.5


class InvalidPrecisionError(ValueError):
    """Raised when a sketch is built with an unsupported precision."""

    def __init__(self, precision):
        super().__init__(
            f"Precision must be an integer between {MIN_PRECISION} and {MAX_PRECISION}, got {precision!r}")
        self.precision = precision


def validate_precision(precision) -> int:
    """Return precision as an int, or raise InvalidPrecisionError."""
    if isinstance(precision, bool) or not isinstance(precision, numbers.Integral):
        raise InvalidPrecisionError(precision)
    if not MIN_PRECISION <= precision <= MAX_PRECISION:
        raise InvalidPrecisionError(precision)
    return int(precision)


def raw_harmonic_estimate(registers: np.ndarray) -> float:
    """Uncorrected estimate ``ALPHA * m^2 / sum(2^-r)``."""
    m = float(len(registers))
    harmonic_sum = float(np.sum(np.exp2(-np.asarray(registers, dtype=np.float64))))
    return ALPHA * m * m / harmonic_sum


def estimate_registers(registers: np.ndarray) -> float:
    """Estimate cardinality from a register array.

    Uses the harmonic-mean estimate, replaced by linear counting
    ``m * ln(m / zeros)`` when the raw value is at most ``2.5 * m`` and some
    registers are still zero. There is no large-range correction.

    Args:
        registers: Register values, one per register

    Returns:
        Estimated number of distinct elements; exactly 0.0 for all-zero registers
    """
    m = len(registers)
    raw = raw_harmonic_estimate(registers)
    zero_registers = int(np.count_nonzero(np.asarray(registers) == 0))
    if raw <= SMALL_RANGE_FACTOR * m and zero_registers > 0:
        return m * math.log(m / zero_registers)
    return raw


class HyperLogLog(AbstractSketch):
    def __init__(self,
                 precision: int = 8,
                 hash_function=None,
                 storage: str = "standard",
                 debug: bool = False):
        """Initialize HyperLogLog sketch.

        Args:
            precision: Number of high-order hash bits used as register index (4-16)
            hash_function: Object with a ``hash(bytes) -> int`` method, or a plain
                           callable. Defaults to PolynomialHash.
            storage: "standard" (one 32-bit word per register) or
                     "packed" (5 bits per register)
            debug: Whether to print debug information

        Raises:
            InvalidPrecisionError: If precision is outside the supported range
            ValueError: If storage is not a known storage type
            TypeError: If hash_function is not usable
        """
        super().__init__()
        self.precision = validate_precision(precision)
        self.num_registers = 1 << self.precision
        self.hash_function = hash_function
        self._hash = resolve_hash_function(hash_function)
        self.storage = create_registers(storage, self.num_registers)
        self.debug = debug
        self.item_count = 0

    def _rank(self, hash_val: int) -> int:
        """Leading zeros of the bits below the index, plus one."""
        remainder = (hash_val << self.precision) & HASH_MASK
        if remainder == 0:
            zeros = HASH_BITS - self.precision
        else:
            zeros = HASH_BITS - remainder.bit_length()
        return zeros + 1

    def add(self, element: Element) -> None:
        """Add a byte sequence to the sketch.

        Raises at most one register to the element's rank.
        """
        data = self._as_bytes(element)
        hash_val = int(self._hash(data)) & HASH_MASK
        idx = hash_val >> (HASH_BITS - self.precision)
        rank = self._rank(hash_val)
        self.item_count += 1
        if rank > self.storage.get(idx):
            self.storage.set(idx, rank)

    @property
    def registers(self) -> np.ndarray:
        """Copy of the current register values."""
        return self.storage.to_array()

    @property
    def storage_type(self) -> str:
        return self.storage.name

    def raw_estimate(self) -> float:
        """Harmonic-mean estimate before small-range correction."""
        return raw_harmonic_estimate(self.registers)

    def estimate(self) -> float:
        """Estimate the number of distinct elements added so far."""
        registers = self.registers
        estimate = estimate_registers(registers)
        if self.debug:
            zeros = int(np.count_nonzero(registers == 0))
            print(f"DEBUG: items={self.item_count}, zero registers={zeros}/{self.num_registers}, "
                  f"raw={raw_harmonic_estimate(registers):.1f}, estimate={estimate:.1f}")
        return estimate

    def clear(self) -> None:
        """Reset all registers to zero."""
        self.storage.clear()
        self.item_count = 0

    def memory_usage(self) -> int:
        """Bytes used by the register store."""
        return self.storage.memory_usage()

    def is_empty(self) -> bool:
        """Check if sketch is empty."""
        return not np.any(self.registers)

    def __repr__(self) -> str:
        return (f"HyperLogLog(precision={self.precision}, storage={self.storage_type!r}, "
                f"hash_function={self.hash_function!r})")


def standard_error(num_registers: int) -> float:
    """Relative standard error ``1.04 / sqrt(m)`` of a HyperLogLog estimate."""
    return 1.04 / math.sqrt(num_registers)


def create_hyperloglog(precision: int = 8, storage: str = "standard", seed: int = 0,
                       hash_name: str = "polynomial", debug: bool = False) -> HyperLogLog:
    """Build a sketch with a named hash function ("polynomial" or "xxhash")."""
    hashers = {"polynomial": PolynomialHash, "xxhash": XXHash32}
    if hash_name not in hashers:
        raise ValueError(f"Invalid hash function '{hash_name}'. Use 'polynomial' or 'xxhash'")
    return HyperLogLog(precision, hashers[hash_name](seed), storage=storage, debug=debug)
