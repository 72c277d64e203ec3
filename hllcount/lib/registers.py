"""Register storage strategies for HyperLogLog sketches.

Both strategies expose the same small interface (``get``, ``set``, ``size``,
``clear``, ``memory_usage``, ``to_array``) so the sketch can run one update
and estimate algorithm over either of them.
"""
from __future__ import annotations
import numpy as np # type: ignore

REGISTER_BITS = 5
MAX_PACKED_RANK = (1 << REGISTER_BITS) - 1


class StandardRegisters:
    """One 32-bit machine word per register."""

    name = "standard"

    def __init__(self, num_registers: int):
        if num_registers <= 0:
            raise ValueError(f"num_registers must be positive, got {num_registers}")
        self.num_registers = num_registers
        self.registers = np.zeros(num_registers, dtype=np.uint32)

    def _check_index(self, index: int) -> None:
        if not 0 <= index < self.num_registers:
            raise IndexError(f"register index {index} out of range for {self.num_registers} registers")

    def get(self, index: int) -> int:
        self._check_index(index)
        return int(self.registers[index])

    def set(self, index: int, rank: int) -> None:
        if rank < 0:
            raise ValueError(f"rank must be non-negative, got {rank}")
        self._check_index(index)
        self.registers[index] = rank

    def size(self) -> int:
        return self.num_registers

    def clear(self) -> None:
        """Reset every register to 0 in place."""
        self.registers.fill(0)

    def memory_usage(self) -> int:
        """Bytes used by the register words."""
        return int(self.registers.nbytes)

    def to_array(self) -> np.ndarray:
        return self.registers.copy()


class PackedRegisters:
    """Five bits per register, packed little-endian into a byte buffer.

    Register ``i`` occupies bits ``[5*i, 5*i + 5)`` of the buffer. A field may
    straddle two bytes, so reads and writes work on a 16-bit window. The
    buffer carries one spare byte so the window never runs past the end.

    Writes saturate at 31, the largest value a 5-bit field can hold.
    """

    name = "packed"

    def __init__(self, num_registers: int):
        if num_registers <= 0:
            raise ValueError(f"num_registers must be positive, got {num_registers}")
        self.num_registers = num_registers
        nbytes = (num_registers * REGISTER_BITS + 7) // 8
        self.buffer = np.zeros(nbytes + 1, dtype=np.uint8)

    def _locate(self, index: int):
        if not 0 <= index < self.num_registers:
            raise IndexError(f"register index {index} out of range for {self.num_registers} registers")
        offset = index * REGISTER_BITS
        return offset >> 3, offset & 7

    def get(self, index: int) -> int:
        byte, shift = self._locate(index)
        window = int(self.buffer[byte]) | (int(self.buffer[byte + 1]) << 8)
        return (window >> shift) & MAX_PACKED_RANK

    def set(self, index: int, rank: int) -> None:
        if rank < 0:
            raise ValueError(f"rank must be non-negative, got {rank}")
        rank = min(rank, MAX_PACKED_RANK)
        byte, shift = self._locate(index)
        window = int(self.buffer[byte]) | (int(self.buffer[byte + 1]) << 8)
        window &= ~(MAX_PACKED_RANK << shift) & 0xFFFF
        window |= rank << shift
        self.buffer[byte] = window & 0xFF
        self.buffer[byte + 1] = window >> 8

    def size(self) -> int:
        return self.num_registers

    def clear(self) -> None:
        self.buffer.fill(0)

    def memory_usage(self) -> int:
        """Nominal packed size, ``floor(m * 5 / 8)`` bytes."""
        return self.num_registers * REGISTER_BITS // 8

    def to_array(self) -> np.ndarray:
        """Unpack all registers into a uint32 array."""
        bits = np.unpackbits(self.buffer, bitorder='little')
        fields = bits[:self.num_registers * REGISTER_BITS].reshape(self.num_registers, REGISTER_BITS)
        weights = (1 << np.arange(REGISTER_BITS)).astype(np.uint32)
        return (fields.astype(np.uint32) * weights).sum(axis=1).astype(np.uint32)


STORAGE_TYPES = {
    StandardRegisters.name: StandardRegisters,
    PackedRegisters.name: PackedRegisters,
}


def create_registers(storage: str, num_registers: int):
    """Build a register store by name ("standard" or "packed")."""
    if storage not in STORAGE_TYPES:
        raise ValueError(f"Invalid storage type '{storage}'. Use one of: {', '.join(sorted(STORAGE_TYPES))}")
    return STORAGE_TYPES[storage](num_registers)
