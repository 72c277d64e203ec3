"""
hllcount - HyperLogLog distinct counting over 32-bit hashes
"""

from hllcount.lib.hyperloglog import HyperLogLog, InvalidPrecisionError, estimate_registers
from hllcount.lib.hashing import PolynomialHash, XXHash32
from hllcount.lib.registers import StandardRegisters, PackedRegisters
from hllcount.lib.exact import ExactCounter

__version__ = '0.1.0'

__all__ = [
    'HyperLogLog',
    'InvalidPrecisionError',
    'estimate_registers',
    'PolynomialHash',
    'XXHash32',
    'StandardRegisters',
    'PackedRegisters',
    'ExactCounter',
]
