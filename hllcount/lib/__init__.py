from .hyperloglog import HyperLogLog, InvalidPrecisionError, estimate_registers, raw_harmonic_estimate, standard_error
from .hashing import PolynomialHash, XXHash32
from .registers import StandardRegisters, PackedRegisters, create_registers
from .exact import ExactCounter, count_unique
from .streams import StreamGenerator, split_stream
from .hashtest import HashQualityReport, chi_square_test

__all__ = [
    'HyperLogLog',
    'InvalidPrecisionError',
    'estimate_registers',
    'raw_harmonic_estimate',
    'standard_error',
    'PolynomialHash',
    'XXHash32',
    'StandardRegisters',
    'PackedRegisters',
    'create_registers',
    'ExactCounter',
    'count_unique',
    'StreamGenerator',
    'split_stream',
    'HashQualityReport',
    'chi_square_test',
]
