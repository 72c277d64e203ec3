"""Chi-square check of how evenly a hash function spreads a stream over buckets."""
from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, Union
import numpy as np # type: ignore
from scipy import stats # type: ignore
from hllcount.lib.hashing import resolve_hash_function

DEFAULT_BUCKETS = 100


@dataclass
class HashQualityReport:
    statistic: float
    degrees_of_freedom: int
    p_value: float
    observed: np.ndarray
    expected: float

    def is_uniform(self, alpha: float = 0.05) -> bool:
        """True when uniformity is not rejected at significance ``alpha``."""
        return self.p_value >= alpha


def chi_square_test(stream: Iterable[Union[str, bytes]], hash_function=None,
                    buckets: int = DEFAULT_BUCKETS) -> HashQualityReport:
    """Bucket ``hash(element) % buckets`` and compute the chi-square statistic.

    Args:
        stream: Elements to hash; strings are encoded as UTF-8
        hash_function: Hash capability (defaults to PolynomialHash)
        buckets: Number of buckets

    Returns:
        HashQualityReport with ``sum((observed - expected)^2 / expected)``
    """
    if buckets < 2:
        raise ValueError(f"buckets must be at least 2, got {buckets}")
    hasher = resolve_hash_function(hash_function)
    indices = []
    for element in stream:
        data = element.encode('utf-8') if isinstance(element, str) else bytes(element)
        indices.append(hasher(data) % buckets)
    if not indices:
        raise ValueError("Cannot test hash quality on an empty stream")

    observed = np.bincount(np.array(indices, dtype=np.int64), minlength=buckets)
    expected = len(indices) / buckets
    statistic = float(np.sum((observed - expected) ** 2 / expected))
    dof = buckets - 1
    return HashQualityReport(
        statistic=statistic,
        degrees_of_freedom=dof,
        p_value=float(stats.chi2.sf(statistic, dof)),
        observed=observed,
        expected=expected,
    )
