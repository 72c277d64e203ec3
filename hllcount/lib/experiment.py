"""Accuracy and memory experiments for HyperLogLog sketches."""
from __future__ import annotations
import csv
from collections import defaultdict
from dataclasses import dataclass, asdict
from typing import Dict, Iterable, List, Optional, Sequence, Tuple
import matplotlib.pyplot as plt # type: ignore
import numpy as np # type: ignore
from hllcount.lib.exact import count_unique
from hllcount.lib.hyperloglog import HyperLogLog
from hllcount.lib.streams import StreamGenerator, split_stream

DEFAULT_PRECISIONS = range(4, 13)
DEFAULT_SIZES = (10000, 50000, 100000)
DEFAULT_PERCENTS = (10, 20, 30, 40, 50, 60, 70, 80, 90, 100)
DEFAULT_RUNS = 5
DEFAULT_PRECISION = 8
CSV_COLUMNS = ["stream_size", "percent", "real", "estimate", "error"]


@dataclass
class SweepResult:
    precision: int
    num_registers: int
    real: int
    estimate: float
    error_percent: float


@dataclass
class ExperimentRow:
    stream_size: int
    percent: int
    real: int
    estimate: int
    error: float


def relative_error_percent(estimate: float, real: int) -> float:
    """``|estimate - real| / real`` as a percentage (0 when real is 0 and estimate is 0)."""
    if real == 0:
        return 0.0 if estimate == 0 else float('inf')
    return abs(estimate - real) / real * 100


def precision_sweep(stream: Sequence[str],
                    precisions: Iterable[int] = DEFAULT_PRECISIONS,
                    storage: str = "standard",
                    hash_function=None) -> List[SweepResult]:
    """Estimate the same stream with each precision.

    Args:
        stream: Elements to add
        precisions: Precision values to try
        storage: Register storage for every sketch
        hash_function: Hash capability shared by every sketch

    Returns:
        One SweepResult per precision
    """
    real = count_unique(stream)
    results = []
    for precision in precisions:
        hll = HyperLogLog(precision, hash_function, storage=storage)
        hll.add_batch(stream)
        est = hll.estimate()
        results.append(SweepResult(
            precision=precision,
            num_registers=hll.num_registers,
            real=real,
            estimate=est,
            error_percent=relative_error_percent(est, real),
        ))
    return results


def run_prefix_experiment(generator: StreamGenerator,
                          sizes: Sequence[int] = DEFAULT_SIZES,
                          percents: Sequence[int] = DEFAULT_PERCENTS,
                          runs: int = DEFAULT_RUNS,
                          precision: int = DEFAULT_PRECISION,
                          storage: str = "standard",
                          hash_function=None,
                          verbose: bool = False) -> List[ExperimentRow]:
    """Track one sketch as a stream grows through increasing prefixes.

    For every stream size and run a fresh stream is drawn and split into
    prefixes. A single sketch receives the prefixes in order, and after
    each prefix its estimate is compared with the exact distinct count of
    that prefix.

    Returns:
        Rows of (stream_size, percent, real, estimate, error)
    """
    if runs < 1:
        raise ValueError(f"runs must be at least 1, got {runs}")
    rows = []
    for size in sizes:
        if verbose:
            print(f"Stream size: {size}")
        for _ in range(runs):
            full_stream = generator.make_stream(size)
            parts = split_stream(full_stream, percents)
            hll = HyperLogLog(precision, hash_function, storage=storage)
            added = 0
            for percent, part in zip(percents, parts):
                # prefixes nest, so only the new tail needs adding
                if len(part) > added:
                    hll.add_batch(part[added:])
                    added = len(part)
                real = count_unique(part)
                est = hll.estimate()
                rows.append(ExperimentRow(
                    stream_size=size,
                    percent=percent,
                    real=real,
                    estimate=int(est),
                    error=relative_error_percent(est, real),
                ))
    return rows


def write_csv(rows: Iterable[ExperimentRow], path: str) -> None:
    """Write experiment rows with header ``stream_size,percent,real,estimate,error``."""
    with open(path, "w", newline='') as f:
        writer = csv.DictWriter(f, fieldnames=CSV_COLUMNS)
        writer.writeheader()
        for row in rows:
            writer.writerow(asdict(row))


def read_csv(path: str) -> List[ExperimentRow]:
    with open(path, newline='') as f:
        return [
            ExperimentRow(
                stream_size=int(record["stream_size"]),
                percent=int(record["percent"]),
                real=int(record["real"]),
                estimate=int(record["estimate"]),
                error=float(record["error"]),
            )
            for record in csv.DictReader(f)
        ]


def summarize(rows: Iterable[ExperimentRow]) -> Dict[Tuple[int, int], float]:
    """Mean error (percent) per (stream_size, percent)."""
    grouped = defaultdict(list)
    for row in rows:
        grouped[(row.stream_size, row.percent)].append(row.error)
    return {key: float(np.mean(errors)) for key, errors in sorted(grouped.items())}


def plot_errors(rows: Iterable[ExperimentRow], path: str, title: Optional[str] = None) -> None:
    """Plot mean relative error against stream percentage, one line per stream size."""
    summary = summarize(rows)
    by_size = defaultdict(list)
    for (size, percent), error in summary.items():
        by_size[size].append((percent, error))

    fig, ax = plt.subplots(figsize=(8, 5))
    for size, points in sorted(by_size.items()):
        percents, errors = zip(*points)
        ax.plot(percents, errors, marker='o', label=f"n={size}")
    ax.set_xlabel("Stream prefix (%)")
    ax.set_ylabel("Mean relative error (%)")
    ax.set_title(title or "HyperLogLog estimation error")
    ax.grid(True, alpha=0.3)
    ax.legend()
    fig.tight_layout()
    fig.savefig(path)
    plt.close(fig)


def memory_comparison(precision: int = DEFAULT_PRECISION) -> Dict[str, float]:
    """Register memory of standard versus packed storage at one precision."""
    standard = HyperLogLog(precision, storage="standard").memory_usage()
    packed = HyperLogLog(precision, storage="packed").memory_usage()
    return {
        "precision": precision,
        "num_registers": 1 << precision,
        "standard_bytes": standard,
        "packed_bytes": packed,
        "saved_bytes": standard - packed,
        "saved_percent": (standard - packed) * 100 / standard,
    }
