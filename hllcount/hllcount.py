#!/usr/bin/env python
from __future__ import annotations
import sys
import argparse
import warnings
from typing import BinaryIO, List, Optional
from hllcount.lib.hyperloglog import MIN_PRECISION, MAX_PRECISION, create_hyperloglog, standard_error
from hllcount.lib.exact import ExactCounter
from hllcount.lib.hashing import PolynomialHash, XXHash32
from hllcount.lib.hashtest import chi_square_test
from hllcount.lib.streams import StreamGenerator
from hllcount.lib.experiment import (DEFAULT_PERCENTS, DEFAULT_PRECISION, DEFAULT_RUNS, DEFAULT_SIZES,
                                     memory_comparison, plot_errors, precision_sweep,
                                     run_prefix_experiment, summarize, write_csv)

HASH_CHOICES = {"polynomial": PolynomialHash, "xxhash": XXHash32}


def parse_args(argv: Optional[List[str]] = None):
    """Parse command line arguments."""
    arg_parser = argparse.ArgumentParser(
        description="""Estimate distinct counts with HyperLogLog and run accuracy experiments.

        Commands:
        - count: estimate distinct lines of a file (or stdin)
        - hashtest: chi-square uniformity check of the hash function
        - sweep: compare precisions on one random stream
        - experiment: incremental prefix experiment written to CSV
        - memory: register memory of standard vs packed storage
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    arg_parser.add_argument("--seed", type=int, default=42, help="Random seed for stream generation")
    arg_parser.add_argument("--hash", dest="hash_name", choices=sorted(HASH_CHOICES), default="polynomial",
                            help="Hash function used by the sketches")
    arg_parser.add_argument("--debug", action="store_true", help="Enable debug mode")

    subparsers = arg_parser.add_subparsers(dest="command", required=True)

    def add_sketch_options(parser, precision_default=DEFAULT_PRECISION):
        parser.add_argument("--precision", "-p", type=int, default=precision_default,
                            help=f"Precision for HyperLogLog sketching ({MIN_PRECISION}-{MAX_PRECISION})")
        parser.add_argument("--storage", choices=["standard", "packed"], default="standard",
                            help="Register storage: one word per register or 5 packed bits")

    count_parser = subparsers.add_parser("count", help="Estimate distinct lines of a file")
    count_parser.add_argument("input", nargs="?", default="-", help="Input file, '-' for stdin")
    count_parser.add_argument("--exact", action="store_true", help="Also report the exact distinct count")
    add_sketch_options(count_parser)

    hash_parser = subparsers.add_parser("hashtest", help="Chi-square hash uniformity test")
    hash_parser.add_argument("--size", "-n", type=int, default=10000, help="Number of random strings")
    hash_parser.add_argument("--buckets", type=int, default=100, help="Number of buckets")

    sweep_parser = subparsers.add_parser("sweep", help="Estimate one stream at several precisions")
    sweep_parser.add_argument("--size", "-n", type=int, default=50000, help="Number of random strings")
    sweep_parser.add_argument("--min-precision", type=int, default=4)
    sweep_parser.add_argument("--max-precision", type=int, default=12)
    sweep_parser.add_argument("--storage", choices=["standard", "packed"], default="standard")

    exp_parser = subparsers.add_parser("experiment", help="Incremental prefix experiment")
    exp_parser.add_argument("--sizes", type=int, nargs="+", default=list(DEFAULT_SIZES),
                            help="Stream sizes to test")
    exp_parser.add_argument("--percents", type=int, nargs="+", default=list(DEFAULT_PERCENTS),
                            help="Prefix percentages")
    exp_parser.add_argument("--runs", type=int, default=DEFAULT_RUNS, help="Runs per stream size")
    exp_parser.add_argument("--out", "-o", type=str, default="experiment.csv", help="Output CSV path")
    exp_parser.add_argument("--plot", type=str, default=None, help="Optional PNG path for an error plot")
    add_sketch_options(exp_parser)

    mem_parser = subparsers.add_parser("memory", help="Compare register memory of storage types")
    mem_parser.add_argument("--precision", "-p", type=int, default=DEFAULT_PRECISION)

    return arg_parser.parse_args(argv)


def read_lines(handle: BinaryIO):
    """Yield raw lines without their line terminator; no decoding is applied."""
    for line in handle:
        yield line.rstrip(b"\r\n")


def run_count(args) -> None:
    hll = create_hyperloglog(args.precision, args.storage, hash_name=args.hash_name, debug=args.debug)
    exact = ExactCounter() if args.exact else None

    handle = sys.stdin.buffer if args.input == "-" else open(args.input, "rb")
    try:
        for line in read_lines(handle):
            hll.add(line)
            if exact is not None:
                exact.add(line)
    finally:
        if args.input != "-":
            handle.close()

    print(f"estimate\t{hll.estimate():.0f}")
    if exact is not None:
        print(f"exact\t{len(exact)}")


def run_hashtest(args) -> None:
    generator = StreamGenerator(args.seed)
    stream = generator.make_stream(args.size)
    report = chi_square_test(stream, HASH_CHOICES[args.hash_name](), buckets=args.buckets)
    print("Hash test:")
    print(f"Chi2: {report.statistic:.4f} (df={report.degrees_of_freedom}, p={report.p_value:.4f})")


def run_sweep(args) -> None:
    if args.min_precision > args.max_precision:
        raise ValueError("--min-precision must not exceed --max-precision")
    generator = StreamGenerator(args.seed)
    stream = generator.make_stream(args.size)
    print("Choosing B value:")
    results = precision_sweep(stream, range(args.min_precision, args.max_precision + 1),
                              storage=args.storage, hash_function=HASH_CHOICES[args.hash_name]())
    for r in results:
        print(f"B={r.precision} m={r.num_registers} Real={r.real} Est={int(r.estimate)} "
              f"Error={r.error_percent:.4f}%")


def run_experiment(args) -> None:
    generator = StreamGenerator(args.seed)
    rows = run_prefix_experiment(
        generator,
        sizes=args.sizes,
        percents=args.percents,
        runs=args.runs,
        precision=args.precision,
        storage=args.storage,
        hash_function=HASH_CHOICES[args.hash_name](),
        verbose=True,
    )
    write_csv(rows, args.out)
    print(f"Wrote {len(rows)} rows to {args.out}")
    if args.debug:
        for (size, percent), error in summarize(rows).items():
            print(f"DEBUG: size={size} percent={percent} mean_error={error:.2f}%")
    if args.plot:
        plot_errors(rows, args.plot)
        print(f"Wrote plot to {args.plot}")

    m = 1 << args.precision
    print(f"\nAccuracy(B={args.precision}, m={m})")
    print(f"Theoretical error: 1.04/sqrt({m}) = {standard_error(m) * 100:.2f}%")


def run_memory(args) -> None:
    report = memory_comparison(args.precision)
    print(f"=== Memory Comparison (B={args.precision}) ===")
    print(f"Standard HLL: {report['standard_bytes']} bytes")
    print(f"Packed HLL: {report['packed_bytes']} bytes")
    print(f"Memory saved: {report['saved_bytes']} bytes ({report['saved_percent']:.1f}%)")


COMMANDS = {
    "count": run_count,
    "hashtest": run_hashtest,
    "sweep": run_sweep,
    "experiment": run_experiment,
    "memory": run_memory,
}


def main(argv: Optional[List[str]] = None):
    """Main entry point for hllcount."""
    args = parse_args(argv)

    precision = getattr(args, "precision", None)
    if precision is not None and precision < 6:
        warnings.warn(f"Precision {precision} gives fewer than 64 registers; "
                      "estimates will be coarse.", RuntimeWarning)

    try:
        COMMANDS[args.command](args)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)
    except FileNotFoundError as e:
        print(f"Error: File {e.filename} does not exist", file=sys.stderr)
        sys.exit(2)


if __name__ == "__main__":
    main()
