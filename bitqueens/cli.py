from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Sequence

from .errors import BitQueensError
from .oracle import OracleConfig
from .solution import render_board
from .solver import QueenSolver, solve_nqueens

DIVIDER = "-" * 16


def _positive_int(value: str) -> int:
    parsed = int(value)
    if parsed < 1:
        raise argparse.ArgumentTypeError("Value must be >= 1.")
    return parsed


def _non_negative_int(value: str) -> int:
    parsed = int(value)
    if parsed < 0:
        raise argparse.ArgumentTypeError("Value must be >= 0.")
    return parsed


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bitqueens",
        description="Enumerate N-Queens solutions with a bit-vector SAT encoding.",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    solve = subparsers.add_parser("solve", help="Print every solution, or count them.")
    solve.add_argument("--size", "-n", type=_positive_int, required=True)
    solve.add_argument("--max-solutions", type=_positive_int)
    solve.add_argument("--count-only", action="store_true")
    solve.add_argument(
        "--no-symmetry",
        action="store_true",
        help="Ask the oracle for every solution instead of deriving reflections.",
    )
    solve.add_argument("--seed", type=_non_negative_int, default=42)
    solve.add_argument("--timeout-ms", type=_positive_int)
    solve.add_argument("--json", action="store_true")

    benchmark = subparsers.add_parser(
        "benchmark", help="Count solutions across board sizes and report oracle usage."
    )
    benchmark.add_argument("--sizes", nargs="+", type=_positive_int, default=[4, 6, 8])
    benchmark.add_argument("--no-symmetry", action="store_true")
    benchmark.add_argument("--seed", type=_non_negative_int, default=42)
    benchmark.add_argument("--json", action="store_true")

    return parser


def _run_solve(args: argparse.Namespace) -> int:
    config = OracleConfig(random_seed=args.seed, timeout_ms=args.timeout_ms)
    use_symmetry = not args.no_symmetry

    if args.json or args.count_only:
        result = solve_nqueens(
            args.size,
            max_solutions=args.max_solutions,
            count_only=args.count_only,
            use_symmetry=use_symmetry,
            config=config,
        )
        if args.json:
            print(json.dumps(result.to_dict(include_boards=True), indent=2))
        else:
            print(result.stats.solutions_found)
        return 0

    with QueenSolver(args.size, config=config, use_symmetry=use_symmetry) as solver:
        for solution in solver:
            print(render_board(solution, args.size))
            print(DIVIDER)
            limit = args.max_solutions
            if limit is not None and solver.stats.solutions_found >= limit:
                break
    return 0


def _run_benchmark(args: argparse.Namespace) -> int:
    rows: list[dict[str, float | int]] = []
    for size in args.sizes:
        result = solve_nqueens(
            size,
            count_only=True,
            use_symmetry=not args.no_symmetry,
            config=OracleConfig(random_seed=args.seed),
        )
        rows.append(
            {
                "size": size,
                "solutions_found": result.stats.solutions_found,
                "oracle_checks": result.stats.oracle_checks,
                "blocking_clauses": result.stats.blocking_clauses,
                "elapsed_ms": result.stats.elapsed_ms,
            }
        )

    if args.json:
        print(json.dumps(rows, indent=2))
    else:
        print("size  solutions  checks  clauses  elapsed_ms")
        for row in rows:
            print(
                f"{row['size']:>4}  "
                f"{row['solutions_found']:>9}  "
                f"{row['oracle_checks']:>6}  "
                f"{row['blocking_clauses']:>7}  "
                f"{row['elapsed_ms']:>10.3f}"
            )
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )

    try:
        if args.command == "solve":
            return _run_solve(args)
        if args.command == "benchmark":
            return _run_benchmark(args)
    except (ValueError, BitQueensError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2

    print(f"Unknown command: {args.command}", file=sys.stderr)
    return 2
