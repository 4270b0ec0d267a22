from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from time import perf_counter
from typing import Iterator

from .encoding import QueenEncoding
from .errors import (
    EncodingInvariantError,
    InvalidConfiguration,
    OracleUndecided,
    SessionClosed,
)
from .metrics import SearchStats
from .oracle import CheckResult, OracleConfig, Z3Session, ensure_backend
from .solution import Position, QueenSolution, render_board
from .symmetry import expand

logger = logging.getLogger(__name__)


class EngineState(str, Enum):
    BUFFERED = "buffered"
    QUERY = "query"
    EXHAUSTED = "exhausted"


def validate_size(size: object) -> int:
    if isinstance(size, bool) or not isinstance(size, int):
        raise InvalidConfiguration(f"Board size must be an integer, got {size!r}.")
    if size < 1:
        raise InvalidConfiguration("Board size must be at least 1.")
    return size


def decode_row(row: int, value: int) -> Position | None:
    """Turn a row's one-hot model value into a position; zero means no queen."""
    if value == 0:
        return None
    if value & (value - 1):
        raise EncodingInvariantError(
            f"Row {row} evaluated to {value:#b}, expected zero or a single set bit."
        )
    return Position(row, value.bit_length() - 1)


class QueenSolver:
    """Lazy, single-use enumerator of N-Queens solutions.

    Every model returned by the oracle is expanded through board reflections.
    Each derived solution gets a blocking clause before the next check, so no
    solution is produced twice and the sequence always ends. Pending solutions
    are kept on a stack and handed out one at a time.

    The solver owns its oracle session; release it with :meth:`close` or by
    using the solver as a context manager.
    """

    def __init__(
        self,
        size: int,
        *,
        config: OracleConfig | None = None,
        use_symmetry: bool = True,
    ) -> None:
        self.size = validate_size(size)
        self.use_symmetry = use_symmetry
        self.stats = SearchStats()

        ensure_backend()
        self._session = Z3Session(config)
        try:
            self._encoding: QueenEncoding | None = QueenEncoding.build(
                self._session, self.size
            )
        except BaseException:
            self._session.close()
            raise

        self._buffer: list[QueenSolution] = []
        self._model_pending = False
        self._exhausted = False

    @property
    def state(self) -> EngineState:
        if self._buffer:
            return EngineState.BUFFERED
        if self._exhausted:
            return EngineState.EXHAUSTED
        return EngineState.QUERY

    @property
    def closed(self) -> bool:
        return self._session.closed

    def _require_encoding(self) -> QueenEncoding:
        if self._encoding is None:
            raise SessionClosed("Solver has been closed.")
        return self._encoding

    def has_next(self) -> bool:
        if self._buffer:
            return True
        if self._exhausted:
            return False
        if self._model_pending:
            return True
        if self.closed:
            raise SessionClosed("Solver has been closed.")

        start = perf_counter()
        result = self._session.check()
        self.stats.oracle_checks += 1
        self.stats.elapsed_ms += (perf_counter() - start) * 1000

        if result is CheckResult.UNKNOWN:
            raise OracleUndecided(self._session.reason_unknown())
        if result is CheckResult.UNSAT:
            self._exhausted = True
            logger.info(
                "Enumerated %d solution(s) for %d queens with %d oracle check(s)",
                self.stats.solutions_found,
                self.size,
                self.stats.oracle_checks,
            )
            return False
        self._model_pending = True
        return True

    def __iter__(self) -> Iterator[QueenSolution]:
        return self

    def __next__(self) -> QueenSolution:
        if not self.has_next():
            raise StopIteration
        if not self._buffer:
            self._refill()
        self.stats.solutions_found += 1
        return self._buffer.pop()

    def _refill(self) -> None:
        start = perf_counter()
        solution = self._extract_solution()
        encoding = self._require_encoding()
        derived = expand(solution, self.size) if self.use_symmetry else [solution]
        for candidate in derived:
            self._session.add(encoding.blocking_clause(candidate))
        self.stats.blocking_clauses += len(derived)
        self._buffer.extend(derived)
        self.stats.elapsed_ms += (perf_counter() - start) * 1000
        logger.debug("Model expanded into %d solution(s)", len(derived))

    def _extract_solution(self) -> QueenSolution:
        # all rows must be read before any blocking clause invalidates the model
        positions = []
        for index, row in enumerate(self._require_encoding().rows):
            position = decode_row(index, self._session.evaluate(row))
            if position is not None:
                positions.append(position)
        self._model_pending = False
        self.stats.models_extracted += 1
        return QueenSolution(tuple(positions))

    def close(self) -> None:
        self._buffer.clear()
        self._model_pending = False
        self._encoding = None
        self._session.close()

    def __enter__(self) -> QueenSolver:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


@dataclass
class NQueensResult:
    size: int
    solutions: list[QueenSolution]
    stats: SearchStats

    def to_dict(self, include_boards: bool = False) -> dict[str, object]:
        payload: dict[str, object] = {
            "size": self.size,
            "solutions_found": self.stats.solutions_found,
            "stats": self.stats.to_dict(),
        }
        if self.solutions:
            payload["solutions"] = [solution.to_dict()["positions"] for solution in self.solutions]
            if include_boards:
                payload["boards"] = [
                    render_board(solution, self.size).splitlines() for solution in self.solutions
                ]
        return payload


def solve_nqueens(
    size: int,
    *,
    max_solutions: int | None = None,
    count_only: bool = False,
    use_symmetry: bool = True,
    config: OracleConfig | None = None,
) -> NQueensResult:
    if max_solutions is not None and max_solutions < 1:
        raise InvalidConfiguration("max_solutions must be >= 1.")

    solutions: list[QueenSolution] = []
    with QueenSolver(size, config=config, use_symmetry=use_symmetry) as solver:
        for solution in solver:
            if not count_only:
                solutions.append(solution)
            if max_solutions is not None and solver.stats.solutions_found >= max_solutions:
                break
    return NQueensResult(size=size, solutions=solutions, stats=solver.stats)


def count_solutions(size: int, **options: object) -> int:
    return solve_nqueens(size, count_only=True, **options).stats.solutions_found
