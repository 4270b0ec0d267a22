"""bitqueens package exports."""

from .errors import (
    BackendUnavailable,
    BitQueensError,
    EncodingInvariantError,
    InvalidConfiguration,
    OracleUndecided,
    SessionClosed,
)
from .oracle import CheckResult, OracleConfig, Z3Session
from .solution import Position, QueenSolution, render_board
from .solver import EngineState, NQueensResult, QueenSolver, count_solutions, solve_nqueens

__all__ = [
    "BackendUnavailable",
    "BitQueensError",
    "CheckResult",
    "EncodingInvariantError",
    "EngineState",
    "InvalidConfiguration",
    "NQueensResult",
    "OracleConfig",
    "OracleUndecided",
    "Position",
    "QueenSolution",
    "QueenSolver",
    "SessionClosed",
    "Z3Session",
    "count_solutions",
    "render_board",
    "solve_nqueens",
]
