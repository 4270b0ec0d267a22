"""Board reflections used to get several solutions out of one model.

Only the row mirror, the column mirror and their composition (a half turn)
are applied. Transposes and quarter turns are left to the oracle.
"""

from __future__ import annotations

from .solution import Position, QueenSolution


def mirror_rows(solution: QueenSolution, size: int) -> QueenSolution:
    return QueenSolution(
        tuple(Position(size - 1 - position.row, position.col) for position in solution.positions)
    )


def mirror_cols(solution: QueenSolution, size: int) -> QueenSolution:
    return QueenSolution(
        tuple(Position(position.row, size - 1 - position.col) for position in solution.positions)
    )


def rotate_half(solution: QueenSolution, size: int) -> QueenSolution:
    return mirror_cols(mirror_rows(solution, size), size)


def expand(solution: QueenSolution, size: int) -> list[QueenSolution]:
    candidates = [
        solution,
        mirror_rows(solution, size),
        mirror_cols(solution, size),
        rotate_half(solution, size),
    ]
    return list(dict.fromkeys(candidates))
