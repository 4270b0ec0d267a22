from __future__ import annotations

from dataclasses import dataclass
from itertools import combinations


@dataclass(frozen=True, order=True)
class Position:
    row: int
    col: int


@dataclass(frozen=True)
class QueenSolution:
    """A full placement, stored in canonical (sorted) order."""

    positions: tuple[Position, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "positions", tuple(sorted(self.positions)))

    @property
    def size(self) -> int:
        return len(self.positions)

    def columns(self) -> tuple[int, ...]:
        return tuple(position.col for position in self.positions)

    def is_valid(self, size: int) -> bool:
        if len(self.positions) != size:
            return False
        if [position.row for position in self.positions] != list(range(size)):
            return False
        if len(set(self.columns())) != size:
            return False
        for first, second in combinations(self.positions, 2):
            if abs(first.row - second.row) == abs(first.col - second.col):
                return False
        return True

    def to_dict(self) -> dict[str, object]:
        return {"positions": [[position.row, position.col] for position in self.positions]}


def render_board(solution: QueenSolution, size: int) -> str:
    field = [["_"] * size for _ in range(size)]
    for position in solution.positions:
        field[position.row][position.col] = "*"
    return "\n".join("".join(row) for row in field)
