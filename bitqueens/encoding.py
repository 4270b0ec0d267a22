"""Bit-vector encoding of the N-Queens constraints.

Row ``i`` is an N-bit vector whose set bit is the column of its queen. Only
"at most one bit" is asserted per row; "exactly one" follows from the column
check, which adds all rows (carries included) and requires the population
count of the sum to equal N. Two rows sharing a column produce a carry, and an
empty row contributes nothing, so either case drops the count below N.

Diagonals reuse the column check on widened rows shifted by their row index:
a left shift lines up cells with equal ``row + col`` and a logical right shift
lines up cells with equal ``row - col``.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import reduce
from operator import add
from typing import Sequence

import z3

from .oracle import Z3Session
from .solution import QueenSolution


def create_row_variables(session: Z3Session, size: int) -> list[z3.BitVecRef]:
    return [session.bitvec(f"row_{index}", size) for index in range(size)]


def row_exclusivity(row: z3.BitVecRef) -> z3.BoolRef:
    return z3.Or(row == 0, (row & (row - 1)) == 0)


def population_count(vector: z3.BitVecRef) -> z3.ArithRef:
    bits = [z3.BV2Int(z3.Extract(index, index, vector)) for index in range(vector.size())]
    return z3.Sum(bits)


def column_exclusivity(rows: Sequence[z3.BitVecRef], queens: int) -> z3.BoolRef:
    total = reduce(add, rows)
    return population_count(total) == queens


def diagonal_exclusivity(rows: Sequence[z3.BitVecRef], queens: int) -> z3.BoolRef:
    width = rows[0].size()
    padding = z3.BitVecVal(0, width, ctx=rows[0].ctx)

    low = [z3.ZeroExt(width, row) for row in rows]
    by_sum = [row << index for index, row in enumerate(low)]

    high = [z3.Concat(row, padding) for row in rows]
    by_difference = [z3.LShR(row, index) for index, row in enumerate(high)]

    return z3.And(
        column_exclusivity(by_sum, queens),
        column_exclusivity(by_difference, queens),
    )


@dataclass(frozen=True, eq=False)
class QueenEncoding:
    size: int
    rows: tuple[z3.BitVecRef, ...]

    @classmethod
    def build(cls, session: Z3Session, size: int) -> QueenEncoding:
        rows = create_row_variables(session, size)
        for row in rows:
            session.add(row_exclusivity(row))
        session.add(column_exclusivity(rows, size))
        session.add(diagonal_exclusivity(rows, size))
        return cls(size=size, rows=tuple(rows))

    def placement(self, solution: QueenSolution) -> z3.BoolRef:
        """Conjunction pinning every row of ``solution`` to its one-hot column."""
        return z3.And(
            [self.rows[position.row] == 1 << position.col for position in solution.positions]
        )

    def blocking_clause(self, solution: QueenSolution) -> z3.BoolRef:
        return z3.Not(self.placement(solution))
