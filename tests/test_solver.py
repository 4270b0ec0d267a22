import gc
import unittest
import weakref
from unittest import mock

from bitqueens.errors import (
    EncodingInvariantError,
    InvalidConfiguration,
    OracleUndecided,
    SessionClosed,
)
from bitqueens.oracle import CheckResult
from bitqueens.solution import Position, QueenSolution
from bitqueens.solver import (
    EngineState,
    QueenSolver,
    count_solutions,
    decode_row,
    solve_nqueens,
)


class DecodeRowTests(unittest.TestCase):
    def test_one_hot_value_maps_to_column(self) -> None:
        self.assertEqual(decode_row(2, 0b1000), Position(2, 3))
        self.assertEqual(decode_row(0, 1), Position(0, 0))

    def test_zero_means_no_queen(self) -> None:
        self.assertIsNone(decode_row(1, 0))

    def test_several_bits_break_the_invariant(self) -> None:
        with self.assertRaises(EncodingInvariantError):
            decode_row(0, 0b0110)


class QueenSolverTests(unittest.TestCase):
    def test_known_solution_counts(self) -> None:
        expected = {1: 1, 2: 0, 3: 0, 4: 2, 5: 10, 6: 4, 8: 92}
        for size, total in expected.items():
            with self.subTest(size=size):
                self.assertEqual(count_solutions(size), total)

    def test_four_queens_solutions(self) -> None:
        with QueenSolver(4) as solver:
            found = set(solver)
        expected = {
            QueenSolution((Position(0, 1), Position(1, 3), Position(2, 0), Position(3, 2))),
            QueenSolution((Position(0, 2), Position(1, 0), Position(2, 3), Position(3, 1))),
        }
        self.assertEqual(found, expected)

    def test_solutions_are_valid_and_distinct(self) -> None:
        result = solve_nqueens(8)
        self.assertEqual(len(result.solutions), 92)
        self.assertEqual(len(set(result.solutions)), 92)
        for solution in result.solutions:
            self.assertTrue(solution.is_valid(8), solution)

    def test_symmetry_saves_oracle_checks(self) -> None:
        with_symmetry = solve_nqueens(6, count_only=True)
        without = solve_nqueens(6, count_only=True, use_symmetry=False)
        self.assertEqual(with_symmetry.stats.solutions_found, 4)
        self.assertEqual(without.stats.solutions_found, 4)
        self.assertEqual(without.stats.oracle_checks, 5)
        self.assertLess(with_symmetry.stats.oracle_checks, without.stats.oracle_checks)
        self.assertEqual(with_symmetry.stats.blocking_clauses, 4)

    def test_exhaustion_is_permanent(self) -> None:
        with QueenSolver(4) as solver:
            self.assertEqual(solver.state, EngineState.QUERY)
            self.assertEqual(len(list(solver)), 2)
            self.assertEqual(solver.state, EngineState.EXHAUSTED)
            checks = solver.stats.oracle_checks
            self.assertFalse(solver.has_next())
            self.assertFalse(solver.has_next())
            self.assertEqual(solver.stats.oracle_checks, checks)
            with self.assertRaises(StopIteration):
                next(solver)

    def test_has_next_does_not_consume(self) -> None:
        with QueenSolver(5) as solver:
            self.assertTrue(solver.has_next())
            self.assertTrue(solver.has_next())
            self.assertEqual(solver.stats.oracle_checks, 1)
            next(solver)
            self.assertEqual(solver.state, EngineState.BUFFERED)

    def test_repeated_runs_agree_on_count(self) -> None:
        self.assertEqual(count_solutions(7), count_solutions(7))
        self.assertEqual(count_solutions(7), 40)

    def test_max_solutions_cap(self) -> None:
        result = solve_nqueens(8, max_solutions=3)
        self.assertEqual(result.stats.solutions_found, 3)
        self.assertEqual(len(result.solutions), 3)

    def test_closed_solver_releases_session(self) -> None:
        solver = QueenSolver(6)
        next(solver)
        solver.close()
        solver.close()
        self.assertTrue(solver.closed)
        with self.assertRaises(SessionClosed):
            next(solver)

    def test_close_frees_oracle_context(self) -> None:
        solver = QueenSolver(6)
        next(solver)
        context = weakref.ref(solver._encoding.rows[0].ctx)
        solver.close()
        gc.collect()
        self.assertIsNone(context())

    def test_context_manager_closes_on_early_exit(self) -> None:
        with QueenSolver(8) as solver:
            next(solver)
        self.assertTrue(solver.closed)

    def test_unknown_result_is_surfaced(self) -> None:
        with QueenSolver(4) as solver:
            with mock.patch.object(
                solver._session, "check", return_value=CheckResult.UNKNOWN
            ), mock.patch.object(solver._session, "reason_unknown", return_value="timeout"):
                with self.assertRaises(OracleUndecided) as caught:
                    solver.has_next()
            self.assertEqual(caught.exception.reason, "timeout")
            self.assertNotEqual(solver.state, EngineState.EXHAUSTED)

    def test_rejects_invalid_sizes(self) -> None:
        for size in (0, -3, "8", 2.0, True):
            with self.subTest(size=size):
                with self.assertRaises(InvalidConfiguration):
                    QueenSolver(size)
        with self.assertRaises(ValueError):
            solve_nqueens(4, max_solutions=0)

    def test_result_payload(self) -> None:
        payload = solve_nqueens(4).to_dict(include_boards=True)
        self.assertEqual(payload["size"], 4)
        self.assertEqual(payload["solutions_found"], 2)
        self.assertEqual(len(payload["boards"]), 2)
        self.assertIn("oracle_checks", payload["stats"])


if __name__ == "__main__":
    unittest.main()
