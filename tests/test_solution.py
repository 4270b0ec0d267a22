import unittest

from bitqueens.solution import Position, QueenSolution, render_board


def _solution(columns):
    return QueenSolution(tuple(Position(row, col) for row, col in enumerate(columns)))


class SolutionTests(unittest.TestCase):
    def test_positions_order_by_row_then_column(self) -> None:
        positions = [Position(1, 0), Position(0, 3), Position(0, 1)]
        self.assertEqual(sorted(positions), [Position(0, 1), Position(0, 3), Position(1, 0)])

    def test_canonical_form_ignores_input_order(self) -> None:
        shuffled = QueenSolution((Position(3, 2), Position(0, 1), Position(2, 0), Position(1, 3)))
        self.assertEqual(shuffled, _solution((1, 3, 0, 2)))
        self.assertEqual(hash(shuffled), hash(_solution((1, 3, 0, 2))))
        self.assertEqual(shuffled.columns(), (1, 3, 0, 2))

    def test_validity_checks(self) -> None:
        self.assertTrue(_solution((1, 3, 0, 2)).is_valid(4))
        self.assertFalse(_solution((0, 1, 2, 3)).is_valid(4))
        self.assertFalse(_solution((1, 1, 0, 2)).is_valid(4))
        self.assertFalse(_solution((1, 3, 0)).is_valid(4))

    def test_board_rendering(self) -> None:
        board = render_board(_solution((1, 3, 0, 2)), 4)
        self.assertEqual(board, "_*__\n___*\n*___\n__*_")


if __name__ == "__main__":
    unittest.main()
