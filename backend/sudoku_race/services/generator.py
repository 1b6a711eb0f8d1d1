import logging
import random
from typing import Optional, Tuple

from sudoku_race.errors import GenerationFailure, InvalidDifficulty
from sudoku_race.models import DIFFICULTY_HOLES, Board
from .board import (
    BOX,
    SIZE,
    copy_board,
    empty_board,
    is_valid_board,
    is_valid_move,
)

DEFAULT_MAX_ATTEMPTS = 10
MIN_TRANSFORMATIONS = 5
MAX_TRANSFORMATIONS = 14


class SudokuGenerator:
    """Builds puzzles from a randomly filled and shuffled solution grid.

    A solution is produced by seeding the three diagonal boxes (which cannot
    conflict) and completing the rest by backtracking. The grid is then
    scrambled with validity-preserving transformations and ``holes`` cells
    are cleared. The whole pipeline is retried up to ``max_attempts`` times.

    Pass ``rng`` (a ``random.Random``) to make generation reproducible.
    """

    def __init__(self, rng: Optional[random.Random] = None, max_attempts: int = DEFAULT_MAX_ATTEMPTS,
                 logger: Optional[logging.Logger] = None):
        self.rng = rng or random.Random()
        self.max_attempts = max_attempts
        self.logger = logger or logging.getLogger(__name__)
        self._transformations = (
            self.swap_rows_in_band,
            self.swap_columns_in_stack,
            self.swap_bands,
            self.swap_stacks,
            self.transpose,
            self.swap_digits,
        )

    def generate(self, difficulty: str) -> Tuple[Board, Board]:
        """Return ``(puzzle, original)``: equal content, independent lists."""
        if not isinstance(difficulty, str) or difficulty not in DIFFICULTY_HOLES:
            raise InvalidDifficulty()
        holes = DIFFICULTY_HOLES[difficulty]

        for attempt in range(1, self.max_attempts + 1):
            board = empty_board()
            if not self.fill_board(board):
                self.logger.warning(f"[generate] attempt={attempt} backtracking fill failed")
                continue
            self.apply_random_transformations(board)
            puzzle = self.remove_numbers(board, holes)
            if not is_valid_board(puzzle):
                self.logger.warning(f"[generate] attempt={attempt} produced an invalid puzzle")
                continue
            self.logger.debug(f"[generate] difficulty={difficulty} holes={holes} attempts={attempt}")
            return puzzle, copy_board(puzzle)

        raise GenerationFailure(
            f'Could not generate valid sudoku board after {self.max_attempts} attempts'
        )

    # ---- Solution grid ----

    def fill_board(self, board: Board) -> bool:
        """Fill ``board`` in place with a complete solution."""
        self.fill_diagonal_boxes(board)
        return self.fill_remaining(board, 0, 0)

    def fill_diagonal_boxes(self, board: Board) -> None:
        for i in range(0, SIZE, BOX):
            digits = list(range(1, SIZE + 1))
            self.rng.shuffle(digits)
            for r in range(BOX):
                for c in range(BOX):
                    board[i + r][i + c] = digits[r * BOX + c]

    def fill_remaining(self, board: Board, row: int, col: int) -> bool:
        if row >= SIZE:
            return True
        next_row, next_col = (row + 1, 0) if col == SIZE - 1 else (row, col + 1)
        if board[row][col] != 0:
            return self.fill_remaining(board, next_row, next_col)

        digits = list(range(1, SIZE + 1))
        self.rng.shuffle(digits)
        for digit in digits:
            if is_valid_move(board, row, col, digit):
                board[row][col] = digit
                if self.fill_remaining(board, next_row, next_col):
                    return True
                board[row][col] = 0
        return False

    # ---- Transformations (each maps a valid grid to a valid grid) ----

    def apply_random_transformations(self, board: Board) -> int:
        count = self.rng.randint(MIN_TRANSFORMATIONS, MAX_TRANSFORMATIONS)
        for _ in range(count):
            self.rng.choice(self._transformations)(board)
        return count

    def _pick_pair(self, start=0, size=BOX):
        a, b = self.rng.sample(range(start, start + size), 2)
        return a, b

    def swap_rows_in_band(self, board: Board) -> None:
        band = self.rng.randrange(BOX) * BOX
        r1, r2 = self._pick_pair(band)
        board[r1], board[r2] = board[r2], board[r1]

    def swap_columns_in_stack(self, board: Board) -> None:
        stack = self.rng.randrange(BOX) * BOX
        c1, c2 = self._pick_pair(stack)
        for row in board:
            row[c1], row[c2] = row[c2], row[c1]

    def swap_bands(self, board: Board) -> None:
        b1, b2 = self._pick_pair()
        for i in range(BOX):
            r1, r2 = b1 * BOX + i, b2 * BOX + i
            board[r1], board[r2] = board[r2], board[r1]

    def swap_stacks(self, board: Board) -> None:
        s1, s2 = self._pick_pair()
        for row in board:
            for i in range(BOX):
                c1, c2 = s1 * BOX + i, s2 * BOX + i
                row[c1], row[c2] = row[c2], row[c1]

    def transpose(self, board: Board) -> None:
        board[:] = [list(col) for col in zip(*board)]

    def swap_digits(self, board: Board) -> None:
        d1, d2 = self._pick_pair(1, SIZE)
        for row in board:
            for c, value in enumerate(row):
                if value == d1:
                    row[c] = d2
                elif value == d2:
                    row[c] = d1

    # ---- Holes ----

    def remove_numbers(self, board: Board, holes: int) -> Board:
        """Return a copy of ``board`` with ``holes`` random cells cleared."""
        puzzle = copy_board(board)
        removed = 0
        while removed < holes:
            row = self.rng.randrange(SIZE)
            col = self.rng.randrange(SIZE)
            if puzzle[row][col] != 0:
                puzzle[row][col] = 0
                removed += 1
        return puzzle
