"""Pure helpers over 9x9 Sudoku boards. Zero marks an empty cell."""

from typing import Iterator, List

from sudoku_race.models import Board

SIZE = 9
BOX = 3


def empty_board() -> Board:
    return [[0] * SIZE for _ in range(SIZE)]


def copy_board(board: Board) -> Board:
    return [list(row) for row in board]


def count_empty(board: Board) -> int:
    return sum(1 for row in board for cell in row if cell == 0)


def _units(board: Board) -> Iterator[List[int]]:
    for row in board:
        yield row
    for col in range(SIZE):
        yield [board[row][col] for row in range(SIZE)]
    for box_row in range(0, SIZE, BOX):
        for box_col in range(0, SIZE, BOX):
            yield [
                board[r][c]
                for r in range(box_row, box_row + BOX)
                for c in range(box_col, box_col + BOX)
            ]


def is_valid_board(board: Board) -> bool:
    """True if no row, column or box repeats a non-zero digit."""
    for unit in _units(board):
        digits = [d for d in unit if d != 0]
        if len(digits) != len(set(digits)):
            return False
    return True


def is_solved(board: Board) -> bool:
    if any(cell == 0 for row in board for cell in row):
        return False
    return is_valid_board(board)


def is_valid_move(board: Board, row: int, col: int, value: int) -> bool:
    """Whether ``value`` can go at (row, col) without clashing with its row, column or box."""
    if value in board[row]:
        return False
    if any(board[r][col] == value for r in range(SIZE)):
        return False
    box_row, box_col = row - row % BOX, col - col % BOX
    for r in range(box_row, box_row + BOX):
        for c in range(box_col, box_col + BOX):
            if board[r][c] == value:
                return False
    return True
