import os
import random
import sys
import pytest

# Ensure the backend root (containing the `sudoku_race` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from sudoku_race import create_app, socketio
from sudoku_race.services.board import SIZE
from sudoku_race.services.coordinator import GameCoordinator
from sudoku_race.services.generator import SudokuGenerator
from sudoku_race.services.registry import GameRegistry


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    CORS_ORIGINS = ['http://localhost:5173']
    SOCKETIO_NAMESPACE = '/'
    GENERATION_MAX_ATTEMPTS = 10
    BROADCAST_PLAYER_BOARDS = False
    MAX_NAME_LENGTH = 32
    LOG_LEVEL = 'DEBUG'


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
    )
    yield test_client
    try:
        test_client.disconnect()
    except Exception:
        pass


@pytest.fixture()
def generator():
    return SudokuGenerator(rng=random.Random(1234))


@pytest.fixture()
def registry():
    return GameRegistry()


@pytest.fixture()
def coordinator(registry, generator):
    return GameCoordinator(registry, generator)


@pytest.fixture()
def started_game(registry, coordinator):
    """A two-player easy game that has just been started by its host."""
    game = registry.create_game('easy', 'Alice')
    alice = game.players[0]
    _, bob = registry.join_game(game.id, 'Bob')
    coordinator.start_game(game.id, alice.id)
    return game, alice, bob


def given_cell(player):
    for r in range(SIZE):
        for c in range(SIZE):
            if player.original_board[r][c] != 0:
                return r, c
    raise AssertionError('puzzle has no given cells')


def empty_cells(player):
    return [(r, c) for r in range(SIZE) for c in range(SIZE) if player.board[r][c] == 0]


def solution_digit(board, row, col):
    """The only digit that fits an empty cell of an otherwise complete board."""
    taken = set(board[row])
    taken |= {board[r][col] for r in range(SIZE)}
    br, bc = row - row % 3, col - col % 3
    taken |= {board[r][c] for r in range(br, br + 3) for c in range(bc, bc + 3)}
    candidates = [d for d in range(1, SIZE + 1) if d not in taken]
    assert len(candidates) == 1
    return candidates[0]


def solve_puzzle(puzzle):
    """Complete ``puzzle`` by plain backtracking; any valid completion will do."""
    board = [list(row) for row in puzzle]
    cells = [(r, c) for r in range(SIZE) for c in range(SIZE) if board[r][c] == 0]

    def fits(r, c, d):
        if d in board[r] or any(board[i][c] == d for i in range(SIZE)):
            return False
        br, bc = r - r % 3, c - c % 3
        return all(board[i][j] != d for i in range(br, br + 3) for j in range(bc, bc + 3))

    def solve(i):
        if i == len(cells):
            return True
        r, c = cells[i]
        for d in range(1, SIZE + 1):
            if fits(r, c, d):
                board[r][c] = d
                if solve(i + 1):
                    return True
                board[r][c] = 0
        return False

    assert solve(0)
    return board
