import logging
from collections import namedtuple
from typing import Optional

from sudoku_race.errors import (
    AlreadyFinished,
    AlreadyStarted,
    BoardUninitialized,
    Forbidden,
    ImmutableCell,
    NotEnoughPlayers,
    OutOfRange,
    WrongPhase,
)
from sudoku_race.models import (
    MAX_PLAYERS,
    PHASE_LOBBY,
    PHASE_PLAYING,
    Game,
    Player,
    utcnow,
)
from .board import SIZE, copy_board, count_empty, is_solved
from .generator import SudokuGenerator
from .registry import GameRegistry

FinishResult = namedtuple('FinishResult', ['player_finished', 'game_finished'])


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class GameCoordinator:
    """Per-game state machine: lobby -> playing -> finished.

    Every operation checks all of its preconditions before touching state,
    under the game's lock.
    """

    def __init__(self, registry: GameRegistry, generator: Optional[SudokuGenerator] = None,
                 logger: Optional[logging.Logger] = None):
        self.registry = registry
        self.logger = logger or logging.getLogger(__name__)
        self.generator = generator or SudokuGenerator(logger=self.logger)

    def start_game(self, game_id: str, player_id: str) -> Game:
        game, player = self.registry.require(game_id, player_id)
        with game.lock:
            if not player.is_host:
                raise Forbidden()
            if game.phase != PHASE_LOBBY:
                raise AlreadyStarted()
            if len(game.players) < MAX_PLAYERS:
                raise NotEnoughPlayers()

            # GenerationFailure propagates before anything is committed
            board, original_board = self.generator.generate(game.difficulty)

            cells_remaining = count_empty(board)
            game.board = board
            game.original_board = original_board
            game.started_at = utcnow()
            game.phase = PHASE_PLAYING
            for p in game.players:
                p.board = copy_board(board)
                p.original_board = copy_board(original_board)
                p.cells_remaining = cells_remaining
                p.is_solved = False
        self.logger.info(f"[start] game={game.id} difficulty={game.difficulty} holes={cells_remaining}")
        return game

    def update_cell(self, game_id: str, player_id: str, row, col, value) -> Player:
        game, player = self.registry.require(game_id, player_id)
        with game.lock:
            if game.phase != PHASE_PLAYING:
                raise WrongPhase()
            if player.board is None or player.original_board is None:
                raise BoardUninitialized()
            if not (_is_int(row) and _is_int(col) and 0 <= row < SIZE and 0 <= col < SIZE):
                raise OutOfRange('Invalid cell position')
            if player.original_board[row][col] != 0:
                raise ImmutableCell()
            if not (_is_int(value) and 0 <= value <= SIZE):
                raise OutOfRange()
            if player.finished_at is not None:
                raise AlreadyFinished()

            player.board[row][col] = value
            player.cells_remaining = count_empty(player.board)
            player.is_solved = is_solved(player.board)
        return player

    def record_finish(self, game_id: str, player_id: str) -> FinishResult:
        """Stamp ``finished_at`` the first time a player is solved.

        Once every player in the game has finished, the game itself moves to
        ``finished``.
        """
        game, player = self.registry.require(game_id, player_id)
        with game.lock:
            if not player.is_solved or player.finished_at is not None:
                return FinishResult(False, False)
            player.finished_at = utcnow()
            game_finished = game.finish_if_complete()
        self.logger.info(f"[finish] game={game.id} player={player.id} name={player.name!r}")
        if game_finished:
            self.logger.info(f"[finish] game={game.id} all players finished")
        return FinishResult(True, game_finished)
