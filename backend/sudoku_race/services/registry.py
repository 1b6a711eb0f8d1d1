import logging
import threading
from collections import namedtuple
from typing import Dict, List, Optional, Tuple

from sudoku_race.errors import AlreadyStarted, GameFull, InvalidDifficulty, NotFound
from sudoku_race.models import (
    DIFFICULTY_HOLES,
    MAX_PLAYERS,
    PHASE_LOBBY,
    Game,
    Player,
    generate_game_code,
)

LeaveResult = namedtuple('LeaveResult', ['player_name', 'game_finished'])


class GameRegistry:
    """In-memory owner of all active games and players.

    ``games`` and ``players`` index the same Player objects a Game holds in
    its ``players`` list. Map edits take ``_lock``; anything touching a
    single game takes ``game.lock`` first (never the other way round).
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)
        self._games: Dict[str, Game] = {}
        self._players: Dict[str, Player] = {}
        self._lock = threading.Lock()

    # ---- Lookups ----

    def get_game(self, game_id: str) -> Optional[Game]:
        """Look up a game; invite codes are matched case-insensitively."""
        if not isinstance(game_id, str):
            return None
        game_id = game_id.strip().upper()
        with self._lock:
            return self._games.get(game_id)

    def get_player(self, player_id: str) -> Optional[Player]:
        if not isinstance(player_id, str):
            return None
        with self._lock:
            return self._players.get(player_id)

    def list_games(self) -> List[Game]:
        with self._lock:
            return list(self._games.values())

    def active_games_count(self) -> int:
        with self._lock:
            return len(self._games)

    def active_players_count(self) -> int:
        with self._lock:
            return len(self._players)

    def require(self, game_id: str, player_id: str) -> Tuple[Game, Player]:
        """Resolve a game and one of its players or raise NotFound."""
        game = self.get_game(game_id)
        player = self.get_player(player_id)
        if not game or not player or player.game_id != game.id:
            raise NotFound('Game or player not found')
        return game, player

    @staticmethod
    def sanitize(game: Game) -> dict:
        """Broadcast-safe view of a game; board contents never included."""
        return game.to_dict()

    # ---- Lifecycle ----

    def create_game(self, difficulty: str, host_name: str) -> Game:
        if not isinstance(difficulty, str) or difficulty not in DIFFICULTY_HOLES:
            raise InvalidDifficulty()
        with self._lock:
            game_id = generate_game_code()
            while game_id in self._games:
                game_id = generate_game_code()
            game = Game(difficulty, game_id=game_id)
            host = Player(game.id, host_name, is_host=True)
            game.players.append(host)
            self._games[game.id] = game
            self._players[host.id] = host
        self.logger.info(f"[create] game={game.id} difficulty={difficulty} host={host.id}")
        return game

    def join_game(self, game_id: str, name: str) -> Tuple[Game, Player]:
        game = self.get_game(game_id)
        if not game:
            raise NotFound('Game not found')
        with game.lock:
            if game.phase != PHASE_LOBBY:
                raise AlreadyStarted()
            if len(game.players) >= MAX_PLAYERS:
                raise GameFull()
            player = Player(game.id, name)
            with self._lock:
                if self._games.get(game.id) is not game:
                    raise NotFound('Game not found')
                game.players.append(player)
                self._players[player.id] = player
        self.logger.info(f"[join] game={game.id} player={player.id} name={name!r}")
        return game, player

    def leave_game(self, game_id: str, player_id: str) -> LeaveResult:
        """Remove a player; drop the game once empty.

        If everyone still in a playing game has already finished, the game
        moves to ``finished`` and ``game_finished`` is True.
        """
        game, player = self.require(game_id, player_id)
        with game.lock:
            if game.find_player(player.id) is None:
                raise NotFound('Game or player not found')
            game.players.remove(player)
            if player.is_host and game.players:
                game.players[0].is_host = True
            game_finished = game.finish_if_complete()
            with self._lock:
                self._players.pop(player.id, None)
                if not game.players:
                    self._games.pop(game.id, None)
        self.logger.info(f"[leave] game={game.id} player={player.id}")
        if game_finished:
            self.logger.info(f"[finish] game={game.id} all remaining players finished")
        if not game.players:
            self.logger.info(f"[leave] game={game.id} deleted (no players left)")
        return LeaveResult(player.name, game_finished)

    # ---- Connections ----

    def attach_connection(self, game_id: str, player_id: str, sid: str) -> Tuple[Game, Player]:
        """Bind a (possibly new) connection to an existing player."""
        game = self.get_game(game_id)
        if not game:
            raise NotFound('Game not found')
        with game.lock:
            player = game.find_player(player_id)
            if not player:
                raise NotFound('Player not found in game')
            player.sid = sid
            player.is_connected = True
        return game, player

    def detach_connection(self, sid: str) -> Optional[Tuple[Game, Player]]:
        """Mark whichever player owns ``sid`` as disconnected; boards are kept."""
        for game in self.list_games():
            with game.lock:
                player = next((p for p in game.players if p.sid == sid), None)
                if player:
                    player.is_connected = False
                    player.sid = None
                    return game, player
        return None
