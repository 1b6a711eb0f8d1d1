import random
import string
import threading
import uuid
from datetime import datetime, timezone
from typing import List, Optional

Board = List[List[int]]

PHASE_LOBBY = 'lobby'
PHASE_PLAYING = 'playing'
PHASE_FINISHED = 'finished'

# Number of cells removed from the solved grid per difficulty
DIFFICULTY_HOLES = {
    'easy': 30,
    'medium': 45,
    'hard': 55,
}

MAX_PLAYERS = 2


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _isoformat(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def generate_game_code(length=8):
    """Generate a short base-36 game code."""
    return ''.join(random.choices(string.ascii_uppercase + string.digits, k=length))


class Player:
    def __init__(self, game_id: str, name: str, is_host: bool = False, player_id: Optional[str] = None):
        self.id = player_id or str(uuid.uuid4())
        self.game_id = game_id
        self.name = name
        self.is_host = is_host
        self.is_connected = False
        self.sid: Optional[str] = None
        self.board: Optional[Board] = None
        self.original_board: Optional[Board] = None
        self.cells_remaining = 0
        self.is_solved = False
        self.finished_at: Optional[datetime] = None

    def to_dict(self):
        """Public progress fields; never includes board contents."""
        return {
            'id': self.id,
            'name': self.name,
            'isConnected': self.is_connected,
            'cellsRemaining': self.cells_remaining,
            'finishedAt': _isoformat(self.finished_at),
            'isHost': self.is_host,
            'isSolved': self.is_solved,
        }

    def private_state(self):
        """The player's own boards, sent only to that player's connection."""
        return {
            'id': self.id,
            'board': self.board,
            'originalBoard': self.original_board,
        }

    def __repr__(self):
        return f'<Player {self.id} {self.name!r} game={self.game_id}>'


class Game:
    def __init__(self, difficulty: str, game_id: Optional[str] = None):
        self.id = game_id or generate_game_code()
        self.phase = PHASE_LOBBY
        self.difficulty = difficulty
        self.board: Optional[Board] = None
        self.original_board: Optional[Board] = None
        self.players: List[Player] = []
        self.created_at = utcnow()
        self.started_at: Optional[datetime] = None
        self.finished_at: Optional[datetime] = None
        # Guards every mutation of this game and its players
        self.lock = threading.RLock()

    @property
    def host(self) -> Optional[Player]:
        return next((p for p in self.players if p.is_host), None)

    def find_player(self, player_id: str) -> Optional[Player]:
        return next((p for p in self.players if p.id == player_id), None)

    def finish_if_complete(self) -> bool:
        """Move a playing game to ``finished`` once every remaining player has finished.

        Caller must hold ``self.lock``. Returns True only on the transition.
        """
        if self.phase != PHASE_PLAYING or not self.players:
            return False
        if not all(p.finished_at for p in self.players):
            return False
        self.phase = PHASE_FINISHED
        self.finished_at = utcnow()
        return True

    def to_dict(self):
        return {
            'id': self.id,
            'phase': self.phase,
            'difficulty': self.difficulty,
            'players': [p.to_dict() for p in self.players],
            'createdAt': _isoformat(self.created_at),
            'startedAt': _isoformat(self.started_at),
            'finishedAt': _isoformat(self.finished_at),
        }

    def __repr__(self):
        return f'<Game {self.id} phase={self.phase} players={len(self.players)}>'
