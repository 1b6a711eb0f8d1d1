"""Error taxonomy shared by the registry, coordinator and transports.

Domain operations raise these instead of returning partial results; the
HTTP blueprint and the Socket.IO handlers translate them into JSON error
bodies and ``error`` events respectively.
"""


class GameError(Exception):
    status_code = 400
    code = 'GameError'
    default_message = 'Game error'

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self):
        return {'message': self.message, 'code': self.code}


class NotFound(GameError):
    status_code = 404
    code = 'NotFound'
    default_message = 'Game or player not found'


class Forbidden(GameError):
    status_code = 403
    code = 'Forbidden'
    default_message = 'Only the host can start the game'


class InvalidState(GameError):
    code = 'InvalidState'
    default_message = 'Action not allowed in the current game state'


class AlreadyStarted(InvalidState):
    code = 'AlreadyStarted'
    default_message = 'Game has already started'


class NotEnoughPlayers(InvalidState):
    code = 'NotEnoughPlayers'
    default_message = 'Need at least 2 players to start'


class GameFull(InvalidState):
    code = 'Full'
    default_message = 'Game is full'


class WrongPhase(InvalidState):
    code = 'WrongPhase'
    default_message = 'Game is not in playing phase'


class BoardUninitialized(InvalidState):
    code = 'Uninitialized'
    default_message = 'Player board not initialized'


class AlreadyFinished(InvalidState):
    code = 'AlreadyFinished'
    default_message = 'You have already finished this puzzle'


class ValidationError(GameError):
    code = 'ValidationError'
    default_message = 'Invalid input'


class ImmutableCell(ValidationError):
    code = 'ImmutableCell'
    default_message = 'Cannot modify original numbers'


class OutOfRange(ValidationError):
    code = 'OutOfRange'
    default_message = 'Invalid value'


class InvalidDifficulty(ValidationError):
    code = 'InvalidDifficulty'
    default_message = 'Invalid difficulty level'


class GenerationFailure(GameError):
    status_code = 503
    code = 'GenerationFailure'
    default_message = 'Could not generate a valid sudoku board'
