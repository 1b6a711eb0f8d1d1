from flask import current_app, request
from flask_socketio import emit, join_room, leave_room
from sudoku_race import get_coordinator, get_registry, socketio
from sudoku_race.errors import GameError


def _get_sid() -> str:
    # request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _payload(data) -> dict:
    return data if isinstance(data, dict) else {}


def _ids(data):
    data = _payload(data)
    game_id = data.get('gameId')
    if isinstance(game_id, str):
        game_id = game_id.strip().upper()
    return game_id, data.get('playerId')


def _reply_error(exc: GameError) -> None:
    emit('error', exc.to_dict())


def _guarded(event_name, handler):
    """Turn domain errors into an ``error`` event and log anything unexpected."""
    def wrapper(data=None):
        try:
            return handler(data)
        except GameError as exc:
            current_app.logger.info(f"[{event_name}] rejected sid={_get_sid()} code={exc.code}: {exc.message}")
            _reply_error(exc)
        except Exception:
            current_app.logger.exception(f"[{event_name}] failed sid={_get_sid()}")
            emit('error', {'message': f'Failed to handle {event_name}', 'code': 'InternalError'})
    wrapper.__name__ = getattr(handler, '__name__', event_name)
    return wrapper


def handle_connect(auth=None):
    emit('connected', {'message': 'Connected', 'sid': _get_sid()})


def handle_disconnect(reason=None):
    # The connection is gone, so failures are only logged
    try:
        found = get_registry().detach_connection(_get_sid())
        if not found:
            return
        game, player = found
        current_app.logger.info(f"[disconnect] game={game.id} player={player.id} reason={reason}")
        emit('player-disconnected', {
            'playerId': player.id,
            'playerName': player.name,
        }, to=game.id, include_self=False)
    except Exception:
        current_app.logger.exception(f"[disconnect] failed sid={_get_sid()}")


def handle_join_game(data):
    """Join (or rejoin) the room for a game and bind this connection to the player."""
    game_id, player_id = _ids(data)
    registry = get_registry()
    game, player = registry.attach_connection(game_id, player_id, _get_sid())
    join_room(game.id)
    current_app.logger.info(f"[join-room] game={game.id} player={player.id}")

    with game.lock:
        emit('game-state', {
            'game': registry.sanitize(game),
            'player': player.private_state(),
        })
        emit('player-connected', {
            'playerId': player.id,
            'playerName': player.name,
            'game': registry.sanitize(game),
        }, to=game.id)


def handle_start_game(data):
    game_id, player_id = _ids(data)
    registry = get_registry()
    game = get_coordinator().start_game(game_id, player_id)
    with game.lock:
        # Every player was dealt the same puzzle, so the room can share it
        emit('game-started', {
            'game': registry.sanitize(game),
            'board': game.board,
            'originalBoard': game.original_board,
        }, to=game.id)


def _emit_game_finished(game) -> None:
    with game.lock:
        emit('game-finished', {'game': get_registry().sanitize(game)}, to=game.id)


def handle_cell_update(data):
    data = _payload(data)
    game_id, player_id = _ids(data)
    coordinator = get_coordinator()
    player = coordinator.update_cell(game_id, player_id, data.get('row'), data.get('col'), data.get('value'))
    room = player.game_id

    payload = {
        'playerId': player.id,
        'cellsRemaining': player.cells_remaining,
        'isSolved': player.is_solved,
    }
    if current_app.config.get('BROADCAST_PLAYER_BOARDS'):
        payload['board'] = player.board
    emit('player-update', payload, to=room)

    if player.is_solved and player.finished_at is None:
        result = coordinator.record_finish(game_id, player_id)
        if result.player_finished:
            emit('player-finished', {
                'playerId': player.id,
                'playerName': player.name,
                'finishedAt': player.finished_at.isoformat(),
            }, to=room)
        if result.game_finished:
            game = get_registry().get_game(room)
            if game:
                _emit_game_finished(game)


def handle_leave_game(data):
    game_id, player_id = _ids(data)
    registry = get_registry()
    game, _ = registry.require(game_id, player_id)
    result = registry.leave_game(game.id, player_id)
    leave_room(game.id)
    with game.lock:
        emit('player-left', {
            'playerId': player_id,
            'playerName': result.player_name,
            'game': registry.sanitize(game) if game.players else None,
        }, to=game.id, include_self=False)
    if result.game_finished:
        _emit_game_finished(game)


def handle_ping(data):
    emit('pong', data or {})


def register_socketio_handlers(namespace: str = '/') -> None:
    """Register Socket.IO event handlers on ``namespace``."""
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event('join-game', _guarded('join-game', handle_join_game), namespace=namespace)
    socketio.on_event('start-game', _guarded('start-game', handle_start_game), namespace=namespace)
    socketio.on_event('cell-update', _guarded('cell-update', handle_cell_update), namespace=namespace)
    socketio.on_event('leave-game', _guarded('leave-game', handle_leave_game), namespace=namespace)
    socketio.on_event('ping', handle_ping, namespace=namespace)
