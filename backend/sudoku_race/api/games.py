from flask import Blueprint, current_app, jsonify, request
from sudoku_race import get_registry
from sudoku_race.errors import GameError


games = Blueprint('games', __name__)


def clean_name(raw, default: str) -> str:
    """Strip and cap a player-supplied name, falling back to ``default``."""
    limit = int(current_app.config.get('MAX_NAME_LENGTH', 32))
    name = raw.strip() if isinstance(raw, str) else ''
    return name[:limit] or default


def json_body() -> dict:
    """Request JSON as a dict; anything else counts as an empty body."""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


@games.errorhandler(GameError)
def handle_game_error(exc: GameError):
    return jsonify({'error': exc.message, 'code': exc.code}), exc.status_code


@games.route('/create', methods=['POST'])
def create_game():
    """
    Creates a new game lobby with the caller as host.
    """
    data = json_body()
    game = get_registry().create_game(
        data.get('difficulty'),
        clean_name(data.get('playerName'), 'Player 1'),
    )
    return jsonify({
        'gameId': game.id,
        'playerId': game.players[0].id,
        'message': 'Game created successfully',
    })


@games.route('/join/<string:game_id>', methods=['POST'])
def join_game(game_id):
    """
    Adds a guest player to a lobby. Every join failure is a 400.
    """
    data = json_body()
    try:
        game, player = get_registry().join_game(
            game_id,
            clean_name(data.get('playerName'), 'Player 2'),
        )
    except GameError as exc:
        return jsonify({'error': exc.message, 'code': exc.code}), 400
    return jsonify({
        'gameId': game.id,
        'playerId': player.id,
        'message': 'Joined game successfully',
    })


@games.route('/<string:game_id>', methods=['GET'])
def get_game(game_id):
    registry = get_registry()
    game = registry.get_game(game_id)
    if not game:
        return jsonify({'error': 'Game not found'}), 404
    with game.lock:
        return jsonify(registry.sanitize(game))
