from flask import Blueprint, jsonify
from sudoku_race import get_registry

main = Blueprint('main', __name__)


@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the War of Numbers game server!'})


@main.route('/health')
def health():
    registry = get_registry()
    return jsonify({
        'status': 'OK',
        'message': 'War of Numbers Server is running!',
        'activeGames': registry.active_games_count(),
        'activePlayers': registry.active_players_count(),
    })
