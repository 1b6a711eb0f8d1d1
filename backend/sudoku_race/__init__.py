from flask import Flask, current_app
from flask_cors import CORS
from flask_socketio import SocketIO
from config import Config

socketio = SocketIO(async_mode=None)


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    allowed_origins = flask_app.config.get('CORS_ORIGINS') or []
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # One registry per app instance; handlers reach it through current_app
    from sudoku_race.services.coordinator import GameCoordinator
    from sudoku_race.services.generator import SudokuGenerator
    from sudoku_race.services.registry import GameRegistry

    registry = GameRegistry(logger=flask_app.logger)
    generator = SudokuGenerator(
        max_attempts=flask_app.config.get('GENERATION_MAX_ATTEMPTS', 10),
        logger=flask_app.logger,
    )
    flask_app.extensions['game_registry'] = registry
    flask_app.extensions['game_coordinator'] = GameCoordinator(registry, generator, logger=flask_app.logger)

    from sudoku_race.main import main
    flask_app.register_blueprint(main)

    from sudoku_race.api.games import games
    flask_app.register_blueprint(games, url_prefix='/api/game')

    from sudoku_race.socketio_events import register_socketio_handlers
    register_socketio_handlers(namespace=flask_app.config.get('SOCKETIO_NAMESPACE', '/'))

    return flask_app


def get_registry():
    return current_app.extensions['game_registry']


def get_coordinator():
    return current_app.extensions['game_coordinator']
