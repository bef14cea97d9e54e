from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
import click
from config import Config

socketio = SocketIO(async_mode=None)


def _allowed_origins(value):
    if not value or value.strip() == '*':
        return '*'
    return [origin.strip() for origin in value.split(',') if origin.strip()]


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    allowed_origins = _allowed_origins(flask_app.config.get('CORS_ORIGINS', '*'))
    CORS(flask_app, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # One registry per app; all lobby and match state lives here
    from hexduel.services.registry import SessionRegistry
    from hexduel.socketio_events import SocketIONotifier, register_socketio_handlers
    namespace = flask_app.config.get('SOCKETIO_NAMESPACE', '/')
    flask_app.extensions['session_registry'] = SessionRegistry(
        SocketIONotifier(socketio, namespace=namespace),
        radius=flask_app.config.get('BOARD_RADIUS', 4),
        disconnect_forfeits=flask_app.config.get('DISCONNECT_FORFEITS', True),
        logger=flask_app.logger,
    )
    register_socketio_handlers(namespace=namespace)

    from hexduel.routes import main
    flask_app.register_blueprint(main)

    @click.command('show-board')
    @click.option('--radius', type=int, default=None, help='Board radius (defaults to BOARD_RADIUS).')
    def show_board_command(radius):
        """Prints the starting board, one cell per line."""
        from hexduel.services.games.board import build_board
        board = build_board(radius if radius is not None else flask_app.config.get('BOARD_RADIUS', 4))
        for cell in board:
            owner = cell.owner.value if cell.owner else '-'
            click.echo(f"{cell.id:3d} {cell.q:3d} {cell.r:3d} {owner}")
        click.echo(f"{len(board)} cells")

    flask_app.cli.add_command(show_board_command)

    return flask_app
