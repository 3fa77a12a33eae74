from functools import partial

from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
import click
from config import Config

from battleship.rooms import RoomService, parse_permanent_rooms

socketio = SocketIO(async_mode=None)


def _origins(raw):
    return [origin.strip() for origin in (raw or '').split(',') if origin.strip()]


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    allowed_origins = _origins(flask_app.config.get('CORS_ALLOWED_ORIGINS'))
    CORS(flask_app, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(
        flask_app,
        cors_allowed_origins=allowed_origins,
        async_handlers=flask_app.config.get('SOCKETIO_ASYNC_HANDLERS', False),
    )

    # One room store per app, owned by the room service for the life of the process
    namespace = flask_app.config.get('SOCKETIO_NAMESPACE', '/')
    flask_app.extensions['rooms'] = RoomService.from_config(
        flask_app.config,
        emit=partial(socketio.emit, namespace=namespace),
        logger=flask_app.logger,
    )

    from battleship.routes import main
    flask_app.register_blueprint(main)

    from battleship.socketio_events import register_socketio_handlers
    register_socketio_handlers(namespace=namespace)

    @click.command('permanent-rooms')
    def permanent_rooms_command():
        """Print the permanent rooms seeded at startup."""
        seeds = parse_permanent_rooms(flask_app.config.get('PERMANENT_ROOMS', ''))
        if not seeds:
            click.echo('No permanent rooms configured.')
            return
        for room_id, display_name in seeds:
            click.echo(f'{room_id}\t{display_name}')

    flask_app.cli.add_command(permanent_rooms_command)

    return flask_app
