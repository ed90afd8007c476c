"""
Boluxiones Game Server Application Package

Daily word-grouping puzzle: a 4x4 board of words to be split into four
groups of four, served over HTTP and pushed to clients over Socket.IO.
"""

from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from .config import Config


def create_app(config_class=Config, game_service=None):
    """
    Application factory pattern for creating Flask app instances.

    Args:
        config_class: Configuration class to use
        game_service: Game service whose board updates are pushed to clients

    Returns:
        Flask application and SocketIO instance with all extensions initialized
    """
    app = Flask(__name__)
    app.config.from_object(config_class)

    # Initialize extensions
    CORS(app)
    socketio = SocketIO(app, cors_allowed_origins="*", logger=False, engineio_logger=False)

    # Register blueprints
    from .controllers.game_controller import game_bp

    app.register_blueprint(game_bp, url_prefix='/api')

    # Register WebSocket handlers
    from .websocket.handlers import register_board_broadcasts, register_websocket_handlers
    register_websocket_handlers(socketio)
    if game_service is not None:
        register_board_broadcasts(socketio, game_service)

    # Store socketio instance for use in other modules
    app.socketio = socketio

    return app, socketio
