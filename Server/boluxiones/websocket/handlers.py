"""
WebSocket Event Handlers

Pushes board updates and one-away notices to connected clients.
"""

from flask import request
from flask_socketio import emit, join_room, leave_room
from ..utils.decorators import websocket_game_service_required
from ..utils.game_logger import game_logger

BOARD_ROOM = "board"


def register_websocket_handlers(socketio):
    """Register all WebSocket event handlers."""

    @socketio.on('connect')
    def handle_connect():
        """Handle WebSocket connection."""
        pass

    @socketio.on('disconnect')
    def handle_disconnect():
        """Handle WebSocket disconnection."""
        leave_room(BOARD_ROOM)

    @socketio.on('join_game')
    @websocket_game_service_required
    def handle_join_game(data=None, game_service=None):
        """Join the board room and receive the current board."""
        try:
            join_room(BOARD_ROOM)
            board = game_service.get_board()
            game_logger.log_user_action(request, 'join_game', board.date_key)
            emit('board_update', {'success': True, 'board': board.to_dict()})
        except Exception as e:
            game_logger.log_error(request, e, 'join_game')
            emit('error', {'error': str(e)})

    @socketio.on('leave_game')
    def handle_leave_game(data=None):
        """Leave the board room."""
        leave_room(BOARD_ROOM)


def register_board_broadcasts(socketio, game_service):
    """Forward engine notifications to the board room."""

    def broadcast_board(board):
        try:
            socketio.emit('board_update', {'success': True, 'board': board.to_dict()}, room=BOARD_ROOM)
        except Exception as e:
            game_logger.logger.error(f"Error broadcasting board for {board.date_key}: {e}")

    def broadcast_one_away(date_key):
        socketio.emit('one_away', {'date_key': date_key}, room=BOARD_ROOM)

    game_service.add_board_listener(broadcast_board)
    game_service.add_one_away_listener(broadcast_one_away)
