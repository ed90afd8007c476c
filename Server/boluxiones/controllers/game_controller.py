"""
Game Controller

Handles all game-related HTTP endpoints of the daily puzzle.
"""

from flask import Blueprint, request, jsonify
from ..utils.decorators import require_game_service
from ..utils.game_logger import game_logger

game_bp = Blueprint('game', __name__)


def _attempt_to_dict(attempt):
    if attempt is None:
        return None
    return {
        'words': list(attempt.words),
        'correct': attempt.correct,
        'submitted_by': attempt.submitted_by.value
    }


def _error(action, message, status, date_key=None, **kwargs):
    error_response = {
        'success': False,
        'error': message
    }
    game_logger.log_server_response(request, action, False, error_response, date_key, **kwargs)
    return jsonify(error_response), status


@game_bp.route('/game/state', methods=['GET'])
@require_game_service
def get_state(game_service=None):
    """Get the current board."""
    try:
        game_logger.log_user_action(request, 'get_state')

        board = game_service.get_board()
        response_data = {
            'success': True,
            'board': board.to_dict()
        }

        game_logger.log_server_response(request, 'get_state', True, response_data, board.date_key)
        return jsonify(response_data)

    except Exception as e:
        game_logger.log_error(request, e, 'get_state')
        return _error('get_state', str(e), 500)


@game_bp.route('/game/select', methods=['POST'])
@require_game_service
def select_word(game_service=None):
    """Select or deselect a tile."""
    try:
        data = request.get_json(silent=True)
        if not data or not isinstance(data.get('word'), str):
            return _error('select_word', 'Word is required', 400)

        word = data['word']
        selected = bool(data.get('selected', True))

        game_logger.log_user_action(request, 'select_word', word=word, selected=selected)

        result = game_service.set_selected(word, selected)
        board = result['board']
        response_data = {
            'success': True,
            'changed': result['changed'],
            'board': board.to_dict()
        }

        game_logger.log_server_response(request, 'select_word', True, response_data, board.date_key)
        return jsonify(response_data)

    except Exception as e:
        game_logger.log_error(request, e, 'select_word')
        return _error('select_word', str(e), 500)


@game_bp.route('/game/deselect_all', methods=['POST'])
@require_game_service
def deselect_all(game_service=None):
    """Clear the selection."""
    try:
        game_logger.log_user_action(request, 'deselect_all')

        result = game_service.deselect_all()
        board = result['board']
        response_data = {
            'success': True,
            'changed': result['changed'],
            'board': board.to_dict()
        }

        game_logger.log_server_response(request, 'deselect_all', True, response_data, board.date_key)
        return jsonify(response_data)

    except Exception as e:
        game_logger.log_error(request, e, 'deselect_all')
        return _error('deselect_all', str(e), 500)


@game_bp.route('/game/submit', methods=['POST'])
@require_game_service
def submit(game_service=None):
    """Submit the four selected words."""
    try:
        game_logger.log_user_action(request, 'submit')

        board = game_service.get_board()
        if not board.can_submit:
            message = 'Game is already over' if board.ended else 'Exactly 4 words must be selected'
            return _error('submit', message, 400, board.date_key,
                          selected_count=len(board.selected_words))

        result = game_service.submit()
        board = result['board']
        response_data = {
            'success': True,
            'attempt': _attempt_to_dict(result['attempt']),
            'board': board.to_dict()
        }

        game_logger.log_server_response(
            request, 'submit', True, response_data, board.date_key,
            attempts_remaining=board.attempts_remaining, ended=board.ended
        )
        return jsonify(response_data)

    except Exception as e:
        game_logger.log_error(request, e, 'submit')
        return _error('submit', str(e), 500)


@game_bp.route('/game/shuffle', methods=['POST'])
@require_game_service
def shuffle(game_service=None):
    """Shuffle the tiles still in play."""
    try:
        game_logger.log_user_action(request, 'shuffle')

        result = game_service.shuffle()
        board = result['board']
        response_data = {
            'success': True,
            'changed': result['changed'],
            'board': board.to_dict()
        }

        game_logger.log_server_response(request, 'shuffle', True, response_data, board.date_key)
        return jsonify(response_data)

    except Exception as e:
        game_logger.log_error(request, e, 'shuffle')
        return _error('shuffle', str(e), 500)


@game_bp.route('/game/share', methods=['GET'])
@require_game_service
def share(game_service=None):
    """Emoji summary of the user's attempts."""
    try:
        game_logger.log_user_action(request, 'share')

        board = game_service.get_board()
        response_data = {
            'success': True,
            'emoji_representation': board.emoji_representation,
            'text': game_service.share_text()
        }

        game_logger.log_server_response(request, 'share', True, response_data, board.date_key)
        return jsonify(response_data)

    except Exception as e:
        game_logger.log_error(request, e, 'share')
        return _error('share', str(e), 500)


@game_bp.route('/game/reload', methods=['POST'])
@require_game_service
def reload_groupings(game_service=None):
    """Retry loading the day's groupings."""
    try:
        game_logger.log_user_action(request, 'reload')

        catalog = game_service.reload_catalog()
        board = game_service.get_board()
        if not catalog.is_loaded:
            return _error('reload', catalog.error or 'Groupings unavailable', 503, board.date_key)

        response_data = {
            'success': True,
            'board': board.to_dict()
        }

        game_logger.log_server_response(request, 'reload', True, response_data, board.date_key)
        return jsonify(response_data)

    except Exception as e:
        game_logger.log_error(request, e, 'reload')
        return _error('reload', str(e), 500)


@game_bp.route('/health', methods=['GET'])
@require_game_service
def health_check(game_service=None):
    """Health check endpoint."""
    try:
        game_logger.log_user_action(request, 'health_check')

        board = game_service.get_board()
        response_data = {
            'status': 'healthy',
            'date_key': board.date_key,
            'catalog_status': board.catalog_status,
            'log_stats': game_logger.get_log_stats()
        }

        game_logger.log_server_response(request, 'health_check', True, response_data)
        return jsonify(response_data)

    except Exception as e:
        game_logger.log_error(request, e, 'health_check')
        error_response = {
            'status': 'error',
            'error': str(e)
        }
        game_logger.log_server_response(request, 'health_check', False, error_response)
        return jsonify(error_response), 500
