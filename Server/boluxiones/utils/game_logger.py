"""
Game Logger Module for the Boluxiones Server

Writes one JSON document per line for every client action, server response
and engine event, keyed by the puzzle day they belong to.
"""

import logging
import json
from collections import Counter
from datetime import datetime, timezone
from typing import Dict, Any, Optional
from pathlib import Path

from ..config.app_config import Config
from .helpers import get_user_identity

SYSTEM_CLIENT = {'user_ip': 'system', 'session_id': None}


class GameLogger:
    """
    Structured logger of the puzzle server.

    Entries carry an event type (USER_ACTION, SERVER_RESPONSE_SUCCESS,
    SERVER_RESPONSE_ERROR, GAME_EVENT, ERROR), the action name, the client
    that caused it and the date key of the session involved.
    """

    def __init__(self, log_dir: str = "logs", level: str = "INFO"):
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.level = getattr(logging, str(level).upper(), logging.INFO)
        self.log_file = self.log_dir / f"boluxiones_{self._utc_now().strftime('%Y-%m-%d')}.log"

        self.logger = self._setup_logger()

    @staticmethod
    def _utc_now() -> datetime:
        return datetime.now(timezone.utc)

    def _setup_logger(self) -> logging.Logger:
        """File handler gets the JSON lines, the console only warnings."""
        logger = logging.getLogger('boluxiones_game')
        logger.setLevel(self.level)

        # Prevent duplicate handlers
        if logger.handlers:
            logger.handlers.clear()

        file_handler = logging.FileHandler(self.log_file, encoding='utf-8')
        file_handler.setLevel(self.level)
        file_handler.setFormatter(logging.Formatter('%(message)s'))

        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.WARNING)
        console_handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))

        logger.addHandler(file_handler)
        logger.addHandler(console_handler)
        return logger

    def _entry(self,
               event_type: str,
               action: str,
               client: Dict[str, Any],
               date_key: Optional[str],
               details: Dict[str, Any]) -> str:
        return json.dumps({
            'timestamp': self._utc_now().isoformat(),
            'event_type': event_type,
            'action': action,
            'date_key': date_key,
            'client': client,
            'details': details
        }, ensure_ascii=False, default=str)

    def log_user_action(self,
                        request,
                        action: str,
                        date_key: Optional[str] = None,
                        **kwargs):
        """
        Log a client request before it is handled.

        Args:
            request: Flask request object
            action: Name of the action (e.g. 'select_word', 'submit', 'shuffle')
            date_key: Puzzle day, when already known
            **kwargs: Request parameters worth keeping
        """
        details = {
            'method': getattr(request, 'method', None),
            'path': getattr(request, 'path', None),
            **kwargs
        }
        self.logger.info(self._entry('USER_ACTION', action, get_user_identity(request), date_key, details))

    def log_server_response(self,
                            request,
                            action: str,
                            success: bool,
                            response_data: Dict[str, Any],
                            date_key: Optional[str] = None,
                            **kwargs):
        """
        Log what was sent back for an action. Failures are logged at ERROR.
        """
        details = {
            'success': success,
            'response': self._summarize_response(response_data),
            **kwargs
        }
        event_type = 'SERVER_RESPONSE_SUCCESS' if success else 'SERVER_RESPONSE_ERROR'
        entry = self._entry(event_type, action, get_user_identity(request), date_key, details)

        if success:
            self.logger.info(entry)
        else:
            self.logger.error(entry)

    def log_game_event(self,
                       date_key: Optional[str],
                       event: str,
                       source: str = 'engine',
                       **kwargs):
        """
        Log something that happened to a session.

        Args:
            date_key: Puzzle day of the session
            event: e.g. 'attempt_submitted', 'one_away', 'game_ended'
            source: 'engine', 'timer', 'system' or 'analytics'
        """
        client = {'user_ip': source, 'session_id': None}
        self.logger.info(self._entry('GAME_EVENT', event, client, date_key, dict(kwargs)))

    def log_error(self,
                  request,
                  error: Exception,
                  action: str,
                  date_key: Optional[str] = None):
        """Log an exception; request is None for work done off a request."""
        client = get_user_identity(request) if request is not None else SYSTEM_CLIENT
        details = {
            'error_type': type(error).__name__,
            'error_message': str(error)
        }
        self.logger.error(self._entry('ERROR', action, client, date_key, details))

    @staticmethod
    def _summarize_response(data: Dict[str, Any]) -> Dict[str, Any]:
        """Replaces the board with its counters; the tile list is too verbose."""
        if not isinstance(data, dict):
            return {'data_type': type(data).__name__}

        summary = dict(data)
        board = summary.get('board')
        if isinstance(board, dict):
            summary['board'] = {
                'attempts_remaining': board.get('attempts_remaining'),
                'selected_count': len(board.get('selected_words', [])),
                'solutions_count': len(board.get('solutions', [])),
                'ended': board.get('ended'),
                'won': board.get('won')
            }
        return summary

    def get_log_stats(self) -> Dict[str, Any]:
        """Counts today's entries by event type, for the health endpoint."""
        if not self.log_file.exists():
            return {'error': 'No log file found for today'}

        counts: Counter = Counter()
        try:
            with open(self.log_file, 'r', encoding='utf-8') as f:
                for line in f:
                    if not line.strip():
                        continue
                    try:
                        entry = json.loads(line)
                    except ValueError:
                        entry = None
                    if isinstance(entry, dict):
                        counts[entry.get('event_type', 'UNKNOWN')] += 1
                    else:
                        counts['UNSTRUCTURED'] += 1
        except OSError as e:
            return {'error': f'Failed to get stats: {e}'}

        return {
            'log_file': str(self.log_file),
            'file_size_mb': round(self.log_file.stat().st_size / (1024 * 1024), 2),
            'total_entries': sum(counts.values()),
            'by_event_type': dict(counts)
        }


# Global logger instance
game_logger = GameLogger(Config.LOG_DIR, Config.LOG_LEVEL)
