"""
Analytics Service

Optional capability port for game-result events. Having no sink at all is a
valid configuration.
"""

from typing import Any, Dict, Optional

from ..utils.game_logger import game_logger


class AnalyticsSink:
    """Receives fire-and-forget analytics events."""

    def track(self, event: str, properties: Dict[str, Any]) -> None:
        raise NotImplementedError


class LoggingAnalyticsSink(AnalyticsSink):
    """Writes analytics events to the structured game log."""

    def __init__(self, date_key: Optional[str] = None):
        self.date_key = date_key

    def track(self, event: str, properties: Dict[str, Any]) -> None:
        game_logger.log_game_event(self.date_key, event, 'analytics', **properties)
