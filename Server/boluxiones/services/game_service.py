"""
Game Service

Coordinates the session of the current puzzle day: loads the groupings,
restores or starts the engine, rolls over at midnight (UTC) and serializes
access from request threads and the timer worker.
"""

import datetime
import random
import threading
from typing import Callable, Dict, List, Optional

from ..models.catalog import Catalog
from ..utils.game_logger import game_logger
from ..utils.helpers import get_game_date_string, utc_today
from .analytics_service import AnalyticsSink, LoggingAnalyticsSink
from .catalog_service import CatalogService
from .game_engine import GameEngine
from .presentation import BoardView
from .scheduler import Scheduler, monotonic_ms
from .storage_service import SessionGateway


class GameService:
    """
    Owns the engine of the current day.

    This class handles:
    - Starting (or restoring) the day's session
    - Loading and retrying the groupings
    - Routing user actions to the engine under one lock
    - Draining due timer events
    - Fanning board updates and one-away notices out to listeners
    """

    def __init__(self,
                 catalog_service: CatalogService,
                 gateway: Optional[SessionGateway] = None,
                 shuffle_initial: bool = True,
                 clock: Callable[[], float] = monotonic_ms,
                 today: Callable[[], datetime.date] = utc_today,
                 rng: Optional[random.Random] = None,
                 analytics: Optional[Callable[[str], Optional[AnalyticsSink]]] = LoggingAnalyticsSink):
        self.catalog_service = catalog_service
        self.gateway = gateway
        self.shuffle_initial = shuffle_initial
        self.clock = clock
        self.today = today
        self.rng = rng or random.Random()
        self.analytics = analytics
        self.engine: Optional[GameEngine] = None
        self.game_date: Optional[datetime.date] = None
        self._lock = threading.RLock()
        self._board_listeners: List[Callable[[BoardView], None]] = []
        self._one_away_listeners: List[Callable[[str], None]] = []

    # Listeners

    def add_board_listener(self, callback: Callable[[BoardView], None]) -> None:
        with self._lock:
            self._board_listeners.append(callback)
            if self.engine is not None:
                self.engine.subscribe(callback)

    def add_one_away_listener(self, callback: Callable[[str], None]) -> None:
        with self._lock:
            self._one_away_listeners.append(callback)

    def _notify_one_away(self, date_key: str) -> None:
        for callback in list(self._one_away_listeners):
            callback(date_key)

    # Day handling

    def get_engine(self) -> GameEngine:
        """Engine of the current day, starting a new session on rollover."""
        with self._lock:
            today = self.today()
            if self.engine is None or self.game_date != today:
                self._start_day(today)
            return self.engine

    def _start_day(self, game_date: datetime.date) -> None:
        date_key = get_game_date_string(game_date)
        previous = self.engine.date_key if self.engine else None

        engine = GameEngine(
            date_key,
            gateway=self.gateway,
            scheduler=Scheduler(self.clock),
            rng=self.rng,
            one_away_fn=lambda: self._notify_one_away(date_key),
            analytics=self.analytics(date_key) if self.analytics else None,
            lock=self._lock
        )
        for callback in self._board_listeners:
            engine.subscribe(callback)

        self.engine = engine
        self.game_date = game_date
        game_logger.log_game_event(date_key, 'day_started', 'system', previous_date_key=previous)

        engine.start(self.shuffle_initial)
        self._load_catalog()

    def _load_catalog(self) -> Catalog:
        catalog = self.catalog_service.load(self.game_date)
        self.engine.set_catalog(catalog, self.shuffle_initial)
        return catalog

    def reload_catalog(self) -> Catalog:
        """Retries loading the groupings if they are not available yet."""
        with self._lock:
            engine = self.get_engine()
            if engine.catalog.is_loaded:
                return engine.catalog
            return self._load_catalog()

    # Actions

    def get_board(self) -> BoardView:
        with self._lock:
            return self.get_engine().view()

    def set_selected(self, word: str, selected: bool) -> Dict:
        with self._lock:
            engine = self.get_engine()
            changed = engine.set_selected(word, selected)
            engine.run_due()
            return {'changed': changed, 'board': engine.view()}

    def deselect_all(self) -> Dict:
        with self._lock:
            engine = self.get_engine()
            changed = engine.deselect_all()
            return {'changed': changed, 'board': engine.view()}

    def submit(self) -> Dict:
        with self._lock:
            engine = self.get_engine()
            before = len(engine.session.attempts)
            changed = engine.submit()
            attempt = engine.session.attempts[-1] if len(engine.session.attempts) > before else None
            engine.run_due()
            return {'changed': changed, 'attempt': attempt, 'board': engine.view()}

    def shuffle(self) -> Dict:
        with self._lock:
            engine = self.get_engine()
            changed = engine.shuffle()
            return {'changed': changed, 'board': engine.view()}

    def share_text(self) -> str:
        with self._lock:
            return self.get_engine().share_text()

    def run_due_events(self) -> int:
        """Applies due timer events; called periodically by the timer worker."""
        with self._lock:
            return self.get_engine().run_due()


# Global service instance
_game_service = None


def get_game_service() -> Optional[GameService]:
    """Get the global game service instance."""
    return _game_service


def initialize_game_service(catalog_service: CatalogService,
                            gateway: Optional[SessionGateway] = None,
                            **kwargs) -> GameService:
    """Initialize the global game service instance."""
    global _game_service
    _game_service = GameService(catalog_service, gateway, **kwargs)
    return _game_service
