"""
Game Engine

Contains the session state machine of the daily puzzle.

apply_event() is the single transition function: it takes the current
session and one event and returns the next session together with the timer
events to post and the side effects to run. GameEngine is the runtime around
it: it owns the scheduler, persistence, notifier, analytics and subscribers.
"""

import random
import threading
from dataclasses import dataclass, replace
from typing import Callable, ContextManager, List, Optional, Sequence, Tuple

from ..config.game_settings import (
    ATTEMPT_STAGGER_MS, AUTO_SOLVE_STEP_MS, AUTO_SOLVE_TRAILING_MS,
    CLEAR_SELECTION_DELAY_MS, GRID_SIZE, GROUP_SIZE, REVEAL_DELAY_MS
)
from ..models.catalog import Catalog
from ..models.events import (
    AutoSolveFinished, AutoSolveStep, ClearSelection, DeselectAll, DeselectWord,
    Event, Initialize, Restore, ScheduledEvent, SelectWord, SetTileStatus,
    Shuffle, Submit, TIMER_EVENTS
)
from ..models.game import Attempt, Position, Session, SubmittedBy, Tile, TileStatus
from ..utils.game_logger import game_logger
from . import rules
from .analytics_service import AnalyticsSink
from .positions import ORDERED_POSITIONS, relocate_words_to_row, restricted_shuffle
from .presentation import BoardView, build_board_view
from .scheduler import Scheduler
from .storage_service import SessionGateway


@dataclass(frozen=True)
class Transition:
    """Result of applying one event."""
    session: Session
    scheduled: Tuple[ScheduledEvent, ...] = ()
    attempt: Optional[Attempt] = None  # attempt appended by this event
    one_away: bool = False
    ended_now: bool = False


def _reveal_schedule(words: Sequence[str], final_status: TileStatus) -> List[ScheduledEvent]:
    """Staggered 'attempt' statuses, then the final status for all four at once."""
    schedule = [
        ScheduledEvent(ATTEMPT_STAGGER_MS * index, SetTileStatus(word, TileStatus.ATTEMPT))
        for index, word in enumerate(words)
    ]
    schedule.extend(ScheduledEvent(REVEAL_DELAY_MS, SetTileStatus(word, final_status)) for word in words)
    return schedule


def _next_auto_solve(remaining: Sequence[Tuple[str, ...]]) -> ScheduledEvent:
    if remaining:
        return ScheduledEvent(AUTO_SOLVE_STEP_MS, AutoSolveStep(tuple(remaining)))
    return ScheduledEvent(AUTO_SOLVE_TRAILING_MS, AutoSolveFinished())


def _start_auto_solve(session: Session, catalog: Catalog) -> ScheduledEvent:
    """First auto-solve event, over the groupings unsolved right now."""
    return _next_auto_solve([grouping.words for grouping in rules.unsolved_groupings(session, catalog)])


def _settle_reveal(session: Session) -> Session:
    """
    Applies what the reveal timers of a saved session would have applied.

    Tiles of the last attempt, and any tile left mid-reveal, get the final
    status of the latest attempt containing them; a selection holding solved
    words is cleared as the pending ClearSelection would have done.
    """
    if not session.attempts:
        return session

    final_status = {}
    for attempt in session.attempts:
        for word in attempt.words:
            final_status[word] = TileStatus.SOLVED if attempt.correct else TileStatus.WRONG

    pending = set(session.attempts[-1].words)
    pending.update(tile.word for tile in session.tiles if tile.status is TileStatus.ATTEMPT)
    tiles = tuple(
        replace(tile, status=final_status.get(tile.word, TileStatus.NONE))
        if tile.word in pending else tile
        for tile in session.tiles
    )

    selected = session.selected_words
    out_of_play = set(rules.words_out_of_play(session))
    if any(word in out_of_play for word in selected):
        selected = ()
    return replace(session, tiles=tiles, selected_words=selected)


def _initialize(session, event, catalog, rng, ordered_positions):
    if not catalog.is_loaded or session.tiles:
        return Transition(session)

    words = [word for grouping in catalog.groupings for word in grouping.words]
    if event.shuffle:
        words = restricted_shuffle(words, range(len(words)), rng)

    return Transition(Session(
        date_key=session.date_key,
        tiles=tuple(Tile(word) for word in words),
        positions=tuple(ordered_positions)
    ))


def _restore(session, event, catalog, rng, ordered_positions):
    saved = event.session
    if saved.date_key != session.date_key:
        return Transition(session)

    restored = _settle_reveal(saved)
    scheduled = ()
    if restored.ended and not restored.auto_solve_finished and catalog.is_loaded:
        scheduled = (_start_auto_solve(restored, catalog),)
    return Transition(restored, scheduled)


def _select_word(session, event, catalog, rng, ordered_positions):
    word = event.word
    if (session.ended
            or len(session.selected_words) >= GROUP_SIZE
            or word in session.selected_words
            or word not in rules.words_in_play(session)):
        return Transition(session)
    return Transition(replace(session, selected_words=session.selected_words + (word,)))


def _deselect_word(session, event, catalog, rng, ordered_positions):
    if session.ended or event.word not in session.selected_words:
        return Transition(session)
    remaining = tuple(word for word in session.selected_words if word != event.word)
    return Transition(replace(session, selected_words=remaining))


def _deselect_all(session, event, catalog, rng, ordered_positions):
    if session.ended:
        return Transition(session)
    return Transition(replace(session, selected_words=()))


def _submit(session, event, catalog, rng, ordered_positions):
    auto = event.submitted_by is SubmittedBy.AUTO
    words = session.selected_words
    if len(words) != GROUP_SIZE or (session.ended and not auto):
        return Transition(session)
    # a solved group stays selected until ClearSelection
    in_play = set(rules.words_in_play(session))
    if any(word not in in_play for word in words):
        return Transition(session)

    correct = rules.are_same_group(words, catalog) is not None
    attempt = Attempt(words, correct, event.submitted_by)
    updated = replace(session, attempts=session.attempts + (attempt,))

    one_away = False
    if correct:
        row = min(max(len(rules.solved_groupings(updated, catalog)) - 1, 0), GRID_SIZE - 1)
        positions = relocate_words_to_row(updated.positions, updated.words, words, row)
        updated = replace(updated, positions=tuple(positions))
        scheduled = _reveal_schedule(words, TileStatus.SOLVED)
        scheduled.append(ScheduledEvent(CLEAR_SELECTION_DELAY_MS, ClearSelection()))
    else:
        one_away = rules.is_one_away(words, catalog)
        scheduled = _reveal_schedule(words, TileStatus.WRONG)

    ended_now = False
    if not updated.ended and rules.is_game_over(updated, catalog):
        ended_now = True
        won = len(rules.solved_groupings(updated, catalog)) == GRID_SIZE
        updated = replace(updated, ended=True, won=won)
        scheduled.append(_start_auto_solve(updated, catalog))

    return Transition(updated, tuple(scheduled), attempt, one_away, ended_now)


def _shuffle(session, event, catalog, rng, ordered_positions):
    if session.ended or not session.tiles:
        return Transition(session)

    in_play = set(rules.words_in_play(session))
    indices = [index for index, tile in enumerate(session.tiles) if tile.word in in_play]
    tiles = restricted_shuffle(session.tiles, indices, rng)
    return Transition(replace(session, tiles=tuple(tiles)))


def _set_tile_status(session, event, catalog, rng, ordered_positions):
    tiles = tuple(
        replace(tile, status=event.status) if tile.word == event.word else tile
        for tile in session.tiles
    )
    return Transition(replace(session, tiles=tiles))


def _clear_selection(session, event, catalog, rng, ordered_positions):
    return Transition(replace(session, selected_words=()))


def _auto_solve_step(session, event, catalog, rng, ordered_positions):
    if not session.ended or session.auto_solve_finished:
        return Transition(session)

    if not event.remaining:
        return Transition(session, (_next_auto_solve(()),))

    selected = replace(session, selected_words=tuple(event.remaining[0]))
    submitted = _submit(selected, Submit(SubmittedBy.AUTO), catalog, rng, ordered_positions)
    if submitted.attempt is None:
        submitted = Transition(session)
    scheduled = submitted.scheduled + (_next_auto_solve(event.remaining[1:]),)
    return replace(submitted, scheduled=scheduled)


def _auto_solve_finished(session, event, catalog, rng, ordered_positions):
    if not session.ended:
        return Transition(session)
    return Transition(replace(session, auto_solve_finished=True))


_HANDLERS = {
    Initialize: _initialize,
    Restore: _restore,
    SelectWord: _select_word,
    DeselectWord: _deselect_word,
    DeselectAll: _deselect_all,
    Submit: _submit,
    Shuffle: _shuffle,
    SetTileStatus: _set_tile_status,
    ClearSelection: _clear_selection,
    AutoSolveStep: _auto_solve_step,
    AutoSolveFinished: _auto_solve_finished,
}


def apply_event(session: Session,
                event: Event,
                catalog: Catalog,
                rng: Optional[random.Random] = None,
                ordered_positions: Sequence[Position] = ORDERED_POSITIONS) -> Transition:
    """
    Applies one event to a session.

    Pure apart from drawing from rng: the input session is never modified.

    Raises:
        TypeError: If the event type is unknown
    """
    handler = _HANDLERS.get(type(event))
    if handler is None:
        raise TypeError(f"Unknown event: {event!r}")
    return handler(session, event, catalog, rng, ordered_positions)


class GameEngine:
    """
    Runtime of one day's session.

    All changes go through dispatch(); timer events wait in the scheduler
    until run_due() applies them against the latest session.
    """

    def __init__(self,
                 date_key: str,
                 catalog: Optional[Catalog] = None,
                 gateway: Optional[SessionGateway] = None,
                 scheduler: Optional[Scheduler] = None,
                 rng: Optional[random.Random] = None,
                 one_away_fn: Optional[Callable[[], None]] = None,
                 analytics: Optional[AnalyticsSink] = None,
                 ordered_positions: Sequence[Position] = ORDERED_POSITIONS,
                 lock: Optional[ContextManager] = None):
        self.session = Session(date_key=date_key)
        self.catalog = catalog or Catalog.loading()
        self.gateway = gateway
        self.scheduler = scheduler or Scheduler()
        self.rng = rng or random.Random()
        self.one_away_fn = one_away_fn
        self.analytics = analytics
        self.ordered_positions = tuple(ordered_positions)
        self._subscribers: List[Callable[[BoardView], None]] = []
        self._auto_solve_posted = False
        # shared with the owner so that tile handlers serialize with it
        self._lock = lock or threading.RLock()

    @property
    def date_key(self) -> str:
        return self.session.date_key

    def start(self, shuffle: bool = True) -> None:
        """Restores today's saved session, or initializes a new one."""
        saved = self.gateway.load(self.date_key) if self.gateway else None
        if saved is not None:
            self.dispatch(Restore(saved))
            game_logger.log_game_event(self.date_key, 'session_restored',
                                       attempts=len(saved.attempts), ended=saved.ended)
        else:
            self.initialize(shuffle)

    def initialize(self, shuffle: bool = True) -> bool:
        changed = self.dispatch(Initialize(shuffle))
        if changed:
            game_logger.log_game_event(self.date_key, 'session_initialized', shuffled=shuffle)
        return changed

    def set_catalog(self, catalog: Catalog, shuffle: bool = True) -> None:
        """Installs the day's groupings; initializes if nothing was restored."""
        self.catalog = catalog
        if not self.session.tiles:
            self.initialize(shuffle)
        elif self.session.ended and not self._auto_solve_posted:
            # restored before the groupings arrived; resume auto-solve now
            self.dispatch(Restore(self.session))
        self._notify()

    # User actions

    def select_word(self, word: str) -> bool:
        return self.dispatch(SelectWord(word))

    def deselect_word(self, word: str) -> bool:
        return self.dispatch(DeselectWord(word))

    def set_selected(self, word: str, selected: bool) -> bool:
        if selected:
            return self.select_word(word)
        return self.deselect_word(word)

    def deselect_all(self) -> bool:
        return self.dispatch(DeselectAll())

    def submit(self) -> bool:
        return self.dispatch(Submit(SubmittedBy.USER))

    def shuffle(self) -> bool:
        return self.dispatch(Shuffle())

    # Event loop

    def dispatch(self, event: Event) -> bool:
        """
        Applies one event and runs its side effects.

        A failure while applying a timer event is logged and leaves the
        session as it was. Returns True if the session changed.
        """
        with self._lock:
            return self._dispatch(event)

    def _dispatch(self, event: Event) -> bool:
        previous = self.session
        try:
            transition = apply_event(previous, event, self.catalog, self.rng, self.ordered_positions)
        except Exception as e:
            if isinstance(event, TIMER_EVENTS):
                game_logger.log_error(None, e, type(event).__name__, self.date_key)
                return False
            raise

        self.session = transition.session
        for scheduled in transition.scheduled:
            self.scheduler.post(scheduled.event, scheduled.delay_ms)
            if isinstance(scheduled.event, (AutoSolveStep, AutoSolveFinished)):
                self._auto_solve_posted = True

        if transition.attempt is not None:
            self._on_attempt(transition)
        if transition.ended_now:
            self._on_game_ended()
        if isinstance(event, AutoSolveFinished) and self.session.auto_solve_finished:
            game_logger.log_game_event(self.date_key, 'auto_solve_finished', 'timer')

        changed = self.session != previous
        if changed:
            self._persist()
            self._notify()
        return changed

    def run_due(self) -> int:
        """Applies every timer event that has fallen due. Returns how many ran."""
        count = 0
        with self._lock:
            try:
                while True:
                    event = self.scheduler.pop_due()
                    if event is None:
                        break
                    self._dispatch(event)
                    count += 1
            finally:
                self.scheduler.settle()
        return count

    # Observers

    def subscribe(self, callback: Callable[[BoardView], None]) -> Callable[[], None]:
        """Registers a view callback; returns a function that unregisters it."""
        self._subscribers.append(callback)

        def unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)
        return unsubscribe

    def view(self) -> BoardView:
        return build_board_view(self.session, self.catalog, self.ordered_positions,
                                select=self.select_word, deselect=self.deselect_word)

    def share_text(self) -> str:
        return rules.share_text(self.session, self.catalog)

    def _notify(self) -> None:
        if not self._subscribers:
            return
        board = self.view()
        for callback in list(self._subscribers):
            try:
                callback(board)
            except Exception as e:
                game_logger.logger.error(f"Error notifying board subscriber: {e}")

    def _persist(self) -> None:
        # An uninitialized board must not overwrite a valid save
        if self.gateway is not None and self.session.tiles:
            self.gateway.save(self.session)

    def _on_attempt(self, transition: Transition) -> None:
        attempt = transition.attempt
        game_logger.log_game_event(
            self.date_key, 'attempt_submitted',
            'timer' if attempt.submitted_by is SubmittedBy.AUTO else 'engine',
            words=list(attempt.words), correct=attempt.correct,
            submitted_by=attempt.submitted_by.value,
            attempts_remaining=rules.attempts_remaining(self.session)
        )
        if transition.one_away:
            game_logger.log_game_event(self.date_key, 'one_away', words=list(attempt.words))
            if self.one_away_fn is not None:
                try:
                    self.one_away_fn()
                except Exception as e:
                    game_logger.logger.error(f"One-away notifier failed: {e}")

    def _on_game_ended(self) -> None:
        num_solutions = len(rules.solved_groupings(self.session, self.catalog))
        game_logger.log_game_event(self.date_key, 'game_ended',
                                   won=self.session.won, num_solutions=num_solutions)
        if self.analytics is None:
            return
        try:
            self.analytics.track('game_result', {
                'won': num_solutions == GRID_SIZE,
                'num_solutions': num_solutions
            })
        except Exception as e:
            game_logger.logger.warning(f"Analytics event failed: {e}")
