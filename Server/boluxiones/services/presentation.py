"""
Presentation Adapter

Read-only projection of a session for the rendering layer. Rebuilt from
the current state on every change, never stored.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence

from ..config.game_settings import GROUP_SIZE
from ..models.catalog import Catalog
from ..models.game import Grouping, Position, Session, TileStatus
from . import rules


@dataclass
class TileView:
    """What the renderer needs to draw one tile."""
    word: str
    status: TileStatus
    selected: bool
    in_play: bool
    dx: int
    dy: int
    set_selected: Optional[Callable[[bool], None]] = field(default=None, repr=False, compare=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'word': self.word,
            'status': None if self.status is TileStatus.NONE else self.status.value,
            'selected': self.selected,
            'in_play': self.in_play,
            'dx': self.dx,
            'dy': self.dy
        }


@dataclass
class BoardView:
    date_key: str
    catalog_status: str
    tiles: List[TileView]
    selected_words: List[str]
    solutions: List[Grouping]
    emoji_representation: List[List[str]]
    attempts_remaining: int
    can_submit: bool
    can_deselect_all: bool
    ended: bool
    won: bool
    auto_solve_finished: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            'date_key': self.date_key,
            'catalog_status': self.catalog_status,
            'tiles': [tile.to_dict() for tile in self.tiles],
            'selected_words': list(self.selected_words),
            'solutions': [
                {'group': g.group, 'difficulty': g.difficulty, 'words': list(g.words)}
                for g in self.solutions
            ],
            'emoji_representation': self.emoji_representation,
            'attempts_remaining': self.attempts_remaining,
            'can_submit': self.can_submit,
            'can_deselect_all': self.can_deselect_all,
            'ended': self.ended,
            'won': self.won,
            'auto_solve_finished': self.auto_solve_finished
        }


def _toggle_handler(word: str, in_play: bool, ended: bool,
                    select: Callable[[str], Any],
                    deselect: Callable[[str], Any]) -> Callable[[bool], None]:
    def set_selected(selected: bool) -> None:
        if ended:
            return
        if selected and in_play:
            select(word)
        else:
            deselect(word)
    return set_selected


def build_board_view(session: Session,
                     catalog: Catalog,
                     ordered_positions: Sequence[Position],
                     select: Optional[Callable[[str], Any]] = None,
                     deselect: Optional[Callable[[str], Any]] = None) -> BoardView:
    """
    Projects a session onto the board view.

    Each tile's offset is its current grid cell minus the default cell of its
    index in ordered_positions. When select/deselect callbacks are given, each
    tile carries a set_selected handler routed through them.
    """
    in_play = set(rules.words_in_play(session))
    selected = set(session.selected_words)

    tiles = []
    for index, tile in enumerate(session.tiles):
        current = session.positions[index]
        default = ordered_positions[index]
        handler = None
        if select is not None and deselect is not None:
            handler = _toggle_handler(tile.word, tile.word in in_play, session.ended, select, deselect)
        tiles.append(TileView(
            word=tile.word,
            status=tile.status,
            selected=tile.word in selected,
            in_play=tile.word in in_play,
            dx=current.col - default.col,
            dy=current.row - default.row,
            set_selected=handler
        ))

    return BoardView(
        date_key=session.date_key,
        catalog_status=catalog.status.value,
        tiles=tiles,
        selected_words=list(session.selected_words),
        solutions=rules.solved_groupings(session, catalog),
        emoji_representation=rules.emoji_representation(session, catalog),
        attempts_remaining=rules.attempts_remaining(session),
        can_submit=(not session.ended
                    and len(session.selected_words) == GROUP_SIZE
                    and selected <= in_play),
        can_deselect_all=not session.ended and len(session.selected_words) > 0,
        ended=session.ended,
        won=session.won,
        auto_solve_finished=session.auto_solve_finished
    )
