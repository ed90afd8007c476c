"""
Catalog Service

Fetches the published puzzle sheet and picks the groupings of a day.
"""

import datetime
from collections import OrderedDict
from typing import Dict, List, Optional

import requests

from ..config.game_settings import FALLBACK_EPOCH, GRID_SIZE, GROUP_SIZE
from ..models.catalog import Catalog
from ..models.game import Grouping
from ..utils.game_logger import game_logger
from ..utils.helpers import get_game_date_string

WORD_COLUMNS = tuple(f"word{index}" for index in range(1, GROUP_SIZE + 1))


def rows_to_groupings(rows: List[Dict]) -> List[Grouping]:
    """
    Converts sheet rows into groupings sorted by difficulty.

    Raises:
        ValueError: If a row is missing a column, has a blank group or word,
            or the rows do not form four distinct groups of distinct words
    """
    groupings = []
    for row in rows:
        try:
            words = tuple(str(row[column]).strip() for column in WORD_COLUMNS)
            difficulty = int(str(row["difficulty"]).strip())
            group = str(row["group"]).strip()
        except (KeyError, TypeError, ValueError) as e:
            raise ValueError(f"Malformed puzzle row {row!r}: {e}")
        if not group or not all(words):
            raise ValueError(f"Puzzle row has a blank group or word: {row!r}")
        groupings.append(Grouping(group=group, difficulty=difficulty, words=words))

    difficulties = sorted(g.difficulty for g in groupings)
    if difficulties != list(range(1, GRID_SIZE + 1)):
        raise ValueError(f"Difficulties must be 1-{GRID_SIZE} exactly once, got {difficulties}")

    labels = [g.group for g in groupings]
    if len(set(labels)) != len(labels):
        raise ValueError("Group labels must be distinct")

    words = [word for g in groupings for word in g.words]
    if len(set(words)) != len(words):
        raise ValueError("A word appears in more than one grouping")

    return sorted(groupings, key=lambda g: g.difficulty)


def fallback_index(game_date: datetime.date, valid_count: int,
                   epoch: datetime.date = FALLBACK_EPOCH) -> int:
    """Deterministic index of the replacement puzzle for a day with no puzzle."""
    return (game_date - epoch).days % valid_count


def select_rows_for_date(rows: List[Dict], game_date: datetime.date) -> Optional[List[Dict]]:
    """
    Returns the four rows of the puzzle to play on game_date.

    The exact date is used when it has four rows. Otherwise the dates that
    have exactly four rows are taken in order of first appearance and one is
    chosen from the day offset, so a given day always gets the same puzzle.
    """
    date_key = get_game_date_string(game_date)
    rows_for_date = [row for row in rows if str(row.get("date", "")).strip() == date_key]
    if len(rows_for_date) == GRID_SIZE:
        return rows_for_date

    grouped_by_date: "OrderedDict[str, List[Dict]]" = OrderedDict()
    for row in rows:
        grouped_by_date.setdefault(str(row.get("date", "")).strip(), []).append(row)

    valid_dates = [d for d, date_rows in grouped_by_date.items() if len(date_rows) == GRID_SIZE]
    if not valid_dates:
        return None

    chosen = valid_dates[fallback_index(game_date, len(valid_dates))]
    return grouped_by_date[chosen]


class CatalogService:
    """Loads the day's groupings from the puzzle sheet."""

    def __init__(self, url: str, timeout: int = 10, session: Optional[requests.Session] = None):
        self.url = url
        self.timeout = timeout
        self.http = session or requests.Session()

    def fetch_rows(self) -> List[Dict]:
        response = self.http.get(self.url, timeout=self.timeout)
        response.raise_for_status()
        rows = response.json()
        if not isinstance(rows, list):
            raise ValueError("Puzzle sheet must be a JSON array")
        return [row for row in rows if isinstance(row, dict)]

    def load(self, game_date: datetime.date) -> Catalog:
        """
        Returns a loaded catalog, or a failed one on any network or data error.
        """
        date_key = get_game_date_string(game_date)
        try:
            rows = self.fetch_rows()
            selected = select_rows_for_date(rows, game_date)
            if selected is None:
                raise ValueError("Puzzle sheet has no complete puzzle")
            groupings = rows_to_groupings(selected)
        except (requests.RequestException, ValueError) as e:
            game_logger.logger.warning(f"Failed to load groupings for {date_key}: {e}")
            return Catalog.failed(str(e))

        source_date = str(selected[0].get("date", "")).strip()
        game_logger.log_game_event(date_key, 'groupings_loaded', 'system',
                                   source_date=source_date, fallback=source_date != date_key)
        return Catalog.loaded(groupings, source_date)
