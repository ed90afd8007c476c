"""
Data Models Package

Contains all data models and schemas used throughout the application.
"""

from .catalog import Catalog, CatalogStatus
from .game import (
    Attempt, Grouping, Position, Session, SessionFormatError,
    SubmittedBy, Tile, TileStatus
)

__all__ = [
    'Catalog', 'CatalogStatus', 'Attempt', 'Grouping', 'Position', 'Session',
    'SessionFormatError', 'SubmittedBy', 'Tile', 'TileStatus'
]
