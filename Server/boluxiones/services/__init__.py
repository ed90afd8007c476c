"""
Services Package

Contains all business logic and service classes.
"""

from .catalog_service import CatalogService
from .game_engine import GameEngine, apply_event
from .game_service import GameService, get_game_service
from .storage_service import MemorySessionStore, MongoSessionStore, SessionGateway

__all__ = [
    'CatalogService',
    'GameEngine', 'apply_event',
    'GameService', 'get_game_service',
    'MemorySessionStore', 'MongoSessionStore', 'SessionGateway'
]
