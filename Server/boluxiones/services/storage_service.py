"""
Session Storage Service

The save slot of the daily session. Stores are dumb key-value byte stores;
SessionGateway turns them into "load today's session / save / clear" and
never lets a storage failure reach the game engine.
"""

import datetime
from typing import Dict, Optional

from pymongo.mongo_client import MongoClient
from pymongo.server_api import ServerApi

from ..config.game_settings import STORAGE_KEY
from ..models.game import Session, SessionFormatError
from ..utils.game_logger import game_logger


class SessionStore:
    """Interface of a key-value byte store."""

    def get(self, key: str) -> Optional[bytes]:
        raise NotImplementedError

    def set(self, key: str, value: bytes) -> None:
        raise NotImplementedError

    def delete(self, key: str) -> None:
        raise NotImplementedError


class MemorySessionStore(SessionStore):
    """Process-local store, used in development and tests."""

    def __init__(self):
        self._data: Dict[str, bytes] = {}

    def get(self, key: str) -> Optional[bytes]:
        return self._data.get(key)

    def set(self, key: str, value: bytes) -> None:
        self._data[key] = bytes(value)

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class MongoSessionStore(SessionStore):
    """
    MongoDB-backed store: one document per key, the blob kept as binary.
    """

    def __init__(self, mongo_uri: Optional[str] = None, db_name: str = 'boluxiones',
                 collection=None):
        """
        Args:
            mongo_uri: MongoDB connection string
            db_name: Database holding the saved sessions
            collection: Ready collection object (skips connecting)
        """
        if collection is None:
            self.client = MongoClient(mongo_uri, server_api=ServerApi('1'))
            collection = self.client[db_name].saved_sessions
        self.collection = collection

    def get(self, key: str) -> Optional[bytes]:
        doc = self.collection.find_one({'_id': key})
        if not doc:
            return None
        return bytes(doc['value'])

    def set(self, key: str, value: bytes) -> None:
        self.collection.replace_one(
            {'_id': key},
            {'_id': key, 'value': value, 'updated_at': datetime.datetime.now(datetime.timezone.utc)},
            upsert=True
        )

    def delete(self, key: str) -> None:
        self.collection.delete_one({'_id': key})


class SessionGateway:
    """Loads, saves and clears the single saved session."""

    def __init__(self, store: SessionStore, key: str = STORAGE_KEY):
        self.store = store
        self.key = key

    def load(self, date_key: str) -> Optional[Session]:
        """
        Returns the saved session for date_key, or None.

        Read failures, malformed records and sessions of another day all count
        as "no saved session"; the latter two are deleted.
        """
        try:
            blob = self.store.get(self.key)
        except Exception as e:
            game_logger.logger.warning(f"Failed to load saved session: {e}")
            return None

        if not blob:
            return None

        try:
            session = Session.from_bytes(blob)
        except SessionFormatError as e:
            game_logger.logger.warning(f"Discarding malformed saved session: {e}")
            self.clear()
            return None

        if session.date_key != date_key:
            game_logger.log_game_event(date_key, 'stale_session_discarded', 'system',
                                       saved_date_key=session.date_key)
            self.clear()
            return None

        return session

    def save(self, session: Session) -> bool:
        try:
            self.store.set(self.key, session.to_bytes())
            return True
        except Exception as e:
            game_logger.logger.warning(f"Failed to save session {session.date_key}: {e}")
            return False

    def clear(self) -> bool:
        try:
            self.store.delete(self.key)
            return True
        except Exception as e:
            game_logger.logger.warning(f"Failed to clear saved session: {e}")
            return False


def create_session_store(mongo_uri: Optional[str], db_name: str = 'boluxiones') -> SessionStore:
    """Mongo store when a URI is configured, otherwise in-memory."""
    if mongo_uri:
        return MongoSessionStore(mongo_uri, db_name)
    return MemorySessionStore()
