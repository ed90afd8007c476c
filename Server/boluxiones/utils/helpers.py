"""
Helper Functions

Contains utility functions used throughout the application.
"""

import datetime
from typing import Dict, Optional


def get_user_identity(request_obj) -> Dict[str, str]:
    """Extract user identity information from request."""
    return {
        'user_ip': getattr(request_obj, 'remote_addr', None) or 'unknown',
        'session_id': getattr(request_obj, 'sid', None)
    }


def utc_today(now: Optional[datetime.datetime] = None) -> datetime.date:
    """Current calendar day in UTC, the day convention of puzzle dates."""
    now = now or datetime.datetime.now(datetime.timezone.utc)
    return now.astimezone(datetime.timezone.utc).date()


def get_game_date_string(date: datetime.date) -> str:
    """Date key of a puzzle day (YYYY-MM-DD)."""
    return date.isoformat()
