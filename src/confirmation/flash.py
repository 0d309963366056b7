"""One-shot transport for confirmed form data

An entry is written once by the replay redirect and taken by the next
request only; reading removes it.
"""

from typing import Any, Dict, Optional, Tuple
from datetime import datetime, timedelta
import asyncio
import logging
import secrets

from .models import utcnow
from .storage import Clock

logger = logging.getLogger(__name__)


class FlashStore:
    """Short-TTL, read-once key/value store keyed by a random id"""

    def __init__(self, ttl_seconds: int = 60, clock: Clock = utcnow):
        self._entries: Dict[str, Tuple[datetime, Dict[str, Any]]] = {}
        self._lock = asyncio.Lock()
        self._ttl = timedelta(seconds=ttl_seconds)
        self._clock = clock

    async def put(self, data: Dict[str, Any]) -> str:
        flash_id = secrets.token_urlsafe(24)
        async with self._lock:
            self._purge(self._clock())
            self._entries[flash_id] = (self._clock() + self._ttl, data)
        return flash_id

    async def take(self, flash_id: str) -> Optional[Dict[str, Any]]:
        if not flash_id:
            return None

        async with self._lock:
            entry = self._entries.pop(flash_id, None)
        if entry is None:
            return None

        expires_at, data = entry
        if self._clock() >= expires_at:
            logger.info(f"Flash entry {flash_id} expired before it was read")
            return None
        return data

    def _purge(self, now: datetime) -> None:
        for key in [k for k, (exp, _) in self._entries.items() if now >= exp]:
            del self._entries[key]

    def __len__(self) -> int:
        return len(self._entries)
