"""Confirmation storage"""

from abc import ABC, abstractmethod
from typing import Callable, Dict, Optional
from datetime import datetime
import asyncio
import logging

from .models import ConfirmationContext, utcnow

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


class ConfirmationStore(ABC):
    """Short-lived token -> ConfirmationContext storage

    ``get`` never consumes; consumption is ``remove`` (idempotent) or the
    atomic ``consume``. Expired contexts are never returned.
    """

    @abstractmethod
    async def put(self, context: ConfirmationContext) -> str:
        """Store a context, returns its token"""
        pass

    @abstractmethod
    async def get(self, token: str) -> Optional[ConfirmationContext]:
        """Look up a live context without consuming it"""
        pass

    @abstractmethod
    async def remove(self, token: str) -> None:
        """Remove a context; unknown tokens are a no-op"""
        pass

    @abstractmethod
    async def consume(self, token: str) -> Optional[ConfirmationContext]:
        """Atomically check and remove; only one caller gets the context"""
        pass

    @abstractmethod
    async def cleanup_expired(self) -> int:
        """Drop expired contexts, returns how many were dropped"""
        pass


class InMemoryConfirmationStore(ConfirmationStore):
    """In-process store

    Suitable for a single instance; contents are lost on restart.
    """

    def __init__(self, clock: Clock = utcnow):
        self._store: Dict[str, ConfirmationContext] = {}
        self._lock = asyncio.Lock()
        self._clock = clock

    async def put(self, context: ConfirmationContext) -> str:
        async with self._lock:
            if context.token in self._store:
                raise ValueError(f"Duplicate confirmation token {context.token}")
            self._store[context.token] = context
        logger.debug(f"Stored confirmation {context.token}")
        return context.token

    async def get(self, token: str) -> Optional[ConfirmationContext]:
        async with self._lock:
            context = self._store.get(token)
            if context is None:
                return None

            if context.is_expired(self._clock()):
                del self._store[token]
                logger.info(f"Confirmation {token} has expired")
                return None

            return context.model_copy(deep=True)

    async def remove(self, token: str) -> None:
        async with self._lock:
            self._store.pop(token, None)

    async def consume(self, token: str) -> Optional[ConfirmationContext]:
        async with self._lock:
            context = self._store.pop(token, None)
        if context is None or context.is_expired(self._clock()):
            return None
        return context

    async def cleanup_expired(self) -> int:
        async with self._lock:
            now = self._clock()
            expired = [t for t, c in self._store.items() if c.is_expired(now)]
            for token in expired:
                del self._store[token]

        if expired:
            logger.info(f"Removed {len(expired)} expired confirmations")
        return len(expired)

    def get_stats(self) -> Dict:
        """Store statistics (debugging)"""
        now = self._clock()
        return {
            "total_confirmations": len(self._store),
            "expired_count": sum(1 for c in self._store.values() if c.is_expired(now)),
        }
