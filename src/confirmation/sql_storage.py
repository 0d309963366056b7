"""Durable confirmation storage on SQLAlchemy"""

from typing import Callable, Optional, TypeVar
from datetime import datetime, timezone
import asyncio
import logging

from sqlalchemy import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from src.db import init_db, make_session_factory, session_scope
from src.db import crud

from .exceptions import ConfirmationStoreError
from .models import ConfirmationContext, utcnow
from .storage import Clock, ConfirmationStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _naive_utc(value: datetime) -> datetime:
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class SqlConfirmationStore(ConfirmationStore):
    """Store backed by a ``pending_confirmations`` table

    Blocking database calls run in a worker thread. Consumption is a single
    conditional DELETE, so only one transaction can win a given token.
    """

    def __init__(self, engine: Engine, clock: Clock = utcnow, create_tables: bool = True):
        self._engine = engine
        self._session_factory = make_session_factory(engine)
        self._clock = clock
        if create_tables:
            init_db(engine)

    async def _run(self, fn: Callable[[Session], T]) -> T:
        def work() -> T:
            with session_scope(self._session_factory) as db:
                return fn(db)

        try:
            return await asyncio.to_thread(work)
        except SQLAlchemyError as e:
            logger.error(f"Confirmation store failure: {e}", exc_info=True)
            raise ConfirmationStoreError(str(e)) from e

    async def put(self, context: ConfirmationContext) -> str:
        payload = context.model_dump_json(by_alias=True)

        def op(db: Session) -> str:
            crud.insert_confirmation(
                db,
                token=context.token,
                payload=payload,
                created_at=_naive_utc(context.created_at),
                expires_at=_naive_utc(context.expires_at),
            )
            return context.token

        return await self._run(op)

    async def get(self, token: str) -> Optional[ConfirmationContext]:
        def op(db: Session) -> Optional[str]:
            row = crud.get_confirmation(db, token)
            return row.payload if row else None

        payload = await self._run(op)
        if payload is None:
            return None

        context = ConfirmationContext.model_validate_json(payload)
        if context.is_expired(self._clock()):
            logger.info(f"Confirmation {token} has expired")
            await self.remove(token)
            return None
        return context

    async def remove(self, token: str) -> None:
        await self._run(lambda db: crud.delete_confirmation(db, token))

    async def consume(self, token: str) -> Optional[ConfirmationContext]:
        def op(db: Session) -> Optional[str]:
            row = crud.get_confirmation(db, token)
            if row is None:
                return None
            payload = row.payload
            if crud.delete_confirmation(db, token) != 1:
                return None
            return payload

        payload = await self._run(op)
        if payload is None:
            return None

        context = ConfirmationContext.model_validate_json(payload)
        if context.is_expired(self._clock()):
            return None
        return context

    async def cleanup_expired(self) -> int:
        now = _naive_utc(self._clock())
        count = await self._run(lambda db: crud.delete_expired(db, now))
        if count:
            logger.info(f"Removed {count} expired confirmations")
        return count
