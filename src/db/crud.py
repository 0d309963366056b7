"""CRUD helpers for pending confirmations"""

from datetime import datetime
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from .models import PendingConfirmation


def insert_confirmation(
    db: Session,
    token: str,
    payload: str,
    created_at: datetime,
    expires_at: datetime,
) -> PendingConfirmation:
    row = PendingConfirmation(
        token=token,
        payload=payload,
        created_at=created_at,
        expires_at=expires_at,
    )
    db.add(row)
    db.flush()
    return row


def get_confirmation(db: Session, token: str) -> Optional[PendingConfirmation]:
    return db.execute(
        select(PendingConfirmation).where(PendingConfirmation.token == token)
    ).scalar_one_or_none()


def delete_confirmation(db: Session, token: str) -> int:
    """Delete by token, returns the number of rows removed (0 or 1)

    A row count of 1 is what makes a consume exclusive: two transactions
    racing on the same token cannot both delete it.
    """
    result = db.execute(
        delete(PendingConfirmation).where(PendingConfirmation.token == token)
    )
    return result.rowcount or 0


def delete_expired(db: Session, now: datetime) -> int:
    result = db.execute(
        delete(PendingConfirmation).where(PendingConfirmation.expires_at <= now)
    )
    return result.rowcount or 0
