"""SQLAlchemy ORM models

- pending_confirmations: confirmations waiting for a user decision
"""

from datetime import datetime

from sqlalchemy import String, Text, DateTime
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all models"""
    pass


class PendingConfirmation(Base):
    """Pending confirmation table"""
    __tablename__ = "pending_confirmations"

    token: Mapped[str] = mapped_column(String(64), primary_key=True)
    # ConfirmationContext serialised as JSON
    payload: Mapped[str] = mapped_column(Text, nullable=False)
    # naive UTC, used for the expiry sweep
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)
