"""Server-side session persistence model."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import Mapped, mapped_column

from soul_log.extensions import db


class SessionRecord(db.Model):
    """One row per cookie-carried session; ``token`` is the digest of the raw token."""

    __tablename__ = "sessions"
    __table_args__ = (db.Index("ix_sessions_expiry", "expiry"),)

    token: Mapped[str] = mapped_column(db.String(128), primary_key=True)
    data: Mapped[dict] = mapped_column(db.JSON, nullable=False, default=dict)
    expiry: Mapped[datetime] = mapped_column(nullable=False)
