"""User identity model."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy.orm import Mapped, mapped_column

from soul_log.extensions import db


def _new_user_id() -> str:
    return str(uuid.uuid4())


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)


class User(db.Model, TimestampMixin):
    __tablename__ = "users"
    __table_args__ = (
        db.UniqueConstraint("external_provider_id", name="uq_users_external_provider_id"),
    )

    id: Mapped[str] = mapped_column(db.String(36), primary_key=True, default=_new_user_id)
    external_provider_id: Mapped[str] = mapped_column(db.String(255), nullable=False)
    email: Mapped[str | None] = mapped_column(db.String(320))
    name: Mapped[str | None] = mapped_column(db.String(255))
    avatar_url: Mapped[str | None] = mapped_column(db.Text)
