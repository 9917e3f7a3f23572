"""Mind/body/soul journal entry."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import Mapped, mapped_column

from soul_log.domains.journal.constants import (
    ENTRY_TYPE_BODY,
    ENTRY_TYPE_MIND,
    TYPE_LABELS,
)
from soul_log.extensions import db


class JournalEntry(db.Model):
    __tablename__ = "journal_entries"
    __table_args__ = (
        db.Index("ix_journal_entries_user_created_at", "user_id", "created_at"),
        db.Index("ix_journal_entries_user_type", "user_id", "type"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[str] = mapped_column(db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    entry_type: Mapped[str] = mapped_column("type", db.String(16), nullable=False)
    category: Mapped[str] = mapped_column(db.String(32), nullable=False)
    content: Mapped[str] = mapped_column(db.Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, nullable=False)

    @property
    def type_label(self) -> str:
        return TYPE_LABELS.get(self.entry_type, self.entry_type.title())

    @property
    def title(self) -> str:
        if self.entry_type == ENTRY_TYPE_MIND:
            return f"Mind check-in ({self.category})"
        if self.entry_type == ENTRY_TYPE_BODY:
            return f"Body {self.category} update"
        return f"Soul {self.category} reflection"
