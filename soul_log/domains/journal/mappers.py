"""Journal mappers for DTO responses."""

from __future__ import annotations

from soul_log.domains.journal.models import JournalEntry
from soul_log.domains.journal.schemas.journal_schemas import JournalEntryResponse, JournalExportItem


def map_entry(entry: JournalEntry) -> dict:
    return JournalEntryResponse(
        id=entry.id,
        type=entry.entry_type,
        category=entry.category,
        title=entry.title,
        content=entry.content,
        created_at=entry.created_at.isoformat() if entry.created_at else "",
    ).model_dump()


def map_export_item(entry: JournalEntry) -> dict:
    return JournalExportItem(
        id=entry.id,
        type=entry.entry_type,
        title=entry.title,
        content=entry.content,
        date=entry.created_at.isoformat() if entry.created_at else "",
    ).model_dump()
