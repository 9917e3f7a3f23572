"""Journal services: create, list/search, clear and export."""

from __future__ import annotations

import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError

from soul_log.core.errors import DependencyUnavailable, ValidationFailure
from soul_log.domains.journal.constants import CATEGORIES_BY_TYPE, ENTRY_TYPES, MAX_CONTENT_LENGTH
from soul_log.domains.journal.mappers import map_export_item
from soul_log.domains.journal.models import JournalEntry
from soul_log.extensions import db

logger = logging.getLogger(__name__)


def create_entry(user_id: str, *, entry_type: str, category: str, content: str) -> JournalEntry:
    _validate_type(entry_type)
    if category not in CATEGORIES_BY_TYPE[entry_type]:
        raise ValidationFailure(
            details=[{"loc": ["category"], "msg": f"invalid category for {entry_type} entries"}]
        )
    text = (content or "").strip()
    if not text:
        raise ValidationFailure(details=[{"loc": ["content"], "msg": "content must not be blank"}])
    if len(text) > MAX_CONTENT_LENGTH:
        raise ValidationFailure(details=[{"loc": ["content"], "msg": "content is too long"}])

    entry = JournalEntry(user_id=user_id, entry_type=entry_type, category=category, content=text)
    try:
        db.session.add(entry)
        db.session.commit()
    except SQLAlchemyError as exc:
        _fail("create entry", exc)
    return entry


def list_entries(
    user_id: str,
    *,
    entry_type: Optional[str] = None,
    search_text: Optional[str] = None,
) -> List[JournalEntry]:
    """Newest first. Search matches the derived title, the content or the type label."""
    query = JournalEntry.query.filter_by(user_id=user_id)
    if entry_type:
        _validate_type(entry_type)
        query = query.filter_by(entry_type=entry_type)
    try:
        entries = query.order_by(JournalEntry.created_at.desc(), JournalEntry.id.desc()).all()
    except SQLAlchemyError as exc:
        _fail("list entries", exc)
    if not search_text:
        return entries
    needle = search_text.lower()
    # Titles are derived, so the match runs in Python rather than SQL.
    return [
        entry
        for entry in entries
        if needle in entry.title.lower() or needle in entry.content.lower() or needle in entry.type_label.lower()
    ]


def clear_entries(user_id: str, *, entry_type: Optional[str] = None) -> int:
    query = JournalEntry.query.filter_by(user_id=user_id)
    if entry_type:
        _validate_type(entry_type)
        query = query.filter_by(entry_type=entry_type)
    try:
        deleted = query.delete(synchronize_session=False)
        db.session.commit()
    except SQLAlchemyError as exc:
        _fail("clear entries", exc)
    logger.info("Cleared %s journal entries for user %s", deleted, user_id)
    return int(deleted or 0)


def export_entries(user_id: str) -> List[dict]:
    return [map_export_item(entry) for entry in list_entries(user_id)]


def _validate_type(entry_type: str) -> None:
    if entry_type not in ENTRY_TYPES:
        raise ValidationFailure(details=[{"loc": ["type"], "msg": f"unknown entry type: {entry_type}"}])


def _fail(action: str, exc: SQLAlchemyError):
    db.session.rollback()
    logger.warning("Journal store failed to %s: %s", action, exc.__class__.__name__)
    raise DependencyUnavailable() from exc
