"""Journal JSON API."""

from __future__ import annotations

from datetime import datetime

from flask import Blueprint, jsonify, request

from soul_log.core.utils.decorators import current_user_id, login_required
from soul_log.core.utils.validation import parse_model
from soul_log.domains.journal.mappers import map_entry
from soul_log.domains.journal.schemas.journal_schemas import (
    JournalClearParams,
    JournalEntryCreate,
    JournalEntryListFilter,
    JournalStatsParams,
)
from soul_log.domains.journal.services import aggregator, journal_service
from soul_log.domains.journal.services.feedback_service import daily_affirmation, generate_feedback

journal_api_bp = Blueprint("journal_api", __name__)


@journal_api_bp.get("")
@login_required
def list_journal():
    filters = parse_model(JournalEntryListFilter, request.args)
    entries = journal_service.list_entries(
        current_user_id(),
        entry_type=filters.entry_type,
        search_text=filters.search_text,
    )
    return jsonify({"ok": True, "items": [map_entry(e) for e in entries], "total": len(entries)})


@journal_api_bp.post("")
@login_required
def create_journal_entry():
    data = parse_model(JournalEntryCreate, request.get_json(silent=True) or {})
    entry = journal_service.create_entry(
        current_user_id(),
        entry_type=data.type,
        category=data.category,
        content=data.content,
    )
    feedback = generate_feedback(entry.entry_type, entry.category, entry.content)
    return jsonify({"ok": True, "entry": map_entry(entry), "feedback": feedback}), 201


@journal_api_bp.delete("")
@login_required
def clear_journal():
    params = parse_model(JournalClearParams, request.args)
    deleted = journal_service.clear_entries(current_user_id(), entry_type=params.type)
    return jsonify({"ok": True, "deleted": deleted})


@journal_api_bp.get("/export")
@login_required
def export_journal():
    items = journal_service.export_entries(current_user_id())
    filename = f"soul-log-journal-{datetime.utcnow().date().isoformat()}.json"
    resp = jsonify(items)
    resp.headers["Content-Disposition"] = f'attachment; filename="{filename}"'
    return resp


@journal_api_bp.get("/stats")
@login_required
def journal_stats():
    params = parse_model(JournalStatsParams, request.args)
    zone = params.zone
    reference = params.reference_date or aggregator.entry_day(datetime.utcnow(), zone)
    entries = journal_service.list_entries(current_user_id())
    stats = aggregator.summarize(
        entries,
        reference,
        tz=zone,
        hydration_progress=params.hydration_progress,
        hydration_goal=params.hydration_goal,
    )
    return jsonify({"ok": True, "reference_date": reference.isoformat(), "stats": stats})


@journal_api_bp.get("/affirmation")
@login_required
def affirmation():
    today = datetime.utcnow().date()
    return jsonify({"ok": True, "date": today.isoformat(), "affirmation": daily_affirmation(today)})
