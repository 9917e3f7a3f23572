"""Journal entry types and their category vocabularies."""

from __future__ import annotations

ENTRY_TYPE_MIND = "mind"
ENTRY_TYPE_BODY = "body"
ENTRY_TYPE_SOUL = "soul"
ENTRY_TYPES = (ENTRY_TYPE_MIND, ENTRY_TYPE_BODY, ENTRY_TYPE_SOUL)

# Declaration order is the canonical order used to break ties.
MIND_MOODS = ("happy", "neutral", "sad")
BODY_CATEGORIES = ("exercise", "nutrition", "hydration")
SOUL_CATEGORIES = ("meditation", "gratitude", "reflection")

CATEGORIES_BY_TYPE = {
    ENTRY_TYPE_MIND: MIND_MOODS,
    ENTRY_TYPE_BODY: BODY_CATEGORIES,
    ENTRY_TYPE_SOUL: SOUL_CATEGORIES,
}

TYPE_LABELS = {
    ENTRY_TYPE_MIND: "Mind",
    ENTRY_TYPE_BODY: "Body",
    ENTRY_TYPE_SOUL: "Soul",
}

DEFAULT_HYDRATION_GOAL = 8
MAX_CONTENT_LENGTH = 10_000

__all__ = [
    "ENTRY_TYPE_MIND",
    "ENTRY_TYPE_BODY",
    "ENTRY_TYPE_SOUL",
    "ENTRY_TYPES",
    "MIND_MOODS",
    "BODY_CATEGORIES",
    "SOUL_CATEGORIES",
    "CATEGORIES_BY_TYPE",
    "TYPE_LABELS",
    "DEFAULT_HYDRATION_GOAL",
    "MAX_CONTENT_LENGTH",
]
