"""Reflective coach feedback and the affirmation of the day."""

from __future__ import annotations

from datetime import date

from soul_log.domains.journal.constants import ENTRY_TYPE_BODY, ENTRY_TYPE_MIND

HIGHLIGHT_LIMIT = 200

MIND_ENCOURAGEMENT = {
    "happy": "It's beautiful to witness your joy—let it ripple into the rest of the day.",
    "neutral": "You're in a reflective place. This is a gentle invitation to check in with your energy.",
    "sad": "Thank you for sharing honestly. Softer days deserve extra compassion and care.",
}
MIND_PROMPTS = {
    "happy": (
        "Bottle the moment by writing a gratitude note to your future self.",
        "What tiny ritual helped you feel this light today?",
    ),
    "neutral": (
        "What would feeling 10% better look like this afternoon?",
        "Name one small win you can create before the day ends.",
    ),
    "sad": (
        "Which friend or practice could offer comfort right now?",
        "Gift yourself five minutes of deep breathing or stretching.",
    ),
}

BODY_ENCOURAGEMENT = {
    "exercise": "Consistency compounds. Your body will thank you for moving today.",
    "nutrition": "Balanced nutrition is an act of self-respect—notice how your energy responds.",
    "hydration": "Each glass is a reset button for your focus, mood, and recovery.",
}
BODY_ADVICE = {
    "exercise": (
        "Schedule a gentle stretch or mobility session for tomorrow.",
        "Fuel your body with protein within an hour of finishing your workout.",
    ),
    "nutrition": (
        "Aim to color your next plate with at least three different plants.",
        "Hydrate before your meals to support digestion and energy.",
    ),
    "hydration": (
        "Pair every cup of coffee with a full glass of water.",
        "Keep a refill reminder on your phone for mid-afternoon slumps.",
    ),
}

SOUL_OPENINGS = {
    "meditation": "Meditation is how you plant seeds of stillness. Thank you for tending your heart with care.",
    "gratitude": "Gratitude reorients the soul toward abundance. Your reflections brighten the day.",
    "reflection": "Reflection is a mirror for the spirit—you are bravely noticing what wants to be healed.",
}
SOUL_BLESSINGS = {
    "meditation": (
        "Light a candle tonight and breathe with the flame for three slow cycles.",
        "Set a two-minute timer and scan your body from toes to crown with gratitude.",
    ),
    "gratitude": (
        "Send one sentence of appreciation to a person who crossed your mind.",
        "Note three sensory delights you noticed today—honor them aloud.",
    ),
    "reflection": (
        "Write a gentle question for tomorrow's self and place it on your nightstand.",
        "Release anything heavy by journaling three things you're ready to forgive.",
    ),
}

AFFIRMATIONS = (
    "I give myself permission to slow down and listen deeply.",
    "My inner wisdom is a compass I can trust.",
    "Every breath is a doorway back to peace.",
    "Gratitude turns ordinary moments into miracles.",
    "I am grounded, guided, and growing in grace.",
)


def _highlight(content: str) -> str:
    text = (content or "").strip()
    if not text:
        return "..."
    if len(text) > HIGHLIGHT_LIMIT:
        return text[:HIGHLIGHT_LIMIT] + "…"
    return text


def _bullets(lines) -> str:
    return "\n".join(f"• {line}" for line in lines)


def generate_feedback(entry_type: str, category: str, content: str) -> str:
    """Templated coaching text echoing the entry back with two suggestions."""
    highlight = _highlight(content)
    if entry_type == ENTRY_TYPE_MIND:
        return (
            f"{MIND_ENCOURAGEMENT[category]}\n\n"
            f"You captured: “{highlight}”\n\n"
            f"Consider exploring:\n{_bullets(MIND_PROMPTS[category])}\n\n"
            "Keep listening to yourself—awareness is healing."
        )
    if entry_type == ENTRY_TYPE_BODY:
        return (
            f"{BODY_ENCOURAGEMENT[category]}\n\n"
            f"You captured: “{highlight}”\n\n"
            f"Try this next:\n{_bullets(BODY_ADVICE[category])}\n\n"
            "Remember to celebrate the effort, not just the outcome."
        )
    return (
        f"{SOUL_OPENINGS[category]}\n\n"
        f"You wrote: “{highlight}”\n\n"
        f"Next soul ritual:\n{_bullets(SOUL_BLESSINGS[category])}\n\n"
        "Trust your rhythm. Every note of presence counts."
    )


def daily_affirmation(day: date) -> str:
    return AFFIRMATIONS[day.toordinal() % len(AFFIRMATIONS)]


__all__ = ["AFFIRMATIONS", "daily_affirmation", "generate_feedback"]
