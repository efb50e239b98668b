"""
Write-path validation for echoes and tones.

Every create or update goes through here before it reaches the
database. Text is trimmed; a blank insight is stored as None.
"""

import logging
from dataclasses import dataclass, field, replace
from datetime import date
from typing import FrozenSet, Optional

from echocollector.core.errors import ValidationError
from echocollector.core.utils import normalize_color_hex, utcnow

logger = logging.getLogger(__name__)

MAX_TITLE_LENGTH = 200
MAX_TEXT_LENGTH = 5000
MAX_TONE_NAME_LENGTH = 100
MIN_STRENGTH = 1
MAX_STRENGTH = 10


@dataclass(frozen=True)
class EchoDraft:
    """User-entered echo fields, before validation."""
    title: str
    past_date: date
    past_situation: str
    current_trigger: str
    connection_strength: int = 5
    insight: Optional[str] = None
    tone_ids: FrozenSet[int] = field(default_factory=frozenset)
    parent_id: Optional[int] = None
    photo: Optional[bytes] = None


def _required_text(name: str, value: Optional[str], max_length: int) -> str:
    cleaned = (value or "").strip()
    if not cleaned:
        raise ValidationError(f"{name} is required")
    if len(cleaned) > max_length:
        raise ValidationError(
            f"{name} is too long ({len(cleaned)} > {max_length} characters)"
        )
    return cleaned


def validate_echo_draft(draft: EchoDraft, today: Optional[date] = None) -> EchoDraft:
    """
    Validate and clean an echo draft.

    Returns a new draft with trimmed text.

    Raises:
        ValidationError: on the first field that fails
    """
    today = today or utcnow().date()

    title = _required_text("Title", draft.title, MAX_TITLE_LENGTH)
    past_situation = _required_text("Past situation", draft.past_situation, MAX_TEXT_LENGTH)
    current_trigger = _required_text("Current trigger", draft.current_trigger, MAX_TEXT_LENGTH)

    insight = (draft.insight or "").strip() or None
    if insight and len(insight) > MAX_TEXT_LENGTH:
        raise ValidationError(
            f"Insight is too long ({len(insight)} > {MAX_TEXT_LENGTH} characters)"
        )

    if draft.past_date is None:
        raise ValidationError("Past date is required")
    if draft.past_date > today:
        raise ValidationError(f"Past date {draft.past_date} is in the future")

    strength = draft.connection_strength
    if isinstance(strength, bool) or not isinstance(strength, int):
        raise ValidationError(f"Connection strength must be an integer, got {strength!r}")
    if not MIN_STRENGTH <= strength <= MAX_STRENGTH:
        raise ValidationError(
            f"Connection strength must be between {MIN_STRENGTH} and {MAX_STRENGTH}, got {strength}"
        )

    return replace(
        draft,
        title=title,
        past_situation=past_situation,
        current_trigger=current_trigger,
        insight=insight,
        tone_ids=frozenset(draft.tone_ids or ()),
    )


def validate_tone_fields(name: Optional[str], color_hex: Optional[str]) -> tuple:
    """
    Validate tone name and color.

    Returns (name, color_hex) cleaned.
    """
    cleaned_name = _required_text("Tone name", name, MAX_TONE_NAME_LENGTH)

    try:
        cleaned_color = normalize_color_hex(color_hex)
    except ValueError as e:
        raise ValidationError(str(e)) from e

    return cleaned_name, cleaned_color
