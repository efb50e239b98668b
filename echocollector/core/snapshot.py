"""
Read-only record snapshots.

The review engines work on these plain values, never on live ORM
objects. Echoes refer to their parent and tones by id only.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import FrozenSet, Optional

from echocollector.core.models import Echo, EmotionalTone


@dataclass(frozen=True)
class ToneSnapshot:
    """An emotional tone as seen by the engines."""
    id: int
    name: str
    color_hex: Optional[str] = None
    icon_name: Optional[str] = None
    description: Optional[str] = None

    @classmethod
    def from_model(cls, tone: EmotionalTone) -> "ToneSnapshot":
        return cls(
            id=tone.id,
            name=tone.name,
            color_hex=tone.color_hex,
            icon_name=tone.icon_name,
            description=tone.description,
        )


@dataclass(frozen=True)
class EchoSnapshot:
    """
    An echo as seen by the engines.

    Every optional field may be None; engines treat missing text as
    empty and missing dates as unknown.
    """
    id: int
    title: Optional[str] = None
    past_date: Optional[date] = None
    past_situation: Optional[str] = None
    current_trigger: Optional[str] = None
    connection_strength: int = 0
    insight: Optional[str] = None
    tone_ids: FrozenSet[int] = field(default_factory=frozenset)
    parent_id: Optional[int] = None
    is_resolved: bool = False
    resolved_date: Optional[datetime] = None
    created_at: Optional[datetime] = None
    has_photo: bool = False

    @classmethod
    def from_model(cls, echo: Echo) -> "EchoSnapshot":
        return cls(
            id=echo.id,
            title=echo.title,
            past_date=echo.past_date,
            past_situation=echo.past_situation,
            current_trigger=echo.current_trigger,
            connection_strength=echo.connection_strength or 0,
            insight=echo.insight,
            tone_ids=frozenset(t.id for t in echo.tones),
            parent_id=echo.parent_id,
            is_resolved=bool(echo.is_resolved),
            resolved_date=echo.resolved_date,
            created_at=echo.created_at,
            has_photo=echo.photo is not None,
        )

    @property
    def has_parent(self) -> bool:
        return self.parent_id is not None

    def searchable_text(self) -> str:
        """Title, past situation, trigger and insight joined for search."""
        return " ".join(
            [
                self.title or "",
                self.past_situation or "",
                self.current_trigger or "",
                self.insight or "",
            ]
        )
