"""
Echo and tone repository.

The only place records are created, changed or deleted. Each call runs
in its own transaction and hands back snapshots, never live ORM objects.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from echocollector.core.config import Config
from echocollector.core.db import init_db, session_scope
from echocollector.core.errors import CycleError, RecordNotFoundError
from echocollector.core.models import Echo, EmotionalTone
from echocollector.core.snapshot import EchoSnapshot, ToneSnapshot
from echocollector.core.utils import utcnow
from echocollector.core.validation import (
    EchoDraft,
    validate_echo_draft,
    validate_tone_fields,
)

logger = logging.getLogger(__name__)

DEFAULT_TONE_COLOR = "0A4D5E"
DEFAULT_TONE_ICON = "circle.fill"


@dataclass(frozen=True)
class TonePreset:
    """Built-in emotional tone."""
    name: str
    color_hex: str
    icon_name: str
    description: str


# Built-in tones
DEFAULT_TONES: List[TonePreset] = [
    TonePreset("Regret", "8E3B46", "arrow.uturn.backward", "Wishing the decision had gone another way"),
    TonePreset("Anxiety", "D98E04", "exclamationmark.triangle", "Worry that the pattern will repeat"),
    TonePreset("Pride", "2E7D32", "star.fill", "Satisfaction with how it turned out"),
    TonePreset("Relief", "4A90A4", "leaf.fill", "Tension released after the outcome"),
    TonePreset("Shame", "5D4E6D", "eye.slash", "Discomfort about sharing the decision"),
    TonePreset("Hope", DEFAULT_TONE_COLOR, "sun.max.fill", "Expectation of doing better next time"),
]


class EchoRepository:
    """
    Explicit read/write interface over the echo database.

    Usage:
        repo = EchoRepository(config)
        echo = repo.create_echo(draft)
        echoes = repo.list_all_echoes()
    """

    def __init__(self, config: Config, create_schema: bool = True):
        self.config = config
        if create_schema:
            init_db(config)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def list_all_echoes(self) -> List[EchoSnapshot]:
        """All echoes in creation order."""
        with session_scope(self.config) as session:
            echoes = session.scalars(
                select(Echo)
                .options(selectinload(Echo.tones))
                .order_by(Echo.created_at, Echo.id)
            ).all()
            return [EchoSnapshot.from_model(e) for e in echoes]

    def list_all_tones(self) -> List[ToneSnapshot]:
        """All tones ordered by name."""
        with session_scope(self.config) as session:
            tones = session.scalars(
                select(EmotionalTone).order_by(EmotionalTone.name, EmotionalTone.id)
            ).all()
            return [ToneSnapshot.from_model(t) for t in tones]

    def get_echo(self, echo_id: int) -> EchoSnapshot:
        with session_scope(self.config) as session:
            return EchoSnapshot.from_model(self._load_echo(session, echo_id))

    def get_photo(self, echo_id: int) -> Optional[bytes]:
        with session_scope(self.config) as session:
            return self._load_echo(session, echo_id).photo

    def get_tone(self, tone_id: int) -> ToneSnapshot:
        with session_scope(self.config) as session:
            return ToneSnapshot.from_model(self._load_tone(session, tone_id))

    def tone_usage(self) -> Dict[int, int]:
        """
        Count echoes tagged with each tone.

        Tones with no echoes are omitted.
        """
        known = {t.id for t in self.list_all_tones()}
        usage: Dict[int, int] = {}
        for echo in self.list_all_echoes():
            for tone_id in echo.tone_ids:
                if tone_id in known:
                    usage[tone_id] = usage.get(tone_id, 0) + 1
        return usage

    # ------------------------------------------------------------------
    # Echo writes
    # ------------------------------------------------------------------

    def create_echo(
        self,
        draft: EchoDraft,
        created_at: Optional[datetime] = None,
    ) -> EchoSnapshot:
        """
        Validate and store a new echo.

        Raises:
            ValidationError: if any field is invalid
            RecordNotFoundError: if the parent or a tone doesn't exist
        """
        cleaned = validate_echo_draft(draft)

        with session_scope(self.config) as session:
            echo = Echo(created_at=created_at or utcnow(), is_resolved=False)
            self._apply_draft(session, echo, cleaned)
            session.add(echo)
            session.flush()

            logger.info(f"Created echo: {echo}")
            return EchoSnapshot.from_model(echo)

    def update_echo(self, echo_id: int, draft: EchoDraft) -> EchoSnapshot:
        """
        Validate and store new field values for an existing echo.

        created_at and resolution state are left untouched. A draft without
        a photo keeps the stored one; use remove_photo to clear it.

        Raises:
            ValidationError: if any field is invalid
            CycleError: if the new parent would make the echo its own ancestor
            RecordNotFoundError: if the echo, parent or a tone doesn't exist
        """
        cleaned = validate_echo_draft(draft)

        with session_scope(self.config) as session:
            echo = self._load_echo(session, echo_id)
            if cleaned.parent_id is not None:
                self._check_no_cycle(session, echo_id, cleaned.parent_id)

            self._apply_draft(session, echo, cleaned)
            session.flush()

            logger.info(f"Updated echo: {echo}")
            return EchoSnapshot.from_model(echo)

    def create_follow_up(
        self,
        parent_id: int,
        title: str,
        current_trigger: str,
        connection_strength: int = 5,
        insight: Optional[str] = None,
        tone_ids: Iterable[int] = (),
    ) -> EchoSnapshot:
        """
        Record a new echo of an existing one.

        The follow-up shares the parent's past date and past situation.
        """
        parent = self.get_echo(parent_id)

        draft = EchoDraft(
            title=title,
            past_date=parent.past_date or utcnow().date(),
            past_situation=parent.past_situation or "",
            current_trigger=current_trigger,
            connection_strength=connection_strength,
            insight=insight,
            tone_ids=frozenset(tone_ids),
            parent_id=parent_id,
        )
        return self.create_echo(draft)

    def resolve_echo(self, echo_id: int, at: Optional[datetime] = None) -> EchoSnapshot:
        """Mark an echo resolved. Already-resolved echoes keep their date."""
        with session_scope(self.config) as session:
            echo = self._load_echo(session, echo_id)

            if not echo.is_resolved:
                echo.is_resolved = True
                echo.resolved_date = at or utcnow()
                logger.info(f"Resolved echo #{echo_id}")

            session.flush()
            return EchoSnapshot.from_model(echo)

    def reopen_echo(self, echo_id: int) -> EchoSnapshot:
        """Revert a resolved echo. Clears the resolved date."""
        with session_scope(self.config) as session:
            echo = self._load_echo(session, echo_id)

            echo.is_resolved = False
            echo.resolved_date = None
            logger.info(f"Reopened echo #{echo_id}")

            session.flush()
            return EchoSnapshot.from_model(echo)

    def remove_photo(self, echo_id: int) -> EchoSnapshot:
        with session_scope(self.config) as session:
            echo = self._load_echo(session, echo_id)
            echo.photo = None
            logger.info(f"Removed photo from echo #{echo_id}")

            session.flush()
            return EchoSnapshot.from_model(echo)

    def delete_echo(self, echo_id: int) -> None:
        """Delete an echo. Its follow-ups lose their parent link."""
        with session_scope(self.config) as session:
            echo = self._load_echo(session, echo_id)
            orphaned = len(echo.children)

            session.delete(echo)
            logger.info(f"Deleted echo #{echo_id} ({orphaned} follow-ups unlinked)")

    # ------------------------------------------------------------------
    # Tone writes
    # ------------------------------------------------------------------

    def create_tone(
        self,
        name: str,
        color_hex: Optional[str] = DEFAULT_TONE_COLOR,
        icon_name: Optional[str] = DEFAULT_TONE_ICON,
        description: Optional[str] = None,
    ) -> ToneSnapshot:
        cleaned_name, cleaned_color = validate_tone_fields(name, color_hex)

        with session_scope(self.config) as session:
            tone = EmotionalTone(
                name=cleaned_name,
                color_hex=cleaned_color,
                icon_name=(icon_name or "").strip() or None,
                description=(description or "").strip() or None,
            )
            session.add(tone)
            session.flush()

            logger.info(f"Created tone: {tone}")
            return ToneSnapshot.from_model(tone)

    def update_tone(
        self,
        tone_id: int,
        name: str,
        color_hex: Optional[str] = None,
        icon_name: Optional[str] = None,
        description: Optional[str] = None,
    ) -> ToneSnapshot:
        cleaned_name, cleaned_color = validate_tone_fields(name, color_hex)

        with session_scope(self.config) as session:
            tone = self._load_tone(session, tone_id)
            tone.name = cleaned_name
            tone.color_hex = cleaned_color
            tone.icon_name = (icon_name or "").strip() or None
            tone.description = (description or "").strip() or None
            session.flush()

            logger.info(f"Updated tone: {tone}")
            return ToneSnapshot.from_model(tone)

    def delete_tone(self, tone_id: int) -> None:
        """Delete a tone and remove it from every echo tagged with it."""
        with session_scope(self.config) as session:
            tone = self._load_tone(session, tone_id)
            tagged = len(tone.echoes)
            session.delete(tone)
            logger.info(f"Deleted tone #{tone_id} (untagged {tagged} echoes)")

    def seed_default_tones(self) -> List[ToneSnapshot]:
        """
        Insert the built-in tones into an empty tone table.

        Returns the created tones (empty if tones already exist).
        """
        if self.list_all_tones():
            logger.info("Tones already present, skipping seed")
            return []

        return [
            self.create_tone(p.name, p.color_hex, p.icon_name, p.description)
            for p in DEFAULT_TONES
        ]

    def reset_all(self) -> None:
        """Delete every echo and tone."""
        with session_scope(self.config) as session:
            echoes = session.scalars(select(Echo)).all()
            for echo in echoes:
                echo.parent_id = None
                echo.tones = []
            session.flush()

            for echo in echoes:
                session.delete(echo)
            for tone in session.scalars(select(EmotionalTone)).all():
                session.delete(tone)

            logger.warning(f"Reset: deleted {len(echoes)} echoes and all tones")

    # ------------------------------------------------------------------
    # Bulk import
    # ------------------------------------------------------------------

    def import_records(self, tones: Iterable[ToneSnapshot], entries: Iterable) -> Dict[str, int]:
        """
        Add tones and echoes from a backup in a single transaction.

        Entries carry a backup-local id, a draft, resolution state and
        created_at (see export.backup.BackupEcho). Ids in the drafts
        (tones, parent) refer to the backup and are remapped. Every record
        is validated before anything is written; if one fails, nothing is
        stored. Parent links to missing echoes or that would form a cycle
        are skipped with a warning.

        Returns counts of imported echoes, tones and parent links.
        """
        cleaned_tones = [(t, *validate_tone_fields(t.name, t.color_hex)) for t in tones]
        cleaned_entries = [(entry, validate_echo_draft(entry.draft)) for entry in entries]

        with session_scope(self.config) as session:
            tone_map: Dict[int, EmotionalTone] = {}
            for tone, name, color in cleaned_tones:
                model = EmotionalTone(
                    name=name,
                    color_hex=color,
                    icon_name=(tone.icon_name or "").strip() or None,
                    description=(tone.description or "").strip() or None,
                )
                session.add(model)
                tone_map[tone.id] = model

            echo_map: Dict[int, Echo] = {}
            for entry, draft in cleaned_entries:
                resolved_date = None
                if entry.is_resolved:
                    resolved_date = entry.resolved_date or utcnow()

                echo = Echo(
                    title=draft.title,
                    past_date=draft.past_date,
                    past_situation=draft.past_situation,
                    current_trigger=draft.current_trigger,
                    connection_strength=draft.connection_strength,
                    insight=draft.insight,
                    photo=draft.photo,
                    is_resolved=bool(entry.is_resolved),
                    resolved_date=resolved_date,
                    created_at=entry.created_at or utcnow(),
                )
                echo.tones = [tone_map[t] for t in sorted(draft.tone_ids) if t in tone_map]
                session.add(echo)
                echo_map[entry.id] = echo

            session.flush()

            parents: Dict[int, Optional[int]] = {e.id: None for e in echo_map.values()}
            links = 0
            for entry, draft in cleaned_entries:
                if draft.parent_id is None:
                    continue
                parent = echo_map.get(draft.parent_id)
                if parent is None:
                    logger.warning(
                        f"Backup echo #{entry.id} refers to missing parent #{draft.parent_id}"
                    )
                    continue

                child = echo_map[entry.id]
                if self._creates_cycle(parents, child.id, parent.id):
                    logger.warning(
                        f"Skipping backup link #{entry.id} -> #{draft.parent_id}: it would form a cycle"
                    )
                    continue

                child.parent_id = parent.id
                parents[child.id] = parent.id
                links += 1

            logger.info(
                f"Imported {len(echo_map)} echoes, {len(tone_map)} tones, {links} links"
            )
            return {"echoes": len(echo_map), "tones": len(tone_map), "links": links}

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _load_echo(session: Session, echo_id: int) -> Echo:
        echo = session.get(Echo, echo_id)
        if echo is None:
            raise RecordNotFoundError("Echo", echo_id)
        return echo

    @staticmethod
    def _load_tone(session: Session, tone_id: int) -> EmotionalTone:
        tone = session.get(EmotionalTone, tone_id)
        if tone is None:
            raise RecordNotFoundError("Tone", tone_id)
        return tone

    def _apply_draft(self, session: Session, echo: Echo, draft: EchoDraft) -> None:
        if draft.parent_id is not None:
            self._load_echo(session, draft.parent_id)

        echo.title = draft.title
        echo.past_date = draft.past_date
        echo.past_situation = draft.past_situation
        echo.current_trigger = draft.current_trigger
        echo.connection_strength = draft.connection_strength
        echo.insight = draft.insight
        if draft.photo is not None:
            echo.photo = draft.photo
        echo.parent_id = draft.parent_id
        echo.tones = [self._load_tone(session, tone_id) for tone_id in sorted(draft.tone_ids)]

    @staticmethod
    def _creates_cycle(parents: Dict[int, Optional[int]], echo_id: int, parent_id: int) -> bool:
        """Walk up from the proposed parent; reaching echo_id means a cycle."""
        seen = set()
        current: Optional[int] = parent_id
        while current is not None and current not in seen:
            if current == echo_id:
                return True
            seen.add(current)
            current = parents.get(current)
        return False

    def _check_no_cycle(self, session: Session, echo_id: int, parent_id: int) -> None:
        parents = dict(session.execute(select(Echo.id, Echo.parent_id)).all())
        if self._creates_cycle(parents, echo_id, parent_id):
            raise CycleError(
                f"Echo #{parent_id} cannot be the parent of echo #{echo_id}: "
                f"it would make #{echo_id} its own ancestor"
            )
