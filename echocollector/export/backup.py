"""
JSON backup export and import.

Backups hold every echo and tone with ISO-8601 dates. Photos are not
included. Ids in a backup are only meaningful inside that file; import
assigns fresh ids and re-links parents and tones.
"""

import json
import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from echocollector.core.errors import ValidationError
from echocollector.core.snapshot import EchoSnapshot, ToneSnapshot
from echocollector.core.utils import utcnow
from echocollector.core.validation import EchoDraft
from echocollector.store.repository import EchoRepository

logger = logging.getLogger(__name__)

BACKUP_VERSION = 1


@dataclass
class BackupEcho:
    """One echo read from a backup file."""
    id: int
    draft: EchoDraft
    is_resolved: bool = False
    resolved_date: Optional[datetime] = None
    created_at: Optional[datetime] = None


@dataclass
class Backup:
    """Parsed backup file."""
    tones: List[ToneSnapshot] = field(default_factory=list)
    echoes: List[BackupEcho] = field(default_factory=list)
    exported_at: Optional[datetime] = None


def _iso(value: Optional[Union[date, datetime]]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _parse_datetime(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    return datetime.fromisoformat(value)


def _parse_date(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    return date.fromisoformat(value[:10])


def backup_to_dict(
    echoes: Iterable[EchoSnapshot],
    tones: Iterable[ToneSnapshot],
    exported_at: Optional[datetime] = None,
) -> Dict[str, Any]:
    """Build the JSON-ready backup structure."""
    return {
        "version": BACKUP_VERSION,
        "exported_at": _iso(exported_at or utcnow()),
        "tones": [
            {
                "id": t.id,
                "name": t.name,
                "color_hex": t.color_hex,
                "icon_name": t.icon_name,
                "description": t.description,
            }
            for t in tones
        ],
        "echoes": [
            {
                "id": e.id,
                "title": e.title or "",
                "past_date": _iso(e.past_date),
                "past_situation": e.past_situation or "",
                "current_trigger": e.current_trigger or "",
                "connection_strength": e.connection_strength,
                "insight": e.insight or "",
                "emotional_tones": sorted(e.tone_ids),
                "parent_id": e.parent_id,
                "is_resolved": e.is_resolved,
                "resolved_date": _iso(e.resolved_date),
                "created_at": _iso(e.created_at),
            }
            for e in echoes
        ],
    }


def export_backup(
    echoes: Iterable[EchoSnapshot],
    tones: Iterable[ToneSnapshot],
    filepath: Union[str, Path],
) -> Path:
    """
    Write a pretty-printed JSON backup.

    Returns file path.
    """
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)

    data = backup_to_dict(echoes, tones)
    with open(filepath, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)

    logger.info(
        f"Backup exported to {filepath} "
        f"({len(data['echoes'])} echoes, {len(data['tones'])} tones)"
    )
    return filepath


def load_backup(filepath: Union[str, Path]) -> Backup:
    """
    Parse a backup file.

    Raises:
        FileNotFoundError: if the file doesn't exist
        ValidationError: if the file isn't a backup this version understands
    """
    filepath = Path(filepath)
    if not filepath.exists():
        raise FileNotFoundError(f"Backup file not found: {filepath}")

    try:
        with open(filepath, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValidationError(f"Backup is not valid JSON: {e}") from e

    if not isinstance(data, dict) or data.get("version") != BACKUP_VERSION:
        raise ValidationError(f"Unsupported backup format in {filepath}")

    try:
        tones = [
            ToneSnapshot(
                id=int(t["id"]),
                name=t["name"],
                color_hex=t.get("color_hex"),
                icon_name=t.get("icon_name"),
                description=t.get("description"),
            )
            for t in data.get("tones", [])
        ]

        echoes = [
            BackupEcho(
                id=int(e["id"]),
                draft=EchoDraft(
                    title=e.get("title", ""),
                    past_date=_parse_date(e.get("past_date")),
                    past_situation=e.get("past_situation", ""),
                    current_trigger=e.get("current_trigger", ""),
                    connection_strength=int(e.get("connection_strength", 5)),
                    insight=e.get("insight") or None,
                    tone_ids=frozenset(int(t) for t in e.get("emotional_tones", [])),
                    parent_id=int(e["parent_id"]) if e.get("parent_id") is not None else None,
                ),
                is_resolved=bool(e.get("is_resolved", False)),
                resolved_date=_parse_datetime(e.get("resolved_date")),
                created_at=_parse_datetime(e.get("created_at")),
            )
            for e in data.get("echoes", [])
        ]
    except (KeyError, TypeError, ValueError) as e:
        raise ValidationError(f"Malformed backup entry: {e}") from e

    return Backup(
        tones=tones,
        echoes=echoes,
        exported_at=_parse_datetime(data.get("exported_at")),
    )


def import_backup(repository: EchoRepository, filepath: Union[str, Path]) -> Dict[str, int]:
    """
    Restore a backup into the repository.

    Existing records are kept. The import is all or nothing: a single
    invalid entry raises ValidationError and leaves the store unchanged.
    Parent links that would form a cycle are dropped with a warning.

    Returns counts of imported echoes, tones and parent links.
    """
    backup = load_backup(filepath)
    counts = repository.import_records(backup.tones, backup.echoes)
    logger.info(f"Restored backup {filepath}")
    return counts
