"""
Export echoes to CSV for external analysis.
"""

import csv
import logging
from pathlib import Path
from typing import Iterable, Union

from echocollector.core.snapshot import EchoSnapshot, ToneSnapshot

logger = logging.getLogger(__name__)

CSV_COLUMNS = [
    "id",
    "created_at",
    "title",
    "past_date",
    "past_situation",
    "current_trigger",
    "connection_strength",
    "insight",
    "tones",
    "parent_id",
    "resolved",
    "resolved_date",
]


def export_echoes_csv(
    echoes: Iterable[EchoSnapshot],
    tones: Iterable[ToneSnapshot],
    filepath: Union[str, Path],
) -> int:
    """
    Write one row per echo.

    Tones are written by name, separated by '; '.
    Returns the number of rows written.
    """
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)

    tone_names = {t.id: t.name for t in tones}
    count = 0

    with open(filepath, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(CSV_COLUMNS)

        for echo in echoes:
            names = sorted(tone_names[t] for t in echo.tone_ids if t in tone_names)
            writer.writerow([
                echo.id,
                echo.created_at.isoformat() if echo.created_at else "",
                echo.title or "",
                echo.past_date.isoformat() if echo.past_date else "",
                echo.past_situation or "",
                echo.current_trigger or "",
                echo.connection_strength,
                echo.insight or "",
                "; ".join(names),
                echo.parent_id or "",
                "Yes" if echo.is_resolved else "No",
                echo.resolved_date.isoformat() if echo.resolved_date else "",
            ])
            count += 1

    logger.info(f"Exported {count} echoes to {filepath}")
    return count
