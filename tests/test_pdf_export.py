"""
Tests for the PDF booklet export.
"""

import sys
from datetime import date, datetime
from pathlib import Path

# Add parent to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from echocollector.core.snapshot import EchoSnapshot, ToneSnapshot
from echocollector.export.pdf_export import export_echoes_pdf


def _echo(echo_id, **overrides):
    fields = dict(
        id=echo_id,
        title=f"Echo {echo_id}",
        past_date=date(2019, 5, 1),
        past_situation="Financed a phone over 24 months",
        current_trigger="New model announced",
        connection_strength=6,
        created_at=datetime(2025, 1, echo_id),
        tone_ids=frozenset({1}),
    )
    fields.update(overrides)
    return EchoSnapshot(**fields)


class TestPdfExport:
    """Test that the booklet is written."""

    def test_writes_pdf(self, tmp_path):
        path = tmp_path / "out" / "echoes.pdf"
        echoes = [
            _echo(1, insight="Wait for the sale"),
            _echo(2, is_resolved=True, resolved_date=datetime(2025, 6, 1)),
        ]

        count = export_echoes_pdf(echoes, [ToneSnapshot(1, "Regret")], path)

        assert count == 2
        data = path.read_bytes()
        assert data.startswith(b"%PDF")
        assert data.rstrip().endswith(b"%%EOF")

    def test_many_echoes_grow_file(self, tmp_path):
        path = tmp_path / "long.pdf"
        echoes = [_echo(i, past_situation="Long story. " * 80) for i in range(1, 21)]

        short = tmp_path / "short.pdf"
        export_echoes_pdf(echoes[:1], [], short)

        assert export_echoes_pdf(echoes, [], path) == 20
        assert path.stat().st_size > short.stat().st_size

    def test_text_outside_latin1(self, tmp_path):
        path = tmp_path / "unicode.pdf"
        echo = _echo(1, title="Crypto € ✓ \U0001f4b8", insight="“Never again”")

        assert export_echoes_pdf([echo], [ToneSnapshot(1, "後悔")], path) == 1
        assert path.read_bytes().startswith(b"%PDF")

    def test_empty_journal(self, tmp_path):
        path = tmp_path / "empty.pdf"

        assert export_echoes_pdf([], [], path) == 0
        assert path.stat().st_size > 0
