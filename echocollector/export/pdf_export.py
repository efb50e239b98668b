"""
Export echoes as a printable PDF booklet.

One block per echo: title, dates, strength, tones, the past decision,
the present trigger and any insight. Letter-sized pages.
"""

import logging
from pathlib import Path
from typing import Iterable, Optional, Union

from fpdf import FPDF
from fpdf.enums import XPos, YPos

from echocollector.core.snapshot import EchoSnapshot, ToneSnapshot
from echocollector.core.utils import hex_to_rgba

logger = logging.getLogger(__name__)

BOOKLET_TITLE = "My Financial Echoes"
TITLE_COLOR = "0A4D5E"
FONT = "Times"


def _latin1(text: Optional[str]) -> str:
    # Core PDF fonts only cover Latin-1
    return (text or "").encode("latin-1", "replace").decode("latin-1")


def _format_date(value) -> str:
    return value.strftime("%Y-%m-%d") if value else "-"


class EchoBooklet(FPDF):
    """Letter-sized booklet with a page footer."""

    def __init__(self):
        super().__init__(format="Letter")
        self.set_auto_page_break(auto=True, margin=20)
        self.set_margins(left=20, top=20, right=20)
        self.set_creator("Financial Echo Collector")
        self.set_title(BOOKLET_TITLE)

    def footer(self):
        self.set_y(-15)
        self.set_font(FONT, "I", 9)
        self.set_text_color(120, 120, 120)
        self.cell(0, 10, f"Page {self.page_no()}", align="C")

    def heading(self, text: str) -> None:
        r, g, b, _ = hex_to_rgba(TITLE_COLOR)
        self.set_font(FONT, "B", 28)
        self.set_text_color(r, g, b)
        self.cell(0, 16, _latin1(text), align="C", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        self.ln(6)

    def paragraph(self, label: str, text: Optional[str]) -> None:
        self.set_font(FONT, "B", 11)
        self.set_text_color(0, 0, 0)
        self.cell(0, 6, _latin1(label), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        self.set_font(FONT, "", 11)
        self.multi_cell(0, 6, _latin1(text), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        self.ln(1)

    def echo_block(self, echo: EchoSnapshot, tone_names: Iterable[str]) -> None:
        r, g, b, _ = hex_to_rgba(TITLE_COLOR)
        self.set_font(FONT, "B", 15)
        self.set_text_color(r, g, b)
        self.multi_cell(0, 8, _latin1(echo.title or "Untitled"), new_x=XPos.LMARGIN, new_y=YPos.NEXT)

        status = f"Resolved {_format_date(echo.resolved_date)}" if echo.is_resolved else "Open"
        self.set_font(FONT, "I", 10)
        self.set_text_color(90, 90, 90)
        self.multi_cell(
            0,
            5,
            _latin1(
                f"Past decision: {_format_date(echo.past_date)}  |  "
                f"Logged: {_format_date(echo.created_at)}  |  "
                f"Strength: {echo.connection_strength}/10  |  {status}"
            ),
            new_x=XPos.LMARGIN,
            new_y=YPos.NEXT,
        )

        names = list(tone_names)
        if names:
            self.multi_cell(0, 5, _latin1("Tones: " + ", ".join(names)), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        self.ln(2)

        self.paragraph("Then", echo.past_situation)
        self.paragraph("Now", echo.current_trigger)
        if echo.insight:
            self.paragraph("Insight", echo.insight)

        self.set_draw_color(200, 200, 200)
        self.line(self.l_margin, self.get_y() + 2, self.w - self.r_margin, self.get_y() + 2)
        self.ln(8)


def export_echoes_pdf(
    echoes: Iterable[EchoSnapshot],
    tones: Iterable[ToneSnapshot],
    filepath: Union[str, Path],
) -> int:
    """
    Write the PDF booklet.

    Returns the number of echoes written.
    """
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)

    tone_names = {t.id: t.name for t in tones}

    pdf = EchoBooklet()
    pdf.add_page()
    pdf.heading(BOOKLET_TITLE)

    count = 0
    for echo in echoes:
        names = sorted(tone_names[t] for t in echo.tone_ids if t in tone_names)
        pdf.echo_block(echo, names)
        count += 1

    if count == 0:
        pdf.set_font(FONT, "", 12)
        pdf.set_text_color(0, 0, 0)
        pdf.cell(0, 8, "No echoes recorded yet.", align="C")

    pdf.output(str(filepath))

    logger.info(f"Exported {count} echoes to PDF {filepath} ({pdf.page_no()} pages)")
    return count
