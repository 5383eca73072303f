# report.py
# PDF export of time cards: 4 employees per page, laid out as a 2x2 grid.
from __future__ import annotations

import io
import logging
from typing import List, Sequence
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.platypus import (
    KeepInFrame,
    PageBreak,
    Paragraph,
    SimpleDocTemplate,
    Spacer,
    Table,
    TableStyle,
)

from config import PDF_TITLE
from domain import TimeCard
from utils import format_date, money, week_to_dataframe

logger = logging.getLogger(__name__)

CARDS_PER_PAGE = 4
MARGIN = 24
CELL_PADDING = 6
BORDER_COLOR = colors.HexColor("#C7CCD6")
BORDER_INSET = 12
BORDER_WIDTH = 0.8


def _styles():
    styles = getSampleStyleSheet()
    return {
        "title": styles["Title"],
        "name": ParagraphStyle(name="CardName", parent=styles["Normal"], fontSize=12, leading=14,
                               fontName="Helvetica-Bold", spaceAfter=2),
        "meta": ParagraphStyle(name="CardMeta", parent=styles["Normal"], fontSize=10, leading=12,
                               spaceAfter=4),
        "week": ParagraphStyle(name="CardWeek", parent=styles["Normal"], fontSize=9, leading=11,
                               spaceBefore=2, spaceAfter=2),
        "total": ParagraphStyle(name="CardTotal", parent=styles["Normal"], fontSize=9, leading=11),
        "normal": styles["Normal"],
    }


def _week_table(card_week, name_days: bool, width: float) -> Table:
    df = week_to_dataframe(card_week, name_days=name_days)
    data = [list(df.columns)] + df.values.tolist()
    col_widths = [width * 0.40, width * 0.18, width * 0.17, width * 0.25]
    table = Table(data, colWidths=col_widths, repeatRows=1, hAlign="LEFT")
    table.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), colors.Color(200 / 255, 200 / 255, 200 / 255)),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.black),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, 0), 8),
        ("FONTSIZE", (0, 1), (-1, -1), 7),
        ("ALIGN", (1, 0), (-1, -1), "RIGHT"),
        ("GRID", (0, 0), (-1, -1), 0.25, colors.HexColor("#9E9E9E")),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ("TOPPADDING", (0, 0), (-1, -1), 1),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 1),
    ]))
    return table


def _card_block(card: TimeCard, styles, name_days: bool, width: float, height: float) -> KeepInFrame:
    flow = [
        Paragraph(f"Employee: {escape(card.employee_name or 'Unnamed')}", styles["name"]),
        Paragraph(f"Start Date: {format_date(card.start_date)}", styles["meta"]),
    ]
    for week_index, week in enumerate(card.weeks, start=1):
        flow.append(Paragraph(f"Week {week_index}", styles["week"]))
        flow.append(_week_table(week, name_days, width))
    flow += [
        Spacer(1, 4),
        Paragraph(f"Final Totals (Decimal): {card.overall_decimal_hours:.2f} hrs", styles["total"]),
        Paragraph(f"Final Totals (hh:mm): {card.overall_hhmm}", styles["total"]),
        Paragraph(f"Final Gross Pay: {money(card.overall_gross_pay)}", styles["total"]),
    ]
    # long pay periods (4 weeks x 7 days) are scaled down to fit the cell
    return KeepInFrame(width, height, flow, mode="shrink")


def _page_border(canvas, doc):
    canvas.saveState()
    w, h = doc.pagesize
    canvas.setStrokeColor(BORDER_COLOR)
    canvas.setLineWidth(BORDER_WIDTH)
    canvas.rect(BORDER_INSET, BORDER_INSET, w - 2 * BORDER_INSET, h - 2 * BORDER_INSET)
    canvas.restoreState()

def _chunks(cards: Sequence[TimeCard], size: int) -> List[Sequence[TimeCard]]:
    return [cards[i:i + size] for i in range(0, len(cards), size)]


def time_cards_to_pdf(cards: Sequence[TimeCard], title: str = PDF_TITLE, name_days: bool = True) -> bytes:
    buf = io.BytesIO()
    doc = SimpleDocTemplate(buf, pagesize=A4, topMargin=MARGIN, bottomMargin=MARGIN,
                            leftMargin=MARGIN, rightMargin=MARGIN, title=title)
    styles = _styles()
    story = [Paragraph(escape(title), styles["title"]), Spacer(1, 6)]

    if not cards:
        story.append(Paragraph("No employees to show.", styles["normal"]))
    else:
        # frames pad 6pt on each side; leave room for the title on the first page
        col_w = (doc.width - 12) / 2
        row_h = (doc.height - 12 - 60) / 2
        inner_w = col_w - 2 * CELL_PADDING
        inner_h = row_h - 2 * CELL_PADDING
        for page_index, chunk in enumerate(_chunks(list(cards), CARDS_PER_PAGE)):
            if page_index:
                story.append(PageBreak())
            blocks = [_card_block(c, styles, name_days, inner_w, inner_h) for c in chunk]
            if len(blocks) % 2:
                blocks.append("")
            grid_rows = [blocks[i:i + 2] for i in range(0, len(blocks), 2)]
            grid = Table(grid_rows, colWidths=[col_w, col_w], rowHeights=[row_h] * len(grid_rows))
            grid.setStyle(TableStyle([
                ("VALIGN", (0, 0), (-1, -1), "TOP"),
                ("LEFTPADDING", (0, 0), (-1, -1), CELL_PADDING),
                ("RIGHTPADDING", (0, 0), (-1, -1), CELL_PADDING),
                ("TOPPADDING", (0, 0), (-1, -1), CELL_PADDING),
                ("BOTTOMPADDING", (0, 0), (-1, -1), CELL_PADDING),
            ]))
            story.append(grid)

    doc.build(story, onFirstPage=_page_border, onLaterPages=_page_border)
    logger.info("rendered %d time cards into PDF", len(cards))
    return buf.getvalue()
