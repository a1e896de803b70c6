import io
from datetime import datetime
from typing import Sequence

from reportlab.lib.pagesizes import A4, landscape
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer
from reportlab.lib import colors
from reportlab.lib.styles import getSampleStyleSheet

from planifia.domain.GroupedItem import GroupedItem
from planifia.utilities.constants import DISPLAY_DATE_FORMAT, MEAL_TYPE_LABELS, STORE_DATE_FORMAT

_HEADER_STYLE = [
    ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#4F46E5")),
    ("TEXTCOLOR", (0, 0), (-1, 0), colors.whitesmoke),
    ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
    ("FONTSIZE", (0, 0), (-1, 0), 12),
    ("BOTTOMPADDING", (0, 0), (-1, 0), 10),
    ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
]


def _display_date(iso_day: str) -> str:
    return datetime.strptime(iso_day, STORE_DATE_FORMAT).strftime(DISPLAY_DATE_FORMAT)


def _build(elements, pagesize) -> bytes:
    buf = io.BytesIO()
    doc = SimpleDocTemplate(
        buf, pagesize=pagesize,
        rightMargin=20, leftMargin=20, topMargin=20, bottomMargin=20
    )
    doc.build(elements)
    return buf.getvalue()


def generate_pdf_for_week(week_view: dict) -> bytes:
    """Generate a PDF table Day / Lunch / Dinner from MealPlanner.week_view() output."""
    styles = getSampleStyleSheet()
    title = f"Planifia: {_display_date(week_view['start'])} - {_display_date(week_view['end'])}"
    elements = [Paragraph(title, styles["Title"]), Spacer(1, 16)]

    data = [["Day", MEAL_TYPE_LABELS["LUNCH"], MEAL_TYPE_LABELS["DINNER"]]]
    for day in week_view["days"]:
        lunch = day.get("lunch") or {}
        dinner = day.get("dinner") or {}
        data.append([
            f"{day['weekday']} ({_display_date(day['date'])})",
            lunch.get("dish_name", "-"),
            dinner.get("dish_name", "-"),
        ])

    table = Table(data, repeatRows=1)
    table.setStyle(TableStyle(_HEADER_STYLE + [("ALIGN", (0, 0), (-1, -1), "CENTER")]))
    elements.append(table)
    return _build(elements, landscape(A4))


def generate_pdf_for_shopping_list(groups: Sequence[GroupedItem]) -> bytes:
    """Generate a printable checklist of grouped shopping items."""
    styles = getSampleStyleSheet()
    purchased = sum(1 for g in groups if g.purchased)
    elements = [
        Paragraph("Lista de la compra", styles["Title"]),
        Paragraph(f"{purchased}/{len(groups)}", styles["Normal"]),
        Spacer(1, 12),
    ]

    data = [["", "Item", ""]]
    for g in groups:
        data.append(["[x]" if g.purchased else "[ ]", g.display_name, "Manual" if g.manual else ""])
    if len(data) == 1:
        data.append(["", "-", ""])

    table = Table(data, repeatRows=1, colWidths=[40, 360, 80])
    table.setStyle(TableStyle(_HEADER_STYLE + [("ALIGN", (0, 0), (0, -1), "CENTER")]))
    elements.append(table)
    return _build(elements, A4)
