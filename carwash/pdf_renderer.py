import io
from datetime import date
from typing import List

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas

from . import schemas

# Basit rapor çıktısı: gelir, servis dağılımı, ortalama süreler


def render_report_pdf(
    start: date,
    end: date,
    income: List[schemas.DailyIncome],
    types: List[schemas.ServiceTypeCount],
    times: List[schemas.ServiceTime],
) -> bytes:
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=A4)
    W, H = A4
    c.setTitle(f"Report_{start.isoformat()}_{end.isoformat()}")

    c.setFont("Helvetica-Bold", 16)
    c.drawString(20*mm, H - 20*mm, "Car Wash - Business Report")
    c.setFont("Helvetica", 10)
    c.drawString(20*mm, H - 27*mm, f"Period: {start.strftime('%d.%m.%Y')} - {end.strftime('%d.%m.%Y')}")

    y = H - 40*mm

    def heading(title: str):
        nonlocal y
        y = _ensure_space(c, y, 20*mm, H)
        c.setFont("Helvetica-Bold", 12)
        c.drawString(20*mm, y, title)
        y -= 5*mm
        c.line(20*mm, y, 190*mm, y)
        y -= 6*mm
        c.setFont("Helvetica", 10)

    def row(*cols):
        nonlocal y
        y = _ensure_space(c, y, 10*mm, H)
        left, *rest = cols
        c.drawString(20*mm, y, str(left)[:60])
        x = 130*mm
        for col in rest:
            c.drawRightString(x, y, str(col))
            x += 30*mm
        y -= 6*mm

    heading("Daily income")
    row("Day", "Services", "Income")
    for d in income:
        row(d.day.strftime("%d.%m.%Y"), d.services, f"{d.income:.2f}")
    row("Total", sum(d.services for d in income), f"{sum(d.income for d in income):.2f}")

    y -= 6*mm
    heading("Service types")
    row("Service", "Visits")
    for t in types:
        row(t.name, t.count)

    y -= 6*mm
    heading("Average service time")
    row("Service", "Completed", "Minutes")
    for t in times:
        row(t.name, t.count, f"{t.avg_minutes:.1f}")

    c.showPage()
    c.save()
    return buf.getvalue()


def _ensure_space(c: canvas.Canvas, y: float, needed: float, page_height: float) -> float:
    if y < 20*mm + needed:  # yeni sayfa
        c.showPage()
        c.setFont("Helvetica", 10)
        return page_height - 20*mm
    return y
