# === Bill PDF export ===

import io
from datetime import date
from typing import Optional

from reportlab.lib.colors import HexColor, black
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.lib.utils import simpleSplit
from reportlab.pdfgen import canvas

from arthavidhi.schemas.bill_schema import BillView
from arthavidhi.services.totals import format_money

# ---------- Config ----------
ACCENT = HexColor("#FF8703")
MUTED = HexColor("#888888")
MARGIN = 15 * mm
FOOTER_TEXT = "Thank you for your business! | ArthaVidhi"

# Item table column x positions (left edge for text, right edge for numbers)
COL_DESC = MARGIN
COL_QTY_R = 120 * mm
COL_RATE_R = 155 * mm
COL_AMOUNT_R = A4[0] - MARGIN
ROW_HEIGHT = 7 * mm


# ---------- Helpers ----------
def fmt_date(d: Optional[date]) -> str:
    return d.strftime("%B %d, %Y") if d else "N/A"


def rs(value) -> str:
    return f"Rs. {format_money(value)}"


def fmt_quantity(value) -> str:
    text = format_money(value)
    return text[:-3] if text.endswith(".00") else text


def pdf_filename(view: BillView) -> str:
    return f"{view.bill.invoice_number}.pdf"


# ---------- Layout blocks ----------
def draw_header(c: canvas.Canvas, view: BillView, top: float) -> float:
    company = view.company
    width = A4[0]

    c.setFillColor(black)
    c.setFont("Helvetica-Bold", 16)
    c.drawString(MARGIN, top, company.name or "")

    c.setFont("Helvetica", 9)
    lines = [
        company.address or "",
        f"Phone: {company.phone or ''} | Email: {company.email or ''}",
        f"PAN: {company.pan_number or ''} | VAT: {company.vat_number or ''}",
    ]
    y = top - 6 * mm
    for line in lines:
        c.drawString(MARGIN, y, line)
        y -= 4.5 * mm

    c.setFillColor(ACCENT)
    c.setFont("Helvetica-Bold", 22)
    c.drawRightString(width - MARGIN, top, "INVOICE")
    c.setFillColor(black)
    c.setFont("Helvetica", 11)
    c.drawRightString(width - MARGIN, top - 7 * mm, f"#{view.bill.invoice_number}")

    c.setStrokeColor(ACCENT)
    c.setLineWidth(1.5)
    c.line(MARGIN, y, width - MARGIN, y)
    return y - 8 * mm


def draw_bill_to(c: canvas.Canvas, view: BillView, top: float) -> float:
    bill = view.bill
    width = A4[0]

    c.setFillColor(MUTED)
    c.setFont("Helvetica-Bold", 9)
    c.drawString(MARGIN, top, "Bill To:")

    c.setFillColor(black)
    c.setFont("Helvetica-Bold", 11)
    c.drawString(MARGIN, top - 5 * mm, bill.client_name)

    c.setFont("Helvetica", 9)
    y = top - 10 * mm
    for line in simpleSplit(bill.client_address, "Helvetica", 9, 90 * mm):
        c.drawString(MARGIN, y, line)
        y -= 4.5 * mm
    c.drawString(MARGIN, y, bill.client_phone)
    y -= 4.5 * mm
    if bill.client_pan_number:
        c.drawString(MARGIN, y, f"PAN: {bill.client_pan_number}")
        y -= 4.5 * mm

    c.drawRightString(width - MARGIN, top - 5 * mm, f"Bill Date: {fmt_date(bill.bill_date)}")
    c.drawRightString(width - MARGIN, top - 10 * mm, f"Due Date: {fmt_date(bill.due_date)}")

    return y - 6 * mm


def draw_items_table(c: canvas.Canvas, view: BillView, top: float) -> float:
    width = A4[0]

    # Header row
    c.setFillColor(ACCENT)
    c.rect(MARGIN, top - ROW_HEIGHT + 2 * mm, width - 2 * MARGIN, ROW_HEIGHT, stroke=0, fill=1)
    c.setFillColor(HexColor("#FFFFFF"))
    c.setFont("Helvetica-Bold", 9)
    c.drawString(COL_DESC + 2 * mm, top - 3 * mm, "Description")
    c.drawRightString(COL_QTY_R, top - 3 * mm, "Quantity")
    c.drawRightString(COL_RATE_R, top - 3 * mm, "Rate (Rs.)")
    c.drawRightString(COL_AMOUNT_R - 2 * mm, top - 3 * mm, "Amount (Rs.)")

    c.setFillColor(black)
    c.setFont("Helvetica", 9)
    c.setStrokeColor(HexColor("#DDDDDD"))
    c.setLineWidth(0.5)

    y = top - ROW_HEIGHT - 3 * mm
    for item in view.bill.items:
        if y < 60 * mm:
            draw_footer(c)
            c.showPage()
            c.setFont("Helvetica", 9)
            y = A4[1] - MARGIN

        c.drawString(COL_DESC + 2 * mm, y, item.description[:60])
        c.drawRightString(COL_QTY_R, y, f"{fmt_quantity(item.quantity)} {item.unit}")
        c.drawRightString(COL_RATE_R, y, format_money(item.rate))
        c.drawRightString(COL_AMOUNT_R - 2 * mm, y, format_money(item.quantity * item.rate))
        c.line(MARGIN, y - 2.5 * mm, width - MARGIN, y - 2.5 * mm)
        y -= ROW_HEIGHT

    return y - 4 * mm


def draw_summary(c: canvas.Canvas, view: BillView, top: float) -> float:
    totals = view.totals
    label_x = COL_RATE_R - 35 * mm
    value_x = COL_AMOUNT_R - 2 * mm

    rows = [
        ("Subtotal", rs(totals.subtotal)),
        (totals.applied_discount_label, f"- {rs(totals.discount)}"),
        ("Subtotal after Discount", rs(totals.subtotal_after_discount)),
        ("VAT (13%)", rs(totals.vat)),
    ]

    c.setFont("Helvetica", 10)
    y = top
    for label, value in rows:
        c.drawString(label_x, y, label)
        c.drawRightString(value_x, y, value)
        y -= 6 * mm

    c.setStrokeColor(ACCENT)
    c.line(label_x, y + 3 * mm, value_x, y + 3 * mm)
    c.setFillColor(ACCENT)
    c.setFont("Helvetica-Bold", 12)
    c.drawString(label_x, y - 2 * mm, "Total")
    c.drawRightString(value_x, y - 2 * mm, rs(totals.total))
    c.setFillColor(black)
    return y - 10 * mm


def draw_footer(c: canvas.Canvas) -> None:
    c.setFillColor(MUTED)
    c.setFont("Helvetica", 9)
    c.drawCentredString(A4[0] / 2, 12 * mm, FOOTER_TEXT)
    c.setFillColor(black)


# ---------- Entry point ----------
def render_bill_pdf(view: BillView) -> bytes:
    """A4 invoice for one bill. Returns the PDF document as bytes."""
    buffer = io.BytesIO()
    c = canvas.Canvas(buffer, pagesize=A4)
    c.setTitle(f"Invoice {view.bill.invoice_number}")
    c.setAuthor(view.company.name or "ArthaVidhi")

    y = A4[1] - MARGIN - 5 * mm
    y = draw_header(c, view, y)
    y = draw_bill_to(c, view, y)
    y = draw_items_table(c, view, y)
    draw_summary(c, view, y)
    draw_footer(c)

    c.showPage()
    c.save()
    return buffer.getvalue()
