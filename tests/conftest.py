import io

import docx
import pytest
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """Generate a minimal single-page PDF with known text content."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Hello PDF World")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def multi_page_pdf_bytes() -> bytes:
    """Generate a two-page PDF with known text on each page."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Page one content")
    c.showPage()
    c.drawString(72, 720, "Page two content")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def empty_pdf_bytes() -> bytes:
    """Generate a valid PDF with no text content (blank page)."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.showPage()
    c.save()
    return buf.getvalue()


@pytest.fixture()
def nda_pdf_bytes() -> bytes:
    """Two-page confidentiality agreement that also mentions employment."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Mutual Non-Disclosure Agreement")
    c.drawString(72, 700, "This agreement covers confidential information exchanged")
    c.drawString(72, 680, "during employment discussions between the parties.")
    c.showPage()
    c.drawString(72, 720, "Termination: either party may terminate with notice.")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def sample_docx_bytes() -> bytes:
    """Word document with two paragraphs and a two-column table."""
    document = docx.Document()
    document.add_paragraph("Service Agreement")
    document.add_paragraph("The provider shall deliver the services monthly.")
    table = document.add_table(rows=2, cols=2)
    table.cell(0, 0).text = "Fee"
    table.cell(0, 1).text = "1000 USD"
    table.cell(1, 0).text = "Term"
    table.cell(1, 1).text = "12 months"
    buf = io.BytesIO()
    document.save(buf)
    return buf.getvalue()


@pytest.fixture()
def empty_docx_bytes() -> bytes:
    buf = io.BytesIO()
    docx.Document().save(buf)
    return buf.getvalue()
