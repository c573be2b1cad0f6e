"""
Tests for the HTML rendering behind PDF generation.

WeasyPrint needs native libraries, so only the Jinja2 rendering is
exercised here.
"""

from datetime import date
from decimal import Decimal

from app.schemas.invoice import PaymentCreate
from app.services.conversion_service import conversion_service
from app.services.invoice_service import invoice_service
from app.services.pdf_service import format_date, pdf_service
from app.services.quotation_service import quotation_service


class TestPdfRendering:
    """Tests for document HTML rendering."""

    async def test_quotation_html(self, db, quotation_data):
        """Test numero, cliente, righe e totali nel preventivo."""
        quotation = await quotation_service.create(db, quotation_data)

        html = pdf_service.render_html(quotation)

        assert quotation.quotation_number in html
        assert "ใบเสนอราคา" in html
        assert "Somchai Jaidee" in html
        assert "Installation" in html
        assert "฿267.50" in html
        assert "฿17.50" in html

    async def test_invoice_html(self, db, quotation_data):
        """Test fattura con riferimento al preventivo e pagamenti."""
        quotation = await quotation_service.create(db, quotation_data)
        invoice = await conversion_service.convert_to_invoice(db, quotation.id)
        invoice = await invoice_service.record_payment(db, invoice.id, PaymentCreate(amount=Decimal("100")))

        html = pdf_service.render_html(invoice)

        assert invoice.invoice_number in html
        assert quotation.quotation_number in html
        assert "ชำระบางส่วน" in html
        assert "฿167.50" in html

    async def test_customer_text_is_escaped(self, db, quotation_factory):
        """Test autoescape dei dati inseriti dall'utente."""
        quotation = await quotation_service.create(db, quotation_factory(customer_name="<b>Evil</b>"))

        html = pdf_service.render_html(quotation)

        assert "<b>Evil</b>" not in html
        assert "&lt;b&gt;Evil&lt;/b&gt;" in html

    def test_format_date(self):
        """Test formato data gg/mm/aaaa."""
        assert format_date(date(2026, 1, 5)) == "05/01/2026"
        assert format_date(None) == "-"
