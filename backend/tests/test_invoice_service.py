"""
Integration tests for InvoiceService.

Covers direct creation, the payment ledger, status reconciliation,
the read-time overdue status and deletion rules.
"""

import uuid
from datetime import date, timedelta
from decimal import Decimal

import pytest

from app.core.exceptions import InvalidStateError, NotFoundError, ValidationError
from app.models.appointment import Appointment
from app.models.invoice import InvoiceStatus, PaymentMethod, PaymentStatus
from app.schemas.document import LineItemCreate
from app.schemas.invoice import InvoiceCreate, PaymentCreate
from app.services.invoice_service import invoice_service


def _invoice_data(total: str = "1000", **overrides) -> InvoiceCreate:
    """Fattura con una riga e IVA 0: il totale coincide con il prezzo."""
    values = {
        "customer_name": "Somchai Jaidee",
        "items": [LineItemCreate(product_name="Service", quantity=1, price=Decimal(total))],
        "vat_rate": Decimal("0"),
    }
    values.update(overrides)
    return InvoiceCreate(**values)


@pytest.fixture
async def invoice(db):
    """Fattura diretta da 1000."""
    return await invoice_service.create(db, _invoice_data())


# ============================================================
# Tests for creation
# ============================================================


class TestCreateInvoice:
    """Tests for direct invoice creation."""

    async def test_create(self, db):
        """Test fattura diretta non pagata con scadenza di default."""
        created = await invoice_service.create(db, _invoice_data())

        assert created.invoice_number == f"INV-{date.today().year}-0001"
        assert created.quotation_id is None
        assert created.payment_status == PaymentStatus.UNPAID.value
        assert created.due_date == date.today() + timedelta(days=30)
        assert created.total == Decimal("1000.00")
        assert created.remaining_amount == Decimal("1000.00")

    async def test_default_vat(self, db):
        """Test aliquota di default da configurazione (7%)."""
        created = await invoice_service.create(db, _invoice_data(vat_rate=None))

        assert created.vat_rate == Decimal("7.00")
        assert created.total == Decimal("1070.00")


# ============================================================
# Tests for the payment ledger
# ============================================================


class TestRecordPayment:
    """Tests for payment recording."""

    async def test_payment_scenario(self, db, invoice):
        """Test totale 1000: 400 → partial/600; 700 rifiutato; 600 → paid/0."""
        after_first = await invoice_service.record_payment(
            db, invoice.id, PaymentCreate(amount=Decimal("400"))
        )
        assert after_first.payment_status == PaymentStatus.PARTIAL.value
        assert after_first.remaining_amount == Decimal("600.00")

        with pytest.raises(ValidationError) as exc_info:
            await invoice_service.record_payment(db, invoice.id, PaymentCreate(amount=Decimal("700")))
        assert exc_info.value.extra == {"remainingAmount": 600.0}

        unchanged = await invoice_service.get_by_id(db, invoice.id)
        assert unchanged.paid_amount == Decimal("400.00")

        settled = await invoice_service.record_payment(
            db, invoice.id, PaymentCreate(amount=Decimal("600"), method=PaymentMethod.TRANSFER)
        )
        assert settled.payment_status == PaymentStatus.PAID.value
        assert settled.remaining_amount == Decimal("0.00")
        assert [p.method for p in settled.payments] == ["cash", "transfer"]

    async def test_paid_rejects_payment(self, db, invoice):
        """Test una fattura saldata non accetta altri pagamenti."""
        await invoice_service.record_payment(db, invoice.id, PaymentCreate(amount=Decimal("1000")))

        with pytest.raises(InvalidStateError):
            await invoice_service.record_payment(db, invoice.id, PaymentCreate(amount=Decimal("1")))

    async def test_non_positive_amount(self, db, invoice):
        """Test importo zero rifiutato."""
        with pytest.raises(ValidationError):
            await invoice_service.record_payment(db, invoice.id, PaymentCreate(amount=Decimal("0")))

    async def test_paid_amount_never_exceeds_total(self, db, invoice):
        """Test 0 ≤ pagato ≤ totale dopo una sequenza di pagamenti."""
        for amount in ("250", "250", "499.99"):
            current = await invoice_service.record_payment(
                db, invoice.id, PaymentCreate(amount=Decimal(amount))
            )
            assert Decimal("0") <= current.paid_amount <= current.total

        assert current.payment_status == PaymentStatus.PARTIAL.value
        assert current.remaining_amount == Decimal("0.01")

    async def test_missing_invoice(self, db):
        """Test pagamento su fattura inesistente."""
        with pytest.raises(NotFoundError):
            await invoice_service.record_payment(db, uuid.uuid4(), PaymentCreate(amount=Decimal("1")))


# ============================================================
# Tests for status
# ============================================================


class TestInvoiceStatus:
    """Tests for status reconciliation and overdue filtering."""

    async def test_update_status_consistent(self, db, invoice):
        """Test stato coerente con il registro accettato."""
        updated = await invoice_service.update_status(db, invoice.id, PaymentStatus.UNPAID)

        assert updated.payment_status == PaymentStatus.UNPAID.value

    async def test_update_status_inconsistent(self, db, invoice):
        """Test impossibile segnare pagata una fattura senza pagamenti."""
        with pytest.raises(InvalidStateError):
            await invoice_service.update_status(db, invoice.id, PaymentStatus.PAID)

    async def test_overdue_filter(self, db):
        """Test filtro 'overdue' calcolato dalla data di scadenza."""
        past = await invoice_service.create(db, _invoice_data(due_date=date.today() - timedelta(days=1)))
        await invoice_service.create(db, _invoice_data())

        overdue = await invoice_service.get_all(db, status=InvoiceStatus.OVERDUE)
        assert [i.id for i in overdue] == [past.id]
        assert overdue[0].status == InvoiceStatus.OVERDUE.value
        # Lo stato memorizzato resta quello di pagamento
        assert overdue[0].payment_status == PaymentStatus.UNPAID.value

    async def test_paid_past_due_not_overdue(self, db):
        """Test fattura saldata dopo la scadenza non è overdue."""
        past = await invoice_service.create(db, _invoice_data(due_date=date.today() - timedelta(days=5)))
        settled = await invoice_service.record_payment(db, past.id, PaymentCreate(amount=Decimal("1000")))

        assert settled.status == InvoiceStatus.PAID.value


# ============================================================
# Tests for deletion
# ============================================================


class TestDeleteInvoice:
    """Tests for invoice deletion."""

    async def test_delete_without_payments(self, db, invoice):
        """Test eliminazione consentita e appuntamenti scollegati."""
        appointment = Appointment(
            title="Installation",
            appointment_date=date.today(),
            invoice_id=invoice.id,
        )
        db.add(appointment)
        await db.commit()

        await invoice_service.delete(db, invoice.id)

        with pytest.raises(NotFoundError):
            await invoice_service.get_by_id(db, invoice.id)
        await db.refresh(appointment)
        assert appointment.invoice_id is None

    async def test_delete_with_payments(self, db, invoice):
        """Test fattura con pagamenti non eliminabile."""
        await invoice_service.record_payment(db, invoice.id, PaymentCreate(amount=Decimal("100")))

        with pytest.raises(InvalidStateError):
            await invoice_service.delete(db, invoice.id)
