"""
Integration tests for AppointmentService.
"""

import uuid
from datetime import date, time, timedelta
from decimal import Decimal

import pytest

from app.core.exceptions import InvalidStateError, NotFoundError, ValidationError
from app.models.appointment import AppointmentStatus, AppointmentType
from app.schemas.appointment import AppointmentCreate, AppointmentUpdate
from app.schemas.document import LineItemCreate
from app.schemas.invoice import InvoiceCreate
from app.services.appointment_service import appointment_service
from app.services.invoice_service import invoice_service


def _appointment_data(**overrides) -> AppointmentCreate:
    values = {
        "title": "Install air conditioner",
        "appointment_date": date.today() + timedelta(days=1),
        "start_time": time(9, 0),
        "end_time": time(11, 0),
        "appointment_type": AppointmentType.INSTALLATION,
    }
    values.update(overrides)
    return AppointmentCreate(**values)


class TestAppointmentService:
    """Tests for appointment CRUD and status transitions."""

    async def test_create_pending(self, db):
        """Test nuovo appuntamento in stato pending."""
        appointment = await appointment_service.create(db, _appointment_data())

        assert appointment.status == AppointmentStatus.PENDING.value
        assert appointment.invoice_number is None

    async def test_create_linked_to_invoice(self, db):
        """Test collegamento a una fattura esistente."""
        invoice = await invoice_service.create(
            db,
            InvoiceCreate(
                customer_name="Somchai",
                items=[LineItemCreate(product_name="Unit", quantity=1, price=Decimal("500"))],
            ),
        )

        appointment = await appointment_service.create(
            db, _appointment_data(invoice_id=invoice.id, appointment_type=AppointmentType.PAYMENT)
        )

        assert appointment.invoice_id == invoice.id
        assert appointment.invoice_number == invoice.invoice_number

    async def test_create_unknown_invoice(self, db):
        """Test fattura collegata inesistente."""
        with pytest.raises(NotFoundError):
            await appointment_service.create(db, _appointment_data(invoice_id=uuid.uuid4()))

    def test_end_before_start_rejected(self):
        """Test fascia oraria invertita rifiutata in input."""
        with pytest.raises(ValueError):
            _appointment_data(start_time=time(12, 0), end_time=time(10, 0))

    async def test_complete_once(self, db):
        """Test pending → completed una sola volta."""
        appointment = await appointment_service.create(db, _appointment_data())

        done = await appointment_service.update_status(db, appointment.id, AppointmentStatus.COMPLETED)
        assert done.status == AppointmentStatus.COMPLETED.value

        with pytest.raises(InvalidStateError):
            await appointment_service.update_status(db, appointment.id, AppointmentStatus.CANCELLED)

    async def test_cancelled_is_final(self, db):
        """Test un appuntamento annullato non torna pending."""
        appointment = await appointment_service.create(db, _appointment_data())
        await appointment_service.update_status(db, appointment.id, AppointmentStatus.CANCELLED)

        with pytest.raises(InvalidStateError):
            await appointment_service.update_status(db, appointment.id, AppointmentStatus.PENDING)

    async def test_update_details_only(self, db):
        """Test l'aggiornamento non tocca lo stato."""
        appointment = await appointment_service.create(db, _appointment_data())

        updated = await appointment_service.update(
            db, appointment.id, AppointmentUpdate(title="Maintenance", location="Chiang Mai")
        )

        assert updated.title == "Maintenance"
        assert updated.location == "Chiang Mai"
        assert updated.status == AppointmentStatus.PENDING.value

    async def test_update_invalid_time_range(self, db):
        """Test fine prima dell'inizio esistente."""
        appointment = await appointment_service.create(db, _appointment_data())

        with pytest.raises(ValidationError):
            await appointment_service.update(db, appointment.id, AppointmentUpdate(end_time=time(8, 0)))

    async def test_update_required_field_null(self, db):
        """Test titolo obbligatorio non annullabile."""
        appointment = await appointment_service.create(db, _appointment_data())

        with pytest.raises(ValidationError):
            await appointment_service.update(db, appointment.id, AppointmentUpdate(title=None))

    async def test_filters(self, db):
        """Test filtri per stato e intervallo di date."""
        today = date.today()
        near = await appointment_service.create(db, _appointment_data(appointment_date=today))
        await appointment_service.create(db, _appointment_data(appointment_date=today + timedelta(days=20)))

        in_range = await appointment_service.get_all(db, date_from=today, date_to=today + timedelta(days=7))
        assert [a.id for a in in_range] == [near.id]

        completed = await appointment_service.get_all(db, status=AppointmentStatus.COMPLETED)
        assert completed == []

    async def test_delete_any_state(self, db):
        """Test eliminazione anche di un appuntamento completato."""
        appointment = await appointment_service.create(db, _appointment_data())
        await appointment_service.update_status(db, appointment.id, AppointmentStatus.COMPLETED)

        await appointment_service.delete(db, appointment.id)

        with pytest.raises(NotFoundError):
            await appointment_service.get_by_id(db, appointment.id)
