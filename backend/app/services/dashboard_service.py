"""
Service per la dashboard
Progetto: Quotation Manager (Gestionale Preventivi e Fatture)

Aggregati di sola lettura: conteggi, vendite, incassi e classifiche.
"""

import logging
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.money import to_decimal, to_money
from app.models.appointment import Appointment, AppointmentStatus
from app.models.customer import Customer
from app.models.invoice import Invoice, InvoiceItem, InvoiceStatus, Payment, compute_invoice_status
from app.models.product import Product
from app.models.quotation import Quotation, QuotationStatus
from app.schemas.dashboard import (
    DashboardSummary,
    InvoiceStatusCounts,
    MonthlySales,
    TopCustomer,
    TopProduct,
    UpcomingAppointment,
)

logger = logging.getLogger(__name__)

MONTHS_BACK = 6
TOP_LIMIT = 5
UPCOMING_DAYS = 7


def last_months(today: date, count: int = MONTHS_BACK) -> list[str]:
    """Chiavi YYYY-MM degli ultimi `count` mesi, dal più vecchio al corrente."""
    year, month = today.year, today.month
    keys = []
    for _ in range(count):
        keys.append(f"{year:04d}-{month:02d}")
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    return list(reversed(keys))


def _as_date(value: datetime) -> date:
    return value.date() if isinstance(value, datetime) else value


class DashboardService:
    """Calcola il riepilogo della dashboard."""

    async def _count(self, db: AsyncSession, stmt) -> int:
        return int(await db.scalar(stmt) or 0)

    async def get_summary(self, db: AsyncSession, today: Optional[date] = None) -> DashboardSummary:
        today = today or date.today()

        # Conteggi
        total_quotations = await self._count(db, select(func.count(Quotation.id)))
        pending_quotations = await self._count(
            db,
            select(func.count(Quotation.id)).where(
                Quotation.status.in_([QuotationStatus.DRAFT.value, QuotationStatus.SENT.value])
            ),
        )
        total_customers = await self._count(db, select(func.count(Customer.id)))
        total_products = await self._count(
            db, select(func.count(Product.id)).where(Product.is_active == True)  # noqa: E712
        )

        # Fatture: stato, vendite del giorno e per mese
        rows = (
            await db.execute(
                select(Invoice.payment_status, Invoice.due_date, Invoice.total, Invoice.created_at)
            )
        ).all()

        status_counts = {s.value: 0 for s in InvoiceStatus}
        months = last_months(today)
        monthly = {key: [Decimal("0"), 0] for key in months}
        today_sales = Decimal("0")
        invoiced_total = Decimal("0")

        for payment_status, due_date, total, created_at in rows:
            status_counts[compute_invoice_status(payment_status, due_date, today).value] += 1
            invoiced_total += total
            created = _as_date(created_at)
            if created == today:
                today_sales += total
            key = f"{created.year:04d}-{created.month:02d}"
            if key in monthly:
                monthly[key][0] += total
                monthly[key][1] += 1

        total_paid = to_decimal(await db.scalar(select(func.coalesce(func.sum(Payment.amount), 0))) or 0)

        # Classifiche
        sales_sum = func.sum(Invoice.total)
        top_customers = (
            await db.execute(
                select(Invoice.customer_name, sales_sum, func.count(Invoice.id))
                .group_by(Invoice.customer_name)
                .order_by(sales_sum.desc())
                .limit(TOP_LIMIT)
            )
        ).all()

        qty_sum = func.sum(InvoiceItem.quantity)
        top_products = (
            await db.execute(
                select(
                    InvoiceItem.product_name,
                    qty_sum,
                    func.sum(InvoiceItem.quantity * InvoiceItem.price),
                )
                .group_by(InvoiceItem.product_name)
                .order_by(qty_sum.desc())
                .limit(TOP_LIMIT)
            )
        ).all()

        upcoming = (
            await db.execute(
                select(Appointment)
                .where(
                    Appointment.status == AppointmentStatus.PENDING.value,
                    Appointment.appointment_date >= today,
                    Appointment.appointment_date <= today + timedelta(days=UPCOMING_DAYS),
                )
                .order_by(Appointment.appointment_date, Appointment.start_time)
                .limit(TOP_LIMIT)
            )
        ).scalars().all()

        return DashboardSummary(
            total_quotations=total_quotations,
            pending_quotations=pending_quotations,
            total_invoices=len(rows),
            total_customers=total_customers,
            total_products=total_products,
            invoice_status=InvoiceStatusCounts(**status_counts),
            today_sales=to_money(today_sales),
            total_paid=to_money(total_paid),
            total_remaining=to_money(invoiced_total - total_paid),
            monthly_sales=[
                MonthlySales(month=key, total=to_money(monthly[key][0]), count=monthly[key][1])
                for key in months
            ],
            top_customers=[
                TopCustomer(customer_name=name, total=to_money(total or 0), invoice_count=count)
                for name, total, count in top_customers
            ],
            top_products=[
                TopProduct(product_name=name, quantity=int(qty or 0), total=to_money(total or 0))
                for name, qty, total in top_products
            ],
            upcoming_appointments=[
                UpcomingAppointment.model_validate(a) for a in upcoming
            ],
        )


dashboard_service = DashboardService()
