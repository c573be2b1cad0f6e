"""
Schemas Pydantic per la dashboard
Progetto: Quotation Manager (Gestionale Preventivi e Fatture)
"""

import uuid
from datetime import date, time
from typing import List, Optional

from pydantic import Field

from app.schemas.common import ApiModel, Money


class InvoiceStatusCounts(ApiModel):
    unpaid: int = 0
    partial: int = 0
    paid: int = 0
    overdue: int = 0


class MonthlySales(ApiModel):
    """Vendite fatturate in un mese (formato YYYY-MM)."""

    month: str
    total: Money
    count: int


class TopCustomer(ApiModel):
    customer_name: str
    total: Money
    invoice_count: int


class TopProduct(ApiModel):
    product_name: str
    quantity: int
    total: Money


class UpcomingAppointment(ApiModel):
    id: uuid.UUID
    title: str
    appointment_date: date
    start_time: Optional[time] = None
    appointment_type: str
    location: Optional[str] = None


class DashboardSummary(ApiModel):
    """Riepilogo per la pagina principale."""

    total_quotations: int
    pending_quotations: int
    total_invoices: int
    total_customers: int
    total_products: int
    invoice_status: InvoiceStatusCounts
    today_sales: Money
    total_paid: Money
    total_remaining: Money
    monthly_sales: List[MonthlySales] = Field(default_factory=list)
    top_customers: List[TopCustomer] = Field(default_factory=list)
    top_products: List[TopProduct] = Field(default_factory=list)
    upcoming_appointments: List[UpcomingAppointment] = Field(default_factory=list)


__all__ = ["DashboardSummary"]
