"""
Utility per importi monetari.
Progetto: Quotation Manager (Gestionale Preventivi e Fatture)

Tutti i calcoli avvengono in Decimal; l'arrotondamento (ROUND_HALF_UP
a 2 decimali) si applica solo ai valori finali, mai alle singole righe.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Iterable, Tuple, Union

__all__ = [
    "CENT",
    "ZERO",
    "DocumentTotals",
    "to_decimal",
    "to_money",
    "compute_totals",
    "format_baht",
]

CENT = Decimal("0.01")
ZERO = Decimal("0")
HUNDRED = Decimal("100")

Number = Union[Decimal, int, float, str]


@dataclass(frozen=True)
class DocumentTotals:
    """Totali di un documento (preventivo o fattura)."""

    subtotal: Decimal
    discount: Decimal
    taxable: Decimal
    vat_amount: Decimal
    total: Decimal


def to_decimal(value: Number) -> Decimal:
    """
    Converte un valore in Decimal senza passare da float binari.

    Raises:
        ValueError: se il valore non è numerico
    """
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError) as e:
        raise ValueError(f"Importo non valido: {value!r}") from e


def to_money(value: Number) -> Decimal:
    """Arrotonda a 2 decimali con ROUND_HALF_UP."""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def compute_totals(
    lines: Iterable[Tuple[Number, Number]],
    discount: Number = ZERO,
    vat_rate: Number = ZERO,
) -> DocumentTotals:
    """
    Calcola subtotale, imponibile, IVA e totale di un documento.

    subtotal = Σ(quantità × prezzo), esatto
    total = (subtotal - sconto) × (1 + aliquota/100), arrotondato

    Lo sconto viene limitato all'intervallo [0, subtotal] così che il
    totale non sia mai negativo; i servizi rifiutano comunque in input
    uno sconto superiore al subtotale.

    Args:
        lines: coppie (quantità, prezzo unitario)
        discount: sconto a importo fisso
        vat_rate: aliquota IVA in percentuale (es. 7)

    Returns:
        DocumentTotals con importi a 2 decimali
    """
    subtotal = sum(
        (to_decimal(qty) * to_decimal(price) for qty, price in lines),
        ZERO,
    )
    discount_value = min(max(to_decimal(discount), ZERO), subtotal)
    taxable = subtotal - discount_value
    rate = to_decimal(vat_rate)

    total = to_money(taxable * (1 + rate / HUNDRED))
    taxable = to_money(taxable)

    return DocumentTotals(
        subtotal=to_money(subtotal),
        discount=to_money(discount_value),
        taxable=taxable,
        vat_amount=total - taxable,
        total=total,
    )


def format_baht(value: Number) -> str:
    """Formatta un importo in Baht thailandesi, es. ฿1,234.50."""
    amount = to_money(value)
    sign = "-" if amount < 0 else ""
    return f"{sign}฿{abs(amount):,.2f}"
