"""
Costruzione dei documenti commerciali
Progetto: Quotation Manager (Gestionale Preventivi e Fatture)

Logica comune a preventivi e fatture: istantanea cliente, righe da
listino, validazione importi e collegamento delle immagini caricate.
"""

import logging
import uuid
from decimal import Decimal
from typing import Iterable, List, Optional, Sequence, Type, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import NotFoundError, ValidationError
from app.core.money import DocumentTotals, compute_totals, to_decimal
from app.models.attachment import DocumentImage
from app.models.customer import Customer
from app.models.document import CustomerSnapshot, LineItemMixin
from app.models.product import Product
from app.schemas.attachment import ImageAttach
from app.schemas.document import DocumentCreateBase, LineItemCreate
from app.services.storage_service import StorageService, storage_service

logger = logging.getLogger(__name__)

ItemT = TypeVar("ItemT", bound=LineItemMixin)


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class DocumentBuilder:
    """Helper condiviso dai servizi di preventivi e fatture."""

    def __init__(self, storage: StorageService = storage_service) -> None:
        self.storage = storage

    # ------------------------------------------------------------
    # Cliente
    # ------------------------------------------------------------
    async def resolve_customer(
        self,
        db: AsyncSession,
        data: DocumentCreateBase,
    ) -> tuple[Optional[uuid.UUID], CustomerSnapshot]:
        """
        Determina l'istantanea cliente del nuovo documento.

        I campi indicati nella richiesta hanno la precedenza; quelli omessi
        vengono copiati dall'anagrafica se `customer_id` è presente.

        Raises:
            NotFoundError: customer_id inesistente
            ValidationError: nome cliente mancante
        """
        customer: Optional[Customer] = None
        if data.customer_id is not None:
            customer = await db.get(Customer, data.customer_id)
            if customer is None:
                raise NotFoundError(f"Cliente {data.customer_id} non trovato")

        def pick(field: str, attr: str) -> Optional[str]:
            value = _clean(getattr(data, field))
            if value is None and customer is not None:
                value = _clean(getattr(customer, attr))
            return value

        name = pick("customer_name", "name")
        if not name:
            raise ValidationError("Il nome del cliente è obbligatorio")

        snapshot = CustomerSnapshot(
            name=name,
            phone=pick("customer_phone", "phone"),
            address=pick("customer_address", "address"),
            tax_id=pick("customer_tax_id", "tax_id"),
        )
        return (customer.id if customer else None), snapshot

    # ------------------------------------------------------------
    # Righe
    # ------------------------------------------------------------
    async def build_items(
        self,
        db: AsyncSession,
        items: Sequence[LineItemCreate],
        item_cls: Type[ItemT],
    ) -> List[ItemT]:
        """
        Valida le righe e le converte in modelli.

        Raises:
            ValidationError: nessuna riga, quantità non positiva, prezzo negativo
            NotFoundError: prodotto inesistente o disattivato
        """
        if not items:
            raise ValidationError("Il documento deve contenere almeno una riga")

        product_ids = {i.product_id for i in items if i.product_id is not None}
        products: dict[uuid.UUID, Product] = {}
        if product_ids:
            result = await db.execute(select(Product).where(Product.id.in_(product_ids)))
            products = {p.id: p for p in result.scalars().all()}

        built: List[ItemT] = []
        for position, item in enumerate(items, start=1):
            product = None
            if item.product_id is not None:
                product = products.get(item.product_id)
                if product is None or not product.is_active:
                    raise NotFoundError(f"Prodotto {item.product_id} non trovato")

            if item.quantity <= 0:
                raise ValidationError(f"Riga {position}: la quantità deve essere positiva")

            name = _clean(item.product_name) or (product.name if product else None)
            if not name:
                raise ValidationError(f"Riga {position}: nome prodotto mancante")

            price = item.price if item.price is not None else (product.price if product else None)
            if price is None:
                raise ValidationError(f"Riga {position}: prezzo mancante")
            if price < 0:
                raise ValidationError(f"Riga {position}: il prezzo non può essere negativo")

            description = item.description
            if description is None and product is not None:
                description = product.description

            built.append(
                item_cls(
                    product_id=item.product_id,
                    product_name=name,
                    description=description,
                    quantity=item.quantity,
                    price=to_decimal(price),
                    position=position,
                )
            )
        return built

    @staticmethod
    def copy_items(source: Iterable[LineItemMixin], item_cls: Type[ItemT]) -> List[ItemT]:
        """Copie indipendenti di righe esistenti (es. preventivo → fattura)."""
        return [
            item_cls(
                product_id=item.product_id,
                product_name=item.product_name,
                description=item.description,
                quantity=item.quantity,
                price=item.price,
                position=item.position,
            )
            for item in source
        ]

    # ------------------------------------------------------------
    # Totali
    # ------------------------------------------------------------
    @staticmethod
    def compute_totals(
        items: Iterable[LineItemMixin],
        discount: Optional[Decimal],
        vat_rate: Optional[Decimal],
    ) -> DocumentTotals:
        """
        Calcola i totali rifiutando sconti non validi.

        Raises:
            ValidationError: sconto negativo o superiore al subtotale
        """
        items = list(items)
        discount = to_decimal(discount) if discount is not None else Decimal("0")
        rate = to_decimal(vat_rate) if vat_rate is not None else settings.default_vat_rate

        if discount < 0:
            raise ValidationError("Lo sconto non può essere negativo")
        if rate < 0:
            raise ValidationError("L'aliquota IVA non può essere negativa")

        totals = compute_totals(((i.quantity, i.price) for i in items), discount, rate)
        if discount > totals.subtotal:
            raise ValidationError("Lo sconto non può superare il subtotale")
        return totals

    # ------------------------------------------------------------
    # Immagini
    # ------------------------------------------------------------
    def build_images(self, images: Sequence[ImageAttach]) -> List[DocumentImage]:
        """
        Prepara i record delle immagini già caricate.

        Raises:
            ValidationError: URL non valido o file non presente nello storage
        """
        records = []
        for image in images:
            filename = self.storage.filename_from_url(image.url)
            if not self.storage.exists(filename):
                raise ValidationError(f"Immagine {image.url} non trovata, caricarla prima")
            records.append(
                DocumentImage(
                    url=image.url,
                    filename=filename,
                    caption=_clean(image.caption),
                )
            )
        return records


document_builder = DocumentBuilder()
