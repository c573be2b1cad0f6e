"""
Integration tests for signatures and document images.
"""

import base64
import uuid

import pytest
from sqlalchemy import select

from app.core.exceptions import InvalidStateError, NotFoundError, ValidationError
from app.models.attachment import DocumentImage, SignatureType
from app.schemas.attachment import ImageAttach, SignatureCreate
from app.services.attachment_service import DocumentKind, attachment_service
from app.services.conversion_service import conversion_service
from app.services.quotation_service import quotation_service
from app.services.storage_service import storage_service

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64
PNG_DATA_URL = "data:image/png;base64," + base64.b64encode(PNG_BYTES).decode()


def _signature(signature_type: SignatureType = SignatureType.CUSTOMER, **overrides) -> SignatureCreate:
    values = {
        "signature_type": signature_type,
        "signature_data": PNG_DATA_URL,
        "signer_name": "Somchai Jaidee",
    }
    values.update(overrides)
    return SignatureCreate(**values)


# ============================================================
# Tests for signatures
# ============================================================


class TestSignatures:
    """Tests for document signatures."""

    async def test_add_signature(self, db, quotation_data):
        """Test firma salvata nello storage e collegata al preventivo."""
        quotation = await quotation_service.create(db, quotation_data)

        signature = await attachment_service.add_signature(
            db, DocumentKind.QUOTATION, quotation.id, _signature()
        )

        assert signature.quotation_id == quotation.id
        assert signature.signature_type == SignatureType.CUSTOMER.value
        assert storage_service.exists(storage_service.filename_from_url(signature.image_url))

    async def test_one_signature_per_type(self, db, quotation_data):
        """Test una sola firma per tipo e documento."""
        quotation = await quotation_service.create(db, quotation_data)
        await attachment_service.add_signature(db, DocumentKind.QUOTATION, quotation.id, _signature())

        with pytest.raises(InvalidStateError):
            await attachment_service.add_signature(db, DocumentKind.QUOTATION, quotation.id, _signature())

        shop = await attachment_service.add_signature(
            db, DocumentKind.QUOTATION, quotation.id, _signature(SignatureType.SHOP, signer_name="Shop")
        )
        assert shop.signature_type == SignatureType.SHOP.value

    async def test_signer_required(self, db, quotation_data):
        """Test nome firmatario obbligatorio."""
        quotation = await quotation_service.create(db, quotation_data)

        with pytest.raises(ValidationError):
            await attachment_service.add_signature(
                db, DocumentKind.QUOTATION, quotation.id, _signature(signer_name="   ")
            )

    async def test_invalid_image(self, db, quotation_data):
        """Test immagine firma non valida."""
        quotation = await quotation_service.create(db, quotation_data)

        with pytest.raises(ValidationError):
            await attachment_service.add_signature(
                db, DocumentKind.QUOTATION, quotation.id, _signature(signature_data="bm90IGFuIGltYWdl")
            )

    async def test_signature_on_invoice(self, db, quotation_data):
        """Test firma sulla fattura, non copiata dal preventivo."""
        quotation = await quotation_service.create(db, quotation_data)
        await attachment_service.add_signature(db, DocumentKind.QUOTATION, quotation.id, _signature())
        invoice = await conversion_service.convert_to_invoice(db, quotation.id)

        assert invoice.signatures == []

        signature = await attachment_service.add_signature(
            db, DocumentKind.INVOICE, invoice.id, _signature()
        )
        assert signature.invoice_id == invoice.id

    async def test_converted_quotation_rejects_signature(self, db, quotation_data):
        """Test preventivo convertito non modificabile."""
        quotation = await quotation_service.create(db, quotation_data)
        await conversion_service.convert_to_invoice(db, quotation.id)

        with pytest.raises(InvalidStateError):
            await attachment_service.add_signature(db, DocumentKind.QUOTATION, quotation.id, _signature())

    async def test_missing_document(self, db):
        """Test documento inesistente."""
        with pytest.raises(NotFoundError):
            await attachment_service.add_signature(db, DocumentKind.INVOICE, uuid.uuid4(), _signature())


# ============================================================
# Tests for images
# ============================================================


class TestImages:
    """Tests for document images."""

    async def test_add_and_delete_image(self, db, quotation_data):
        """Test collegamento e cancellazione con rimozione del file."""
        quotation = await quotation_service.create(db, quotation_data)
        stored = storage_service.save(PNG_BYTES)

        images = await attachment_service.add_images(
            db, DocumentKind.QUOTATION, quotation.id, [ImageAttach(url=stored.url, caption="Before")]
        )
        assert images[0].caption == "Before"

        await attachment_service.delete_image(db, images[0].id)

        assert await db.get(DocumentImage, images[0].id) is None
        assert not storage_service.exists(stored.filename)

    async def test_shared_file_kept_until_unreferenced(self, db, quotation_factory):
        """Test il file condiviso con la fattura resta finché è referenziato."""
        stored = storage_service.save(PNG_BYTES)
        quotation = await quotation_service.create(
            db, quotation_factory(images=[ImageAttach(url=stored.url)])
        )
        invoice = await conversion_service.convert_to_invoice(db, quotation.id)

        await attachment_service.delete_image(db, invoice.images[0].id)

        remaining = (await db.execute(select(DocumentImage).where(DocumentImage.url == stored.url))).scalars().all()
        assert len(remaining) == 1
        assert storage_service.exists(stored.filename)

    async def test_delete_image_of_converted_quotation(self, db, quotation_factory):
        """Test immagini del preventivo convertito non eliminabili."""
        stored = storage_service.save(PNG_BYTES)
        quotation = await quotation_service.create(
            db, quotation_factory(images=[ImageAttach(url=stored.url)])
        )
        await conversion_service.convert_to_invoice(db, quotation.id)

        with pytest.raises(InvalidStateError):
            await attachment_service.delete_image(db, quotation.images[0].id)

    async def test_delete_missing_image(self, db):
        """Test immagine inesistente."""
        with pytest.raises(NotFoundError):
            await attachment_service.delete_image(db, uuid.uuid4())

    async def test_quotation_delete_removes_files(self, db, quotation_factory):
        """Test eliminazione del preventivo rimuove firme e immagini dallo storage."""
        stored = storage_service.save(PNG_BYTES)
        quotation = await quotation_service.create(
            db, quotation_factory(images=[ImageAttach(url=stored.url)])
        )
        signature = await attachment_service.add_signature(
            db, DocumentKind.QUOTATION, quotation.id, _signature()
        )

        await quotation_service.delete(db, quotation.id)

        assert not storage_service.exists(stored.filename)
        assert not storage_service.exists(storage_service.filename_from_url(signature.image_url))


# ============================================================
# Tests for upload deletion
# ============================================================


class TestDeleteUpload:
    """Tests for deleting uploaded files by name."""

    async def test_unreferenced_file_deleted(self, db):
        """Test file non collegato rimosso dallo storage."""
        stored = storage_service.save(PNG_BYTES)

        await attachment_service.delete_upload(db, stored.filename)

        assert not storage_service.exists(stored.filename)

    async def test_linked_image_file_kept(self, db, quotation_factory):
        """Test file usato da un'immagine del preventivo non eliminabile."""
        stored = storage_service.save(PNG_BYTES)
        quotation = await quotation_service.create(
            db, quotation_factory(images=[ImageAttach(url=stored.url)])
        )

        with pytest.raises(InvalidStateError):
            await attachment_service.delete_upload(db, stored.filename)

        assert storage_service.exists(stored.filename)
        refreshed = await quotation_service.get_by_id(db, quotation.id)
        assert [i.url for i in refreshed.images] == [stored.url]

    async def test_signature_file_kept(self, db, quotation_data):
        """Test file di una firma non eliminabile per nome."""
        quotation = await quotation_service.create(db, quotation_data)
        signature = await attachment_service.add_signature(
            db, DocumentKind.QUOTATION, quotation.id, _signature()
        )
        filename = storage_service.filename_from_url(signature.image_url)

        with pytest.raises(InvalidStateError):
            await attachment_service.delete_upload(db, filename)

        assert storage_service.exists(filename)

    async def test_missing_file(self, db):
        """Test file inesistente."""
        with pytest.raises(NotFoundError):
            await attachment_service.delete_upload(db, f"{uuid.uuid4().hex}.png")

    async def test_invalid_filename(self, db):
        """Test nome file non generato dallo storage."""
        with pytest.raises(ValidationError):
            await attachment_service.delete_upload(db, "..secret.png")
