"""
Unit tests for local file storage.
"""

import base64

import pytest

from app.core.exceptions import NotFoundError, ValidationError
from app.services.storage_service import StorageService, decode_image_data, detect_image_type

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


@pytest.fixture
def storage(tmp_path):
    return StorageService(base_dir=tmp_path, max_size=1024)


class TestImageDetection:
    """Tests for image type detection and data URL decoding."""

    def test_detect_png(self):
        """Test riconoscimento PNG dai magic bytes."""
        assert detect_image_type(PNG_BYTES) == "image/png"

    def test_detect_jpeg(self):
        """Test riconoscimento JPEG."""
        assert detect_image_type(b"\xff\xd8\xff\xe0" + b"\x00" * 10) == "image/jpeg"

    def test_detect_unknown(self):
        """Test contenuto non immagine."""
        assert detect_image_type(b"%PDF-1.7") is None

    def test_decode_data_url(self):
        """Test data URL con prefisso."""
        data = "data:image/png;base64," + base64.b64encode(PNG_BYTES).decode()
        assert decode_image_data(data) == PNG_BYTES

    def test_decode_plain_base64(self):
        """Test base64 senza prefisso."""
        assert decode_image_data(base64.b64encode(PNG_BYTES).decode()) == PNG_BYTES

    def test_decode_invalid(self):
        """Test base64 non valido."""
        with pytest.raises(ValidationError):
            decode_image_data("data:image/png;base64,@@@")


class TestStorageService:
    """Tests for saving and deleting files."""

    def test_save_and_delete(self, storage):
        """Test salvataggio con nome generato e cancellazione."""
        stored = storage.save(PNG_BYTES, "image/png")

        assert stored.filename.endswith(".png")
        assert stored.url == f"/uploads/{stored.filename}"
        assert storage.exists(stored.filename)

        storage.delete(stored.filename)
        assert not storage.exists(stored.filename)

    def test_save_rejects_non_image(self, storage):
        """Test il formato è verificato sul contenuto."""
        with pytest.raises(ValidationError):
            storage.save(b"not an image", "image/png")

    def test_save_rejects_too_large(self, storage):
        """Test limite di dimensione."""
        with pytest.raises(ValidationError):
            storage.save(PNG_BYTES + b"\x00" * 2048)

    def test_save_rejects_empty(self, storage):
        """Test file vuoto."""
        with pytest.raises(ValidationError):
            storage.save(b"")

    def test_delete_missing(self, storage):
        """Test cancellazione di un file inesistente."""
        with pytest.raises(NotFoundError):
            storage.delete("0" * 32 + ".png")

    def test_path_traversal_rejected(self, storage):
        """Test nomi file non generati dallo storage."""
        with pytest.raises(ValidationError):
            storage.path_for("../secret.png")

    def test_filename_from_url(self, storage):
        """Test estrazione del nome file dall'URL pubblico."""
        name = "a" * 32 + ".jpg"
        assert storage.filename_from_url(f"/uploads/{name}") == name
        with pytest.raises(ValidationError):
            storage.filename_from_url("https://example.com/x.jpg")

    def test_discard_never_raises(self, storage):
        """Test la rimozione best effort ignora file mancanti."""
        storage.discard("0" * 32 + ".png")
        storage.discard("invalid")
