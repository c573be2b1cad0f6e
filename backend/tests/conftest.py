"""
Pytest configuration and fixtures.

Every test gets a fresh SQLite file database; the app modules are imported
only after the environment points settings at a throwaway database and
upload directory.
"""

import os
import tempfile

os.environ.setdefault("APP_ENV", "testing")
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///" + os.path.join(tempfile.mkdtemp(), "app.db")
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="uploads-")

from decimal import Decimal
from typing import AsyncGenerator

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession
from sqlalchemy.pool import NullPool

from app.core.database import build_engine, build_sessionmaker, get_db
from app.core.security import create_access_token, hash_password
from app.main import app
from app.models import Base
from app.models.customer import Customer
from app.models.product import Product
from app.models.user import User, UserRole
from app.schemas.document import LineItemCreate
from app.schemas.quotation import QuotationCreate
from app.services.storage_service import storage_service

# Intestazione PNG valida: il formato viene riconosciuto dai magic bytes
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


# ============================================================
# Fixtures per il Database
# ============================================================


@pytest.fixture
async def engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """Engine su un file SQLite nuovo per ogni test."""
    test_engine = build_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        poolclass=NullPool,
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_sessionmaker(engine)


@pytest.fixture
async def db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Sessione per i test dei servizi."""
    async with session_factory() as session:
        yield session


# ============================================================
# Fixtures per i Dati
# ============================================================


@pytest.fixture
async def customer(db) -> Customer:
    """Cliente in anagrafica."""
    record = Customer(
        name="Somchai Jaidee",
        phone="081-234-5678",
        address="99 Sukhumvit Rd, Bangkok",
        tax_id="1234567890123",
    )
    db.add(record)
    await db.commit()
    return record


@pytest.fixture
async def product(db) -> Product:
    """Prodotto di listino attivo."""
    record = Product(name="Air conditioner 12000 BTU", price=Decimal("100.00"), unit="เครื่อง")
    db.add(record)
    await db.commit()
    return record


@pytest.fixture
def uploaded_image():
    """Immagine già presente nello storage."""
    stored = storage_service.save(PNG_BYTES, "image/png")
    yield stored
    storage_service.discard(stored.filename)


def _quotation_data(**overrides) -> QuotationCreate:
    """Preventivo con righe [(2, 100), (1, 50)], sconto 0, IVA 7."""
    values = {
        "customer_name": "Somchai Jaidee",
        "customer_phone": "081-234-5678",
        "items": [
            LineItemCreate(product_name="Installation", quantity=2, price=Decimal("100")),
            LineItemCreate(product_name="Pipe", quantity=1, price=Decimal("50")),
        ],
        "discount": Decimal("0"),
        "vat_rate": Decimal("7"),
    }
    values.update(overrides)
    return QuotationCreate(**values)


@pytest.fixture
def quotation_factory():
    """Factory di QuotationCreate con campi sovrascrivibili."""
    return _quotation_data


@pytest.fixture
def quotation_data() -> QuotationCreate:
    return _quotation_data()


# ============================================================
# Fixtures per l'API
# ============================================================


@pytest.fixture
async def user(db) -> User:
    """Utente admin attivo."""
    record = User(
        email="admin@example.com",
        hashed_password=hash_password("password123"),
        full_name="Admin",
        role=UserRole.ADMIN.value,
    )
    db.add(record)
    await db.commit()
    return record


@pytest.fixture
def auth_headers(user) -> dict:
    token = create_access_token(str(user.id), user.role)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def client(session_factory) -> AsyncGenerator[httpx.AsyncClient, None]:
    """Client HTTP verso l'app con get_db sul database del test."""

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as http_client:
        yield http_client
    app.dependency_overrides.clear()
