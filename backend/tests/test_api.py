"""
API tests: response envelope, camelCase payloads, authentication and
error bodies, through the real routers with get_db on the test database.
"""

import base64
import uuid

from app.services.pdf_service import pdf_service
from app.services.storage_service import storage_service


PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64

QUOTATION_PAYLOAD = {
    "customerName": "Somchai Jaidee",
    "customerPhone": "081-234-5678",
    "items": [
        {"productName": "Installation", "quantity": 2, "price": 100},
        {"productName": "Pipe", "quantity": 1, "price": 50},
    ],
    "discount": 0,
    "vatRate": 7,
}


# ============================================================
# Tests for authentication
# ============================================================


class TestAuthApi:
    """Tests for auth endpoints and the bearer requirement."""

    async def test_missing_token(self, client):
        """Test richiesta senza token → 401 UNAUTHENTICATED."""
        response = await client.get("/api/quotations")

        assert response.status_code == 401
        assert response.json()["code"] == "UNAUTHENTICATED"
        assert response.headers["www-authenticate"] == "Bearer"

    async def test_invalid_token(self, client):
        """Test token non valido."""
        response = await client.get("/api/quotations", headers={"Authorization": "Bearer garbage"})

        assert response.status_code == 401
        assert response.json()["code"] == "UNAUTHENTICATED"

    async def test_first_user_becomes_admin(self, client):
        """Test il primo utente registrato è admin senza autenticazione."""
        response = await client.post(
            "/api/auth/register",
            json={"email": "owner@example.com", "password": "password123", "fullName": "Owner", "role": "staff"},
        )

        assert response.status_code == 201
        assert response.json()["data"]["role"] == "admin"

    async def test_register_requires_admin(self, client, user):
        """Test con utenti esistenti serve il token di un admin."""
        response = await client.post(
            "/api/auth/register",
            json={"email": "staff@example.com", "password": "password123", "fullName": "Staff"},
        )

        assert response.status_code == 401

    async def test_admin_registers_staff(self, client, auth_headers):
        """Test un admin registra un utente staff."""
        response = await client.post(
            "/api/auth/register",
            json={"email": "staff@example.com", "password": "password123", "name": "Staff"},
            headers=auth_headers,
        )

        assert response.status_code == 201
        assert response.json()["data"]["role"] == "staff"

    async def test_login_and_me(self, client, user):
        """Test login restituisce utente e token utilizzabile."""
        response = await client.post(
            "/api/auth/login",
            json={"email": "admin@example.com", "password": "password123"},
        )
        assert response.status_code == 200
        body = response.json()["data"]
        assert body["user"]["email"] == "admin@example.com"
        assert body["token"] == body["accessToken"]

        me = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {body['token']}"})
        assert me.status_code == 200
        assert me.json()["data"]["fullName"] == "Admin"

    async def test_login_wrong_password(self, client, user):
        """Test credenziali errate."""
        response = await client.post(
            "/api/auth/login",
            json={"email": "admin@example.com", "password": "wrong-password"},
        )

        assert response.status_code == 401
        assert response.json()["code"] == "UNAUTHENTICATED"

    async def test_refresh(self, client, user):
        """Test refresh token restituisce una nuova coppia."""
        login = await client.post(
            "/api/auth/login",
            json={"email": "admin@example.com", "password": "password123"},
        )
        refresh_token = login.json()["data"]["refreshToken"]

        response = await client.post("/api/auth/refresh", json={"refreshToken": refresh_token})

        assert response.status_code == 200
        assert response.json()["data"]["tokenType"] == "bearer"

    async def test_health_is_public(self, client):
        """Test /health senza autenticazione."""
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


# ============================================================
# Tests for documents
# ============================================================


class TestDocumentsApi:
    """Tests for quotation and invoice endpoints."""

    async def test_create_quotation(self, client, auth_headers):
        """Test envelope, camelCase e totali calcolati dal server."""
        response = await client.post("/api/quotations", json=QUOTATION_PAYLOAD, headers=auth_headers)

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["quotationNumber"].startswith("QT-")
        assert data["status"] == "draft"
        assert data["subtotal"] == 250
        assert data["vatAmount"] == 17.5
        assert data["total"] == 267.5
        assert data["items"][0]["productName"] == "Installation"
        assert data["items"][0]["total"] == 200

    async def test_snake_case_input(self, client, auth_headers):
        """Test input accettato anche in snake_case."""
        payload = {
            "customer_name": "Snake Case",
            "items": [{"product_name": "Unit", "quantity": 1, "price": 10}],
            "vat_rate": 0,
        }
        response = await client.post("/api/quotations", json=payload, headers=auth_headers)

        assert response.status_code == 201
        assert response.json()["data"]["customerName"] == "Snake Case"

    async def test_list_envelope(self, client, auth_headers):
        """Test lista dentro la chiave data."""
        await client.post("/api/quotations", json=QUOTATION_PAYLOAD, headers=auth_headers)

        response = await client.get("/api/quotations", headers=auth_headers)

        assert response.status_code == 200
        assert isinstance(response.json()["data"], list)
        assert len(response.json()["data"]) == 1

    async def test_not_found_body(self, client, auth_headers):
        """Test corpo errore {message, code}."""
        response = await client.get(f"/api/quotations/{uuid.uuid4()}", headers=auth_headers)

        assert response.status_code == 404
        body = response.json()
        assert body["code"] == "NOT_FOUND"
        assert body["message"]

    async def test_request_validation_body(self, client, auth_headers):
        """Test input malformato → 422 VALIDATION_ERROR con dettaglio."""
        payload = dict(QUOTATION_PAYLOAD, items=[{"productName": "X", "quantity": "many"}])
        response = await client.post("/api/quotations", json=payload, headers=auth_headers)

        assert response.status_code == 422
        assert response.json()["code"] == "VALIDATION_ERROR"
        assert response.json()["errors"]

    async def test_status_and_conversion_flow(self, client, auth_headers):
        """Test accettazione, conversione e pagamenti via API."""
        created = await client.post("/api/quotations", json=QUOTATION_PAYLOAD, headers=auth_headers)
        quotation_id = created.json()["data"]["id"]

        accepted = await client.patch(
            f"/api/quotations/{quotation_id}/status", json={"status": "accepted"}, headers=auth_headers
        )
        assert accepted.json()["data"]["status"] == "accepted"

        converted = await client.post(f"/api/quotations/{quotation_id}/convert-to-invoice", headers=auth_headers)
        assert converted.status_code == 201
        invoice = converted.json()["data"]
        assert invoice["invoiceNumber"].startswith("INV-")
        assert invoice["status"] == "unpaid"

        again = await client.post(f"/api/quotations/{quotation_id}/convert-to-invoice", headers=auth_headers)
        assert again.status_code == 409
        assert again.json()["code"] == "INVALID_STATE"

        payment = await client.post(
            f"/api/invoices/{invoice['id']}/payments",
            json={"amount": 100, "paymentMethod": "transfer"},
            headers=auth_headers,
        )
        assert payment.status_code == 201
        paid = payment.json()["data"]
        assert paid["paymentStatus"] == "partial"
        assert paid["paidAmount"] == 100
        assert paid["remainingAmount"] == 167.5
        assert paid["payments"][0]["paymentMethod"] == "transfer"

        over = await client.post(
            f"/api/invoices/{invoice['id']}/payments", json={"amount": 1000}, headers=auth_headers
        )
        assert over.status_code == 422
        assert over.json()["remainingAmount"] == 167.5

    async def test_invoice_status_filter(self, client, auth_headers):
        """Test filtro per stato sulla lista fatture."""
        payload = dict(QUOTATION_PAYLOAD, dueDate="2020-01-01")
        await client.post("/api/invoices", json=payload, headers=auth_headers)

        overdue = await client.get("/api/invoices", params={"status": "overdue"}, headers=auth_headers)
        paid = await client.get("/api/invoices", params={"status": "paid"}, headers=auth_headers)

        assert len(overdue.json()["data"]) == 1
        assert paid.json()["data"] == []

    async def test_signature_endpoint(self, client, auth_headers):
        """Test firma con alias type/signatureData."""
        created = await client.post("/api/quotations", json=QUOTATION_PAYLOAD, headers=auth_headers)
        quotation_id = created.json()["data"]["id"]
        data_url = "data:image/png;base64," + base64.b64encode(PNG_BYTES).decode()

        response = await client.post(
            f"/api/quotations/{quotation_id}/signature",
            json={"type": "customer", "signatureData": data_url, "signerName": "Somchai"},
            headers=auth_headers,
        )

        assert response.status_code == 201
        assert response.json()["data"]["type"] == "customer"
        assert response.json()["data"]["imageUrl"].startswith("/uploads/")


# ============================================================
# Tests for uploads, catalog and dashboard
# ============================================================


class TestSupportApi:
    """Tests for uploads, customers, products, appointments and dashboard."""

    async def test_upload_attach_and_delete(self, client, auth_headers):
        """Test upload, collegamento al preventivo e cancellazione immagine."""
        upload = await client.post(
            "/api/upload/single",
            files={"file": ("photo.png", PNG_BYTES, "image/png")},
            headers=auth_headers,
        )
        assert upload.status_code == 201
        url = upload.json()["data"]["url"]

        created = await client.post("/api/quotations", json=QUOTATION_PAYLOAD, headers=auth_headers)
        quotation_id = created.json()["data"]["id"]

        attached = await client.post(
            f"/api/quotations/{quotation_id}/images",
            json={"images": [{"url": url, "caption": "Site"}]},
            headers=auth_headers,
        )
        assert attached.status_code == 201
        image_id = attached.json()["data"][0]["id"]

        deleted = await client.delete(f"/api/images/{image_id}", headers=auth_headers)
        assert deleted.status_code == 204

    async def test_upload_rejects_non_image(self, client, auth_headers):
        """Test file non immagine rifiutato."""
        response = await client.post(
            "/api/upload/single",
            files={"file": ("notes.txt", b"hello", "text/plain")},
            headers=auth_headers,
        )

        assert response.status_code == 422
        assert response.json()["code"] == "VALIDATION_ERROR"

    async def test_upload_multiple_and_delete(self, client, auth_headers):
        """Test upload multiplo e cancellazione per nome file."""
        response = await client.post(
            "/api/upload/multiple",
            files=[
                ("files", ("a.png", PNG_BYTES, "image/png")),
                ("files", ("b.png", PNG_BYTES, "image/png")),
            ],
            headers=auth_headers,
        )
        assert response.status_code == 201
        files = response.json()["data"]
        assert len(files) == 2

        deleted = await client.delete(f"/api/upload/{files[0]['filename']}", headers=auth_headers)
        assert deleted.status_code == 204

        missing = await client.delete(f"/api/upload/{files[0]['filename']}", headers=auth_headers)
        assert missing.status_code == 404

    async def test_customer_crud(self, client, auth_headers):
        """Test creazione, modifica ed eliminazione cliente."""
        created = await client.post(
            "/api/customers", json={"name": "Malee", "phone": "089-000-0000"}, headers=auth_headers
        )
        assert created.status_code == 201
        customer_id = created.json()["data"]["id"]

        updated = await client.put(
            f"/api/customers/{customer_id}", json={"address": "Phuket"}, headers=auth_headers
        )
        assert updated.json()["data"]["address"] == "Phuket"

        deleted = await client.delete(f"/api/customers/{customer_id}", headers=auth_headers)
        assert deleted.status_code == 204

    async def test_product_soft_delete(self, client, auth_headers):
        """Test prodotto disattivato nascosto dalla lista."""
        created = await client.post(
            "/api/products", json={"name": "Filter", "price": 250}, headers=auth_headers
        )
        product_id = created.json()["data"]["id"]
        assert created.json()["data"]["unit"] == "ชิ้น"

        await client.delete(f"/api/products/{product_id}", headers=auth_headers)

        active = await client.get("/api/products", headers=auth_headers)
        everything = await client.get("/api/products", params={"includeInactive": "true"}, headers=auth_headers)
        assert active.json()["data"] == []
        assert len(everything.json()["data"]) == 1

    async def test_appointment_flow(self, client, auth_headers):
        """Test creazione e chiusura di un appuntamento."""
        created = await client.post(
            "/api/appointments",
            json={"title": "Install", "appointmentDate": "2030-05-01", "appointmentType": "installation"},
            headers=auth_headers,
        )
        assert created.status_code == 201
        appointment_id = created.json()["data"]["id"]
        assert created.json()["data"]["status"] == "pending"

        done = await client.patch(
            f"/api/appointments/{appointment_id}/status", json={"status": "completed"}, headers=auth_headers
        )
        assert done.json()["data"]["status"] == "completed"

        again = await client.patch(
            f"/api/appointments/{appointment_id}/status", json={"status": "cancelled"}, headers=auth_headers
        )
        assert again.status_code == 409

    async def test_dashboard(self, client, auth_headers):
        """Test riepilogo dashboard con una fattura."""
        await client.post("/api/invoices", json=QUOTATION_PAYLOAD, headers=auth_headers)

        response = await client.get("/api/dashboard/summary", headers=auth_headers)

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["totalInvoices"] == 1
        assert data["invoiceStatus"]["unpaid"] == 1
        assert data["totalRemaining"] == 267.5
        assert len(data["monthlySales"]) == 6
        assert data["topCustomers"][0]["customerName"] == "Somchai Jaidee"


# ============================================================
# Tests for upload limits, linked files and PDF export
# ============================================================


class TestFilesApi:
    """Tests for upload size, deletion of linked files and PDF endpoints."""

    async def test_vat_rate_precision_rejected(self, client, auth_headers):
        """Test aliquota con tre decimali → 422."""
        payload = dict(QUOTATION_PAYLOAD, vatRate="7.125")
        response = await client.post("/api/quotations", json=payload, headers=auth_headers)

        assert response.status_code == 422
        assert response.json()["code"] == "VALIDATION_ERROR"

    async def test_oversized_upload_rejected(self, client, auth_headers, monkeypatch):
        """Test file oltre il limite di dimensione rifiutato."""
        monkeypatch.setattr(storage_service, "max_size", 16)

        response = await client.post(
            "/api/upload/single",
            files={"file": ("photo.png", PNG_BYTES, "image/png")},
            headers=auth_headers,
        )

        assert response.status_code == 422
        assert response.json()["code"] == "VALIDATION_ERROR"

    async def test_linked_upload_not_deleted(self, client, auth_headers):
        """Test file collegato a un preventivo non eliminabile per nome."""
        upload = await client.post(
            "/api/upload/single",
            files={"file": ("photo.png", PNG_BYTES, "image/png")},
            headers=auth_headers,
        )
        stored = upload.json()["data"]
        payload = dict(QUOTATION_PAYLOAD, images=[{"url": stored["url"]}])
        created = await client.post("/api/quotations", json=payload, headers=auth_headers)
        quotation_id = created.json()["data"]["id"]

        response = await client.delete(f"/api/upload/{stored['filename']}", headers=auth_headers)

        assert response.status_code == 409
        assert response.json()["code"] == "INVALID_STATE"
        assert storage_service.exists(stored["filename"])

        quotation = await client.get(f"/api/quotations/{quotation_id}", headers=auth_headers)
        assert [i["url"] for i in quotation.json()["data"]["images"]] == [stored["url"]]

    async def test_pdf_endpoints(self, client, auth_headers, monkeypatch):
        """Test PDF di preventivo e fattura restituiti come application/pdf."""
        monkeypatch.setattr(pdf_service, "generate_pdf", lambda document: b"%PDF-1.7")
        created = await client.post("/api/quotations", json=QUOTATION_PAYLOAD, headers=auth_headers)
        quotation = created.json()["data"]

        response = await client.get(f"/api/quotations/{quotation['id']}/pdf", headers=auth_headers)
        assert response.status_code == 200
        assert response.headers["content-type"] == "application/pdf"
        assert response.content == b"%PDF-1.7"
        assert quotation["quotationNumber"] in response.headers["content-disposition"]

        converted = await client.post(
            f"/api/quotations/{quotation['id']}/convert-to-invoice", headers=auth_headers
        )
        invoice_id = converted.json()["data"]["id"]

        response = await client.get(f"/api/invoices/{invoice_id}/pdf", headers=auth_headers)
        assert response.status_code == 200
        assert response.content == b"%PDF-1.7"
