from __future__ import annotations

import fitz
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from citepay.api.dependencies import get_db_session, get_receipt_renderer, get_receipt_repository
from citepay.api.main import app
from citepay.api.routes.receipts import content_disposition
from citepay.core.security import create_access_token
from citepay.models.enums import UserRole
from citepay.services.receipt_renderer import ReceiptRenderer

from factories import InMemoryReceiptRepository, make_payment


def auth(*roles: str) -> dict:
    return {"Authorization": f"Bearer {create_access_token('staff-1', roles)}"}


CASHIER = auth(UserRole.CASHIER.value)


@pytest.fixture
def client(scenario_a_repository):
    app.dependency_overrides[get_receipt_repository] = lambda: scenario_a_repository
    app.dependency_overrides[get_receipt_renderer] = lambda: ReceiptRenderer()
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def test_receipt_pdf_inline(client):
    resp = client.get("/receipts/R-0001/pdf", headers=CASHIER)
    assert resp.status_code == 200
    assert resp.headers["content-type"] == "application/pdf"
    assert resp.headers["content-disposition"] == 'inline; filename="Receipt_R-0001.pdf"'
    with fitz.open(stream=resp.content, filetype="pdf") as doc:
        text = doc[0].get_text()
    assert "NO HELMET" in text
    assert "RECKLESS DRIVING" in text
    assert "₱1,500.00" in text
    assert "ONE THOUSAND FIVE HUNDRED PESOS ONLY" in text


def test_receipt_pdf_download_mode(client):
    resp = client.get("/receipts/R-0001/pdf", params={"download": "true"}, headers=CASHIER)
    assert resp.status_code == 200
    assert resp.headers["content-disposition"].startswith("attachment;")


def test_query_string_route(client):
    resp = client.get("/receipt", params={"receipt": "R-0001"}, headers=auth("admin"))
    assert resp.status_code == 200
    assert resp.content.startswith(b"%PDF")


def test_missing_receipt_is_404_html(client):
    resp = client.get("/receipts/R-9999/pdf", headers=CASHIER)
    assert resp.status_code == 404
    assert resp.headers["content-type"].startswith("text/html")
    assert "RECEIPT NOT FOUND" in resp.text
    assert b"%PDF" not in resp.content


def test_no_violations_is_404(client, scenario_a_repository):
    scenario_a_repository.payments["R-0002"] = make_payment("R-0002", citation_id=99)
    resp = client.get("/receipts/R-0002/pdf", headers=CASHIER)
    assert resp.status_code == 404
    assert "NO VIOLATIONS FOUND" in resp.text


def test_blank_receipt_is_400(client, scenario_a_repository):
    resp = client.get("/receipt", params={"receipt": "   "}, headers=CASHIER)
    assert resp.status_code == 400
    assert "INVALID RECEIPT NUMBER" in resp.text
    assert scenario_a_repository.calls == []


def test_missing_receipt_param_is_400(client):
    resp = client.get("/receipt", headers=CASHIER)
    assert resp.status_code == 400


def test_database_down_is_500_with_guidance(client, scenario_a_repository):
    scenario_a_repository.unavailable = True
    resp = client.get("/receipts/R-0001/pdf", headers=CASHIER)
    assert resp.status_code == 500
    assert "DATABASE CONNECTION FAILED" in resp.text
    assert "database server is not responding" in resp.text
    assert "Lost connection" not in resp.text


def test_role_without_payment_access_is_403(client, scenario_a_repository):
    resp = client.get("/receipts/R-0001/pdf", headers=auth(UserRole.ENFORCER.value))
    assert resp.status_code == 403
    assert "ACCESS DENIED" in resp.text
    assert scenario_a_repository.calls == []


def test_missing_token_is_401(client):
    resp = client.get("/receipts/R-0001/pdf")
    assert resp.status_code == 401


def test_bad_token_is_401(client):
    resp = client.get("/receipts/R-0001/pdf", headers={"Authorization": "Bearer not-a-jwt"})
    assert resp.status_code == 401


def test_dev_auth_bypass(client, monkeypatch):
    from citepay.core import config as cfg

    monkeypatch.setattr(cfg.settings, "DEV_AUTH_BYPASS", True)
    resp = client.get("/receipts/R-0001/pdf")
    assert resp.status_code == 200


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}


def test_non_ascii_receipt_number_gets_encoded_filename(client, scenario_a_repository):
    scenario_a_repository.payments["R-Ω1"] = make_payment("R-Ω1")
    resp = client.get("/receipts/R-Ω1/pdf", headers=CASHIER)
    assert resp.status_code == 200
    assert resp.headers["content-disposition"] == "inline; filename*=utf-8''Receipt_R-%CE%A91.pdf"


def test_content_disposition_keeps_plain_names_quoted():
    assert content_disposition("Receipt_OR-2025-000123.pdf", True) == 'attachment; filename="Receipt_OR-2025-000123.pdf"'
    assert content_disposition("Receipt_A B.pdf", False) == "inline; filename*=utf-8''Receipt_A%20B.pdf"


def test_unreachable_database_does_not_block_startup(tmp_path):
    # A SQLite file inside a missing directory cannot be opened
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'traffic.db'}")
    sessions = async_sessionmaker(engine, expire_on_commit=False)

    async def unreachable_session():
        async with sessions() as session:
            yield session

    app.dependency_overrides[get_db_session] = unreachable_session
    try:
        with TestClient(app) as client:
            health = client.get("/health")
            resp = client.get("/receipts/R-0001/pdf", headers=CASHIER)
    finally:
        app.dependency_overrides.clear()
    assert health.status_code == 200
    assert resp.status_code == 500
    assert resp.headers["content-type"].startswith("text/html")
    assert "DATABASE CONNECTION FAILED" in resp.text
    assert "database server is not responding" in resp.text
    assert "unable to open database file" not in resp.text


def test_debug_endpoint_is_not_exposed(client):
    assert client.get("/debug/db").status_code == 404
