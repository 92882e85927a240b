"""Pytest fixtures for testing"""

import httpx
import pytest
from datetime import timedelta

from mock_backends.mandii import MandiiState, create_mandii_app
from mock_backends.sager import SagerState, create_sager_app
from mysanvi.app import MySanviApp, create_app
from mysanvi.config import Settings
from mysanvi.domain.session import SessionStore
from mysanvi.infrastructure.clients.mandii import MandiiClient
from mysanvi.infrastructure.clients.sager import SagerClient

PHONE = "9876543210"
OTP = "135790"
SAGER_BASE = "http://sager.test/"
MANDII_BASE = "http://mandii.test/"


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        sager_api_base=SAGER_BASE,
        mandii_api_base=MANDII_BASE,
        sager_public_url="http://sager.test/",
        log_level="DEBUG",
    )


@pytest.fixture
def sager_state() -> SagerState:
    """SaGer data with a known OTP and a demo shop owner"""
    state = SagerState(fixed_otp=OTP)
    state.users[PHONE] = {
        "id": 1,
        "username": "demo",
        "phone": PHONE,
        "name": "Demo User",
        "shop_name": "Demo Shop",
        "is_phone_verified": True,
    }
    state.passwords["demo"] = "s3cret"
    return state


@pytest.fixture
def mandii_state() -> MandiiState:
    return MandiiState()


@pytest.fixture
def sager_transport(sager_state: SagerState) -> httpx.ASGITransport:
    return httpx.ASGITransport(app=create_sager_app(sager_state))


@pytest.fixture
def mandii_transport(mandii_state: MandiiState) -> httpx.ASGITransport:
    return httpx.ASGITransport(app=create_mandii_app(mandii_state))


@pytest.fixture
def sager_client(sager_transport: httpx.ASGITransport) -> SagerClient:
    return SagerClient(base_url=SAGER_BASE, transport=sager_transport)


@pytest.fixture
def mandii_client(mandii_transport: httpx.ASGITransport) -> MandiiClient:
    return MandiiClient(base_url=MANDII_BASE, transport=mandii_transport)


@pytest.fixture
def session() -> SessionStore:
    return SessionStore()


@pytest.fixture
def authed_session(sager_state: SagerState) -> SessionStore:
    """Session holding tokens the mock SaGer accepts"""
    store = SessionStore()
    access, refresh = sager_state.issue_tokens(PHONE)
    store.save(access, refresh)
    return store


@pytest.fixture
def app(
    test_settings: Settings,
    sager_transport: httpx.ASGITransport,
    mandii_transport: httpx.ASGITransport,
) -> MySanviApp:
    return create_app(
        test_settings,
        sager_transport=sager_transport,
        mandii_transport=mandii_transport,
        configure_logging=False,
    )


@pytest.fixture
def sample_sales(sager_state: SagerState) -> list[dict]:
    """Two weeks of sales with a mix of paid and unpaid records"""
    today = sager_state.today
    records = [
        sager_state.add_sale(customer_id="C001", date=today, product_bought="Rice", amount=500.0, paid=True, payment_mode="cash"),
        sager_state.add_sale(customer_id="C001", date=today, product_bought="Dal", amount=250.5, paid=False),
        sager_state.add_sale(customer_id="C002", date=today - timedelta(days=1), product_bought="Rice", amount=300.0, paid=False),
        sager_state.add_sale(customer_id="C003", date=today - timedelta(days=5), product_bought="Oil", amount=180.0, paid=False),
        sager_state.add_sale(customer_id="C002", date=today - timedelta(days=20), product_bought="Sugar", amount=90.0, paid=False),
    ]
    sager_state.predictions.extend([
        {
            "id": 1,
            "customer_id": "C001",
            "predicted_product": "Rice",
            "score": 0.82,
            "created_at": "2026-10-18T09:30:00+00:00",
            "expires_at": None,
        },
        {
            "id": 2,
            "customer_id": "C002",
            "predicted_product": "Oil",
            "score": 0.41,
            "created_at": "2026-10-18T09:30:00+00:00",
            "expires_at": "2026-10-25T00:00:00+00:00",
        },
    ])
    return records
