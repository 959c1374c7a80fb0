# tests/conftest.py
import os
import sys

import pytest
from fastapi.testclient import TestClient

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from emi_app.catalog.providers import catalog_from_providers  # noqa: E402
from emi_app.schemas import Provider  # noqa: E402


# ---------- Providers ----------
@pytest.fixture
def test_bank():
    return Provider(
        id="test-bank",
        name="Test Bank",
        min_amount=1000,
        max_amount=50000,
        supported_tenures=[3, 6, 12],
        interest_rates={3: 10, 6: 12, 12: 14},
        processing_fee=99,
    )


@pytest.fixture
def sample_providers():
    return [
        Provider(id="hdfc-emi", name="HDFC Bank", min_amount=1000, max_amount=500000,
                 supported_tenures=[3, 6, 9, 12, 18, 24],
                 interest_rates={3: 12.99, 6: 13.99, 9: 14.99, 12: 15.99, 18: 16.99, 24: 17.99},
                 processing_fee=99),
        Provider(id="icici-emi", name="ICICI Bank", min_amount=1000, max_amount=300000,
                 supported_tenures=[3, 6, 9, 12, 18],
                 interest_rates={3: 11.99, 6: 12.99, 9: 13.99, 12: 14.99, 18: 15.99},
                 processing_fee=149),
        Provider(id="sbi-emi", name="SBI Credit Card", min_amount=500, max_amount=200000,
                 supported_tenures=[3, 6, 9, 12],
                 interest_rates={3: 14.99, 6: 15.99, 9: 16.99, 12: 17.99}),
        Provider(id="amazonpay-emi", name="Amazon Pay Later", min_amount=100, max_amount=100000,
                 supported_tenures=[3, 6, 9],
                 interest_rates={3: 0, 6: 12.99, 9: 13.99}),
        Provider(id="disabled-bank", name="Disabled Bank", min_amount=1000, max_amount=50000,
                 supported_tenures=[3, 6], interest_rates={3: 10, 6: 12}, enabled=False),
    ]


@pytest.fixture
def sample_catalog(sample_providers):
    return catalog_from_providers(sample_providers)


# ---------- FastAPI TestClient ----------
@pytest.fixture()
def client(sample_catalog):
    from emi_app.main import app, get_catalog

    app.dependency_overrides[get_catalog] = lambda: sample_catalog
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def providers_csv(tmp_path):
    def _write(text: str, name: str = "providers.csv") -> str:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return str(path)
    return _write
