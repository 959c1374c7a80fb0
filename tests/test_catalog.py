import pandas as pd
import pytest

from emi_app.catalog.providers import (
    catalog_from_frame,
    catalog_from_providers,
    catalog_to_frame,
    enabled_providers,
    get_provider,
    load_catalog,
    normalize_provider_frame,
    resolve_provider_id,
)
from emi_app.config import DEFAULT_CATALOG_PATH
from emi_app.engine.plans import generate_plans_across_providers


def test_default_catalog_ships_four_providers():
    catalog = load_catalog(DEFAULT_CATALOG_PATH)
    assert list(catalog) == ["hdfc-emi", "icici-emi", "sbi-emi", "amazonpay-emi"]
    assert all(p.enabled for p in catalog.values())

    hdfc = catalog["hdfc-emi"]
    assert hdfc.name == "HDFC Bank"
    assert hdfc.min_amount == 1000 and hdfc.max_amount == 500000
    assert hdfc.supported_tenures == [3, 6, 9, 12, 18, 24]
    assert hdfc.interest_rates[12] == 15.99
    assert hdfc.processing_fee == 99

    amazon = catalog["amazonpay-emi"]
    assert amazon.interest_rates[3] == 0.0


def test_default_catalog_generates_plans():
    plans = generate_plans_across_providers(10000, load_catalog(DEFAULT_CATALOG_PATH))
    assert len(plans) == 18
    assert plans[0].provider_id == "hdfc-emi" and plans[0].tenure == 24


def test_catalog_is_read_only(sample_catalog):
    with pytest.raises(TypeError):
        sample_catalog["new"] = sample_catalog["hdfc-emi"]


def test_load_catalog_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_catalog(str(tmp_path / "nope.csv"))


def test_load_catalog_missing_columns(providers_csv):
    path = providers_csv("id,name\nx,X Bank\n")
    with pytest.raises(ValueError, match="Missing columns"):
        load_catalog(path)


def test_load_catalog_fills_defaults(providers_csv):
    path = providers_csv(
        "Bank,Min,Max,Tenure Months,Rates\n"
        'Kotak Mahindra,"1,000","1,00,000",3|6,3:13|6:14\n'
    )
    catalog = load_catalog(path)
    p = catalog["kotak-mahindra"]
    assert p.max_amount == 100000
    assert p.processing_fee == 0
    assert p.enabled is True
    assert p.logo == ""


def test_load_catalog_disabled_flag(providers_csv):
    path = providers_csv(
        "id,name,min_amount,max_amount,tenures,interest_rates,processing_fee,enabled\n"
        "a,A,1000,50000,3|6,3:10|6:12,0,false\n"
        "b,B,1000,50000,3,3:10,,\n"
    )
    catalog = load_catalog(path)
    assert catalog["a"].enabled is False
    assert catalog["b"].enabled is True
    assert [p.id for p in enabled_providers(catalog)] == ["b"]


def test_duplicate_ids_rejected(sample_providers):
    with pytest.raises(ValueError, match="Duplicate"):
        catalog_from_providers(sample_providers + sample_providers[:1])


def test_normalize_provider_frame_renames_and_orders():
    df = pd.DataFrame([{"Provider": "Yes Bank", "Min": 2000, "Max": 90000,
                        "Supported Tenures": "3|6", "Interest Rates": "3:11|6:12", "Fee": 49}])
    out = normalize_provider_frame(df)
    assert list(out.columns) == ["id", "name", "logo", "min_amount", "max_amount",
                                 "tenures", "interest_rates", "processing_fee", "enabled"]
    assert out.loc[0, "id"] == "yes-bank"

    catalog = catalog_from_frame(df)
    assert catalog["yes-bank"].processing_fee == 49
    assert catalog["yes-bank"].interest_rates == {3: 11.0, 6: 12.0}


def test_get_provider(sample_catalog):
    assert get_provider(sample_catalog, "hdfc-emi").name == "HDFC Bank"
    assert get_provider(sample_catalog, "non-existent") is None


def test_enabled_providers(sample_catalog):
    ids = [p.id for p in enabled_providers(sample_catalog)]
    assert ids == ["hdfc-emi", "icici-emi", "sbi-emi", "amazonpay-emi"]


@pytest.mark.parametrize("query, expected", [
    ("hdfc-emi", "hdfc-emi"),
    ("HDFC Bank", "hdfc-emi"),
    ("icici bank", "icici-emi"),
    ("Amazon Pay Later", "amazonpay-emi"),
    ("  Amazon  Pay Later ", "amazonpay-emi"),
    ("sbi credit card", "sbi-emi"),
    ("ICICI Bankk", "icici-emi"),
])
def test_resolve_provider_id(sample_catalog, query, expected):
    assert resolve_provider_id(sample_catalog, query) == expected


@pytest.mark.parametrize("query", [None, "", "zzzz qqqq", "Kotak Credit Card", "HDFC Credit Card", "hdfc-emx", "Bank"])
def test_resolve_provider_id_no_match(sample_catalog, query):
    assert resolve_provider_id(sample_catalog, query) is None


def test_catalog_to_frame_reloads_identically(sample_catalog, tmp_path):
    path = tmp_path / "out.csv"
    catalog_to_frame(sample_catalog).to_csv(path, index=False)
    reloaded = load_catalog(str(path))
    assert dict(reloaded) == dict(sample_catalog)
    assert reloaded["disabled-bank"].enabled is False
