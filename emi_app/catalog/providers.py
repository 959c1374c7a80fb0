# emi_app/catalog/providers.py
from __future__ import annotations
import logging
import os
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional

import pandas as pd
from rapidfuzz import fuzz, process

from emi_app.config import PROVIDER_CATALOG_PATH
from emi_app.normalize import (
    format_number,
    format_rate_map,
    format_tenures,
    norm_txt,
    parse_amount,
    parse_rate_map,
    parse_tenures,
    slugify,
)
from emi_app.schemas import Provider

logger = logging.getLogger(__name__)

ProviderCatalog = Mapping[str, Provider]

# ------------------------------------------------------------------------------------
# Columns
# ------------------------------------------------------------------------------------
# id,name,logo,min_amount,max_amount,tenures,interest_rates,processing_fee,enabled
COL_ID = "id"
COL_NAME = "name"
COL_LOGO = "logo"
COL_MIN = "min_amount"
COL_MAX = "max_amount"
COL_TENURES = "tenures"
COL_RATES = "interest_rates"
COL_FEE = "processing_fee"
COL_ENABLED = "enabled"

CATALOG_COLUMNS = [COL_ID, COL_NAME, COL_LOGO, COL_MIN, COL_MAX, COL_TENURES, COL_RATES, COL_FEE, COL_ENABLED]
REQUIRED_COLUMNS = [COL_NAME, COL_MIN, COL_MAX, COL_TENURES, COL_RATES]

# Headers seen in lender exports -> catalog headers
RENAME_MAP = {
    "provider_id": COL_ID,
    "lender_id": COL_ID,
    "provider": COL_NAME,
    "lender": COL_NAME,
    "bank": COL_NAME,
    "min": COL_MIN,
    "minamount": COL_MIN,
    "min_loan": COL_MIN,
    "max": COL_MAX,
    "maxamount": COL_MAX,
    "max_loan": COL_MAX,
    "supported_tenures": COL_TENURES,
    "supportedtenures": COL_TENURES,
    "tenure_months": COL_TENURES,
    "rates": COL_RATES,
    "interestrates": COL_RATES,
    "fee": COL_FEE,
    "processingfee": COL_FEE,
    "active": COL_ENABLED,
}

FUZZY_CUTOFF = 90

_TRUE = {"1", "true", "yes", "y", "t", "on"}
_FALSE = {"0", "false", "no", "n", "f", "off"}


def _to_bool(v) -> bool:
    if isinstance(v, bool):
        return v
    if v is None or (isinstance(v, float) and pd.isna(v)):
        return True
    s = str(v).strip().lower()
    if s == "" or s in _TRUE:
        return True
    if s in _FALSE:
        return False
    raise ValueError(f"Not a boolean: {v!r}")


# ------------------------------------------------------------------------------------
# Load / normalize
# ------------------------------------------------------------------------------------
def normalize_provider_frame(df: pd.DataFrame) -> pd.DataFrame:
    """
    Brings a lender export to the catalog shape:
    - lower-cased headers, known aliases renamed (RENAME_MAP)
    - optional columns filled: logo "", processing_fee 0, enabled True
    - missing ids derived from the name ("HDFC Bank" -> "hdfc-bank")
    """
    df = df.copy()
    df.columns = [str(c).strip().lower().replace(" ", "_") for c in df.columns]
    df = df.rename(columns={c: RENAME_MAP[c] for c in df.columns if c in RENAME_MAP})

    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"Missing columns in provider catalog (after mapping): {missing}")

    if COL_LOGO not in df.columns:
        df[COL_LOGO] = ""
    if COL_FEE not in df.columns:
        df[COL_FEE] = 0.0
    if COL_ENABLED not in df.columns:
        df[COL_ENABLED] = True
    if COL_ID not in df.columns:
        df[COL_ID] = ""

    df[COL_LOGO] = df[COL_LOGO].fillna("").astype(str)
    df[COL_FEE] = df[COL_FEE].replace("", 0.0).fillna(0.0)
    df[COL_ID] = df[COL_ID].fillna("").astype(str).str.strip()
    no_id = df[COL_ID] == ""
    df.loc[no_id, COL_ID] = df.loc[no_id, COL_NAME].astype(str).map(slugify)

    return df[CATALOG_COLUMNS]


def _row_to_provider(row: Dict) -> Provider:
    min_amount = parse_amount(row[COL_MIN])
    max_amount = parse_amount(row[COL_MAX])
    fee = parse_amount(row[COL_FEE])
    if min_amount is None or max_amount is None or fee is None:
        raise ValueError(f"Bad amount in provider row {row[COL_ID]!r}")
    return Provider(
        id=str(row[COL_ID]),
        name=str(row[COL_NAME]),
        logo=str(row[COL_LOGO]),
        min_amount=min_amount,
        max_amount=max_amount,
        supported_tenures=parse_tenures(row[COL_TENURES]),
        interest_rates=parse_rate_map(row[COL_RATES]),
        processing_fee=fee,
        enabled=_to_bool(row[COL_ENABLED]),
    )


def catalog_from_providers(providers: Iterable[Provider]) -> ProviderCatalog:
    """
    Read-only mapping provider id -> Provider, in the order given.
    """
    out: Dict[str, Provider] = {}
    for p in providers:
        if p.id in out:
            raise ValueError(f"Duplicate provider id in catalog: {p.id}")
        out[p.id] = p
    return MappingProxyType(out)


def catalog_from_frame(df: pd.DataFrame) -> ProviderCatalog:
    df = normalize_provider_frame(df)
    return catalog_from_providers(_row_to_provider(row) for row in df.to_dict(orient="records"))


def catalog_to_frame(catalog: ProviderCatalog) -> pd.DataFrame:
    rows = [{
        COL_ID: p.id,
        COL_NAME: p.name,
        COL_LOGO: p.logo,
        COL_MIN: format_number(p.min_amount),
        COL_MAX: format_number(p.max_amount),
        COL_TENURES: format_tenures(p.supported_tenures),
        COL_RATES: format_rate_map(p.interest_rates),
        COL_FEE: format_number(p.processing_fee),
        COL_ENABLED: "true" if p.enabled else "false",
    } for p in catalog.values()]
    return pd.DataFrame(rows, columns=CATALOG_COLUMNS)


def load_catalog(path: str = PROVIDER_CATALOG_PATH) -> ProviderCatalog:
    """
    Loads the provider CSV. Cells are strings so "1,00,000" or "3:12.99|6:13.99"
    survive pandas untouched; parsing happens per row.
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"Provider catalog not found at: {path}")

    df = pd.read_csv(path, dtype=str, keep_default_na=False)
    catalog = catalog_from_frame(df)
    logger.info("Loaded %d EMI providers from %s (%d enabled)",
                len(catalog), path, len(enabled_providers(catalog)))
    return catalog


# ------------------------------------------------------------------------------------
# Lookup
# ------------------------------------------------------------------------------------
def get_provider(catalog: ProviderCatalog, provider_id: str) -> Optional[Provider]:
    return catalog.get(provider_id)


def enabled_providers(catalog: ProviderCatalog) -> List[Provider]:
    return [p for p in catalog.values() if p.enabled]


def resolve_provider_id(catalog: ProviderCatalog, query: Optional[str]) -> Optional[str]:
    """
    Exact id first, then an exact match on the normalized id or display name
    ("icici bank" -> "icici-emi"). Last resort is a close spelling of a single
    provider; anything else is unknown.
    """
    if not query:
        return None
    if query in catalog:
        return query

    keys: Dict[str, str] = {}
    for p in catalog.values():
        for text in (p.id, p.name):
            keys[norm_txt(text)] = p.id
            keys[slugify(text)] = p.id

    for q in (norm_txt(query), slugify(query)):
        if q in keys:
            return keys[q]

    q = norm_txt(query)
    matches = process.extract(q, list(keys.keys()), scorer=fuzz.ratio, score_cutoff=FUZZY_CUTOFF, limit=None)
    found = {keys[m[0]] for m in matches}
    if len(found) != 1:
        logger.debug("No single provider matches %r (candidates: %s)", query, sorted(found))
        return None
    return found.pop()
