# emi_app/normalize.py
from __future__ import annotations
import numbers
import re
from typing import Dict, List, Optional, Union
from unidecode import unidecode


# -----------------------------------------------------------------------------
# Text
# -----------------------------------------------------------------------------
def norm_txt(s: str) -> str:
    """
    Strips accents, lower-cases and collapses whitespace.
    """
    s = unidecode(s or "")
    s = s.strip().lower()
    s = re.sub(r"\s+", " ", s)
    return s


def slugify(name: str) -> str:
    """
    Provider id from a display name: "HDFC Bank" -> "hdfc-bank".
    """
    s = norm_txt(name)
    s = re.sub(r"[^a-z0-9]+", "-", s)
    return s.strip("-")


# -----------------------------------------------------------------------------
# Amounts
# -----------------------------------------------------------------------------
_NUM_TOKEN = r"(?:\d{1,3}(?:,\d{2,3})+|\d+(?:\.\d+)?|\d{1,3}(?:,\d{2,3})+\.\d+)"
_MULT_TOKEN = r"(k|thousand|l|lac|lacs|lakh|lakhs|cr|crore|crores)?"
_CURRENCY = re.compile(r"^(?:₹|rs\.?|inr)\s*")


def _apply_multiplier(value: float, mult: Optional[str]) -> float:
    if not mult:
        return value
    if mult in {"k", "thousand"}:
        return value * 1_000.0
    if mult in {"l", "lac", "lacs", "lakh", "lakhs"}:
        return value * 100_000.0
    if mult in {"cr", "crore", "crores"}:
        return value * 10_000_000.0
    return value


def parse_amount(token: Union[str, int, float, None]) -> Optional[float]:
    """
    Parses a rupee amount as people type it:
      "10000", "₹1,00,000", "Rs. 2,500", "10k", "1.5 lakh", "2 crore"
    Returns float or None when the token is not an amount.
    """
    if token is None or isinstance(token, bool):
        return None
    if isinstance(token, numbers.Number):
        return float(token)

    # unidecode would turn ₹ into "Rs", so strip the currency marker first
    t = (token or "").strip().lower()
    t = _CURRENCY.sub("", t)
    t = norm_txt(t)
    # "10 k" -> "10k"
    t = re.sub(r"(\d)\s+([a-z]+)$", r"\1\2", t)

    m = re.fullmatch(rf"({_NUM_TOKEN})\s*{_MULT_TOKEN}", t)
    if not m:
        return None

    raw, mult = m.group(1), m.group(2)
    try:
        val = float(raw.replace(",", ""))
    except ValueError:
        return None
    return _apply_multiplier(val, mult)


# -----------------------------------------------------------------------------
# Catalog cells
# -----------------------------------------------------------------------------
def parse_tenures(cell: Union[str, int, float, None]) -> List[int]:
    """
    "3|6|12" -> [3, 6, 12]. Also accepts commas/semicolons and a single number.
    """
    if cell is None:
        return []
    if isinstance(cell, numbers.Number):
        return [int(cell)]
    parts = re.split(r"[|,;\s]+", str(cell).strip())
    return [int(float(p)) for p in parts if p]


def parse_rate_map(cell: Optional[str]) -> Dict[int, float]:
    """
    "3:12.99|6:0" -> {3: 12.99, 6: 0.0}
    """
    if not cell:
        return {}
    rates: Dict[int, float] = {}
    for part in re.split(r"[|,;]+", str(cell).strip()):
        part = part.strip()
        if not part:
            continue
        tenure, sep, rate = part.partition(":")
        if not sep:
            raise ValueError(f"Bad interest rate entry (expected tenure:rate): {part!r}")
        rates[int(float(tenure))] = float(rate)
    return rates


def format_number(x) -> str:
    """3.0 -> "3", 12.99 -> "12.99" (no exponent, no precision loss)."""
    x = float(x)
    return str(int(x)) if x.is_integer() else repr(x)


def format_tenures(tenures: List[int]) -> str:
    return "|".join(str(int(t)) for t in tenures)


def format_rate_map(rates: Dict[int, float]) -> str:
    return "|".join(f"{int(t)}:{format_number(r)}" for t, r in sorted(rates.items()))
