# scripts/normalize_providers.py
import os
import sys

import pandas as pd

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from emi_app.catalog.providers import catalog_from_frame, catalog_to_frame  # noqa: E402
from emi_app.config import DEFAULT_CATALOG_PATH  # noqa: E402

src = sys.argv[1] if len(sys.argv) > 1 else DEFAULT_CATALOG_PATH
dst = sys.argv[2] if len(sys.argv) > 2 else src

df = pd.read_csv(src, dtype=str, keep_default_na=False)  # ';' separated? use sep=";"

# every row must build a valid Provider before anything is written
try:
    catalog = catalog_from_frame(df)
except ValueError as e:
    raise SystemExit(f"❌ Provider catalog rejected: {e}")

out = catalog_to_frame(catalog)
out.to_csv(dst, index=False)

print("✅ providers.csv normalized:", os.path.abspath(dst))
print("✅ Columns:", list(out.columns))
print("✅ Providers:", len(catalog), "| enabled:", sum(p.enabled for p in catalog.values()))
