import os
from dotenv import load_dotenv

load_dotenv()

BASE_DIR = os.path.dirname(os.path.abspath(__file__))
DEFAULT_CATALOG_PATH = os.path.join(BASE_DIR, "data", "providers.csv")

PROVIDER_CATALOG_PATH = os.getenv("PROVIDER_CATALOG_PATH") or DEFAULT_CATALOG_PATH

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
