# pizzeria/core/config.py
from __future__ import annotations
import os
import logging


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


# Pricing: 40% margin on ingredient cost, rounded up to the next 0.10.
MARGIN_RATE: float = float(os.getenv("MARGIN_RATE", "1.4"))
PRICE_STEP: float = float(os.getenv("PRICE_STEP", "0.1"))

RATING_MIN: int = 0
RATING_MAX: int = 5

# Seeded operator account
DEFAULT_OPERATOR_EMAIL: str = os.getenv("DEFAULT_OPERATOR_EMAIL", "chef@pizza.fr")
DEFAULT_OPERATOR_PASSWORD: str = os.getenv("DEFAULT_OPERATOR_PASSWORD", "admin")
DEFAULT_OPERATOR_LAST_NAME: str = os.getenv("DEFAULT_OPERATOR_LAST_NAME", "Chef")
DEFAULT_OPERATOR_FIRST_NAME: str = os.getenv("DEFAULT_OPERATOR_FIRST_NAME", "Mario")

SESSION_TTL_SECONDS: int = int(os.getenv("SESSION_TTL_SECONDS", "1800"))

# Mongo settings (snapshot persistence)
PERSISTENCE_ENABLED: bool = _env_bool("PERSISTENCE_ENABLED")
MONGO_URI: str = os.getenv("MONGO_URI", "mongodb://localhost:27017")
MONGO_DB: str = os.getenv("MONGO_DB", "pizzeria")
MONGO_SNAPSHOT_COL: str = os.getenv("MONGO_SNAPSHOT_COL", "snapshots")

API_HOST: str = os.getenv("API_HOST", "0.0.0.0")
API_PORT: int = int(os.getenv("API_PORT", "8081"))

# Global logging (module-level loggers inherit this)
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
)
LOGGER = logging.getLogger("pizzeria")
