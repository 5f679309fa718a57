import os
from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


# Stock status cutoffs. quantity <= CRITICAL is Critical, quantity <= LOW is Low.
CRITICAL_THRESHOLD = int(os.getenv("CRITICAL_THRESHOLD", "10"))
LOW_THRESHOLD = int(os.getenv("LOW_THRESHOLD", "20"))

# One auto-dismiss delay for every stock toast (the BHW and BNS pages used to differ)
TOAST_DURATION_SECONDS = float(os.getenv("TOAST_DURATION_SECONDS", "5"))

APP_TIMEZONE = os.getenv("APP_TIMEZONE", "Asia/Manila")

# Bearer tokens are issued by the hosted auth provider and signed with a shared secret
JWT_SECRET = os.getenv("JWT_SECRET", "change-me")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_AUDIENCE = os.getenv("JWT_AUDIENCE", "authenticated")

CORS_ALLOWED_ORIGINS = os.getenv(
    "CORS_ALLOWED_ORIGINS",
    "http://localhost:3000,http://127.0.0.1:3000"
)

LOG_DIR = os.getenv("LOG_DIR", "logs")

SCHEDULER_ENABLED = _env_bool("SCHEDULER_ENABLED", True)
STOCK_SWEEP_HOUR = int(os.getenv("STOCK_SWEEP_HOUR", "6"))

DEFAULT_PAGE_SIZE = 10
