import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()


def _to_int(env_name: str, default: int) -> int:
    try:
        return int(os.getenv(env_name, default))
    except (TypeError, ValueError):
        return default


def _split_origins(raw: str | None) -> tuple[str, ...]:
    if not raw:
        return ()
    return tuple(o.strip().rstrip("/") for o in raw.split(",") if o.strip())


AMOUNT_POLICIES = ("strict", "clamp")


def _amount_policy(raw: str | None) -> str:
    policy = (raw or "strict").strip().lower()
    return policy if policy in AMOUNT_POLICIES else "strict"


CLIENT_URL = os.getenv("CLIENT_URL")
ALLOWED_ORIGINS = _split_origins(CLIENT_URL)

RAZORPAY_KEY_ID = os.getenv("RAZORPAY_KEY_ID")
RAZORPAY_KEY_SECRET = os.getenv("RAZORPAY_KEY_SECRET")
RAZORPAY_BASE_URL = os.getenv("RAZORPAY_BASE_URL", "https://api.razorpay.com/v1")

HOST = os.getenv("HOST", "0.0.0.0")
PORT = _to_int("PORT", 5000)
NODE_ENV = os.getenv("NODE_ENV", "development").lower()
IS_PRODUCTION = NODE_ENV == "production"

# strict: amounts below 1 INR are rejected; clamp: raised to 1 INR
AMOUNT_POLICY = _amount_policy(os.getenv("AMOUNT_POLICY"))

SERVICE_NAME = os.getenv("SERVICE_NAME", "razorpay-relay")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


@dataclass(frozen=True)
class Settings:
    """Snapshot of the environment the app is built with."""

    razorpay_key_id: str | None = RAZORPAY_KEY_ID
    razorpay_key_secret: str | None = RAZORPAY_KEY_SECRET
    razorpay_base_url: str = RAZORPAY_BASE_URL
    allowed_origins: tuple[str, ...] = ALLOWED_ORIGINS
    production: bool = IS_PRODUCTION
    amount_policy: str = AMOUNT_POLICY
    service_name: str = SERVICE_NAME
