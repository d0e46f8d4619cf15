import os

from dotenv import load_dotenv


load_dotenv()


def _get_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _get_list(value: str | None, default: list[str]) -> list[str]:
    if not value:
        return default
    return [item.strip() for item in value.split(",") if item.strip()]


APP_ENV = os.getenv("APP_ENV", "development")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
PORT = int(os.getenv("PORT", "5000"))

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./sportfitx.db")

CORS_ALLOW_ORIGINS = _get_list(os.getenv("CORS_ALLOW_ORIGINS"), ["*"])

ACCESS_TOKEN_SECRET = os.getenv("ACCESS_TOKEN_SECRET", "change-me")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_EXPIRES_MINUTES = int(os.getenv("JWT_EXPIRES_MINUTES", "60"))

STRIPE_SECRET_KEY = os.getenv("STRIPE_SECRET_KEY", "")
PAYMENT_CURRENCY = os.getenv("PAYMENT_CURRENCY", "usd")
# Intent creation is open to anonymous callers unless this is switched on.
PAYMENT_INTENT_REQUIRES_AUTH = _get_bool(os.getenv("PAYMENT_INTENT_REQUIRES_AUTH"), default=False)


def validate_runtime_config() -> None:
    if APP_ENV.lower() != "production":
        return
    if ACCESS_TOKEN_SECRET == "change-me":
        raise RuntimeError("ACCESS_TOKEN_SECRET must be set in production.")
    if not STRIPE_SECRET_KEY:
        raise RuntimeError("STRIPE_SECRET_KEY must be set in production.")
