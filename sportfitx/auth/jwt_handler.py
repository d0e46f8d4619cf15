from datetime import datetime, timedelta, timezone

import jwt

from sportfitx.core import config
from sportfitx.core.errors import Unauthenticated

REGISTERED_CLAIMS = ("exp", "iat")


def create_access_token(claims: dict, expires_minutes: int | None = None) -> str:
    expire_minutes = expires_minutes or config.JWT_EXPIRES_MINUTES
    issued_at = datetime.now(timezone.utc)
    payload = {**claims, "exp": issued_at + timedelta(minutes=expire_minutes), "iat": issued_at}
    return jwt.encode(payload, config.ACCESS_TOKEN_SECRET, algorithm=config.JWT_ALGORITHM)


def decode_access_token(token: str) -> dict:
    return jwt.decode(token, config.ACCESS_TOKEN_SECRET, algorithms=[config.JWT_ALGORITHM])


def verify_access_token(token: str | None) -> dict:
    if not token:
        raise Unauthenticated()
    try:
        payload = decode_access_token(token)
    except jwt.PyJWTError as exc:
        raise Unauthenticated() from exc
    return {key: value for key, value in payload.items() if key not in REGISTERED_CLAIMS}
