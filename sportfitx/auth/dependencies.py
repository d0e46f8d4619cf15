import logging

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from sportfitx.auth import jwt_handler
from sportfitx.core import config
from sportfitx.core.errors import Forbidden, Unauthenticated
from sportfitx.models.user import ROLE_ADMIN, ROLE_INSTRUCTOR
from sportfitx.repository import DocumentCollection, DocumentStore

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def get_store(request: Request) -> DocumentStore:
    return request.app.state.store


def verify_jwt(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> dict:
    if credentials is None:
        logger.debug("Rejected request without bearer token")
        raise Unauthenticated()
    return jwt_handler.verify_access_token(credentials.credentials)


def require_role(claims: dict | None, role: str, users: DocumentCollection) -> dict:
    email = (claims or {}).get("email")
    if not email:
        raise Unauthenticated()

    user = users.find_one({"email": email})
    if user is None or user.get("role") != role:
        logger.debug("Denied %s access to %s", role, email)
        raise Forbidden()
    return claims


def ensure_owner(claims: dict, email: str) -> None:
    if claims.get("email") != email:
        logger.debug("Denied %s access to records of %s", claims.get("email"), email)
        raise Forbidden()


def verify_admin(
    claims: dict = Depends(verify_jwt),
    store: DocumentStore = Depends(get_store),
) -> dict:
    return require_role(claims, ROLE_ADMIN, store.users)


def verify_instructor(
    claims: dict = Depends(verify_jwt),
    store: DocumentStore = Depends(get_store),
) -> dict:
    return require_role(claims, ROLE_INSTRUCTOR, store.users)


def verify_payment_intent_caller(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> dict | None:
    if not config.PAYMENT_INTENT_REQUIRES_AUTH:
        return None
    return verify_jwt(credentials)
