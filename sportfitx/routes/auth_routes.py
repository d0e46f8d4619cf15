from fastapi import APIRouter
from pydantic import BaseModel, ConfigDict

from sportfitx.auth import jwt_handler

router = APIRouter(tags=['auth'])


class TokenRequest(BaseModel):
    """Identity claims sent by the client after it signs the user in."""
    model_config = ConfigDict(extra='allow')

    email: str


class TokenResponse(BaseModel):
    token: str


@router.post('/jwt', response_model=TokenResponse)
def issue_token(data: TokenRequest):
    return TokenResponse(token=jwt_handler.create_access_token(data.model_dump()))
