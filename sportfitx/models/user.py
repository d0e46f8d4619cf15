"""User document schemas."""

from pydantic import BaseModel, ConfigDict, field_validator

ROLE_ADMIN = 'admin'
ROLE_INSTRUCTOR = 'instructor'


class UserDocument(BaseModel):
    """A user as sent by the client on first sign-in."""
    model_config = ConfigDict(extra='allow')

    email: str
    name: str | None = None
    photo: str | None = None
    role: str | None = None

    @field_validator('email')
    @classmethod
    def validate_email(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError('Email is required.')
        return normalized


class UserUpdate(BaseModel):
    """Fields to ``$set`` on a user, usually just the role."""
    model_config = ConfigDict(extra='allow')

    role: str | None = None


class RoleCheckResponse(BaseModel):
    admin: bool | None = None
    instructor: bool | None = None
