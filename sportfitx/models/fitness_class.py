"""Class listing schemas."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

STATUS_PENDING = 'pending'
STATUS_APPROVED = 'approved'


class ClassDocument(BaseModel):
    """A class listing. Unknown fields are stored as sent."""
    model_config = ConfigDict(extra='allow', populate_by_name=True)

    name: str | None = None
    instructor_email: str | None = Field(default=None, alias='instructorEmail')
    status: str | None = None
    total_seats: int | None = None
    enrollment: int | None = None

    @field_validator('total_seats', 'enrollment')
    @classmethod
    def validate_counter(cls, value: int | None) -> int | None:
        if value is not None and value < 0:
            raise ValueError('Seat and enrollment counts cannot be negative.')
        return value

    def to_document(self) -> dict:
        return self.model_dump(by_alias=True, exclude_unset=True)
