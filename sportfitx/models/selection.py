"""Selected-class schemas."""

from pydantic import BaseModel, ConfigDict, Field


class SelectionDocument(BaseModel):
    """A student's pending intent to enroll in a class."""
    model_config = ConfigDict(extra='allow', populate_by_name=True)

    student_email: str = Field(alias='studentEmail')
    class_id: str = Field(alias='classId')

    def to_document(self) -> dict:
        return self.model_dump(by_alias=True, exclude_unset=True)
