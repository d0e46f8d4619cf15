"""Payment schemas."""

from pydantic import BaseModel, ConfigDict, Field

from sportfitx.models.results import DeleteResult, InsertOneResult, UpdateResult


class PaymentRecord(BaseModel):
    """A completed transaction as reported by the client after confirmation."""
    model_config = ConfigDict(extra='allow', populate_by_name=True)

    email: str
    class_id: str = Field(alias='classId')
    amount: int | float
    date: str | None = None

    def to_document(self) -> dict:
        return self.model_dump(by_alias=True, exclude_unset=True)


class PaymentIntentRequest(BaseModel):
    price: float


class PaymentIntentResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    client_secret: str = Field(alias='clientSecret')


class SettlementResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    insert_result: InsertOneResult = Field(alias='insertResult')
    delete_result: DeleteResult = Field(alias='deleteResult')
    update_result: UpdateResult = Field(alias='updateResult')
