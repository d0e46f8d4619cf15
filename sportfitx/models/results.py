"""Write results returned to clients exactly as the collection reports them."""

from pydantic import BaseModel, ConfigDict, Field


class _ResultModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    acknowledged: bool = True


class InsertOneResult(_ResultModel):
    inserted_id: str = Field(alias="insertedId")


class UpdateResult(_ResultModel):
    matched_count: int = Field(default=0, alias="matchedCount")
    modified_count: int = Field(default=0, alias="modifiedCount")
    upserted_count: int = Field(default=0, alias="upsertedCount")
    upserted_id: str | None = Field(default=None, alias="upsertedId")


class DeleteResult(_ResultModel):
    deleted_count: int = Field(default=0, alias="deletedCount")


class ExistsMessage(BaseModel):
    message: str
