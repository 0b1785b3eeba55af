import uuid

from pydantic import ConfigDict, field_validator
from sqlmodel import Field

from app.schemas.base import CamelModel


class CategoryWrite(CamelModel):
    """
    Payload for creating or replacing a category.
    """

    model_config = ConfigDict(extra="forbid")

    name: str = Field(max_length=100)
    icon: str | None = None
    color: str | None = None

    @field_validator("name")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v


class CategoryRead(CamelModel):
    id: uuid.UUID
    name: str
    icon: str | None = None
    color: str | None = None
