from pydantic import ConfigDict
from pydantic.alias_generators import to_camel
from sqlmodel import SQLModel


class CamelModel(SQLModel):
    """
    Base for wire schemas.

    The dashboard speaks camelCase JSON (countInStock, isFeatured, ...);
    attributes stay snake_case in Python and either form is accepted on input.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DeleteResult(SQLModel):
    success: bool
    message: str
