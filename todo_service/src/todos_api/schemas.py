from __future__ import annotations

from datetime import datetime
from typing import Annotated, List

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from .models import TodoEntity
from .utils import INT64_MAX, INT64_MIN

# Identifiers the store can hold; larger values are rejected as undecodable.
StoreInt = Annotated[int, Field(ge=INT64_MIN, le=INT64_MAX)]


def _either_case(name: str) -> AliasChoices:
    # Bodies may use lower-case or capitalized keys.
    return AliasChoices(name, name.capitalize())


# PUBLIC_INTERFACE
class CreateTODORequest(BaseModel):
    """
    Body of POST /todos.

    An empty subject is accepted here and rejected by the handler with 400.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={"example": {"subject": "buy milk", "description": ""}},
    )

    subject: str = Field(default="", validation_alias=_either_case("subject"))
    description: str = Field(default="", validation_alias=_either_case("description"))


# PUBLIC_INTERFACE
class UpdateTODORequest(BaseModel):
    """Body of PUT /todos."""

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {"id": 1, "subject": "buy milk and eggs", "description": ""}
        },
    )

    id: StoreInt = Field(default=0, validation_alias=AliasChoices("id", "ID", "Id"))
    subject: str = Field(default="", validation_alias=_either_case("subject"))
    description: str = Field(default="", validation_alias=_either_case("description"))


# PUBLIC_INTERFACE
class DeleteTODORequest(BaseModel):
    """Body of DELETE /todos."""

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={"example": {"ids": [1, 2, 3]}},
    )

    ids: List[StoreInt] = Field(default_factory=list, validation_alias=AliasChoices("ids", "IDs", "Ids"))


# PUBLIC_INTERFACE
class TodoOut(BaseModel):
    """
    A TODO as returned by the API.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "ID": 1,
                "Subject": "buy milk",
                "Description": "",
                "CreatedAt": "2025-01-25T10:15:30",
                "UpdatedAt": "2025-01-25T10:15:30",
            }
        },
    )

    id: int = Field(..., alias="ID", description="Store-assigned identifier")
    subject: str = Field(..., alias="Subject", description="Non-empty subject")
    description: str = Field(default="", alias="Description", description="Free text description")
    created_at: datetime = Field(..., alias="CreatedAt", description="Creation timestamp")
    updated_at: datetime = Field(..., alias="UpdatedAt", description="Last update timestamp")

    @classmethod
    def from_entity(cls, entity: TodoEntity) -> "TodoOut":
        return cls(**entity)


class CreateTODOResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    todo: TodoOut = Field(..., alias="TODO")


class ReadTODOResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    todos: List[TodoOut] = Field(default_factory=list, alias="TODOs")


class UpdateTODOResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    todo: TodoOut = Field(..., alias="TODO")


class DeleteTODOResponse(BaseModel):
    """Always serialized as an empty JSON object."""


class HealthzResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str = Field(default="string", alias="Message")
