"""
Person MongoDB Schema

Defines the Person document model for the 'people' collection.

Schema Fields:
- _id: ObjectId (MongoDB auto-generated, immutable)
- name: Display name, required and non-empty
- age: Integer age (defaults to 0)
- favorite_foods: Ordered list of foods (defaults to empty)
- created_at, updated_at: Timestamps
"""

from datetime import datetime

from beanie import PydanticObjectId
from pydantic import BaseModel, ConfigDict, Field

from person_records.models.base import BaseDocument


class Person(BaseDocument):
    """A single person record."""

    name: str = Field(..., min_length=1)
    age: int = 0
    favorite_foods: list[str] = Field(default_factory=list)

    class Settings:
        name = "people"
        use_state_management = True

    def summary(self) -> str:
        """Short human-readable form for log lines."""
        foods = ", ".join(self.favorite_foods) or "nothing"
        return f"{self.name} (id={self.id}, age={self.age}, likes {foods})"


class PersonSummary(BaseModel):
    """Projection of a Person without the age field."""

    model_config = ConfigDict(populate_by_name=True)

    id: PydanticObjectId = Field(alias="_id")
    name: str
    favorite_foods: list[str] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def summary(self) -> str:
        foods = ", ".join(self.favorite_foods) or "nothing"
        return f"{self.name} (id={self.id}, likes {foods})"


class DeleteSummary(BaseModel):
    """Acknowledgement and count returned by bulk deletes."""

    acknowledged: bool
    deleted_count: int
