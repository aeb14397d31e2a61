"""
PersonRepository

MongoDB operations for the 'people' collection.

Methods:
- create_one / create_many: Validated inserts
- find_by_name, find_first_by_name, find_one_by_favorite_food, find_by_id: Reads
- classic_update: Read-modify-write append to favorite_foods (not atomic)
- find_and_set_age: Atomic findOneAndUpdate returning the new document
- remove_by_id, remove_many_by_name, remove_all: Deletes
- query_food_lovers / query_burrito_lovers: filter -> sort -> limit -> projection

Not-found results are returned as None. Errors are raised as the typed
exceptions in person_records.exceptions and are not logged here.
"""

from collections.abc import Iterable, Mapping
from typing import Any

from beanie import UpdateResponse
from beanie.operators import Set

from person_records.models import DeleteSummary, Person, PersonSummary
from person_records.repositories.base import (
    parse_object_id,
    storage_call,
    validate_document,
    validate_field,
)

PersonRecord = Mapping[str, Any] | Person


class PersonRepository:
    """CRUD operations on Person documents. Requires a connected Database."""

    async def create_one(self, record: PersonRecord) -> Person:
        """Insert a single person and return it with its generated id."""
        person = validate_document(Person, record, operation="create_one")
        return await storage_call("create_one", person.insert())

    async def create_many(self, records: Iterable[PersonRecord]) -> list[Person]:
        """Insert a batch in one call. Any invalid record fails the whole batch before writing."""
        people = [
            validate_document(Person, record, operation="create_many", index=i)
            for i, record in enumerate(records)
        ]
        if not people:
            return []

        result = await storage_call("create_many", Person.insert_many(people))
        for person, inserted_id in zip(people, result.inserted_ids):
            person.id = inserted_id
        return people

    async def find_by_name(self, name: str) -> list[Person]:
        return await storage_call("find_by_name", Person.find(Person.name == name).to_list())

    async def find_first_by_name(self, name: str) -> Person | None:
        return await storage_call("find_first_by_name", Person.find_one(Person.name == name))

    async def find_one_by_favorite_food(self, food: str) -> Person | None:
        """First person (server order) whose favorite_foods contains ``food``."""
        return await storage_call(
            "find_one_by_favorite_food",
            Person.find_one(Person.favorite_foods == food),
        )

    async def find_by_id(self, person_id: Any) -> Person | None:
        object_id = parse_object_id(person_id, operation="find_by_id")
        return await storage_call("find_by_id", Person.get(object_id))

    async def classic_update(self, person_id: Any, food: str = "Hamburger") -> Person | None:
        """
        Find, edit, then save.

        A concurrent writer between the fetch and the save is overwritten;
        use find_and_set_age-style atomic updates where that matters.
        """
        object_id = parse_object_id(person_id, operation="classic_update")
        person = await storage_call("classic_update", Person.get(object_id))
        if person is None:
            return None

        person.favorite_foods.append(food)
        await storage_call("classic_update", person.save())
        return person

    async def find_and_set_age(self, name: str, age: int) -> Person | None:
        """Atomically set ``age`` on the first person named ``name``; returns the updated document."""
        age = validate_field(Person, "age", age, operation="find_and_set_age")
        return await storage_call(
            "find_and_set_age",
            Person.find_one(Person.name == name).update(
                Set({Person.age: age}),
                response_type=UpdateResponse.NEW_DOCUMENT,
            ),
        )

    async def remove_by_id(self, person_id: Any) -> Person | None:
        """Atomically delete one person by id and return the document as it was before deletion."""
        object_id = parse_object_id(person_id, operation="remove_by_id")
        raw = await storage_call(
            "remove_by_id",
            Person.get_motor_collection().find_one_and_delete({"_id": object_id}),
        )
        if raw is None:
            return None
        return Person.model_validate(raw)

    async def remove_many_by_name(self, name: str) -> DeleteSummary:
        result = await storage_call(
            "remove_many_by_name",
            Person.find(Person.name == name).delete(),
        )
        return _delete_summary(result)

    async def remove_all(self) -> DeleteSummary:
        result = await storage_call("remove_all", Person.find_all().delete())
        return _delete_summary(result)

    async def query_food_lovers(self, food: str, limit: int = 2) -> list[PersonSummary]:
        """People who like ``food``, sorted by name, at most ``limit``, age omitted."""
        return await storage_call(
            "query_food_lovers",
            Person.find(Person.favorite_foods == food)
            .sort(+Person.name)
            .limit(limit)
            .project(PersonSummary)
            .to_list(),
        )

    async def query_burrito_lovers(self) -> list[PersonSummary]:
        return await self.query_food_lovers("Burritos", limit=2)


def _delete_summary(result) -> DeleteSummary:
    if result is None:
        return DeleteSummary(acknowledged=False, deleted_count=0)
    return DeleteSummary(acknowledged=result.acknowledged, deleted_count=result.deleted_count)
