"""Tests for PersonRepository against an in-memory MongoDB."""

import asyncio

import pytest
from bson import ObjectId
from pymongo.errors import OperationFailure

from person_records.exceptions import InvalidIdentifierError, StorageError, ValidationError
from person_records.models import Person
from person_records.repositories import PersonRepository, parse_object_id, storage_call

JANE = {"name": "Jane Doe", "age": 28, "favorite_foods": ["Pasta", "Salad"]}


def run_with_repository(database, scenario) -> None:
    async def run() -> None:
        async with database:
            await scenario(PersonRepository())

    asyncio.run(run())


def test_create_then_find_by_id_round_trips_fields(database) -> None:
    async def scenario(repo: PersonRepository) -> None:
        created = await repo.create_one(JANE)
        assert created.id is not None

        found = await repo.find_by_id(str(created.id))
        assert found is not None
        assert found.id == created.id
        assert (found.name, found.age, found.favorite_foods) == (
            "Jane Doe",
            28,
            ["Pasta", "Salad"],
        )

    run_with_repository(database, scenario)


def test_defaults_apply_on_create(database) -> None:
    async def scenario(repo: PersonRepository) -> None:
        person = await repo.create_one({"name": "Solo"})
        assert person.age == 0
        assert person.favorite_foods == []

    run_with_repository(database, scenario)


@pytest.mark.parametrize("record", [{"age": 40}, {"name": ""}, {"name": "Bad", "age": "old"}])
def test_create_one_rejects_invalid_records(database, record) -> None:
    async def scenario(repo: PersonRepository) -> None:
        with pytest.raises(ValidationError) as exc_info:
            await repo.create_one(record)
        assert exc_info.value.operation == "create_one"
        assert exc_info.value.errors
        assert await Person.find_all().count() == 0

    run_with_repository(database, scenario)


def test_create_many_assigns_ids(database) -> None:
    async def scenario(repo: PersonRepository) -> None:
        people = await repo.create_many([JANE, {"name": "Mike Ross", "age": 25}])

        assert [p.name for p in people] == ["Jane Doe", "Mike Ross"]
        assert all(p.id is not None for p in people)
        assert len({p.id for p in people}) == 2
        assert await repo.find_by_id(people[1].id) is not None

    run_with_repository(database, scenario)


def test_create_many_fails_whole_batch(database) -> None:
    async def scenario(repo: PersonRepository) -> None:
        with pytest.raises(ValidationError) as exc_info:
            await repo.create_many([JANE, {"age": 3}, {"name": "Mike Ross"}])

        assert exc_info.value.index == 1
        assert await Person.find_all().count() == 0

    run_with_repository(database, scenario)


def test_create_many_with_no_records(database) -> None:
    async def scenario(repo: PersonRepository) -> None:
        assert await repo.create_many([]) == []

    run_with_repository(database, scenario)


def test_find_by_name(database) -> None:
    async def scenario(repo: PersonRepository) -> None:
        await repo.create_many([JANE, JANE, {"name": "Mike Ross"}])

        assert len(await repo.find_by_name("Jane Doe")) == 2
        assert await repo.find_by_name("NonExistent Name") == []
        assert (await repo.find_first_by_name("Mike Ross")).name == "Mike Ross"
        assert await repo.find_first_by_name("Nobody") is None

    run_with_repository(database, scenario)


def test_find_one_by_favorite_food(database) -> None:
    async def scenario(repo: PersonRepository) -> None:
        await repo.create_many(
            [JANE, {"name": "Mike Ross", "favorite_foods": ["Burritos", "Pizza"]}]
        )

        found = await repo.find_one_by_favorite_food("Pizza")
        assert found is not None
        assert found.name == "Mike Ross"
        assert await repo.find_one_by_favorite_food("Avocado") is None

    run_with_repository(database, scenario)


def test_find_by_id_unknown_and_malformed(database) -> None:
    async def scenario(repo: PersonRepository) -> None:
        assert await repo.find_by_id("123456789012345678901234") is None

        with pytest.raises(InvalidIdentifierError) as exc_info:
            await repo.find_by_id("not-an-id")
        assert exc_info.value.identifier == "not-an-id"
        assert exc_info.value.operation == "find_by_id"

    run_with_repository(database, scenario)


def test_classic_update_appends_food_once(database) -> None:
    async def scenario(repo: PersonRepository) -> None:
        jane = await repo.create_one(JANE)

        updated = await repo.classic_update(jane.id)
        assert updated.favorite_foods == ["Pasta", "Salad", "Hamburger"]

        stored = await repo.find_by_id(jane.id)
        assert stored.favorite_foods == ["Pasta", "Salad", "Hamburger"]
        assert stored.favorite_foods.count("Hamburger") == 1

    run_with_repository(database, scenario)


def test_classic_update_not_found_and_invalid(database) -> None:
    async def scenario(repo: PersonRepository) -> None:
        assert await repo.classic_update(ObjectId()) is None
        with pytest.raises(InvalidIdentifierError):
            await repo.classic_update("12345")

    run_with_repository(database, scenario)


def test_find_and_set_age(database) -> None:
    async def scenario(repo: PersonRepository) -> None:
        mike = await repo.create_one({"name": "Mike Ross", "age": 25})

        updated = await repo.find_and_set_age("Mike Ross", 26)
        assert updated is not None
        assert updated.id == mike.id
        assert updated.age == 26
        assert (await repo.find_by_id(mike.id)).age == 26

        assert await repo.find_and_set_age("NonExistent Person", 99) is None

    run_with_repository(database, scenario)


def test_remove_by_id_returns_snapshot(database) -> None:
    async def scenario(repo: PersonRepository) -> None:
        peter = await repo.create_one({"name": "Peter Parker", "age": 18})

        removed = await repo.remove_by_id(str(peter.id))
        assert removed is not None
        assert (removed.id, removed.name, removed.age) == (peter.id, "Peter Parker", 18)
        assert await repo.find_by_id(peter.id) is None
        assert await repo.remove_by_id(peter.id) is None

        with pytest.raises(InvalidIdentifierError):
            await repo.remove_by_id(42)

    run_with_repository(database, scenario)


def test_remove_many_by_name_counts(database) -> None:
    async def scenario(repo: PersonRepository) -> None:
        await repo.create_many(
            [{"name": "Mary Poppins"}, {"name": "Mary Poppins"}, {"name": "Bert"}]
        )

        first = await repo.remove_many_by_name("Mary Poppins")
        assert first.acknowledged is True
        assert first.deleted_count == 2

        second = await repo.remove_many_by_name("Mary Poppins")
        assert second.deleted_count == 0
        assert len(await repo.find_by_name("Bert")) == 1

    run_with_repository(database, scenario)


def test_remove_all(database) -> None:
    async def scenario(repo: PersonRepository) -> None:
        await repo.create_many([JANE, {"name": "Bert"}])

        assert (await repo.remove_all()).deleted_count == 2
        assert await Person.find_all().count() == 0

    run_with_repository(database, scenario)


def test_query_burrito_lovers_sorts_limits_and_hides_age(database) -> None:
    async def scenario(repo: PersonRepository) -> None:
        await repo.create_many(
            [
                {"name": "Zed", "age": 50, "favorite_foods": ["Burritos"]},
                {"name": "Mike Ross", "age": 25, "favorite_foods": ["Burritos", "Tacos"]},
                JANE,
                {"name": "Alice", "age": 31, "favorite_foods": ["Tea", "Burritos"]},
            ]
        )

        lovers = await repo.query_burrito_lovers()

        assert [p.name for p in lovers] == ["Alice", "Mike Ross"]
        for person in lovers:
            assert "Burritos" in person.favorite_foods
            assert not hasattr(person, "age")
            assert "age" not in person.model_dump()

        assert [p.name for p in await repo.query_food_lovers("Tacos", limit=5)] == ["Mike Ross"]

    run_with_repository(database, scenario)


def test_storage_call_wraps_driver_errors() -> None:
    async def failing() -> None:
        raise OperationFailure("not authorized")

    with pytest.raises(StorageError) as exc_info:
        asyncio.run(storage_call("find_by_name", failing()))

    assert exc_info.value.operation == "find_by_name"
    assert isinstance(exc_info.value.__cause__, OperationFailure)
    assert "find_by_name failed" in str(exc_info.value)


def test_parse_object_id() -> None:
    oid = ObjectId()

    assert parse_object_id(oid, "op") == oid
    assert parse_object_id(str(oid), "op") == oid
    for bad in (None, "", "zz" * 12, 123):
        with pytest.raises(InvalidIdentifierError):
            parse_object_id(bad, "op")


def test_find_and_set_age_validates_age(database) -> None:
    async def scenario(repo: PersonRepository) -> None:
        await repo.create_one({"name": "Mike Ross", "age": 25})

        with pytest.raises(ValidationError) as exc_info:
            await repo.find_and_set_age("Mike Ross", "abc")
        assert exc_info.value.operation == "find_and_set_age"
        assert (await repo.find_first_by_name("Mike Ross")).age == 25

        updated = await repo.find_and_set_age("Mike Ross", "27")
        assert updated.age == 27

    run_with_repository(database, scenario)


def test_remove_by_id_does_not_report_a_delete_it_did_not_do(database, monkeypatch) -> None:
    async def scenario(repo: PersonRepository) -> None:
        peter = await repo.create_one({"name": "Peter Parker", "age": 18})
        snapshot = await repo.find_by_id(peter.id)
        await Person.get_motor_collection().delete_one({"_id": peter.id})

        async def stale_get(*args, **kwargs):
            return snapshot

        monkeypatch.setattr(Person, "get", stale_get)

        assert await repo.remove_by_id(peter.id) is None

    run_with_repository(database, scenario)
