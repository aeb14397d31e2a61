"""Scripted person-record workflow: create -> read -> update -> delete -> chained query."""

import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import Any

from beanie import PydanticObjectId
from pydantic import BaseModel, ConfigDict, Field

from person_records.exceptions import PersonRecordsError
from person_records.models import DeleteSummary, Person, PersonSummary
from person_records.repositories import PersonRepository

logger = logging.getLogger(__name__)

SEED_PERSON = {"name": "John Doe", "age": 30, "favorite_foods": ["Pizza", "Sushi"]}

SEED_PEOPLE = [
    {"name": "Jane Doe", "age": 28, "favorite_foods": ["Pasta", "Salad"]},
    {"name": "Mike Ross", "age": 25, "favorite_foods": ["Burritos", "Tacos", "Pizza"]},
    {"name": "Mary Poppins", "age": 35, "favorite_foods": ["Spoonful of Sugar", "Tea"]},
    {"name": "Peter Parker", "age": 18, "favorite_foods": ["Pizza", "Hot Dogs", "Burritos"]},
]

# Well-formed ObjectId that no seeded record uses
UNKNOWN_PERSON_ID = "123456789012345678901234"


class ScenarioContext(BaseModel):
    """Values shared between steps."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    repository: PersonRepository
    john: Person | None = None
    jane_id: PydanticObjectId | None = None
    peter_id: PydanticObjectId | None = None


StepAction = Callable[[ScenarioContext], Awaitable[Any]]


class ScenarioStep(BaseModel):
    """A named unit of the scenario."""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    name: str
    action: StepAction


class StepResult(BaseModel):
    """Outcome of one step: a value on success, the error otherwise."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: str
    ok: bool
    value: Any = None
    error: str | None = None
    exception: Exception | None = Field(default=None, exclude=True)


class ScenarioReport(BaseModel):
    """Results of a scenario run, in step order."""

    results: list[StepResult] = Field(default_factory=list)
    skipped: list[str] = Field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return not self.skipped and all(result.ok for result in self.results)

    @property
    def failed_step(self) -> str | None:
        for result in self.results:
            if not result.ok:
                return result.name
        return None

    def get(self, name: str) -> StepResult | None:
        for result in self.results:
            if result.name == name:
                return result
        return None


# ============================================================================
# Steps
# ============================================================================


async def reset_collection(ctx: ScenarioContext) -> DeleteSummary:
    return await ctx.repository.remove_all()


async def create_and_save_person(ctx: ScenarioContext) -> Person:
    ctx.john = await ctx.repository.create_one(SEED_PERSON)
    return ctx.john


async def create_many_people(ctx: ScenarioContext) -> list[Person]:
    return await ctx.repository.create_many(SEED_PEOPLE)


async def find_people_by_name(ctx: ScenarioContext) -> list[Person]:
    name = ctx.john.name if ctx.john is not None else SEED_PERSON["name"]
    return await ctx.repository.find_by_name(name)


async def find_people_by_missing_name(ctx: ScenarioContext) -> list[Person]:
    return await ctx.repository.find_by_name("NonExistent Name")


async def find_one_person_by_food(ctx: ScenarioContext) -> Person | None:
    return await ctx.repository.find_one_by_favorite_food("Pizza")


async def find_one_person_by_missing_food(ctx: ScenarioContext) -> Person | None:
    return await ctx.repository.find_one_by_favorite_food("Avocado")


async def find_person_by_id(ctx: ScenarioContext) -> Person | None:
    jane = await ctx.repository.find_first_by_name("Jane Doe")
    if jane is None:
        return None
    ctx.jane_id = jane.id
    return await ctx.repository.find_by_id(ctx.jane_id)


async def find_person_by_unknown_id(ctx: ScenarioContext) -> Person | None:
    return await ctx.repository.find_by_id(UNKNOWN_PERSON_ID)


async def classic_update(ctx: ScenarioContext) -> Person | None:
    if ctx.jane_id is None:
        return None
    return await ctx.repository.classic_update(ctx.jane_id)


async def find_and_update_age(ctx: ScenarioContext) -> Person | None:
    return await ctx.repository.find_and_set_age("Mike Ross", 26)


async def find_and_update_missing_age(ctx: ScenarioContext) -> Person | None:
    return await ctx.repository.find_and_set_age("NonExistent Person", 99)


async def remove_person_by_id(ctx: ScenarioContext) -> Person | None:
    peter = await ctx.repository.find_first_by_name("Peter Parker")
    if peter is None:
        return None
    ctx.peter_id = peter.id
    return await ctx.repository.remove_by_id(ctx.peter_id)


async def remove_many_people_by_name(ctx: ScenarioContext) -> DeleteSummary:
    return await ctx.repository.remove_many_by_name("Mary Poppins")


async def query_burrito_lovers(ctx: ScenarioContext) -> list[PersonSummary]:
    return await ctx.repository.query_burrito_lovers()


DEFAULT_STEPS: tuple[ScenarioStep, ...] = tuple(
    ScenarioStep(name=action.__name__, action=action)
    for action in (
        create_and_save_person,
        create_many_people,
        find_people_by_name,
        find_people_by_missing_name,
        find_one_person_by_food,
        find_one_person_by_missing_food,
        find_person_by_id,
        find_person_by_unknown_id,
        classic_update,
        find_and_update_age,
        find_and_update_missing_age,
        remove_person_by_id,
        remove_many_people_by_name,
        query_burrito_lovers,
    )
)

RESET_STEP = ScenarioStep(name="reset_collection", action=reset_collection)


def build_steps(reset: bool = False) -> list[ScenarioStep]:
    """Default steps, optionally preceded by a collection wipe."""
    steps = list(DEFAULT_STEPS)
    if reset:
        steps.insert(0, RESET_STEP)
    return steps


# ============================================================================
# Runner
# ============================================================================


def describe(value: Any) -> str:
    """Human-readable summary of a step value for log lines."""
    if value is None:
        return "no matching record"
    if isinstance(value, (Person, PersonSummary)):
        return value.summary()
    if isinstance(value, DeleteSummary):
        return f"acknowledged={value.acknowledged} deleted_count={value.deleted_count}"
    if isinstance(value, list):
        if not value:
            return "0 records"
        return f"{len(value)} record(s): " + "; ".join(describe(item) for item in value)
    return repr(value)


async def run_step(step: ScenarioStep, ctx: ScenarioContext) -> StepResult:
    """Run one step and log its outcome. Errors are captured, not raised."""
    try:
        value = await step.action(ctx)
    except PersonRecordsError as e:
        logger.error(f"{step.name} failed: {e}")
        return StepResult(name=step.name, ok=False, error=str(e), exception=e)
    except Exception as e:
        logger.exception(f"{step.name} failed unexpectedly: {e}")
        return StepResult(name=step.name, ok=False, error=str(e), exception=e)

    logger.info(f"{step.name}: {describe(value)}")
    return StepResult(name=step.name, ok=True, value=value)


async def run_scenario(
    ctx: ScenarioContext,
    steps: Sequence[ScenarioStep] = DEFAULT_STEPS,
) -> ScenarioReport:
    """Run steps in order; the first failure skips everything after it."""
    report = ScenarioReport()
    total = len(steps)
    logger.info(f"Scenario starting: {total} steps")

    for i, step in enumerate(steps, 1):
        result = await run_step(step, ctx)
        report.results.append(result)
        if not result.ok:
            report.skipped = [remaining.name for remaining in steps[i:]]
            break

    if report.succeeded:
        logger.info(f"Scenario complete. All {total} operations succeeded.")
    else:
        logger.error(
            f"Scenario aborted at '{report.failed_step}'. "
            f"{len(report.results) - 1}/{total} succeeded, {len(report.skipped)} skipped."
        )
    return report
