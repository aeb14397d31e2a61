"""
Shared helpers for MongoDB repositories.

Functions:
- storage_call(operation, awaitable): Await a driver call, wrapping failures in StorageError
- parse_object_id(value, operation): Validate an id before any storage call
- validate_document(model, record, operation): Build a document or raise ValidationError
- validate_field(model, field, value, operation): Check one value against a model field
"""

from collections.abc import Awaitable, Mapping
from typing import Annotated, Any, TypeVar

from beanie import PydanticObjectId
from bson import ObjectId
from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from pymongo.errors import PyMongoError

from person_records.exceptions import InvalidIdentifierError, StorageError, ValidationError

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)


async def storage_call(operation: str, awaitable: Awaitable[T]) -> T:
    """Await a storage call. Driver errors are re-raised as StorageError, never retried."""
    try:
        return await awaitable
    except PyMongoError as e:
        raise StorageError(f"{operation} failed: {e}", operation=operation) from e


def parse_object_id(value: Any, operation: str) -> PydanticObjectId:
    """Return value as an ObjectId or raise InvalidIdentifierError."""
    if isinstance(value, ObjectId):
        return PydanticObjectId(value)
    if isinstance(value, (str, bytes)) and ObjectId.is_valid(value):
        return PydanticObjectId(value)
    raise InvalidIdentifierError(value, operation=operation)


def validate_document(
    model: type[M],
    record: Mapping[str, Any] | M,
    operation: str,
    index: int | None = None,
) -> M:
    """Validate a mapping into ``model``. Instances were validated on construction."""
    if isinstance(record, model):
        return record
    try:
        return model.model_validate(record)
    except PydanticValidationError as e:
        where = f" at index {index}" if index is not None else ""
        raise ValidationError(
            f"Invalid {model.__name__} record{where}: {e.error_count()} validation error(s)",
            operation=operation,
            errors=e.errors(include_url=False),
            index=index,
        ) from e


def validate_field(model: type[BaseModel], field: str, value: Any, operation: str) -> Any:
    """Validate ``value`` with the type and constraints of ``model.field``; returns the coerced value."""
    info = model.model_fields[field]
    annotation = Annotated[(info.annotation, *info.metadata)] if info.metadata else info.annotation
    try:
        return TypeAdapter(annotation).validate_python(value)
    except PydanticValidationError as e:
        raise ValidationError(
            f"Invalid {model.__name__}.{field}: {value!r}",
            operation=operation,
            errors=e.errors(include_url=False),
        ) from e
