"""
MongoDB ODM Models Package

Document schemas and projections for the 'people' collection, validated
with Pydantic and mapped by Beanie.
"""

from person_records.models.base import BaseDocument
from person_records.models.person import DeleteSummary, Person, PersonSummary


def get_document_models() -> list[type[BaseDocument]]:
    """Document models registered with Beanie at connect time."""
    return [Person]


__all__ = [
    "BaseDocument",
    "DeleteSummary",
    "Person",
    "PersonSummary",
    "get_document_models",
]
