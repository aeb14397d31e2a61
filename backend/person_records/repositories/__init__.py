"""
Repository Pattern for MongoDB

Database abstraction over the Beanie models:
- PersonRepository: CRUD, update styles and the chained food query
- storage_call / parse_object_id / validate_document: shared guards
"""

from person_records.repositories.base import parse_object_id, storage_call, validate_document
from person_records.repositories.people import PersonRepository

__all__ = [
    "PersonRepository",
    "parse_object_id",
    "storage_call",
    "validate_document",
]
