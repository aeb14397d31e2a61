"""
Database module initialization.
Exports database components for use throughout the application.
"""

from person_records.database.connection import (
    DEFAULT_DATABASE_NAME,
    Database,
    resolve_database_name,
    sanitize_mongodb_url,
)

__all__ = [
    "DEFAULT_DATABASE_NAME",
    "Database",
    "resolve_database_name",
    "sanitize_mongodb_url",
]
