"""Shared fixtures: settings and an in-memory Motor-compatible client."""

import pytest
from mongomock_motor import AsyncMongoMockClient

from person_records.config import Settings
from person_records.database import Database

TEST_MONGO_URI = "mongodb://localhost:27017/person_records_test"


@pytest.fixture
def settings() -> Settings:
    return Settings(mongo_uri=TEST_MONGO_URI, _env_file=None)


@pytest.fixture
def mock_client() -> AsyncMongoMockClient:
    return AsyncMongoMockClient()


@pytest.fixture
def database(settings: Settings, mock_client: AsyncMongoMockClient) -> Database:
    return Database(settings, client=mock_client)
