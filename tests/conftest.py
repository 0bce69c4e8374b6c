"""Shared pytest fixtures."""

import copy
from unittest.mock import AsyncMock

import pytest
from botocore.exceptions import ClientError
from httpx import ASGITransport, AsyncClient

from app.dynamodb import get_dynamodb_client, get_user_repository
from app.repositories.user_repository import UserRepository

TABLE_NAME = "users-test"


class FakeDynamoDBClient:
    """In-memory stand-in for the aioboto3 DynamoDB client.

    Supports the calls UserRepository makes on a single-key table, including
    the ``attribute_not_exists`` condition on put_item.
    """

    def __init__(self, key_name: str = "username") -> None:
        self.key_name = key_name
        self.tables = {}

    def _key(self, item_or_key: dict) -> str:
        return item_or_key[self.key_name]["S"]

    async def get_item(self, TableName, Key):
        item = self.tables.get(TableName, {}).get(self._key(Key))
        return {"Item": copy.deepcopy(item)} if item else {}

    async def put_item(self, TableName, Item, ConditionExpression=None, **kwargs):
        rows = self.tables.setdefault(TableName, {})
        key = self._key(Item)
        if ConditionExpression and "attribute_not_exists" in ConditionExpression and key in rows:
            raise ClientError(
                {
                    "Error": {
                        "Code": "ConditionalCheckFailedException",
                        "Message": "The conditional request failed",
                    }
                },
                "PutItem",
            )
        rows[key] = copy.deepcopy(Item)
        return {}

    async def describe_table(self, TableName):
        return {"Table": {"TableName": TableName, "TableStatus": "ACTIVE"}}


@pytest.fixture
def fake_dynamodb_client():
    return FakeDynamoDBClient()


@pytest.fixture
def mock_dynamodb_client():
    """AsyncMock replacing the aioboto3 DynamoDB client so no real table is needed."""
    client = AsyncMock()
    client.put_item = AsyncMock(return_value={})
    client.get_item = AsyncMock(return_value={})  # empty = item not found
    client.describe_table = AsyncMock(return_value={"Table": {"TableStatus": "ACTIVE"}})
    return client


@pytest.fixture
def user_repo(fake_dynamodb_client):
    return UserRepository(fake_dynamodb_client, TABLE_NAME)


@pytest.fixture
async def client(fake_dynamodb_client, user_repo):
    from app.main import app

    app.dependency_overrides[get_dynamodb_client] = lambda: fake_dynamodb_client
    app.dependency_overrides[get_user_repository] = lambda: user_repo
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac
    app.dependency_overrides.clear()


def user_payload(username: str = "alice", **attributes) -> dict:
    payload = {
        "username": username,
        "email": f"{username}@example.com",
        "display_name": username.title(),
    }
    payload.update(attributes)
    return payload
