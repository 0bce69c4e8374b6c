from contextlib import asynccontextmanager
from typing import AsyncIterator

import aioboto3
from fastapi import Request

from app.config import settings
from app.repositories.user_repository import UserRepository


@asynccontextmanager
async def open_dynamodb_client() -> AsyncIterator:
    """Open an aioboto3 DynamoDB low-level client configured from settings.

    Credentials come from the default AWS chain (environment variables in
    Lambda, instance/task role elsewhere).
    """
    session = aioboto3.Session()
    async with session.client(
        "dynamodb",
        region_name=settings.aws_region,
        endpoint_url=settings.dynamodb_endpoint_url or None,
    ) as dynamodb_client:
        yield dynamodb_client


def get_dynamodb_client(request: Request):
    """FastAPI dependency: the client stored on app.state during lifespan startup."""
    return request.app.state.dynamodb_client


def get_user_repository(request: Request) -> UserRepository:
    """FastAPI dependency: the single UserRepository built at startup."""
    return request.app.state.user_repository
