import math
from decimal import Decimal, DecimalException
from typing import Any, Optional

from boto3.dynamodb.types import TypeDeserializer, TypeSerializer
from botocore.exceptions import ClientError

from app.exceptions.dao_exceptions import (
    DuplicateUsernameError,
    InvalidUserError,
    InvalidUsernameError,
)
from app.logging_config import get_logger
from app.schemas.user import User

logger = get_logger(__name__)

PARTITION_KEY = "username"

_serializer = TypeSerializer()
_deserializer = TypeDeserializer()


def _to_attribute_value(value: Any) -> Any:
    # TypeSerializer rejects float; DynamoDB numbers are decimals.
    if isinstance(value, float):
        if not math.isfinite(value):
            raise TypeError("Infinity and NaN not supported")
        return Decimal(str(value))
    if isinstance(value, dict):
        return {k: _to_attribute_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_attribute_value(v) for v in value]
    return value


def _from_attribute_value(value: Any) -> Any:
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, dict):
        return {k: _from_attribute_value(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_from_attribute_value(v) for v in value]
    if isinstance(value, set):
        # String and number sets come back as sorted lists so they stay JSON-safe
        return sorted(_from_attribute_value(v) for v in value)
    return value


def serialize_user(user: User) -> dict:
    """Convert a User into a low-level DynamoDB item (``{"S": ...}`` shapes)."""
    data = user.model_dump(exclude_none=True)
    return {k: _serializer.serialize(_to_attribute_value(v)) for k, v in data.items()}


def deserialize_user(item: dict) -> User:
    data = {k: _from_attribute_value(_deserializer.deserialize(v)) for k, v in item.items()}
    return User.model_validate(data)


def _is_blank(username: Optional[str]) -> bool:
    return username is None or not username.strip()


class UserRepository:
    """Users table keyed by ``username``.

    Errors from DynamoDB itself (throttling, permissions, missing table) are
    not translated and reach the caller as ``botocore`` exceptions.
    """

    def __init__(self, dynamodb_client, table_name: str) -> None:
        self._client = dynamodb_client
        self._table_name = table_name

    async def get_by_username(self, username: Optional[str]) -> Optional[User]:
        """Fetch a user by partition key. Returns None when no row exists."""
        if _is_blank(username):
            raise InvalidUsernameError("Cannot lookup null or empty user")

        response = await self._client.get_item(
            TableName=self._table_name,
            Key={PARTITION_KEY: {"S": username}},
        )
        item = response.get("Item")
        if not item:
            logger.info("user_not_found", username=username)
            return None
        logger.info("user_lookup", username=username)
        return deserialize_user(item)

    async def create_user(self, user: User) -> str:
        """Insert a new user row and return its username.

        The write is conditional on the key being absent, so two concurrent
        creates for the same username cannot both succeed.
        """
        if _is_blank(user.username):
            raise InvalidUsernameError("Cannot create user with empty username")

        try:
            item = serialize_user(user)
        except (TypeError, DecimalException) as exc:
            # NaN, Infinity, over 38 digits or outside 1E-130..1E+126
            logger.warning("user_create_rejected", username=user.username, reason=str(exc))
            raise InvalidUserError("Unsupported attribute value") from exc

        try:
            await self._client.put_item(
                TableName=self._table_name,
                Item=item,
                ConditionExpression="attribute_not_exists(#pk)",
                ExpressionAttributeNames={"#pk": PARTITION_KEY},
            )
        except ClientError as exc:
            if exc.response.get("Error", {}).get("Code") != "ConditionalCheckFailedException":
                raise
            logger.warning("user_create_rejected", username=user.username, reason="duplicate")
            raise DuplicateUsernameError("Username must be unique") from exc

        logger.info("user_created", username=user.username)
        return user.username
