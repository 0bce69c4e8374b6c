"""AWS Lambda entry point for API Gateway (HTTP API, payload v2).

Routes:
  GET  /health
  POST /users
  GET  /users/{username}

Each invocation opens its own DynamoDB client and hands a UserRepository to
the route function; aioboto3 clients are bound to the event loop that
``asyncio.run`` creates per invocation.
"""

import asyncio
import base64
import json
from typing import Any, Dict, Optional
from urllib.parse import unquote

import structlog
from pydantic import ValidationError

from app.config import settings
from app.dynamodb import open_dynamodb_client
from app.exceptions.dao_exceptions import DAOError
from app.logging_config import configure_logging, get_logger
from app.repositories.user_repository import UserRepository
from app.schemas.user import User, UserCreated

configure_logging()
logger = get_logger(__name__)

DEFAULT_HEADERS: Dict[str, str] = {
    "content-type": "application/json",
}


def json_response(
    body: Any, status: int = 200, headers: Optional[Dict[str, str]] = None
) -> Dict[str, Any]:
    """Return a standard JSON Lambda proxy response."""
    merged_headers = {**DEFAULT_HEADERS, **(headers or {})}
    return {
        "statusCode": status,
        "headers": merged_headers,
        "body": json.dumps(body, ensure_ascii=False),
    }


def bad_request(message: str, *, code: str = "BAD_REQUEST") -> Dict[str, Any]:
    return json_response({"message": message, "code": code}, status=400)


def not_found(message: str = "Not Found", *, code: str = "NOT_FOUND") -> Dict[str, Any]:
    return json_response({"message": message, "code": code}, status=404)


def dao_error(exc: DAOError) -> Dict[str, Any]:
    return json_response({"message": exc.message, "code": exc.code}, status=exc.status_code)


def _read_body(event: Dict[str, Any]) -> str:
    raw_body = event.get("body") or "{}"
    if event.get("isBase64Encoded"):
        raw_body = base64.b64decode(raw_body).decode("utf-8")
    return raw_body


async def create_user(event: Dict[str, Any], repo: UserRepository) -> Dict[str, Any]:
    """POST /users - store a new user."""
    try:
        user = User.model_validate(json.loads(_read_body(event)))
    except ValidationError as exc:
        return bad_request(f"Invalid user: {exc.errors()[0]['msg']}")
    except ValueError:
        # malformed JSON, base64 or UTF-8
        return bad_request("Invalid JSON body")

    username = await repo.create_user(user)
    return json_response(UserCreated(username=username).model_dump(), status=201)


async def get_user(username: str, repo: UserRepository) -> Dict[str, Any]:
    """GET /users/{username} - fetch a stored user."""
    user = await repo.get_by_username(username)
    if user is None:
        return not_found(f"User '{username}' not found")
    return json_response(user.model_dump(exclude_none=True))


def _match_route(event: Dict[str, Any]) -> tuple:
    request_ctx = event.get("requestContext", {})
    method = request_ctx.get("http", {}).get("method")
    path = event.get("rawPath") or request_ctx.get("http", {}).get("path") or ""
    route_key = request_ctx.get("routeKey") or event.get("routeKey")

    if route_key == "GET /health":
        return "health", None
    if route_key == "POST /users":
        return "create_user", None
    if route_key == "GET /users/{username}" or (
        method == "GET" and path.startswith("/users/")
    ):
        path_params = event.get("pathParameters") or {}
        # Fallback: derive the username from the path when the route key is absent
        username = path_params.get("username") or unquote(path[len("/users/"):].strip("/"))
        return "get_user", username
    return None, None


async def _dispatch(event: Dict[str, Any]) -> Dict[str, Any]:
    route, username = _match_route(event)

    if route == "health":
        return json_response({"ok": True, "message": "Backend alive"})
    if route is None:
        return not_found("Route not matched")

    async with open_dynamodb_client() as dynamodb_client:
        repo = UserRepository(dynamodb_client, settings.users_table_name)
        try:
            if route == "create_user":
                return await create_user(event, repo)
            return await get_user(username, repo)
        except DAOError as exc:
            logger.info("dao_error", code=exc.code, reason=exc.message)
            return dao_error(exc)


def handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(
        correlation_id=getattr(context, "aws_request_id", None),
        route=(event.get("requestContext") or {}).get("routeKey") or event.get("routeKey"),
    )
    return asyncio.run(_dispatch(event))
