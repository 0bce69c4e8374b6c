import uuid
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.config import settings
from app.dynamodb import open_dynamodb_client
from app.exceptions.dao_exceptions import DAOError
from app.logging_config import configure_logging, get_logger
from app.repositories.user_repository import UserRepository
from app.routers import health, users

configure_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(
        "application_starting",
        environment=settings.environment,
        table=settings.users_table_name,
    )

    async with open_dynamodb_client() as dynamodb_client:
        app.state.dynamodb_client = dynamodb_client
        app.state.user_repository = UserRepository(
            dynamodb_client, settings.users_table_name
        )
        yield

    logger.info("application_stopped")


app = FastAPI(
    title="User Store API",
    description="Register and look up users stored in DynamoDB, keyed by username.",
    version="1.0.0",
    lifespan=lifespan,
)


@app.middleware("http")
async def correlation_id_middleware(request: Request, call_next):
    correlation_id = request.headers.get("X-Correlation-ID", str(uuid.uuid4()))
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(
        correlation_id=correlation_id,
        method=request.method,
        path=request.url.path,
    )
    response = await call_next(request)
    response.headers["X-Correlation-ID"] = correlation_id
    return response


@app.exception_handler(DAOError)
async def dao_exception_handler(request: Request, exc: DAOError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


app.include_router(users.router)
app.include_router(health.router)
