from fastapi import APIRouter, Depends

from app.config import settings
from app.dynamodb import get_dynamodb_client

router = APIRouter(prefix="/api/v1", tags=["health"])


@router.get("/health")
async def health_check(dynamodb_client=Depends(get_dynamodb_client)):
    dynamodb_status = "ok"

    try:
        await dynamodb_client.describe_table(TableName=settings.users_table_name)
    except Exception as exc:
        dynamodb_status = f"error: {exc}"

    return {
        "status": "ok" if dynamodb_status == "ok" else "degraded",
        "dynamodb": dynamodb_status,
    }
