from fastapi import APIRouter, Depends, HTTPException, status

from app.dynamodb import get_user_repository
from app.repositories.user_repository import UserRepository
from app.schemas.user import User, UserCreated

router = APIRouter(prefix="/api/v1/users", tags=["users"])


@router.post(
    "",
    response_model=UserCreated,
    status_code=status.HTTP_201_CREATED,
    summary="Register a user",
    description=(
        "Stores a new user row keyed by username. Extra attributes are kept "
        "as-is. Returns 409 when the username is already taken."
    ),
)
async def create_user(
    user: User,
    repo: UserRepository = Depends(get_user_repository),
):
    username = await repo.create_user(user)
    return UserCreated(username=username)


@router.get("/{username}", response_model=User, summary="Get a user by username")
async def get_user(
    username: str,
    repo: UserRepository = Depends(get_user_repository),
):
    user = await repo.get_by_username(username)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"User '{username}' not found",
        )
    return user
