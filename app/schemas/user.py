from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class User(BaseModel):
    """A stored user row.

    Only ``username`` is known to the store; every other attribute is kept
    as-is. ``username`` may be missing here so the repository can reject it
    with a DAO error instead of a schema error.
    """

    model_config = ConfigDict(extra="allow")

    username: Optional[str] = Field(default=None, examples=["alice"])


class UserCreated(BaseModel):
    username: str
