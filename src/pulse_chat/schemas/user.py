"""User-related Pydantic schemas."""

from pydantic import Field

from .common import CamelModel


class UserRead(CamelModel):
    """Public view of a user."""

    id: str
    phone: str
    name: str | None = None
    avatar: str | None = None


class UserEnvelope(CamelModel):
    """Single user wrapped under ``user``."""

    user: UserRead


class UserList(CamelModel):
    """Users shown in the chat list or search results."""

    users: list[UserRead]


class UserUpdate(CamelModel):
    """Schema for updating the signed-in user's profile."""

    name: str | None = Field(
        None,
        max_length=50,
        description="Display name (1-50 characters); null clears it",
    )
