"""User schemas (request/response)."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class UserProfile(BaseModel):
    """Identity Store record as seen by services."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    external_provider_id: str
    email: Optional[str] = None
    name: Optional[str] = None
    avatar_url: Optional[str] = None

    def to_public(self) -> "PublicUser":
        return PublicUser(id=self.id, email=self.email, name=self.name, avatar_url=self.avatar_url)


class PublicUser(BaseModel):
    """Profile fields exposed to the frontend."""

    id: str
    email: Optional[str] = None
    name: Optional[str] = None
    avatar_url: Optional[str] = Field(default=None, serialization_alias="avatarUrl")


def serialize_user(user: UserProfile) -> dict:
    return user.to_public().model_dump(by_alias=True)
