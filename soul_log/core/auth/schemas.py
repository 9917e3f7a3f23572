"""Schemas for the OAuth login flow."""

from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator


class ExternalProfile(BaseModel):
    """Identity asserted by the external provider, narrowed once at the boundary."""

    id: str = Field(min_length=1, max_length=255)
    emails: Optional[List[str]] = None
    display_name: Optional[str] = Field(default=None, max_length=255)
    photos: Optional[List[str]] = None

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> Any:
        # Some providers return numeric ids.
        if isinstance(v, int):
            return str(v)
        return v.strip() if isinstance(v, str) else v

    @field_validator("emails", "photos", mode="before")
    @classmethod
    def flatten_values(cls, v: Any) -> Any:
        if v is None:
            return None
        if isinstance(v, str):
            v = [v]
        values = []
        for item in v:
            if isinstance(item, dict):
                item = item.get("value")
            if isinstance(item, str) and item.strip():
                values.append(item.strip())
        return values or None

    @field_validator("display_name", mode="before")
    @classmethod
    def blank_name_to_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @property
    def primary_email(self) -> Optional[str]:
        return self.emails[0] if self.emails else None

    @property
    def primary_photo(self) -> Optional[str]:
        return self.photos[0] if self.photos else None

    @classmethod
    def from_google_userinfo(cls, data: dict) -> "ExternalProfile":
        """Build from Google's OpenID userinfo document (sub, email, name, picture)."""
        return cls.model_validate(
            {
                "id": data.get("sub") or data.get("id"),
                "emails": [data["email"]] if data.get("email") else None,
                "display_name": data.get("name"),
                "photos": [data["picture"]] if data.get("picture") else None,
            }
        )


class LoginQuery(BaseModel):
    return_to: Optional[str] = Field(default=None, alias="returnTo", max_length=2048)


class CallbackQuery(BaseModel):
    code: Optional[str] = None
    state: Optional[str] = None
    error: Optional[str] = None
