"""
HTTP Payloads

Request and response shapes of the REST boundary.

DESIGN DECISION: Payloads are deliberately looser than the domain models.
- `type` and `status` arrive as raw strings so an unknown value can be
  answered with a plain "Invalid type." / "Invalid status." body
  instead of a framework validation error.
- Entries reference their owner by user id only.
- User responses never carry the password.
"""

from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from finances.models.entry import Entry, User


class EntryDTO(BaseModel):
    """Entry as sent by a client."""
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[int] = None
    description: Optional[str] = None
    month: Optional[int] = None
    year: Optional[int] = None
    user: Optional[int] = Field(default=None, description="Owner user id")
    value: Optional[Decimal] = None
    registry_date: Optional[date] = Field(default=None, alias="registryDate")
    type: Optional[str] = None
    status: Optional[str] = None


class EntryRead(BaseModel):
    """Entry as returned to a client."""
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[int] = None
    description: Optional[str] = None
    month: Optional[int] = None
    year: Optional[int] = None
    user: Optional[int] = None
    value: Optional[Decimal] = None
    registry_date: Optional[date] = Field(default=None, alias="registryDate")
    type: Optional[str] = None
    status: Optional[str] = None

    @classmethod
    def from_entry(cls, entry: Entry) -> "EntryRead":
        return cls(
            id=entry.id,
            description=entry.description,
            month=entry.month,
            year=entry.year,
            user=entry.user_id,
            value=entry.value,
            registry_date=entry.registry_date,
            type=entry.type.value if entry.type else None,
            status=entry.status.value if entry.status else None,
        )


class UserDTO(BaseModel):
    """Credentials or registration data sent by a client."""
    name: Optional[str] = Field(default=None, max_length=150)
    email: Optional[str] = Field(default=None, max_length=100)
    password: Optional[str] = None


class UserRead(BaseModel):
    """User as returned to a client. No password."""
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[int] = None
    name: Optional[str] = None
    email: Optional[str] = None
    registry_date: Optional[date] = Field(default=None, alias="registryDate")

    @classmethod
    def from_user(cls, user: User) -> "UserRead":
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            registry_date=user.registry_date,
        )


class UpdateStatusDTO(BaseModel):
    status: Optional[str] = None
