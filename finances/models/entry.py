"""
Core Data Models for Personal Finances

These models describe the ledger records flowing through the system:
entries (revenues and expenses) and the users who own them.

DESIGN DECISION: Every field is optional at the model level.
The same model is used for:
1. Entries submitted by the caller (possibly incomplete or invalid)
2. Persisted entries returned by storage
3. Filter entries used for query-by-example reads

Business rules (description present, month range, positive value...)
are enforced by the entry engine, which reports the FIRST violated rule.
Pydantic only guarantees types here.
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class EntryType(str, Enum):
    """Direction of money for an entry."""
    REVENUE = "REVENUE"
    EXPENSE = "EXPENSE"


class EntryStatus(str, Enum):
    """
    Entry status.

    New entries always start as PENDING.
    Only EFFECTED entries count towards the balance.
    """
    PENDING = "PENDING"
    EFFECTED = "EFFECTED"
    CANCELED = "CANCELED"


# =============================================================================
# USER MODEL
# =============================================================================

class User(BaseModel):
    """
    An account owning ledger entries.

    NOTE: The password is an opaque string compared verbatim.
    It is NOT hashed.
    """
    model_config = ConfigDict(validate_assignment=True)

    id: Optional[int] = Field(
        default=None,
        description="Unique user ID (assigned by storage)"
    )
    name: Optional[str] = Field(
        default=None,
        max_length=150,
        description="Display name"
    )
    email: Optional[str] = Field(
        default=None,
        max_length=100,
        description="Login email (unique)"
    )
    password: Optional[str] = Field(
        default=None,
        description="Plain-text password"
    )
    registry_date: Optional[date] = Field(
        default=None,
        description="Date the user registered"
    )


# =============================================================================
# CORE ENTRY MODEL
# =============================================================================

class Entry(BaseModel):
    """
    A financial record: one revenue or expense in a given month.

    The entry does not own its user, it only references it.
    Only `user.id` is relevant to the ledger.
    """
    model_config = ConfigDict(validate_assignment=True)

    # Identity
    id: Optional[int] = Field(
        default=None,
        description="Unique entry ID (absent until persisted)"
    )

    description: Optional[str] = Field(
        default=None,
        description="Free text description"
    )
    month: Optional[int] = Field(
        default=None,
        description="Month of the entry (1-12)"
    )
    year: Optional[int] = Field(
        default=None,
        description="Four digit year of the entry"
    )
    user: Optional[User] = Field(
        default=None,
        description="Owner of the entry"
    )
    value: Optional[Decimal] = Field(
        default=None,
        description="Amount, must be above zero"
    )
    registry_date: Optional[date] = Field(
        default=None,
        description="Date the entry was recorded"
    )
    type: Optional[EntryType] = None
    status: Optional[EntryStatus] = None

    @property
    def user_id(self) -> Optional[int]:
        """ID of the owning user, if any."""
        return self.user.id if self.user else None
