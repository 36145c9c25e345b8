"""Pydantic request/response schemas used by the API.

Schemas keep API input/output shapes stable and provide validation for
controller handlers and tests. JSON keys are camelCase; snake_case field
names are accepted on input as well.
"""

from datetime import date, datetime, timezone
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import List, Optional


class CamelModel(BaseModel):
    """Base schema mapping snake_case fields to camelCase JSON keys."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class MemberUpdate(CamelModel):
    """Full replacement of a member's mutable fields (PUT semantics)."""
    name: str = Field(max_length=100)
    phone_number: str = Field(max_length=10)
    national_id_number: str = Field(max_length=10)
    date_of_birth: Optional[date] = None
    email: str = Field(max_length=255)
    gender: Optional[str] = Field(default=None, max_length=10)
    address: Optional[str] = Field(default=None, max_length=255)
    last_login_date: Optional[datetime] = None
    is_active: bool = True
    role: str = Field(default="member", max_length=50)

    @field_validator("last_login_date")
    @classmethod
    def _as_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        # Timestamps are stored in UTC; a value without an offset is read as UTC.
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


class MemberCreate(MemberUpdate):
    """Payload for registering a member; the hash is stored as given."""
    password_hash: str = Field(max_length=255)


class MemberRead(CamelModel):
    """Member representation returned by the API (no password hash)."""
    id: int
    name: str
    phone_number: str
    national_id_number: str
    date_of_birth: Optional[date] = None
    email: str
    gender: Optional[str] = None
    address: Optional[str] = None
    registration_date: datetime
    last_login_date: Optional[datetime] = None
    is_active: bool
    role: str


class StockIn(CamelModel):
    """Payload for creating or replacing a stock."""
    code: str = Field(min_length=1, max_length=10)
    name: str = Field(max_length=100)
    industry: Optional[str] = Field(default=None, max_length=100)


class StockRead(CamelModel):
    id: int
    code: str
    name: str
    industry: Optional[str] = None
    last_updated: datetime


class StockGroupIn(CamelModel):
    """Payload for creating or renaming a stock group."""
    name: str = Field(min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)


class StockGroupRead(CamelModel):
    """Stock group with its owner id and the stocks it currently holds."""
    id: int
    name: str
    description: Optional[str] = None
    member_id: int
    stocks: List[StockRead] = []
    creation_date: datetime
    last_updated_date: datetime
