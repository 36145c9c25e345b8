"""SQLModel data models.

This module defines the application's database tables using SQLModel.
Relationships are declared on both sides; callers address related rows
by id (`member_id`, the `stock_group_stocks` link table) and the HTTP
layer never serializes an object cycle.
"""

from typing import Optional
from sqlmodel import SQLModel, Field, Relationship
from datetime import datetime, date, timezone
from typing import List


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class StockGroupStockLink(SQLModel, table=True):
    """Membership row joining a `StockGroup` to a `Stock`.

    The composite primary key gives the membership set semantics.
    """
    __tablename__ = "stock_group_stocks"

    stock_group_id: Optional[int] = Field(
        default=None, foreign_key="stock_groups.id", primary_key=True, ondelete="CASCADE"
    )
    stock_id: Optional[int] = Field(
        default=None, foreign_key="stocks.id", primary_key=True, ondelete="CASCADE"
    )


class Member(SQLModel, table=True):
    """A registered member.

    Fields:
    - `phone_number`, `national_id_number`: unique natural keys
    - `email`: indexed but not unique
    - `password_hash`: opaque hash string, never computed or checked here
    """
    __tablename__ = "members"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(max_length=100)
    phone_number: str = Field(max_length=10, unique=True, index=True)
    national_id_number: str = Field(max_length=10, unique=True, index=True)
    date_of_birth: Optional[date] = None
    email: str = Field(max_length=255, index=True)
    password_hash: str = Field(max_length=255)
    gender: Optional[str] = Field(default=None, max_length=10)
    address: Optional[str] = Field(default=None, max_length=255)
    registration_date: datetime = Field(default_factory=utcnow)
    last_login_date: Optional[datetime] = None
    is_active: bool = True
    role: str = Field(default="member", max_length=50)
    stock_groups: List['StockGroup'] = Relationship(back_populates='member', cascade_delete=True)


class Stock(SQLModel, table=True):
    """A listed stock identified by its exchange `code` (e.g. "2330")."""
    __tablename__ = "stocks"

    id: Optional[int] = Field(default=None, primary_key=True)
    code: str = Field(max_length=10, unique=True, index=True)
    name: str = Field(max_length=100)
    industry: Optional[str] = Field(default=None, max_length=100)
    last_updated: datetime = Field(default_factory=utcnow, sa_column_kwargs={"onupdate": utcnow})
    stock_groups: List['StockGroup'] = Relationship(back_populates='stocks', link_model=StockGroupStockLink)


class StockGroup(SQLModel, table=True):
    """A named set of stocks owned by exactly one `Member`.

    `name` is unique across all members. `last_updated_date` is bumped by
    the ORM on column updates and by the repository on membership changes.
    """
    __tablename__ = "stock_groups"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(max_length=100, unique=True, index=True)
    description: Optional[str] = Field(default=None, max_length=500)
    member_id: int = Field(foreign_key="members.id", index=True, ondelete="CASCADE")
    creation_date: datetime = Field(default_factory=utcnow)
    last_updated_date: datetime = Field(default_factory=utcnow, sa_column_kwargs={"onupdate": utcnow})
    member: Optional[Member] = Relationship(back_populates='stock_groups')
    stocks: List[Stock] = Relationship(
        back_populates='stock_groups',
        link_model=StockGroupStockLink,
        sa_relationship_kwargs={'order_by': 'Stock.id'},
    )
