"""Repository classes encapsulating database operations.

Each repository is small and focused on a single aggregate (members,
stocks, stock groups). Repositories return SQLModel objects and perform
commits/refreshes where appropriate. A commit rejected by a unique
constraint is rolled back and re-raised as `ConflictError`.
"""

from typing import List, Optional
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select
from . import models
from .exceptions import ConflictError


def _commit(session: Session) -> None:
    """Commit the session, turning constraint violations into conflicts."""
    try:
        session.commit()
    except IntegrityError as exc:
        session.rollback()
        raise ConflictError(f"constraint violation: {exc.orig}") from exc


class MemberRepository:
    """CRUD operations for `Member` objects."""
    def __init__(self, session: Session):
        self.session = session

    def list_all(self) -> List[models.Member]:
        stmt = select(models.Member).order_by(models.Member.id)
        return self.session.exec(stmt).all()

    def get(self, member_id: int) -> Optional[models.Member]:
        """Get a `Member` by primary key."""
        return self.session.get(models.Member, member_id)

    def get_by_email(self, email: str) -> Optional[models.Member]:
        """Return the earliest registered member with `email`, if any.

        Email is not a unique column, so several rows can match.
        """
        stmt = select(models.Member).where(models.Member.email == email).order_by(models.Member.id)
        return self.session.exec(stmt).first()

    def get_by_phone_number(self, phone_number: str) -> Optional[models.Member]:
        stmt = select(models.Member).where(models.Member.phone_number == phone_number)
        return self.session.exec(stmt).first()

    def get_by_national_id_number(self, national_id_number: str) -> Optional[models.Member]:
        stmt = select(models.Member).where(models.Member.national_id_number == national_id_number)
        return self.session.exec(stmt).first()

    def save(self, member: models.Member) -> models.Member:
        """Insert or update a member and return the managed instance."""
        self.session.add(member)
        _commit(self.session)
        self.session.refresh(member)
        return member

    def delete(self, member: models.Member) -> None:
        """Delete a member; its stock groups go with it."""
        self.session.delete(member)
        _commit(self.session)


class StockRepository:
    """CRUD operations for `Stock` objects."""
    def __init__(self, session: Session):
        self.session = session

    def list_all(self) -> List[models.Stock]:
        stmt = select(models.Stock).order_by(models.Stock.id)
        return self.session.exec(stmt).all()

    def get(self, stock_id: int) -> Optional[models.Stock]:
        return self.session.get(models.Stock, stock_id)

    def get_by_code(self, code: str) -> Optional[models.Stock]:
        """Return the stock whose code matches `code` exactly."""
        stmt = select(models.Stock).where(models.Stock.code == code)
        return self.session.exec(stmt).first()

    def save(self, stock: models.Stock) -> models.Stock:
        self.session.add(stock)
        _commit(self.session)
        self.session.refresh(stock)
        return stock

    def delete(self, stock: models.Stock) -> None:
        """Delete a stock and its group memberships; the groups stay."""
        self.session.delete(stock)
        _commit(self.session)


class StockGroupRepository:
    """CRUD and membership operations for `StockGroup` records."""
    def __init__(self, session: Session):
        self.session = session

    def list_all(self) -> List[models.StockGroup]:
        stmt = select(models.StockGroup).order_by(models.StockGroup.id)
        return self.session.exec(stmt).all()

    def get(self, group_id: int) -> Optional[models.StockGroup]:
        return self.session.get(models.StockGroup, group_id)

    def get_by_name(self, name: str) -> Optional[models.StockGroup]:
        """Return the group called `name`; names are unique across members."""
        stmt = select(models.StockGroup).where(models.StockGroup.name == name)
        return self.session.exec(stmt).first()

    def list_by_member(self, member_id: int) -> List[models.StockGroup]:
        """Return all groups owned by `member_id`, oldest first."""
        stmt = (
            select(models.StockGroup)
            .where(models.StockGroup.member_id == member_id)
            .order_by(models.StockGroup.id)
        )
        return self.session.exec(stmt).all()

    def list_stocks(self, group_id: int) -> List[models.Stock]:
        """Return the stocks in a group ordered by id."""
        stmt = (
            select(models.Stock)
            .join(models.StockGroupStockLink, models.StockGroupStockLink.stock_id == models.Stock.id)
            .where(models.StockGroupStockLink.stock_group_id == group_id)
            .order_by(models.Stock.id)
        )
        return self.session.exec(stmt).all()

    def save(self, group: models.StockGroup) -> models.StockGroup:
        self.session.add(group)
        _commit(self.session)
        self.session.refresh(group)
        return group

    def delete(self, group: models.StockGroup) -> None:
        self.session.delete(group)
        _commit(self.session)

    def add_stock(self, group: models.StockGroup, stock: models.Stock) -> models.StockGroup:
        """Attach `stock` to `group`; a stock already present is left as is."""
        if stock in group.stocks:
            return group
        group.stocks.append(stock)
        group.last_updated_date = models.utcnow()
        return self.save(group)

    def remove_stock(self, group: models.StockGroup, stock: models.Stock) -> models.StockGroup:
        """Detach `stock` from `group`. The caller checks membership first."""
        group.stocks.remove(stock)
        group.last_updated_date = models.utcnow()
        return self.save(group)
