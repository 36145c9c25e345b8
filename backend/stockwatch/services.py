"""Business logic services used by HTTP controllers.

This module holds small service classes that coordinate repositories.
Services are intentionally thin: they check that referenced rows exist,
pre-check natural-key uniqueness and persist aggregates via
repositories. Failures are raised as `exceptions.ServiceError`
subclasses.
"""

import logging
from typing import List, Optional
from sqlmodel import Session
from . import models, repositories, schemas
from .exceptions import ConflictError, InvalidMembershipError, NotFoundError

logger = logging.getLogger(__name__)

# Fields overwritten by a member update. The password hash is deliberately
# absent; it is only written at registration.
MEMBER_MUTABLE_FIELDS = (
    "name",
    "phone_number",
    "national_id_number",
    "date_of_birth",
    "email",
    "gender",
    "address",
    "last_login_date",
    "is_active",
    "role",
)


class MemberService:
    """Member registration, profile updates and lookups."""
    def __init__(self, session: Session):
        self.session = session
        self.member_repo = repositories.MemberRepository(session)

    def list_all(self) -> List[models.Member]:
        return self.member_repo.list_all()

    def get(self, member_id: int) -> Optional[models.Member]:
        return self.member_repo.get(member_id)

    def get_by_email(self, email: str) -> Optional[models.Member]:
        return self.member_repo.get_by_email(email)

    def get_by_phone_number(self, phone_number: str) -> Optional[models.Member]:
        return self.member_repo.get_by_phone_number(phone_number)

    def get_by_national_id_number(self, national_id_number: str) -> Optional[models.Member]:
        return self.member_repo.get_by_national_id_number(national_id_number)

    def create(self, data: schemas.MemberCreate) -> models.Member:
        """Persist a new member.

        There is no pre-check on phone number or national ID; the unique
        constraints on those columns reject duplicates, which the
        repository reports as `ConflictError`.
        """
        member = self.member_repo.save(models.Member(**data.model_dump()))
        logger.info("Created member %s", member.id)
        return member

    def update(self, member_id: int, data: schemas.MemberUpdate) -> models.Member:
        """Overwrite every mutable field of member `member_id` from `data`."""
        member = self.member_repo.get(member_id)
        if not member:
            raise NotFoundError(f"Member not found with id {member_id}")
        for field in MEMBER_MUTABLE_FIELDS:
            setattr(member, field, getattr(data, field))
        member = self.member_repo.save(member)
        logger.info("Updated member %s", member_id)
        return member

    def delete(self, member_id: int) -> None:
        member = self.member_repo.get(member_id)
        if not member:
            raise NotFoundError(f"Member not found with id {member_id}")
        self.member_repo.delete(member)
        logger.info("Deleted member %s and its stock groups", member_id)


class StockService:
    """Stock catalogue maintenance with a unique `code` per stock."""
    def __init__(self, session: Session):
        self.session = session
        self.stock_repo = repositories.StockRepository(session)

    def list_all(self) -> List[models.Stock]:
        return self.stock_repo.list_all()

    def get(self, stock_id: int) -> Optional[models.Stock]:
        return self.stock_repo.get(stock_id)

    def get_by_code(self, code: str) -> Optional[models.Stock]:
        return self.stock_repo.get_by_code(code)

    def create(self, data: schemas.StockIn) -> models.Stock:
        """Create a stock unless another one already uses `data.code`."""
        if self.stock_repo.get_by_code(data.code):
            logger.warning("Rejected stock create: code %s already exists", data.code)
            raise ConflictError(f"Stock with code '{data.code}' already exists.")
        stock = self.stock_repo.save(models.Stock(**data.model_dump()))
        logger.info("Created stock %s (%s)", stock.id, stock.code)
        return stock

    def update(self, stock_id: int, data: schemas.StockIn) -> models.Stock:
        """Overwrite code and name of stock `stock_id`.

        `industry` only changes when the payload carries it (an explicit
        null clears it). The new code is checked against every other
        stock; keeping the stock's own code is allowed.
        """
        stock = self.stock_repo.get(stock_id)
        if not stock:
            raise NotFoundError(f"Stock not found with id {stock_id}")
        existing = self.stock_repo.get_by_code(data.code)
        if existing and existing.id != stock_id:
            logger.warning("Rejected stock update %s: code %s already exists", stock_id, data.code)
            raise ConflictError(f"Stock with code '{data.code}' already exists.")
        stock.code = data.code
        stock.name = data.name
        if "industry" in data.model_fields_set:
            stock.industry = data.industry
        stock = self.stock_repo.save(stock)
        logger.info("Updated stock %s", stock_id)
        return stock

    def delete(self, stock_id: int) -> None:
        stock = self.stock_repo.get(stock_id)
        if not stock:
            raise NotFoundError(f"Stock not found with id {stock_id}")
        self.stock_repo.delete(stock)
        logger.info("Deleted stock %s", stock_id)


class StockGroupService:
    """Member-owned stock groups and their stock membership."""
    def __init__(self, session: Session):
        self.session = session
        self.group_repo = repositories.StockGroupRepository(session)
        self.member_service = MemberService(session)
        self.stock_service = StockService(session)

    def list_all(self) -> List[models.StockGroup]:
        return self.group_repo.list_all()

    def get(self, group_id: int) -> Optional[models.StockGroup]:
        return self.group_repo.get(group_id)

    def get_by_name(self, name: str) -> Optional[models.StockGroup]:
        return self.group_repo.get_by_name(name)

    def list_by_member(self, member_id: int) -> List[models.StockGroup]:
        """Return the member's groups; an empty list is a valid result."""
        if not self.member_service.get(member_id):
            raise NotFoundError(f"Member not found with id {member_id}")
        return self.group_repo.list_by_member(member_id)

    def list_stocks(self, group_id: int) -> List[models.Stock]:
        self._require_group(group_id)
        return self.group_repo.list_stocks(group_id)

    def create(self, data: schemas.StockGroupIn, member_id: int) -> models.StockGroup:
        """Create a group owned by `member_id`.

        The name check runs before the member lookup, so a duplicate name
        is reported as a conflict even when the member is also missing.
        """
        if self.group_repo.get_by_name(data.name):
            logger.warning("Rejected stock group create: name %r already exists", data.name)
            raise ConflictError(f"Stock group with name '{data.name}' already exists.")
        member = self.member_service.get(member_id)
        if not member:
            raise NotFoundError(f"Member not found with id {member_id}")
        group = models.StockGroup(name=data.name, description=data.description, member_id=member.id)
        group = self.group_repo.save(group)
        logger.info("Created stock group %s for member %s", group.id, member_id)
        return group

    def update(self, group_id: int, data: schemas.StockGroupIn) -> models.StockGroup:
        group = self._require_group(group_id)
        existing = self.group_repo.get_by_name(data.name)
        if existing and existing.id != group_id:
            logger.warning("Rejected stock group update %s: name %r already exists", group_id, data.name)
            raise ConflictError(f"Stock group with name '{data.name}' already exists.")
        group.name = data.name
        group.description = data.description
        group = self.group_repo.save(group)
        logger.info("Updated stock group %s", group_id)
        return group

    def delete(self, group_id: int) -> None:
        group = self._require_group(group_id)
        self.group_repo.delete(group)
        logger.info("Deleted stock group %s", group_id)

    def add_stock(self, group_id: int, stock_id: int) -> models.StockGroup:
        """Put stock `stock_id` into group `group_id`; idempotent."""
        group = self._require_group(group_id)
        stock = self._require_stock(stock_id)
        group = self.group_repo.add_stock(group, stock)
        logger.info("Stock %s is in stock group %s", stock_id, group_id)
        return group

    def remove_stock(self, group_id: int, stock_id: int) -> models.StockGroup:
        """Take stock `stock_id` out of group `group_id`.

        Removing a stock that is not in the group is an error rather than
        a no-op, and leaves the group untouched.
        """
        group = self._require_group(group_id)
        stock = self._require_stock(stock_id)
        if stock not in group.stocks:
            raise InvalidMembershipError(
                f"Stock with id {stock_id} is not in stock group with id {group_id}"
            )
        group = self.group_repo.remove_stock(group, stock)
        logger.info("Removed stock %s from stock group %s", stock_id, group_id)
        return group

    def _require_group(self, group_id: int) -> models.StockGroup:
        group = self.group_repo.get(group_id)
        if not group:
            raise NotFoundError(f"Stock group not found with id {group_id}")
        return group

    def _require_stock(self, stock_id: int) -> models.Stock:
        stock = self.stock_service.get(stock_id)
        if not stock:
            raise NotFoundError(f"Stock not found with id {stock_id}")
        return stock
