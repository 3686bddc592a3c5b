"""
Owner-scoped data access for expenses and categories.

Every query ANDs the caller's user id with the record filter, so a client-supplied
id alone never reaches another user's rows. A miss on update/delete is reported as
NotFound whether the row is absent or belongs to someone else.
"""
import logging
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Dict, List, Optional

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from date_helpers import normalize_date
from errors import InvalidArgument, NotFound
from models import Category, Expense

logger = logging.getLogger(__name__)


# ids are stored in a 32-bit INTEGER column
MAX_ID = 2 ** 31 - 1
# Numeric(12, 2) leaves ten integer digits
MAX_MONEY = Decimal("1e10")


def parse_id(value) -> Optional[int]:
    """Integer id from a query/body value, or None when it is not a valid id"""
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        try:
            value = int(value.strip())
        except ValueError:
            return None
    if not isinstance(value, int):
        return None
    return value if 0 < value <= MAX_ID else None


def parse_money(value) -> Decimal:
    if value is None or isinstance(value, bool) or (isinstance(value, str) and not value.strip()):
        raise InvalidArgument("Money is required")
    try:
        # str() first so floats coming from JSON keep their printed value
        money = Decimal(str(value).strip())
        if not money.is_finite():
            raise InvalidOperation
        money = money.quantize(Decimal("0.01"))
    except InvalidOperation:
        raise InvalidArgument(f"Invalid money amount: {value}") from None
    if abs(money) >= MAX_MONEY:
        raise InvalidArgument(f"Money amount out of range: {value}")
    return money


# ---------- categories ---------- #

def find_owned_category(db: Session, owner_id: int, category_id) -> Category:
    """Resolve a category only if it exists and belongs to owner_id"""
    cid = parse_id(category_id)
    category = None
    if cid is not None:
        category = db.execute(
            select(Category).where(Category.user_id == owner_id, Category.id == cid)
        ).scalar_one_or_none()
    if category is None:
        raise InvalidArgument("Category not found")
    return category


def list_categories(db: Session, owner_id: int) -> List[Category]:
    return list(
        db.execute(
            select(Category).where(Category.user_id == owner_id).order_by(Category.id)
        ).scalars().all()
    )


def create_category(db: Session, owner_id: int, name) -> Category:
    if not isinstance(name, str) or not name.strip():
        raise InvalidArgument("Category name is required")
    category = Category(user_id=owner_id, name=name.strip())
    db.add(category)
    db.commit()
    db.refresh(category)
    logger.info("Category %s created for user %s", category.id, owner_id)
    return category


def delete_category(db: Session, owner_id: int, category_id) -> Category:
    """Delete an owned category; its expenses become uncategorized"""
    cid = parse_id(category_id)
    category = None
    if cid is not None:
        category = db.execute(
            select(Category).where(Category.user_id == owner_id, Category.id == cid)
        ).scalar_one_or_none()
    if category is None:
        raise NotFound("Category not found")

    db.execute(
        update(Expense)
        .where(Expense.user_id == owner_id, Expense.category_id == category.id)
        .values(category_id=None)
    )
    db.delete(category)
    db.commit()
    logger.info("Category %s deleted for user %s", category.id, owner_id)
    return category


# ---------- expenses ---------- #

def _owned(owner_id: int):
    return select(Expense).where(Expense.user_id == owner_id)


def list_expenses(db: Session, owner_id: int) -> List[Expense]:
    return list(
        db.execute(_owned(owner_id).order_by(Expense.created_at, Expense.id)).scalars().all()
    )


def get_expense(db: Session, owner_id: int, expense_id) -> Optional[Expense]:
    eid = parse_id(expense_id)
    if eid is None:
        return None
    return db.execute(_owned(owner_id).where(Expense.id == eid)).scalar_one_or_none()


def create_expense(db: Session, owner_id: int, payload: Dict) -> Expense:
    """
    Create an expense for owner_id

    Args:
        db: request session
        owner_id: caller; always overrides any owner in the payload
        payload: money, category, created_at (defaults to today), note

    Returns:
        The persisted expense with its category loaded
    """
    category = find_owned_category(db, owner_id, payload.get("category"))
    expense = Expense(
        user_id=owner_id,
        category_id=category.id,
        money=parse_money(payload.get("money")),
        created_at=normalize_date(payload.get("created_at"), default=date.today()),
        note=payload.get("note") or None,
    )
    db.add(expense)
    db.commit()
    db.refresh(expense)
    logger.info("Expense %s created for user %s", expense.id, owner_id)
    return expense


def update_expense(db: Session, owner_id: int, expense_id, payload: Dict) -> Expense:
    """Replace the supplied fields of an owned expense; the category is re-validated"""
    category = find_owned_category(db, owner_id, payload.get("category"))

    expense = get_expense(db, owner_id, expense_id)
    if expense is None:
        raise NotFound("Expense was deleted or does not exist")

    # validate everything before touching the loaded row
    changes = {}
    if "money" in payload:
        changes["money"] = parse_money(payload.get("money"))
    if "created_at" in payload:
        changes["created_at"] = normalize_date(payload.get("created_at"))
    if "note" in payload:
        changes["note"] = payload.get("note") or None

    expense.category_id = category.id
    expense.category = category
    for field, value in changes.items():
        setattr(expense, field, value)

    db.commit()
    db.refresh(expense)
    logger.info("Expense %s updated for user %s", expense.id, owner_id)
    return expense


def delete_expense(db: Session, owner_id: int, expense_id) -> Dict:
    """Hard delete scoped to (owner, id); returns the deleted expense serialized"""
    expense = get_expense(db, owner_id, expense_id)
    if expense is None:
        raise NotFound("Expense not found")

    deleted = expense.to_dict()
    db.delete(expense)
    db.commit()
    logger.info("Expense %s deleted for user %s", deleted["id"], owner_id)
    return deleted


def expenses_on_day(db: Session, owner_id: int, day: date) -> List[Expense]:
    return list(
        db.execute(
            _owned(owner_id).where(Expense.created_at == day).order_by(Expense.id)
        ).scalars().all()
    )


def expenses_between(db: Session, owner_id: int, from_date: date, to_date: date) -> List[Expense]:
    """Owned expenses with from_date <= created_at <= to_date"""
    return list(
        db.execute(
            _owned(owner_id)
            .where(Expense.created_at >= from_date, Expense.created_at <= to_date)
            .order_by(Expense.created_at, Expense.id)
        ).scalars().all()
    )


def expenses_between_for_category(db: Session, owner_id: int, from_date: date, to_date: date,
                                  category_id) -> List[Expense]:
    """
    Owned expenses of one category inside a date window.
    An invalid category id selects the uncategorized expenses.
    """
    cid = parse_id(category_id)
    category_filter = Expense.category_id == cid if cid is not None else Expense.category_id.is_(None)
    return list(
        db.execute(
            _owned(owner_id)
            .where(category_filter)
            .where(Expense.created_at >= from_date, Expense.created_at <= to_date)
            .order_by(Expense.created_at, Expense.id)
        ).scalars().all()
    )
