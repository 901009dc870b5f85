"""Inventory ledger: per-(user, item) quantity counters."""

from __future__ import annotations

import datetime as dt
import logging
from typing import Any, Dict, List

from sqlalchemy import select

from ..errors import (
    MAX_QUANTITY,
    InsufficientQuantity,
    InvalidQuantity,
    NotFoundError,
    parse_id,
    parse_quantity,
)
from ..models import db, InventoryEntry, Item, User
from ..security_rbac import ensure_admin
from .unit_of_work import UnitOfWork, ledger_key

logger = logging.getLogger(__name__)

UNKNOWN_ITEM = "(unknown)"


def _locked_row(uow: UnitOfWork, user_id: int, item_id: int) -> InventoryEntry | None:
    return uow.session.execute(
        select(InventoryEntry)
        .where(InventoryEntry.user_id == user_id, InventoryEntry.item_id == item_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    ).scalar_one_or_none()


def credit(uow: UnitOfWork, user_id: int, item_id: int, amount: int) -> InventoryEntry:
    """Add ``amount`` units, creating the row on first acquisition."""
    if amount <= 0:
        raise ValueError("credit amount must be positive")
    row = _locked_row(uow, user_id, item_id)
    if row is None:
        row = InventoryEntry(
            user_id=user_id,
            item_id=item_id,
            quantity=amount,
            obtained_at=dt.datetime.utcnow(),
        )
        uow.add(row)
    else:
        if row.quantity + amount > MAX_QUANTITY:
            raise InvalidQuantity(amount, f"Holding would exceed {MAX_QUANTITY} units")
        row.quantity = row.quantity + amount
    uow.flush()
    return row


def debit(uow: UnitOfWork, user_id: int, item_id: int, amount: int) -> InventoryEntry:
    """Remove ``amount`` units or raise ``InsufficientQuantity``; never goes negative."""
    if amount <= 0:
        raise ValueError("debit amount must be positive")
    row = _locked_row(uow, user_id, item_id)
    available = row.quantity if row is not None else 0
    if row is None or available < amount:
        raise InsufficientQuantity(user_id, item_id, requested=amount, available=available)
    row.quantity = available - amount
    uow.flush()
    return row


def quantity_of(user_id: int, item_id: int) -> int:
    row = db.session.execute(
        select(InventoryEntry.quantity)
        .where(InventoryEntry.user_id == user_id, InventoryEntry.item_id == item_id)
    ).scalar_one_or_none()
    return int(row or 0)


def _serialize_inventory(rows) -> List[Dict[str, Any]]:
    out = []
    for entry, itm in rows:
        out.append(
            {
                "inventory_id": entry.id,
                "item_id": entry.item_id,
                "name": itm.name if itm else UNKNOWN_ITEM,
                "description": itm.description if itm else None,
                "item_type": itm.item_type if itm else None,
                "rarity": itm.rarity if itm else None,
                "stats": itm.stats if itm else None,
                "quantity": entry.quantity,
                "obtained_at": entry.obtained_at.isoformat() if entry.obtained_at else None,
            }
        )
    return out


def get(user_id: int) -> List[Dict[str, Any]]:
    """Return the user's ledger rows joined with item metadata, most recent first."""
    rows = (
        db.session.query(InventoryEntry, Item)
        .outerjoin(Item, Item.id == InventoryEntry.item_id)
        .filter(InventoryEntry.user_id == user_id)
        .order_by(InventoryEntry.obtained_at.desc(), InventoryEntry.id.desc())
        .all()
    )
    return _serialize_inventory(rows)


def get_inventory(principal) -> List[Dict[str, Any]]:
    return get(principal.id)


def grant_item(admin, user_id, item_id, quantity) -> InventoryEntry:
    """Credit ``quantity`` units to a user out of nothing. Admin only."""
    ensure_admin(admin)
    qty = parse_quantity(quantity)
    user_id = parse_id(user_id, "User not found")
    item_id = parse_id(item_id, "Item not found")
    if not db.session.get(User, user_id):
        raise NotFoundError("User not found", user_id=user_id)
    if not db.session.get(Item, item_id):
        raise NotFoundError("Item not found", item_id=item_id)

    with UnitOfWork() as uow:
        uow.lock([ledger_key(user_id, item_id)])
        row = credit(uow, user_id, item_id, qty)
        new_qty = row.quantity
    logger.info(
        "grant_item admin_id=%s user_id=%s item_id=%s quantity=%s new_quantity=%s",
        admin.id,
        user_id,
        item_id,
        qty,
        new_qty,
    )
    return row


__all__ = [
    "credit",
    "debit",
    "get",
    "get_inventory",
    "grant_item",
    "quantity_of",
]
