from __future__ import annotations

from typing import Dict

from sqlalchemy import func

from ..models import db, InventoryEntry, Item, Transfer, User
from ..security_rbac import ensure_admin


def get_statistics(admin) -> Dict[str, int]:
    ensure_admin(admin)
    units = db.session.query(func.coalesce(func.sum(InventoryEntry.quantity), 0)).scalar()
    return {
        "totalUsers": db.session.query(func.count(User.id)).scalar() or 0,
        "totalItems": db.session.query(func.count(Item.id)).scalar() or 0,
        "totalTransfers": db.session.query(func.count(Transfer.id)).scalar() or 0,
        "totalInventoryUnits": int(units or 0),
    }
