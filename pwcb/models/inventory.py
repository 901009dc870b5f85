from __future__ import annotations

import datetime as dt
from .base import db, Model


class InventoryEntry(Model):
    """One ledger row: how many units of an item a user holds.

    ``item_id`` carries no foreign key: catalog deletes leave the row in place
    (see ``pwcb.services.catalog.delete_item``).
    """

    __tablename__ = "inventory"
    __table_args__ = (
        db.UniqueConstraint("user_id", "item_id", name="uq_inventory_user_item"),
        db.CheckConstraint("quantity >= 0", name="ck_inventory_quantity_nonnegative"),
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    item_id = db.Column(db.Integer, nullable=False, index=True)
    quantity = db.Column(db.Integer, nullable=False, default=0)
    # first acquisition; top-ups leave it alone
    obtained_at = db.Column(db.DateTime, nullable=False, default=dt.datetime.utcnow)
