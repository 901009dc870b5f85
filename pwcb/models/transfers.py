from __future__ import annotations

import datetime as dt
from .base import db, Model


TRANSFER_COMPLETED = "completed"


class Transfer(Model):
    """Append-only history of completed transfers."""

    __tablename__ = "transfers"
    __table_args__ = (
        db.CheckConstraint("quantity > 0", name="ck_transfers_quantity_positive"),
    )

    id = db.Column(db.Integer, primary_key=True)
    from_user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    to_user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    item_id = db.Column(db.Integer, nullable=False, index=True)
    quantity = db.Column(db.Integer, nullable=False)
    transfer_date = db.Column(db.DateTime, nullable=False, default=dt.datetime.utcnow, index=True)
    status = db.Column(db.String(16), nullable=False, default=TRANSFER_COMPLETED)

    def to_json(self) -> dict:
        return {
            "id": self.id,
            "from_user_id": self.from_user_id,
            "to_user_id": self.to_user_id,
            "item_id": self.item_id,
            "quantity": self.quantity,
            "transfer_date": self.transfer_date.isoformat() if self.transfer_date else None,
            "status": self.status,
        }
