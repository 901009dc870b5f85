import datetime as dt

from .base import db, Model


ITEM_TYPES = ("weapon", "armor", "accessory", "consumable", "material", "other")
RARITIES = ("common", "uncommon", "rare", "epic", "legendary")


class Item(Model):
    __tablename__ = "items"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(128), nullable=False)
    description = db.Column(db.Text)
    item_type = db.Column(db.String(16), nullable=False)   # weapon/armor/accessory/...
    rarity = db.Column(db.String(16), nullable=False, default="common")
    stats = db.Column(db.JSON)                              # opaque, caller-interpreted
    created_at = db.Column(db.DateTime, nullable=False, default=dt.datetime.utcnow)
    updated_at = db.Column(
        db.DateTime, nullable=False, default=dt.datetime.utcnow, onupdate=dt.datetime.utcnow
    )

    def to_json(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "item_type": self.item_type,
            "rarity": self.rarity,
            "stats": self.stats,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
