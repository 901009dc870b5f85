"""Item catalog: admin-managed item definitions."""

from __future__ import annotations

import logging
from typing import Dict, List, Literal, Optional, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictFloat,
    StrictInt,
    StrictStr,
    constr,
    field_validator,
)
from pydantic import ValidationError as SchemaError

from ..errors import NotFoundError, ValidationError, parse_id
from ..models import db, Item
from ..security_rbac import ensure_admin

logger = logging.getLogger(__name__)

ItemType = Literal["weapon", "armor", "accessory", "consumable", "material", "other"]
Rarity = Literal["common", "uncommon", "rare", "epic", "legendary"]
StatValue = Union[StrictBool, StrictInt, StrictFloat, StrictStr, None]


class ItemInput(BaseModel):
    name: constr(strip_whitespace=True, min_length=1, max_length=128)
    item_type: ItemType = Field(validation_alias=AliasChoices("item_type", "itemType"))
    rarity: Rarity = "common"
    description: Optional[str] = None
    stats: Optional[Dict[constr(min_length=1, max_length=64), StatValue]] = None
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @field_validator("rarity", mode="before")
    @classmethod
    def _default_rarity(cls, v):
        return "common" if v in (None, "") else v


def parse_item_input(data) -> ItemInput:
    if isinstance(data, ItemInput):
        return data
    try:
        return ItemInput.model_validate(data or {})
    except SchemaError as e:
        fields = sorted({".".join(str(p) for p in err["loc"]) for err in e.errors()})
        raise ValidationError(
            "Name and item type are required" if _missing_core(e) else "Invalid item fields",
            fields=fields,
        )


def _missing_core(e: SchemaError) -> bool:
    return any(
        err["type"] in ("missing", "string_too_short") and err["loc"][:1] in (("name",), ("item_type",))
        for err in e.errors()
    )


def list_items() -> List[Item]:
    return Item.query.order_by(Item.created_at.desc(), Item.id.desc()).all()


def get_item(item_id) -> Item:
    item = db.session.get(Item, parse_id(item_id, "Item not found"))
    if not item:
        raise NotFoundError("Item not found", item_id=item_id)
    return item


def create_item(admin, data) -> Item:
    ensure_admin(admin)
    fields = parse_item_input(data)
    item = Item(
        name=fields.name,
        description=fields.description,
        item_type=fields.item_type,
        rarity=fields.rarity,
        stats=fields.stats,
    )
    db.session.add(item)
    db.session.commit()
    logger.info("create_item admin_id=%s item_id=%s name=%s", admin.id, item.id, item.name)
    return item


def update_item(admin, item_id, data) -> Item:
    """Replace every mutable field of an item in one commit."""
    ensure_admin(admin)
    fields = parse_item_input(data)
    item = get_item(item_id)
    item.name = fields.name
    item.description = fields.description
    item.item_type = fields.item_type
    item.rarity = fields.rarity
    item.stats = fields.stats
    db.session.commit()
    logger.info("update_item admin_id=%s item_id=%s", admin.id, item.id)
    return item


def delete_item(admin, item_id) -> None:
    """Delete unconditionally.

    Ledger rows and history records that reference the item are left in
    place and read back with an ``(unknown)`` item name.
    """
    ensure_admin(admin)
    item = get_item(item_id)
    db.session.delete(item)
    db.session.commit()
    logger.info("delete_item admin_id=%s item_id=%s", admin.id, item_id)


__all__ = [
    "ItemInput",
    "parse_item_input",
    "list_items",
    "get_item",
    "create_item",
    "update_item",
    "delete_item",
]
