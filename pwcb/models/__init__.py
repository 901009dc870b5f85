from .base import db, Model, metadata

# Import model modules so tables register with metadata
from .users import User, ROLES                           # noqa: F401
from .items import Item, ITEM_TYPES, RARITIES            # noqa: F401
from .inventory import InventoryEntry                    # noqa: F401
from .transfers import Transfer, TRANSFER_COMPLETED      # noqa: F401

__all__ = [
    "db", "Model", "metadata",
    "User", "ROLES",
    "Item", "ITEM_TYPES", "RARITIES",
    "InventoryEntry",
    "Transfer", "TRANSFER_COMPLETED",
]
