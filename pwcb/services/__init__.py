"""Service layer: every data mutation goes through these functions."""

from .accounts import authenticate, register, list_users, seed_default_admin  # noqa: F401
from .catalog import list_items, get_item, create_item, update_item, delete_item  # noqa: F401
from .ledger import credit, debit, get_inventory, grant_item  # noqa: F401
from .transfers import transfer  # noqa: F401
from .history import list_transfers  # noqa: F401
from .statistics import get_statistics  # noqa: F401

__all__ = [
    "authenticate", "register", "list_users", "seed_default_admin",
    "list_items", "get_item", "create_item", "update_item", "delete_item",
    "credit", "debit", "get_inventory", "grant_item",
    "transfer",
    "list_transfers",
    "get_statistics",
]
