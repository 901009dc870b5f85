"""Read-only projections over the transfer history.

Usernames and item names are joined in at read time, so renames show up on
old records too.
"""

from __future__ import annotations

from typing import Any, Dict, List

from sqlalchemy import or_
from sqlalchemy.orm import aliased

from ..models import db, Item, Transfer, User
from ..security_rbac import ensure_admin, is_admin

UNKNOWN = "(unknown)"


def _history_query():
    sender = aliased(User)
    receiver = aliased(User)
    return (
        db.session.query(
            Transfer,
            sender.username.label("from_username"),
            receiver.username.label("to_username"),
            Item.name.label("item_name"),
        )
        .outerjoin(sender, sender.id == Transfer.from_user_id)
        .outerjoin(receiver, receiver.id == Transfer.to_user_id)
        .outerjoin(Item, Item.id == Transfer.item_id)
        .order_by(Transfer.transfer_date.desc(), Transfer.id.desc())
    )


def _serialize(rows) -> List[Dict[str, Any]]:
    out = []
    for t, from_username, to_username, item_name in rows:
        data = t.to_json()
        data["from_username"] = from_username or UNKNOWN
        data["to_username"] = to_username or UNKNOWN
        data["item_name"] = item_name or UNKNOWN
        out.append(data)
    return out


def for_user(user_id: int) -> List[Dict[str, Any]]:
    rows = _history_query().filter(
        or_(Transfer.from_user_id == user_id, Transfer.to_user_id == user_id)
    )
    return _serialize(rows.all())


def all_transfers(admin) -> List[Dict[str, Any]]:
    ensure_admin(admin)
    return _serialize(_history_query().all())


def list_transfers(principal) -> List[Dict[str, Any]]:
    if is_admin(principal):
        return all_transfers(principal)
    return for_user(principal.id)


def get_transfer(transfer_id: int) -> Dict[str, Any] | None:
    row = _history_query().filter(Transfer.id == transfer_id).first()
    return _serialize([row])[0] if row else None
