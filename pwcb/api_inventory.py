"""Inventory routes.

``GET /api/inventory`` returns the caller's ledger rows, newest first.
``POST /api/inventory`` lets an admin grant items to any user.
"""
from flask import Blueprint, jsonify, request
from flask_login import login_required, current_user

from .errors import ValidationError
from .security_rbac import require_role
from .services import ledger

bp = Blueprint("inventory_api", __name__, url_prefix="/api/inventory")


def _first(data: dict, *keys):
    for k in keys:
        if data.get(k) not in (None, ""):
            return data[k]
    return None


@bp.get("")
@login_required
def get_inventory():
    return jsonify(ledger.get_inventory(current_user))


@bp.post("")
@require_role("admin")
def grant_item():
    data = request.get_json(force=True, silent=True) or {}
    user_id = _first(data, "user_id", "userId")
    item_id = _first(data, "item_id", "itemId")
    quantity = _first(data, "quantity", "qty")
    if user_id is None or item_id is None or quantity is None:
        raise ValidationError("User ID, item ID, and quantity are required")
    row = ledger.grant_item(current_user, user_id, item_id, quantity)
    return jsonify(
        message="Item added to inventory",
        user_id=row.user_id,
        item_id=row.item_id,
        quantity=row.quantity,
    ), 201
