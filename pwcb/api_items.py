"""Catalog routes. Reads need any login; writes need the admin role."""
from flask import Blueprint, request, jsonify
from flask_login import login_required, current_user

from .security_rbac import require_role
from .services import catalog

bp = Blueprint("items_api", __name__, url_prefix="/api/items")


@bp.get("")
@login_required
def list_items():
    return jsonify([i.to_json() for i in catalog.list_items()])


@bp.get("/<item_id>")
@login_required
def item_detail(item_id):
    return jsonify(catalog.get_item(item_id).to_json())


@bp.post("")
@require_role("admin")
def item_create():
    data = request.get_json(force=True, silent=True) or {}
    item = catalog.create_item(current_user, data)
    return jsonify(item.to_json()), 201


@bp.put("/<item_id>")
@require_role("admin")
def item_update(item_id):
    data = request.get_json(force=True, silent=True) or {}
    item = catalog.update_item(current_user, item_id, data)
    return jsonify(item.to_json())


@bp.delete("/<item_id>")
@require_role("admin")
def item_delete(item_id):
    catalog.delete_item(current_user, item_id)
    return jsonify(message="Item deleted successfully")
