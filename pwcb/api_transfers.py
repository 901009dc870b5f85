from flask import Blueprint, jsonify, request
from flask_login import login_required, current_user

from .services import history, transfers

bp = Blueprint("transfers_api", __name__, url_prefix="/api/transfers")


@bp.get("")
@login_required
def list_transfers():
    """Own transfers for players, every transfer for admins."""
    return jsonify(history.list_transfers(current_user))


@bp.post("")
@login_required
def create_transfer():
    data = request.get_json(force=True, silent=True) or {}
    record = transfers.transfer(
        current_user,
        data.get("to_username", data.get("toUsername")),
        data.get("item_id", data.get("itemId")),
        data.get("quantity"),
    )
    payload = history.get_transfer(record.id) or record.to_json()
    return jsonify(message="Transfer completed successfully", transfer=payload), 201
