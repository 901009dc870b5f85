from flask import Blueprint, request, jsonify
from flask_login import login_required, current_user

from .security import issue_token
from .services import accounts

auth_bp = Blueprint("auth_bp", __name__)
users_bp = Blueprint("users_bp", __name__)


def _session_payload(u):
    return dict(token=issue_token(u), user=dict(id=u.id, username=u.username, role=u.role))


@auth_bp.route("/login", methods=["POST"])
def login():
    data = request.get_json(force=True, silent=True) or {}
    u = accounts.authenticate(data.get("username"), data.get("password"))
    return jsonify(_session_payload(u)), 200


@auth_bp.route("/register", methods=["POST"])
def register():
    data = request.get_json(force=True, silent=True) or {}
    u = accounts.register(data.get("username"), data.get("password"))
    return jsonify(_session_payload(u)), 201


@users_bp.route("/me", methods=["GET"])
@login_required
def me():
    return jsonify(current_user.to_json()), 200
