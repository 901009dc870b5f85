# pwcb/api_admin.py
from flask import Blueprint, jsonify
from flask_login import current_user

from .security_rbac import require_role
from .services import accounts, statistics

admin_api = Blueprint("admin_api", __name__, url_prefix="/api")


@admin_api.get("/users")
@require_role("admin")
def users_list():
    return jsonify(accounts.list_users(current_user))


@admin_api.get("/statistics")
@require_role("admin")
def statistics_view():
    return jsonify(statistics.get_statistics(current_user))
