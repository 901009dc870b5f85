"""Account directory: registration, credential checks and the seeded admin."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from flask import current_app
from sqlalchemy.exc import IntegrityError

from ..errors import AuthError, ValidationError
from ..models import db, User
from ..security_rbac import ensure_admin

logger = logging.getLogger(__name__)

MAX_USERNAME_LENGTH = 64


def get_user(user_id: int) -> Optional[User]:
    return db.session.get(User, user_id)


def get_user_by_username(username: str) -> Optional[User]:
    if not username:
        return None
    return User.query.filter_by(username=username).first()


def register(username, password) -> User:
    username = (username or "").strip() if isinstance(username, str) else ""
    if not username or not password or not isinstance(password, str):
        raise ValidationError("Username and password required")
    if len(username) > MAX_USERNAME_LENGTH:
        raise ValidationError(f"Username must be at most {MAX_USERNAME_LENGTH} characters")
    min_len = int(current_app.config.get("MIN_PASSWORD_LENGTH", 6))
    if len(password) < min_len:
        raise ValidationError(f"Password must be at least {min_len} characters")
    if get_user_by_username(username):
        raise ValidationError("Username already exists")

    user = User(username=username, role="player")
    user.set_password(password)
    db.session.add(user)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ValidationError("Username already exists")
    logger.info("register user_id=%s username=%s", user.id, user.username)
    return user


def authenticate(username, password) -> User:
    if not username or not password or not isinstance(username, str) or not isinstance(password, str):
        raise ValidationError("Username and password required")
    user = get_user_by_username(username)
    if not user or not user.check_password(password):
        logger.info("authenticate_failed username=%s", username)
        raise AuthError("Invalid credentials")
    return user


def list_users(admin) -> List[Dict[str, Any]]:
    ensure_admin(admin)
    return [u.to_json() for u in User.query.order_by(User.id.asc()).all()]


def seed_default_admin() -> User:
    """Create the configured default admin once; later calls return it unchanged."""
    username = current_app.config.get("DEFAULT_ADMIN_USERNAME", "admin")
    existing = get_user_by_username(username)
    if existing:
        return existing
    admin = User(username=username, role="admin")
    admin.set_password(current_app.config.get("DEFAULT_ADMIN_PASSWORD", "admin123"))
    db.session.add(admin)
    db.session.commit()
    current_app.logger.info("Seeded default admin account: %s", username)
    return admin
