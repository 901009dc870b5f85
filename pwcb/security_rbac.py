"""Role checks for principals.

The service layer calls :func:`ensure_admin` on whatever principal it is
handed; :func:`require_role` is the thin route-level counterpart.
"""
from __future__ import annotations

from dataclasses import dataclass
from functools import wraps
from typing import Callable

from flask_login import current_user, login_required

from .errors import PermissionDenied


ROLE_ORDER = ["player", "admin"]


@dataclass(frozen=True)
class Principal:
    """Authenticated identity for callers that don't go through Flask-Login."""

    id: int
    username: str
    role: str = "player"

    @classmethod
    def of(cls, user) -> "Principal":
        return cls(id=user.id, username=user.username, role=user.role)


def role_gte(a: str, b: str) -> bool:
    try:
        return ROLE_ORDER.index(a) >= ROLE_ORDER.index(b)
    except ValueError:
        return False


def is_admin(principal) -> bool:
    return bool(principal) and getattr(principal, "role", None) == "admin"


def ensure_admin(principal) -> None:
    if not is_admin(principal):
        raise PermissionDenied("Admin access required")


def require_role(min_role: str):
    def deco(fn: Callable):
        @wraps(fn)
        @login_required
        def inner(*a, **kw):
            if not role_gte(getattr(current_user, "role", "player"), min_role):
                raise PermissionDenied(f"{min_role.capitalize()} access required")
            return fn(*a, **kw)

        return inner

    return deco
