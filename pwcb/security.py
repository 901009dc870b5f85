# pwcb/security.py
from __future__ import annotations
from typing import Optional
from flask import current_app, request
from flask_login import LoginManager
from itsdangerous import URLSafeTimedSerializer, BadSignature, SignatureExpired

from .errors import AuthError
from .models import db, User

DEFAULT_TTL = 60 * 60 * 24  # 24 hours

login_manager = LoginManager()


def _serializer() -> URLSafeTimedSerializer:
    secret = current_app.config.get("SECRET_KEY")
    if not secret:
        raise RuntimeError("SECRET_KEY must be configured to issue tokens.")
    return URLSafeTimedSerializer(secret_key=secret, salt="pwcb-auth-v1")


def issue_token(user) -> str:
    """Create a signed bearer token. Store only the identity; role is re-read per request."""
    return _serializer().dumps({"uid": user.id, "username": user.username, "typ": "access"})


def verify_token(token: str) -> dict:
    ttl = int(current_app.config.get("TOKEN_TTL", DEFAULT_TTL))
    try:
        data = _serializer().loads(token, max_age=ttl)
    except SignatureExpired:
        raise AuthError("Token expired")
    except BadSignature:
        raise AuthError("Invalid token")
    if not isinstance(data, dict) or data.get("typ") != "access":
        raise AuthError("Invalid token")
    return data


def _extract_token() -> Optional[str]:
    auth = request.headers.get("Authorization", "")
    if auth.lower().startswith("bearer "):
        return auth.split(" ", 1)[1].strip() or None
    return None


@login_manager.request_loader
def load_user_from_request(req):
    token = _extract_token()
    if not token:
        return None
    data = verify_token(token)
    user = db.session.get(User, data.get("uid"))
    if not user:
        raise AuthError("Invalid token")
    return user


@login_manager.unauthorized_handler
def _unauthorized():
    raise AuthError("Access denied. No token provided.")
