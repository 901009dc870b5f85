"""Typed errors raised by the service layer and how the HTTP layer renders them.

Every error carries a machine-readable ``code`` and the HTTP ``status`` it maps
to, so routes never inspect messages:

    PwcbError
    +-- AuthError
    +-- PermissionDenied
    +-- ValidationError
    |   +-- InvalidQuantity
    |   +-- SelfTransfer
    +-- NotFoundError
    |   +-- UnknownRecipient
    +-- InsufficientQuantity
"""
from __future__ import annotations

import logging
import math

from flask import jsonify
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class PwcbError(Exception):
    code = "error"
    status = 500

    def __init__(self, message: str, **details):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_json(self) -> dict:
        payload = {"error": self.message, "code": self.code}
        if self.details:
            payload["details"] = self.details
        return payload


class AuthError(PwcbError):
    code = "auth_error"
    status = 401


class PermissionDenied(PwcbError):
    code = "forbidden"
    status = 403


class ValidationError(PwcbError):
    code = "validation_error"
    status = 400


class InvalidQuantity(ValidationError):
    code = "invalid_quantity"

    def __init__(self, quantity, message: str = "Quantity must be a positive integer"):
        if isinstance(quantity, float) and not math.isfinite(quantity):
            quantity = str(quantity)
        super().__init__(message, quantity=quantity)


class SelfTransfer(ValidationError):
    code = "self_transfer"

    def __init__(self):
        super().__init__("Cannot transfer to yourself")


class NotFoundError(PwcbError):
    code = "not_found"
    status = 404


class UnknownRecipient(NotFoundError):
    code = "unknown_recipient"

    def __init__(self, username: str):
        super().__init__("Recipient user not found", username=username)


class InsufficientQuantity(PwcbError):
    code = "insufficient_quantity"
    status = 409

    def __init__(self, user_id: int, item_id: int, requested: int, available: int):
        super().__init__(
            "Insufficient items",
            user_id=user_id,
            item_id=item_id,
            requested=requested,
            available=available,
        )
        self.user_id = user_id
        self.item_id = item_id
        self.requested = requested
        self.available = available


def register_error_handlers(app) -> None:
    from .models import db

    @app.errorhandler(PwcbError)
    def _pwcb_error(e: PwcbError):
        return jsonify(e.to_json()), e.status

    @app.errorhandler(SQLAlchemyError)
    def _storage_error(e: SQLAlchemyError):
        db.session.rollback()
        logger.exception("storage_error type=%s", type(e).__name__)
        return jsonify(error="Server error"), 500


MAX_QUANTITY = 2**31 - 1
MAX_ID = 2**63 - 1


def parse_quantity(value) -> int:
    """Coerce a request quantity to an ``int`` in ``1..MAX_QUANTITY`` or raise ``InvalidQuantity``."""
    if isinstance(value, bool):
        raise InvalidQuantity(value)
    try:
        qty = int(value)
    except (TypeError, ValueError, OverflowError):
        raise InvalidQuantity(value)
    if isinstance(value, float) and value != qty:
        raise InvalidQuantity(value)
    if qty <= 0 or qty > MAX_QUANTITY:
        raise InvalidQuantity(value)
    return qty


def parse_id(value, message: str = "Not found", **details) -> int:
    """Coerce a row id; anything that cannot name a row raises ``NotFoundError``."""
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise NotFoundError(message, **details)
    try:
        row_id = int(value)
    except (TypeError, ValueError, OverflowError):
        raise NotFoundError(message, **details)
    if row_id <= 0 or row_id > MAX_ID:
        raise NotFoundError(message, **details)
    return row_id
