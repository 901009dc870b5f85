"""Transfer engine: moves item units between two users as one unit of work."""

from __future__ import annotations

import datetime as dt
import logging

from ..errors import (
    NotFoundError,
    PwcbError,
    SelfTransfer,
    UnknownRecipient,
    ValidationError,
    parse_id,
    parse_quantity,
)
from ..models import db, Item, Transfer, TRANSFER_COMPLETED
from . import ledger
from .accounts import get_user_by_username
from .unit_of_work import UnitOfWork, ledger_key

logger = logging.getLogger(__name__)


def transfer(principal, to_username, item_id, quantity) -> Transfer:
    """Move ``quantity`` units of ``item_id`` from ``principal`` to ``to_username``.

    Validation happens first: self-transfer, then required fields, then
    quantity, then recipient and item existence. The debit, credit and history
    append then run inside one :class:`UnitOfWork` holding both ledger rows'
    locks; an ``InsufficientQuantity`` (or anything else) raised mid-way rolls
    the whole attempt back.
    """
    to_username = to_username.strip() if isinstance(to_username, str) else ""
    if to_username and to_username == principal.username:
        raise SelfTransfer()
    if not to_username or item_id in (None, "") or quantity in (None, ""):
        raise ValidationError("Recipient username, item ID, and quantity are required")
    qty = parse_quantity(quantity)

    recipient = get_user_by_username(to_username)
    if recipient is None:
        raise UnknownRecipient(to_username)
    if recipient.id == principal.id:
        raise SelfTransfer()

    item_id = parse_id(item_id, "Item not found")
    if not db.session.get(Item, item_id):
        raise NotFoundError("Item not found", item_id=item_id)

    sender_id, recipient_id = principal.id, recipient.id
    try:
        with UnitOfWork() as uow:
            uow.lock([ledger_key(sender_id, item_id), ledger_key(recipient_id, item_id)])
            ledger.debit(uow, sender_id, item_id, qty)
            ledger.credit(uow, recipient_id, item_id, qty)
            record = Transfer(
                from_user_id=sender_id,
                to_user_id=recipient_id,
                item_id=item_id,
                quantity=qty,
                transfer_date=dt.datetime.utcnow(),
                status=TRANSFER_COMPLETED,
            )
            uow.add(record)
            uow.flush()
    except PwcbError as e:
        logger.info(
            "transfer_rejected from_user_id=%s to_user_id=%s item_id=%s quantity=%s code=%s",
            sender_id,
            recipient_id,
            item_id,
            qty,
            e.code,
        )
        raise

    logger.info(
        "transfer_completed transfer_id=%s from_user_id=%s to_user_id=%s item_id=%s quantity=%s",
        record.id,
        sender_id,
        recipient_id,
        item_id,
        qty,
    )
    return record


__all__ = ["transfer"]
