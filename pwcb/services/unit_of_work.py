"""Atomic unit of work over the shared SQLAlchemy session.

A :class:`UnitOfWork` is handed through every step of a ledger mutation. It
commits exactly once when the ``with`` block exits cleanly and rolls back on
any exception. Per-(user, item) serialization points taken through
:meth:`UnitOfWork.lock` are held until after that commit or rollback, so no
other unit of work can observe or modify the same ledger rows mid-flight.
"""
from __future__ import annotations

import logging
import threading
import weakref
from contextlib import ExitStack
from typing import Hashable, Iterable

from ..models import db

logger = logging.getLogger(__name__)


class RowLocks:
    """In-process registry of one mutex per ledger key.

    Complements ``SELECT ... FOR UPDATE`` on backends (SQLite) that have no
    row-level locking. Keys are always acquired in sorted order. Entries are
    weak: a key's mutex lives only while some unit of work holds it.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks = weakref.WeakValueDictionary()

    def get(self, key: Hashable) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.Lock()
            return lock

    def __len__(self) -> int:
        return len(self._locks)


ROW_LOCKS = RowLocks()


def ledger_key(user_id: int, item_id: int) -> tuple[int, int]:
    return (int(user_id), int(item_id))


class UnitOfWork:
    def __init__(self, session=None, locks: RowLocks | None = None):
        self.session = session if session is not None else db.session
        self._locks = locks if locks is not None else ROW_LOCKS
        self._held = ExitStack()
        self._keys: set = set()
        self.committed = False

    def lock(self, keys: Iterable[Hashable]) -> None:
        """Acquire the serialization points for ``keys``.

        All keys a unit of work needs must be passed in a single call.
        """
        if self._keys:
            raise RuntimeError("UnitOfWork.lock() may only be called once")
        wanted = sorted(set(keys))
        for key in wanted:
            self._held.enter_context(self._locks.get(key))
        self._keys.update(wanted)
        # Rows may have been read before the locks were held; drop stale state.
        self.session.expire_all()

    def add(self, obj) -> None:
        self.session.add(obj)

    def flush(self) -> None:
        self.session.flush()

    def __enter__(self) -> "UnitOfWork":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        try:
            if exc_type is None:
                try:
                    self.session.commit()
                    self.committed = True
                except Exception:
                    self.session.rollback()
                    raise
            else:
                self.session.rollback()
                logger.debug("unit_of_work_rolled_back error=%s", exc_type.__name__)
        finally:
            self._held.close()
        return False
