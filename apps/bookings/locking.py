"""
Per-room mutex for check-then-insert sections.

PostgreSQL serialises concurrent writers through SELECT ... FOR UPDATE on
the room row, but SQLite silently ignores FOR UPDATE. The guard gives the
same guarantee between threads of one process on every backend. It must be
entered *outside* transaction.atomic() so it is released only after commit.

Locks are keyed on the canonical UUID string, so ``UUID(...)``, lower-case
and upper-case spellings of one room id share a single lock and the
registry holds at most one entry per room.
"""
import threading
import uuid
from collections import defaultdict
from contextlib import contextmanager

from .exceptions import RoomNotFoundError

_registry_lock = threading.Lock()
_room_locks = defaultdict(threading.Lock)


def room_key(room_id) -> str:
    try:
        return str(uuid.UUID(str(room_id)))
    except (TypeError, ValueError, AttributeError):
        raise RoomNotFoundError(f"Room {room_id} not found.")


def _lock_for(room_id) -> threading.Lock:
    key = room_key(room_id)
    with _registry_lock:
        return _room_locks[key]


@contextmanager
def room_guard(room_id):
    lock = _lock_for(room_id)
    with lock:
        yield
