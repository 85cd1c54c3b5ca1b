"""TinyDB-backed state: key material and per-session ticket records."""

import hashlib
import logging
import threading
import time
from collections import deque

from tinydb import TinyDB, Query
from tinydb.storages import MemoryStorage

logger = logging.getLogger(__name__)

DATA = Query()


class GatewayDB:
    """One TinyDB instance and the lock serialising every access to it."""

    def __init__(self, path=None):
        if path is None:
            self.db = TinyDB(storage=MemoryStorage)
        else:
            self.db = TinyDB(path)
        self.lock = threading.Lock()

    def table(self, name):
        return self.db.table(name)

    def close(self):
        with self.lock:
            self.db.close()


class KeyStore:
    """Serialized setup artifacts, one record per ``type`` key."""

    TABLE = "groth16"

    def __init__(self, db):
        self.table = db.table(self.TABLE)
        self._lock = db.lock

    def put(self, key, data):
        with self._lock:
            self.table.upsert({"type": key, "data": data}, DATA.type == key)

    def get(self, key):
        with self._lock:
            result = self.table.search(DATA.type == key)
        if not result:
            return None
        return result[0].get("data")

    def remove(self, key):
        with self._lock:
            self.table.remove(DATA.type == key)

    def clear(self):
        with self._lock:
            self.table.truncate()


def session_id(session_key):
    return hashlib.sha256(session_key).digest()[:16].hex()


class SessionRegistry:
    """Tickets issued on the ticket channel, tracked per session.

    Holds at most ``max_sessions`` records; the oldest is evicted first.
    """

    TABLE = "sessions"
    DEFAULT_MAX_SESSIONS = 1024

    def __init__(self, db, max_sessions=DEFAULT_MAX_SESSIONS):
        if max_sessions < 1:
            raise ValueError("max_sessions must be at least 1")
        self.table = db.table(self.TABLE)
        self.max_sessions = max_sessions
        self._lock = db.lock
        with self._lock:
            self._order = deque(sorted(doc.doc_id for doc in self.table.all()))
            self._evict()

    def _evict(self):
        stale = []
        while len(self._order) > self.max_sessions:
            stale.append(self._order.popleft())
        if stale:
            self.table.remove(doc_ids=stale)

    def record(self, session_key, service_name, peer):
        sid = session_id(session_key)
        entry = {
            "session_id": sid,
            "service_name": service_name,
            "peer": "{}:{}".format(*peer[:2]) if peer else None,
            "issued_at": time.time(),
        }
        with self._lock:
            self._order.append(self.table.insert(entry))
            self._evict()
        logger.debug("recorded session %s for %s", sid, service_name)
        return sid

    def lookup(self, session_key):
        sid = session_id(session_key)
        with self._lock:
            return self.table.get(DATA.session_id == sid)

    def __len__(self):
        with self._lock:
            return len(self._order)
