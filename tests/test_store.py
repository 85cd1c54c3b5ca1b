import threading

import pytest

from zkgate.store import GatewayDB, KeyStore, SessionRegistry, session_id


@pytest.fixture
def db():
    db = GatewayDB()
    yield db
    db.close()


class TestKeyStore:
    def test_put_get(self, db):
        store = KeyStore(db)
        store.put("setup.circuit", "abc")
        assert store.get("setup.circuit") == "abc"

    def test_overwrite(self, db):
        store = KeyStore(db)
        store.put("setup.vk", {"v": 1})
        store.put("setup.vk", {"v": 2})
        assert store.get("setup.vk") == {"v": 2}
        assert len(store.table) == 1

    def test_missing(self, db):
        assert KeyStore(db).get("setup.pk") is None

    def test_remove_and_clear(self, db):
        store = KeyStore(db)
        store.put("a", 1)
        store.put("b", 2)
        store.remove("a")
        assert store.get("a") is None
        store.clear()
        assert store.get("b") is None

    def test_file_backed(self, tmp_path):
        path = tmp_path / "keys.json"
        db = GatewayDB(path)
        KeyStore(db).put("setup.circuit", "abc")
        db.close()

        db = GatewayDB(path)
        try:
            assert KeyStore(db).get("setup.circuit") == "abc"
        finally:
            db.close()


class TestSessionRegistry:
    def test_session_id(self):
        assert session_id(b"\x00" * 32) == "66687aadf862bd776c8fc18b8e9f8e20"

    def test_record_lookup(self, db):
        registry = SessionRegistry(db)
        key = bytes(range(32))
        sid = registry.record(key, "echo", ("127.0.0.1", 5555))
        entry = registry.lookup(key)
        assert entry["session_id"] == sid
        assert entry["service_name"] == "echo"
        assert entry["peer"] == "127.0.0.1:5555"
        assert registry.lookup(b"other") is None

    def test_tables_are_separate(self, db):
        KeyStore(db).put("setup.circuit", "abc")
        assert len(SessionRegistry(db)) == 0

    def test_concurrent_records(self, db):
        registry = SessionRegistry(db)

        def worker(n):
            for i in range(20):
                registry.record(bytes([n, i]), "echo", ("127.0.0.1", 1000 + i))

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(5)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert len(registry) == 100


class TestSessionRegistryBound:
    def test_oldest_evicted_first(self, db):
        registry = SessionRegistry(db, max_sessions=3)
        keys = [bytes([i]) * 32 for i in range(5)]
        for key in keys:
            registry.record(key, "echo", ("127.0.0.1", 4000))
        assert len(registry) == 3
        assert len(registry.table) == 3
        assert registry.lookup(keys[0]) is None
        assert registry.lookup(keys[1]) is None
        assert registry.lookup(keys[4])["service_name"] == "echo"

    def test_bound_applies_to_existing_rows(self, tmp_path):
        path = tmp_path / "sessions.json"
        db = GatewayDB(path)
        registry = SessionRegistry(db, max_sessions=10)
        for i in range(6):
            registry.record(bytes([i]), "echo", None)
        db.close()

        db = GatewayDB(path)
        try:
            registry = SessionRegistry(db, max_sessions=4)
            assert len(registry) == 4
            assert registry.lookup(bytes([0])) is None
            assert registry.lookup(bytes([5])) is not None
        finally:
            db.close()

    def test_invalid_bound(self, db):
        with pytest.raises(ValueError):
            SessionRegistry(db, max_sessions=0)
