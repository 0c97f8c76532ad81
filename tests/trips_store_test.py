import pytest
from types import SimpleNamespace
from app.core.exceptions import TripStoreError
from app.db import trips_store


class FakeQuery:
    """Records a Supabase query-builder chain and returns canned rows."""

    def __init__(self, client, table):
        self.client = client
        self.table = table
        self.ops = []

    def __getattr__(self, name):
        def op(*args, **kwargs):
            self.ops.append((name, args, kwargs))
            return self

        return op

    def execute(self):
        self.client.executed.append((self.table, self.ops))
        if self.client.error:
            raise self.client.error
        return SimpleNamespace(data=self.client.rows.pop(0) if self.client.rows else [])


class FakeSupabase:
    def __init__(self, rows=None, error=None):
        self.rows = list(rows or [])
        self.error = error
        self.executed = []

    def table(self, name):
        return FakeQuery(self, name)


@pytest.fixture
def fake_db(monkeypatch):
    def install(rows=None, error=None):
        db = FakeSupabase(rows, error)
        monkeypatch.setattr(trips_store, "get_supabase", lambda: db)
        return db

    return install


def op_names(ops):
    return [name for name, _, _ in ops]


def test_create_trip(fake_db):
    db = fake_db(rows=[[{"tripid": 42, "tripdetails": "# Trip"}]])

    assert trips_store.create_trip("# Trip") == 42

    table, ops = db.executed[0]
    assert table == "trips"
    assert ops[0] == ("insert", ({"tripdetails": "# Trip"},), {})


def test_create_trip_without_rows_fails(fake_db):
    fake_db(rows=[[]])
    with pytest.raises(TripStoreError):
        trips_store.create_trip("# Trip")


def test_create_trip_wraps_client_errors(fake_db):
    fake_db(error=RuntimeError("connection reset"))
    with pytest.raises(TripStoreError, match="Error saving trip"):
        trips_store.create_trip("# Trip")


def test_save_for_user_ignores_duplicates(fake_db):
    db = fake_db()
    trips_store.save_for_user(7, 42)

    table, ops = db.executed[0]
    assert table == "saved"
    name, args, kwargs = ops[0]
    assert name == "upsert"
    assert args[0] == {"userid": 7, "tripid": 42}
    assert kwargs["ignore_duplicates"] is True


def test_trip_exists(fake_db):
    fake_db(rows=[[{"tripid": 1}], []])
    assert trips_store.trip_exists(1) is True
    assert trips_store.trip_exists(2) is False


def test_list_saved_flattens_join(fake_db):
    db = fake_db(
        rows=[
            [
                {"tripid": 3, "saved_at": "2025-06-02T10:00:00", "trips": {"tripdetails": "third"}},
                {"tripid": 1, "saved_at": "2025-06-01T10:00:00", "trips": None},
            ]
        ]
    )

    trips = trips_store.list_saved(7)

    assert trips == [
        {"tripid": 3, "tripdetails": "third", "saved_at": "2025-06-02T10:00:00"},
        {"tripid": 1, "tripdetails": "", "saved_at": "2025-06-01T10:00:00"},
    ]
    _, ops = db.executed[0]
    assert ("order", ("saved_at",), {"desc": True}) in ops


def test_delete_saved(fake_db):
    db = fake_db(rows=[[{"userid": 7, "tripid": 1}], []])

    assert trips_store.delete_saved(7, 1) is True
    assert trips_store.delete_saved(7, 1) is False
    assert op_names(db.executed[0][1]) == ["delete", "eq", "eq"]
