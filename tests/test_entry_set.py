import pytest

from simple_container.entry_set import EntrySet
from simple_container.factories import SingletonFactory


class Database:
    pass


class Cache:
    pass


@pytest.fixture
def entries() -> EntrySet:
    entries = EntrySet()
    entries.get_or_create(Database, "replica").add(lambda c: "replica")
    entries.get_or_create(Cache, None).add(lambda c: "cache")
    entries.get_or_create(Database, None).add(lambda c: "primary")
    return entries


def test_find_by_key_alone_ignores_service(entries):
    assert entries.find(None, "replica").service is Database
    assert entries.find(None, None).service is Cache
    assert entries.find(None, "missing") is None


def test_find_unkeyed_prefers_unkeyed_entry(entries):
    assert entries.find(Database, None).key is None


def test_find_unkeyed_falls_back_to_first_entry_for_service(entries):
    entries.remove(Database, None)

    assert entries.find(Database, None).key == "replica"


def test_find_keyed_is_exact(entries):
    assert entries.find(Database, "replica").key == "replica"
    assert entries.find(Cache, "replica") is None


def test_get_or_create_matches_pairs_exactly(entries):
    entry = entries.get_or_create(Cache, "warm")

    assert entry is not entries.find(Cache, None)
    assert entries.get_or_create(Cache, "warm") is entry
    assert len(entries) == 4


def test_remove_reports_whether_entry_existed(entries):
    assert entries.remove(Database, "replica")
    assert not entries.remove(Database, "replica")


def test_entries_for_service_keep_insertion_order(entries):
    assert [e.key for e in entries.entries_for(Database)] == ["replica", None]


def test_snapshot_shares_entries_but_not_the_list(entries):
    snapshot = entries.snapshot()
    entries.get_or_create(Cache, None).add(lambda c: "late")
    entries.get_or_create(Database, "archive")
    entries.remove(Database, "replica")

    shared = snapshot.find_exact(Cache, None)
    assert shared is entries.find_exact(Cache, None)
    assert len(shared.factories) == 2
    assert snapshot.find_exact(Database, "archive") is None
    assert snapshot.find_exact(Database, "replica") is not None
    assert len(snapshot) == 3


def test_singleton_state_is_shared_through_a_snapshot():
    singleton = SingletonFactory(lambda c: object())
    parent = EntrySet()
    parent.get_or_create(Cache, None).add(singleton)
    child = parent.snapshot()

    built = child.find(Cache, None).factories[0](None)

    assert singleton.is_initialised
    assert parent.find(Cache, None).factories[0](None) is built
