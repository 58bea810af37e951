# tests/test_credential_cache.py

import random
from typing import Dict, List

import pytest

from oauth_clients.application.services.credential_cache import CredentialCache
from oauth_clients.domain.exceptions import ResourceNotFoundException
from oauth_clients.domain.models.change_event import ChangeEvent
from oauth_clients.domain.models.client_domain_model import ClientRecord


def record(client_id: str, secret: str = "hash", name: str = "") -> ClientRecord:
    return ClientRecord(id=client_id, secret=secret, name=name)


def fold(events: List[ChangeEvent]) -> Dict[str, ClientRecord]:
    """Reference fold of the reconciliation rule over an empty mapping."""
    state: Dict[str, ClientRecord] = {}
    for event in events:
        if event.old_value is not None:
            state.pop(event.old_value.id, None)
        if event.new_value is not None:
            state[event.new_value.id] = event.new_value
    return state


class TestCredentialCacheOperations:

    async def test_get_unknown_id_raises_not_found(self):
        cache = CredentialCache()

        with pytest.raises(ResourceNotFoundException) as exc_info:
            await cache.get("missing")

        assert exc_info.value.internal_code == "RESOURCE_NOT_FOUND"
        assert exc_info.value.resource_id == "missing"

    async def test_set_get_delete(self):
        cache = CredentialCache()
        await cache.set("a", record("a"))

        assert (await cache.get("a")).id == "a"

        await cache.delete("a")
        with pytest.raises(ResourceNotFoundException):
            await cache.get("a")

    async def test_delete_unknown_id_is_noop(self):
        cache = CredentialCache()
        await cache.delete("missing")
        assert await cache.size() == 0

    async def test_get_all_returns_snapshot(self):
        cache = CredentialCache()
        await cache.set("a", record("a"))

        snapshot = await cache.get_all()
        await cache.set("b", record("b"))
        snapshot["c"] = record("c")

        assert set(snapshot) == {"a", "c"}
        assert set(await cache.get_all()) == {"a", "b"}

    async def test_load_and_clear(self):
        cache = CredentialCache()

        count = await cache.load([record("a"), record("b")])
        assert count == 2
        assert await cache.size() == 2

        await cache.clear()
        assert await cache.get_all() == {}

    async def test_replace_drops_entries_missing_from_records(self):
        cache = CredentialCache()
        await cache.load([record("a"), record("revoked")])

        count = await cache.replace([record("a", name="renamed"), record("b")])

        assert count == 2
        assert set(await cache.get_all()) == {"a", "b"}
        assert (await cache.get("a")).name == "renamed"

    async def test_events_buffered_before_replace_are_idempotent(self):
        cache = CredentialCache()
        events = [
            ChangeEvent(None, record("a", name="v1")),
            ChangeEvent(record("a", name="v1"), record("a", name="v2")),
            ChangeEvent(None, record("gone")),
            ChangeEvent(record("gone"), None),
        ]
        # Snapshot taken after all of the events above committed
        await cache.replace([record("a", name="v2")])

        for event in events:
            await cache.apply(event)

        assert await cache.get_all() == {"a": record("a", name="v2")}


class TestReconciliation:

    async def test_insert_event_sets_new_record(self):
        cache = CredentialCache()
        await cache.apply(ChangeEvent(old_value=None, new_value=record("a")))
        assert (await cache.get("a")).id == "a"

    async def test_delete_event_removes_exactly_old_id(self):
        cache = CredentialCache()
        await cache.load([record("a"), record("b")])

        await cache.apply(ChangeEvent(old_value=record("a"), new_value=None))

        assert set(await cache.get_all()) == {"b"}

    async def test_update_with_same_id_overwrites(self):
        cache = CredentialCache()
        await cache.set("a", record("a", name="before"))

        await cache.apply(ChangeEvent(old_value=record("a", name="before"), new_value=record("a", name="after")))

        assert (await cache.get("a")).name == "after"
        assert await cache.size() == 1

    async def test_update_with_new_id_rekeys_entry(self):
        cache = CredentialCache()
        await cache.set("a", record("a"))

        await cache.apply(ChangeEvent(old_value=record("a"), new_value=record("z")))

        assert set(await cache.get_all()) == {"z"}

    async def test_empty_event_is_ignored(self, caplog):
        cache = CredentialCache()
        await cache.set("a", record("a"))

        await cache.apply(ChangeEvent())

        assert set(await cache.get_all()) == {"a"}
        assert "without old or new value" in caplog.text

    async def test_fold_independent_of_interleaving_across_ids(self):
        rng = random.Random(42)
        ids = ["a", "b", "c", "d", "e"]

        # Per-id histories of insert, update and delete events
        histories: Dict[str, List[ChangeEvent]] = {}
        for client_id in ids:
            events = []
            current = None
            for step in range(rng.randint(1, 6)):
                if current is None:
                    current = record(client_id, name=f"v{step}")
                    events.append(ChangeEvent(None, current))
                elif rng.random() < 0.3:
                    events.append(ChangeEvent(current, None))
                    current = None
                else:
                    updated = record(client_id, name=f"v{step}")
                    events.append(ChangeEvent(current, updated))
                    current = updated
            histories[client_id] = events

        expected = fold([event for client_id in ids for event in histories[client_id]])

        for _ in range(20):
            # Random merge keeping each id's own order
            queues = {client_id: list(events) for client_id, events in histories.items()}
            merged = []
            while any(queues.values()):
                client_id = rng.choice([key for key, value in queues.items() if value])
                merged.append(queues[client_id].pop(0))

            cache = CredentialCache()
            for event in merged:
                await cache.apply(event)

            assert await cache.get_all() == expected
