# tests/test_change_feed.py

import asyncio
import json

import pytest

from oauth_clients.adapters.outbound.persistence.repositories.change_feed import PostgresChangeFeed
from oauth_clients.domain.exceptions import DatabaseOperationException
from oauth_clients.domain.models.client_domain_model import ClientRecord


class FakeDriverConnection:
    """Stand-in for the asyncpg connection API used by the feed."""

    def __init__(self):
        self.listeners = {}
        self.termination_listeners = []
        self.closed = False

    async def add_listener(self, channel, callback):
        self.listeners[channel] = callback

    async def remove_listener(self, channel, callback):
        self.listeners.pop(channel, None)

    def add_termination_listener(self, callback):
        self.termination_listeners.append(callback)

    def remove_termination_listener(self, callback):
        if callback in self.termination_listeners:
            self.termination_listeners.remove(callback)

    def is_closed(self):
        return self.closed

    def notify(self, channel, payload):
        self.listeners[channel](self, 4242, channel, payload)

    def terminate(self):
        self.closed = True
        for callback in list(self.termination_listeners):
            callback(self)


@pytest.fixture
def driver():
    return FakeDriverConnection()


class FakeClientTable:
    """Rows the feed reads back by ID."""

    def __init__(self, *records: ClientRecord):
        self.rows = {record.id: record for record in records}
        self.reads = []
        self.error = None

    async def get_by_client_id(self, client_id):
        self.reads.append(client_id)
        if self.error is not None:
            raise self.error
        return self.rows.get(client_id)


@pytest.fixture
def table():
    return FakeClientTable(
        ClientRecord(id="a", secret="$2b$hash", scopes=("read",)),
        ClientRecord(id="b", name="renamed"),
    )


@pytest.fixture
async def feed(driver, table):
    released = []

    async def release():
        released.append(True)

    feed = PostgresChangeFeed(driver, "client_changes", table.get_by_client_id, release=release)
    feed.released = released
    await feed.listen()
    yield feed
    await feed.close()


def payload(op, old_id=None, new_id=None) -> str:
    return json.dumps({"op": op, "old_id": old_id, "new_id": new_id})


class TestPostgresChangeFeed:

    async def test_insert_reads_row_back(self, driver, feed, table):
        driver.notify("client_changes", payload("INSERT", new_id="a"))

        event = await asyncio.wait_for(feed.__anext__(), 1.0)

        assert event.old_value is None
        assert event.new_value == table.rows["a"]
        assert table.reads == ["a"]

    async def test_update_and_delete_notifications(self, driver, feed, table):
        driver.notify("client_changes", payload("UPDATE", old_id="a", new_id="b"))
        driver.notify("client_changes", payload("DELETE", old_id="b"))

        update = await asyncio.wait_for(feed.__anext__(), 1.0)
        delete = await asyncio.wait_for(feed.__anext__(), 1.0)

        assert update.old_value.id == "a"
        assert update.new_value.name == "renamed"
        assert delete.old_value.id == "b" and delete.new_value is None
        assert table.reads == ["b"]

    async def test_large_client_travels_by_id(self, driver, feed, table):
        uris = tuple(f"https://app.example/callback/{i}" for i in range(500))
        table.rows["big"] = ClientRecord(id="big", secret="$2b$hash", redirect_uris=uris)
        message = payload("INSERT", new_id="big")

        driver.notify("client_changes", message)
        event = await asyncio.wait_for(feed.__anext__(), 1.0)

        assert len(message) < 8000
        assert "$2b$hash" not in message
        assert event.new_value.redirect_uris == uris

    async def test_insert_of_row_already_deleted_is_skipped(self, driver, feed):
        driver.notify("client_changes", payload("INSERT", new_id="gone"))
        driver.notify("client_changes", payload("INSERT", new_id="a"))

        event = await asyncio.wait_for(feed.__anext__(), 1.0)

        assert event.new_value.id == "a"

    async def test_update_to_row_already_deleted_becomes_delete(self, driver, feed):
        driver.notify("client_changes", payload("UPDATE", old_id="a", new_id="gone"))

        event = await asyncio.wait_for(feed.__anext__(), 1.0)

        assert event.old_value.id == "a"
        assert event.new_value is None

    async def test_malformed_notification_is_skipped(self, driver, feed, caplog):
        driver.notify("client_changes", "not json")
        driver.notify("client_changes", payload("INSERT", new_id=""))
        driver.notify("client_changes", payload("DELETE"))
        driver.notify("client_changes", payload("TRUNCATE"))
        driver.notify("client_changes", payload("INSERT", new_id="a"))

        event = await asyncio.wait_for(feed.__anext__(), 1.0)

        assert event.new_value.id == "a"
        assert caplog.text.count("Skipping malformed client change notification") == 4

    async def test_row_read_error_raises_store_error(self, driver, feed, table):
        table.error = DatabaseOperationException(detail="Error reading client")
        driver.notify("client_changes", payload("INSERT", new_id="a"))

        with pytest.raises(DatabaseOperationException):
            await asyncio.wait_for(feed.__anext__(), 1.0)

    async def test_connection_loss_raises_store_error(self, driver, feed):
        driver.terminate()

        with pytest.raises(DatabaseOperationException):
            await asyncio.wait_for(feed.__anext__(), 1.0)

    async def test_close_removes_listeners_and_releases(self, driver, feed):
        await feed.close()
        await feed.close()

        assert driver.listeners == {}
        assert driver.termination_listeners == []
        assert feed.released == [True]
        with pytest.raises(StopAsyncIteration):
            await feed.__anext__()

    async def test_close_wakes_pending_reader(self, feed):
        reader = asyncio.ensure_future(feed.__anext__())
        await asyncio.sleep(0)

        await feed.close()

        with pytest.raises(StopAsyncIteration):
            await asyncio.wait_for(reader, 1.0)
