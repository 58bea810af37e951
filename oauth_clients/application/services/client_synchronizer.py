# oauth_clients/application/services/client_synchronizer.py

"""
Synchronizer between the client store and the credential cache.

This module implements the cold start (full load of the store into the
cache) and the watch loop, a background task that consumes the store's
change subscription and reconciles every event into the cache. The watch
loop never surfaces errors: it logs them, waits with bounded exponential
backoff and subscribes again until it is stopped. Every new subscription is
followed by a rescan of the store, so changes committed while no
subscription was open still reach the cache.
"""

import asyncio
import contextlib
import logging
import time
from enum import Enum
from typing import Optional

from oauth_clients.application.ports.outbound import IChangeFeed, IClientStore
from oauth_clients.application.services.credential_cache import CredentialCache
from oauth_clients.shared.utils.backoff import ExponentialBackoff, wait_for_stop

logger = logging.getLogger(__name__)

DEFAULT_RETRY_MIN_SECONDS = 15.0
DEFAULT_RETRY_MAX_SECONDS = 60.0


class WatchState(str, Enum):
    """States of the watch loop."""

    DISCONNECTED = "disconnected"
    SUBSCRIBING = "subscribing"
    STREAMING = "streaming"
    STOPPED = "stopped"


class ClientSynchronizer:
    """
    Keeps a CredentialCache convergent with an IClientStore.

    Lifecycle: construct, cold_start(), start(), stop(). The cold start must
    complete before the watch loop is started against the same cache.
    """

    def __init__(
            self,
            store: IClientStore,
            cache: CredentialCache,
            backoff: Optional[ExponentialBackoff] = None,
            shutdown_timeout: float = 10.0,
    ):
        """
        Args:
            store: Store to load from and subscribe to
            cache: Cache owned by this synchronizer
            backoff: Delay policy between subscription attempts
            shutdown_timeout: Seconds stop() waits before cancelling the task
        """
        self.store = store
        self.cache = cache
        self.backoff = backoff or ExponentialBackoff(
            min_delay=DEFAULT_RETRY_MIN_SECONDS,
            max_delay=DEFAULT_RETRY_MAX_SECONDS,
        )
        self.shutdown_timeout = shutdown_timeout
        self.subscription_attempts = 0
        self.events_applied = 0

        self._state = WatchState.DISCONNECTED
        self._ready = False
        self._stop_event = asyncio.Event()
        self._task: Optional[asyncio.Task] = None
        self._feed: Optional[IChangeFeed] = None
        self._streaming_since: Optional[float] = None

    @property
    def state(self) -> WatchState:
        return self._state

    @property
    def is_ready(self) -> bool:
        """True once a cold start has completed successfully."""
        return self._ready

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def cold_start(self) -> int:
        """
        Clear the cache and load every record from the store.

        Returns:
            Number of clients loaded

        Raises:
            DatabaseOperationException: If the store scan fails. The cache
                is left empty and the synchronizer is not ready.
            RuntimeError: If the watch loop is already running
        """
        if self.is_running:
            raise RuntimeError("Cold start cannot run while the watch loop is active")

        self._ready = False
        await self.cache.clear()

        records = await self.store.scan_all()
        count = await self.cache.load(records)

        self._ready = True
        logger.info(f"Client cache loaded with {count} clients")
        return count

    def start(self) -> asyncio.Task:
        """
        Launch the watch loop as a background task.

        Raises:
            RuntimeError: If no cold start has completed or the loop is running
        """
        if not self._ready:
            raise RuntimeError("Cold start must complete before the watch loop starts")
        if self.is_running:
            raise RuntimeError("Watch loop is already running")

        self._stop_event.clear()
        self._task = asyncio.create_task(self.watch(), name="client-change-watch")
        return self._task

    async def stop(self) -> None:
        """
        Signal the watch loop to exit and wait for it.

        Any backoff wait in progress is abandoned and the open change feed is
        closed. If the task does not finish within shutdown_timeout it is
        cancelled.
        """
        self._stop_event.set()

        feed = self._feed
        if feed is not None:
            await self._close_feed(feed)

        task = self._task
        if task is None:
            return

        done, _ = await asyncio.wait({task}, timeout=self.shutdown_timeout)
        if not done:
            logger.warning("Watch loop did not stop in time, cancelling it")
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task

    async def watch(self) -> None:
        """
        Consume the change subscription until stopped.

        Every failure, whether opening the subscription, rescanning the
        store, a mid-stream error or the feed ending, moves the loop back to
        DISCONNECTED and schedules a new subscription after the next backoff
        delay.
        """
        logger.info("Client change watch started")
        try:
            while not self._stop_event.is_set():
                self._streaming_since = None
                try:
                    await self._consume()
                except asyncio.CancelledError:
                    raise
                except Exception as e:
                    logger.error(f"Client change subscription failed: {e}")
                else:
                    if not self._stop_event.is_set():
                        logger.warning("Client change subscription ended unexpectedly")
                finally:
                    self._state = WatchState.DISCONNECTED

                if self._stop_event.is_set():
                    break

                # A long healthy subscription starts the backoff over
                if (self._streaming_since is not None
                        and time.monotonic() - self._streaming_since >= 2 * self.backoff.max_delay):
                    self.backoff.reset()

                delay = self.backoff.next_delay()
                logger.info(f"Retrying client change subscription in {delay:.1f} seconds")
                if await wait_for_stop(self._stop_event, delay):
                    break
        finally:
            self._state = WatchState.STOPPED
            logger.info("Client change watch stopped")

    async def _consume(self) -> None:
        """
        Run one subscription until it fails or ends.

        The feed is opened before the store is scanned, so every change
        committed after the scan is still delivered by the feed. Events
        buffered while the scan runs are applied on top of it, which the
        reconciliation rule makes harmless.
        """
        self._state = WatchState.SUBSCRIBING
        self.subscription_attempts += 1

        feed = await self.store.subscribe_changes()
        self._feed = feed
        try:
            if self._stop_event.is_set():
                return

            await self._resync()

            self._state = WatchState.STREAMING
            self._streaming_since = time.monotonic()
            logger.info("Client change subscription established")

            async for event in feed:
                await self.cache.apply(event)
                self.events_applied += 1
        finally:
            self._feed = None
            await self._close_feed(feed)

    async def _resync(self) -> None:
        """Replace the cache with a fresh scan of the store."""
        records = await self.store.scan_all()
        count = await self.cache.replace(records)
        logger.info(f"Client cache resynchronized with {count} clients")

    @staticmethod
    async def _close_feed(feed: IChangeFeed) -> None:
        try:
            await feed.close()
        except Exception as e:
            logger.warning(f"Error closing client change feed: {e}")
