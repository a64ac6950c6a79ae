# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""This module contains tools for turning SDK handler callbacks into awaitable events.

SDK client handlers are invoked on threads owned by the SDK. An EventSource moves each value
onto the event loop the glue runs on, and hands it to whichever listeners are registered at
that moment.
"""

import asyncio
import collections
import logging
from typing import Any, Callable, Deque, List, Optional

logger = logging.getLogger(__name__)

# A listener returns True if it consumed the value
Listener = Callable[[Any], bool]

DEFAULT_MAX_UNCLAIMED = 100


class EventSource:
    def __init__(
        self,
        loop: Optional[asyncio.AbstractEventLoop] = None,
        replay_latest: bool = False,
        keep_unclaimed: bool = False,
        max_unclaimed: int = DEFAULT_MAX_UNCLAIMED,
    ) -> None:
        """Initializer for an EventSource

        :param loop: The event loop listeners run on. Defaults to the running loop.
        :param bool replay_latest: If True, a newly added listener is immediately called with
            the most recent value (if there is one), the way a cloud twin replays its current
            desired properties to a new subscriber.
        :param bool keep_unclaimed: If True, values that no listener consumes are kept and handed
            to the next matching call to .wait_for_next()
        :param int max_unclaimed: The most kept values held at once. When full, the oldest kept
            value is dropped to make room.
        """
        self._loop = loop or asyncio.get_running_loop()
        self._listeners: List[Listener] = []
        self._replay_latest = replay_latest
        self._has_latest = False
        self._latest: Any = None
        self._unclaimed: Optional[Deque[Any]] = (
            collections.deque(maxlen=max_unclaimed) if keep_unclaimed else None
        )

    @property
    def latest(self) -> Any:
        return self._latest

    def emit(self, value: Any) -> None:
        """Deliver a value to the listeners. Safe to call from any thread."""
        self._loop.call_soon_threadsafe(self._deliver, value)

    def set_latest(self, value: Any) -> None:
        """Set the value replayed to new listeners without notifying current ones.
        Must be called on the loop thread.
        """
        self._latest = value
        self._has_latest = True

    def _deliver(self, value: Any) -> None:
        self.set_latest(value)
        consumed = False
        for listener in list(self._listeners):
            if listener(value):
                consumed = True
        if not consumed and self._unclaimed is not None:
            if len(self._unclaimed) == self._unclaimed.maxlen:
                logger.warning("Too many unclaimed events, dropping the oldest")
            logger.debug("No listener consumed event, keeping it for a later wait")
            self._unclaimed.append(value)

    def clear_unclaimed(self) -> None:
        if self._unclaimed is not None:
            self._unclaimed.clear()

    def add_listener(self, listener: Listener) -> None:
        self._listeners.append(listener)
        if self._replay_latest and self._has_latest:
            listener(self._latest)

    def remove_listener(self, listener: Listener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    async def wait_for_next(self, predicate: Optional[Callable[[Any], bool]] = None) -> Any:
        """Wait for the next value (optionally, the next value matching a predicate).

        Does not replay the latest value. Kept values that were never consumed are checked
        before waiting.
        """
        if self._unclaimed:
            for value in self._unclaimed:
                if predicate is None or predicate(value):
                    self._unclaimed.remove(value)
                    return value

        future = self._loop.create_future()

        def listener(value):
            if future.done() or (predicate is not None and not predicate(value)):
                return False
            future.set_result(value)
            return True

        self._listeners.append(listener)
        try:
            return await future
        finally:
            self.remove_listener(listener)


class SecondEventWaiter:
    """Single-shot wait that ignores the first event from a source and resolves on the second.

    Replaying sources deliver their current value as soon as a listener is added. That first
    event is a snapshot, not a change, so it is skipped.
    """

    WAITING_FIRST = "WAITING_FIRST"
    WAITING_SECOND = "WAITING_SECOND"
    DONE = "DONE"

    def __init__(self, source: EventSource) -> None:
        self._source = source
        self._future: Optional[asyncio.Future] = None
        self.state = self.WAITING_FIRST

    def _on_event(self, value: Any) -> bool:
        if self.state == self.WAITING_FIRST:
            logger.debug("Skipping first event")
            self.state = self.WAITING_SECOND
            return False
        elif self.state == self.WAITING_SECOND:
            self.state = self.DONE
            self._source.remove_listener(self._on_event)
            if self._future.done():
                # The wait was cancelled before this event arrived
                return False
            self._future.set_result(value)
            return True
        else:
            return False

    async def wait(self) -> Any:
        """Return the second event delivered by the source after this call starts.

        :raises: RuntimeError if this waiter has already been used
        """
        if self._future is not None:
            raise RuntimeError("SecondEventWaiter can only be waited on once")
        self._future = asyncio.get_running_loop().create_future()
        self._source.add_listener(self._on_event)
        try:
            return await self._future
        finally:
            self._source.remove_listener(self._on_event)


async def wait_for_second_event(source: EventSource) -> Any:
    return await SecondEventWaiter(source).wait()
