"""Unbuffered handoff of timer events between two threads."""

import threading
import time
from typing import Iterator, Optional

from .models import TimerEvent

# How often blocked callers re-check the cancellation signal
POLL_INTERVAL = 0.05


class ChannelClosed(Exception):
    """Raised when receiving from a drained channel or sending on a closed one."""


class EventChannel:
    """Single-producer, single-consumer rendezvous for TimerEvents.

    ``send()`` only returns once the consumer has taken the event, so the
    producer never runs ahead of the consumer by more than one event.
    """

    def __init__(self, poll_interval: float = POLL_INTERVAL):
        self._poll_interval = poll_interval
        self._cond = threading.Condition()
        self._pending: Optional[TimerEvent] = None
        self._closed = False

    @property
    def closed(self) -> bool:
        with self._cond:
            return self._closed

    def send(self, event: TimerEvent, cancel: threading.Event) -> bool:
        """Hand an event to the consumer.

        Args:
            event: Event to deliver
            cancel: Cancellation signal checked while waiting

        Returns:
            True if the consumer took the event, False if cancelled first
        """
        with self._cond:
            if self._closed:
                raise ChannelClosed("send on closed channel")
            if cancel.is_set():
                return False

            self._pending = event
            self._cond.notify_all()

            while self._pending is event:
                if cancel.is_set():
                    self._pending = None
                    return False
                self._cond.wait(self._poll_interval)

            return True

    def receive(self, timeout: Optional[float] = None) -> TimerEvent:
        """Take the next event.

        Args:
            timeout: Seconds to wait before giving up, None waits forever

        Returns:
            The next event in emission order

        Raises:
            ChannelClosed: The channel is closed and has no pending event
            TimeoutError: No event arrived within ``timeout``
        """
        deadline = None if timeout is None else time.monotonic() + timeout

        with self._cond:
            while self._pending is None:
                if self._closed:
                    raise ChannelClosed("channel closed")

                wait_for = self._poll_interval
                if deadline is not None:
                    left = deadline - time.monotonic()
                    if left <= 0:
                        raise TimeoutError("no event received")
                    wait_for = min(wait_for, left)
                self._cond.wait(wait_for)

            event = self._pending
            self._pending = None
            self._cond.notify_all()
            return event

    def close(self) -> None:
        """Signal that no more events will be sent."""
        with self._cond:
            self._closed = True
            self._cond.notify_all()

    def __iter__(self) -> Iterator[TimerEvent]:
        while True:
            try:
                yield self.receive()
            except ChannelClosed:
                return
