"""Clock and ticker abstractions used by the timer loop."""

import queue
import threading
import time
from abc import ABC, abstractmethod
from typing import Optional


class Ticker(ABC):
    """Repeating tick source.

    ``ticks`` holds at most one undelivered tick (the instant it fired).
    A tick that fires while the previous one is still unread is dropped.
    """

    def __init__(self, interval: float):
        if interval <= 0:
            raise ValueError("ticker interval must be greater than zero")
        self.interval = interval
        self.ticks: "queue.Queue[float]" = queue.Queue(maxsize=1)

    def _deliver(self, instant: float) -> None:
        try:
            self.ticks.put_nowait(instant)
        except queue.Full:
            # previous tick never consumed
            pass

    @abstractmethod
    def stop(self) -> None:
        """Stop firing. Safe to call more than once."""


class Clock(ABC):
    """Source of the current instant and of tickers."""

    @abstractmethod
    def now(self) -> float:
        """Current instant in seconds."""

    @abstractmethod
    def new_ticker(self, interval: float) -> Ticker:
        """Create a ticker firing every ``interval`` seconds."""

    @abstractmethod
    def sleep(self, seconds: float) -> None:
        """Block for ``seconds``."""


class RealTicker(Ticker):
    """Ticker backed by a daemon thread on a fixed schedule."""

    def __init__(self, interval: float):
        super().__init__(interval)
        self._stopped = threading.Event()
        self._thread = threading.Thread(
            target=self._run, name="pomo-ticker", daemon=True
        )
        self._thread.start()

    def _run(self) -> None:
        next_tick = time.monotonic() + self.interval
        while not self._stopped.wait(max(0.0, next_tick - time.monotonic())):
            self._deliver(time.monotonic())
            next_tick += self.interval
            # Skip slots missed while the process was suspended
            now = time.monotonic()
            if next_tick < now:
                missed = int((now - next_tick) // self.interval) + 1
                next_tick += missed * self.interval

    def stop(self) -> None:
        self._stopped.set()


class RealClock(Clock):
    """Clock backed by the system monotonic clock."""

    def now(self) -> float:
        return time.monotonic()

    def new_ticker(self, interval: float) -> Ticker:
        return RealTicker(interval)

    def sleep(self, seconds: float) -> None:
        time.sleep(seconds)


class VirtualTicker(Ticker):
    """Ticker driven by a VirtualClock."""

    def __init__(self, interval: float, next_tick: float):
        super().__init__(interval)
        self.next_tick = next_tick
        self.stopped = False

    def stop(self) -> None:
        self.stopped = True


class VirtualClock(Clock):
    """Manually advanced clock for deterministic tests.

    Time only moves when ``advance()`` (or ``sleep()``) is called. It may be
    advanced from one thread while another reads it.
    """

    def __init__(self, start: float = 0.0):
        self._current = start
        self._tickers: list[VirtualTicker] = []
        self._lock = threading.Lock()

    def now(self) -> float:
        with self._lock:
            return self._current

    def new_ticker(self, interval: float) -> Ticker:
        with self._lock:
            ticker = VirtualTicker(interval, self._current + interval)
            self._tickers.append(ticker)
            return ticker

    def sleep(self, seconds: float) -> None:
        self.advance(seconds)

    def advance(self, seconds: float) -> None:
        """Move time forward, firing due tickers in chronological order.

        Each ticker whose next tick falls at or before the target fires one at
        a time, earliest first, and is rescheduled by its interval. Once no
        ticker is due, time jumps straight to the target.
        """
        with self._lock:
            target = self._current + seconds
            while self._current < target:
                earliest = self._earliest_ticker()
                if earliest is None or earliest.next_tick > target:
                    self._current = target
                    break

                self._current = earliest.next_tick
                earliest._deliver(self._current)
                earliest.next_tick += earliest.interval

            self._tickers = [t for t in self._tickers if not t.stopped]

    def _earliest_ticker(self) -> Optional[VirtualTicker]:
        earliest = None
        for ticker in self._tickers:
            if ticker.stopped:
                continue
            if earliest is None or ticker.next_tick < earliest.next_tick:
                earliest = ticker
        return earliest
