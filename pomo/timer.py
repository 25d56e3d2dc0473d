"""Timer loop that drives a pomodoro session and emits progress events."""

import logging
import queue
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Iterator, Optional

from .channel import POLL_INTERVAL, EventChannel
from .clock import Clock, RealClock, Ticker
from .models import RunOutcome, SessionConfig, TimerEvent
from .session import Session

logger = logging.getLogger(__name__)

# Seconds between progress events
DEFAULT_TICK_INTERVAL = 0.2


class Timer:
    """Runs one pomodoro session, emitting an event on every tick."""

    def __init__(
        self,
        config: SessionConfig,
        clock: Optional[Clock] = None,
        tick_interval: float = DEFAULT_TICK_INTERVAL,
    ):
        """Initialize timer.

        Args:
            config: Session configuration
            clock: Time source, the system clock if not provided
            tick_interval: Seconds between progress events
        """
        self.clock = clock if clock is not None else RealClock()
        self.tick_interval = tick_interval
        self.session = Session(config)
        self._started = False

    def run(self, events: EventChannel, cancel: threading.Event) -> RunOutcome:
        """Run the whole session, sending events to the channel.

        Blocks until the session is done or ``cancel`` is set. The channel is
        closed on return either way.

        Args:
            events: Channel the consumer is draining
            cancel: Cancellation signal

        Returns:
            RunOutcome.COMPLETED or RunOutcome.CANCELLED
        """
        try:
            if self._started:
                raise RuntimeError("Timer has already been run")
            self._started = True

            logger.info(
                f"Starting session: {self.session.total_cycles or 'unbounded'} cycles, "
                f"{self.session.total_phases} phases"
            )
            while not self.session.is_done:
                if not self._run_phase(events, cancel):
                    logger.info(
                        f"Session cancelled during {self.session.current_phase.value} "
                        f"after {self.session.phases_complete} phases"
                    )
                    return RunOutcome.CANCELLED
                self.session.next_phase()
        finally:
            events.close()

        logger.info(f"Session complete after {self.session.phases_complete} phases")
        return RunOutcome.COMPLETED

    def _run_phase(self, events: EventChannel, cancel: threading.Event) -> bool:
        """Run the current phase to completion.

        Returns:
            True if the phase completed, False if cancelled
        """
        duration = self.session.phase_duration()
        if duration == 0:
            logger.debug(f"Skipping zero-length {self.session.current_phase.value} phase")
            return True

        start = self.clock.now()
        ticker = self.clock.new_ticker(self.tick_interval)
        try:
            while True:
                event = self._build_event(self.clock.now() - start, duration)

                if not events.send(event, cancel):
                    return False

                if event.phase_complete:
                    return True

                if not self._wait_for_tick(ticker, cancel):
                    return False
        finally:
            ticker.stop()

    def _build_event(self, elapsed: float, duration: float) -> TimerEvent:
        session = self.session
        return TimerEvent(
            phase=session.current_phase,
            elapsed_seconds=elapsed,
            remaining_seconds=max(0.0, duration - elapsed),
            total_seconds=duration,
            fraction=min(max(elapsed / duration, 0.0), 1.0),
            phase_complete=elapsed >= duration,
            cycle_num=session.cycles_complete + 1,
            total_cycles=session.total_cycles,
            phase_num=session.phases_complete + 1,
            total_phases=session.total_phases,
        )

    @staticmethod
    def _wait_for_tick(ticker: Ticker, cancel: threading.Event) -> bool:
        while not cancel.is_set():
            try:
                ticker.ticks.get(timeout=POLL_INTERVAL)
                return True
            except queue.Empty:
                continue
        return False


class TimerRun:
    """A timer running on a background worker thread.

    Iterate over the run (or its ``events`` channel) until it is exhausted,
    then call ``wait()`` for the outcome.
    """

    def __init__(self, timer: Timer, cancel: Optional[threading.Event] = None):
        self.timer = timer
        self.cancel = cancel if cancel is not None else threading.Event()
        self.events = EventChannel()
        self._future: Optional[Future] = None

    def start(self) -> "TimerRun":
        if self._future is not None:
            raise RuntimeError("TimerRun already started")

        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="pomo-timer")
        self._future = executor.submit(self.timer.run, self.events, self.cancel)
        executor.shutdown(wait=False)
        return self

    def __iter__(self) -> Iterator[TimerEvent]:
        return iter(self.events)

    def wait(self, timeout: Optional[float] = None) -> RunOutcome:
        """Wait for the producer to finish.

        Raises:
            concurrent.futures.TimeoutError: The run did not finish in time
            Exception: Whatever the timer loop raised
        """
        if self._future is None:
            raise RuntimeError("TimerRun not started")
        return self._future.result(timeout=timeout)
