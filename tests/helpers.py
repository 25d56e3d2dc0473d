"""Helpers for driving timers under a virtual clock."""

from pomo.channel import ChannelClosed
from pomo.clock import VirtualClock
from pomo.models import SessionConfig
from pomo.timer import Timer, TimerRun

# Generous bound so a broken loop fails instead of hanging the suite
RUN_TIMEOUT = 10


def make_config(work=60, short=60, long=60, every=0, cycles=2) -> SessionConfig:
    """Build a config with durations in seconds."""
    return SessionConfig(
        work_seconds=work,
        short_break_seconds=short,
        long_break_seconds=long,
        long_break_every=every,
        total_cycles=cycles,
    )


def drive(timer: Timer, clock: VirtualClock, cancel=None, max_events=None):
    """Run a timer in the background, advancing the clock one tick per event.

    Args:
        timer: Timer using ``clock``
        clock: Virtual clock to advance
        cancel: Optional cancellation event for the run
        max_events: Cancel the run once this many events were received

    Returns:
        (events, outcome)
    """
    run = TimerRun(timer, cancel).start()
    events = []
    while True:
        try:
            event = run.events.receive(timeout=RUN_TIMEOUT)
        except ChannelClosed:
            break
        events.append(event)
        if max_events is not None and len(events) >= max_events:
            run.cancel.set()
        elif not event.phase_complete:
            clock.advance(timer.tick_interval)
    return events, run.wait(timeout=RUN_TIMEOUT)
