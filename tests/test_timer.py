"""Tests for the timer loop, driven by a virtual clock."""

import itertools
import threading

import pytest

from pomo.channel import EventChannel
from pomo.models import Phase, RunOutcome
from pomo.timer import DEFAULT_TICK_INTERVAL, Timer, TimerRun

from helpers import RUN_TIMEOUT, drive, make_config


def phases_of(events) -> list:
    return [phase for phase, _ in itertools.groupby(e.phase for e in events)]


class TestCompletedRun:

    def test_two_cycles_one_minute_each(self, clock):
        timer = Timer(make_config(work=60, short=60, long=60, every=0, cycles=2),
                      clock=clock, tick_interval=1.0)
        events, outcome = drive(timer, clock)

        assert outcome is RunOutcome.COMPLETED
        assert phases_of(events) == [Phase.WORK, Phase.SHORT_BREAK, Phase.WORK]
        assert len(events) == 3 * 61
        assert all(e.total_phases == 3 for e in events)
        assert timer.session.current_phase is Phase.DONE

    def test_event_fields_within_a_phase(self, clock):
        timer = Timer(make_config(work=4, cycles=1), clock=clock, tick_interval=1.0)
        events, outcome = drive(timer, clock)

        assert outcome is RunOutcome.COMPLETED
        assert [e.elapsed_seconds for e in events] == [0, 1, 2, 3, 4]
        assert [e.remaining_seconds for e in events] == [4, 3, 2, 1, 0]
        assert [e.fraction for e in events] == [0.0, 0.25, 0.5, 0.75, 1.0]
        assert [e.phase_complete for e in events] == [False, False, False, False, True]
        assert all(e.total_seconds == 4 for e in events)
        assert all((e.cycle_num, e.total_cycles) == (1, 1) for e in events)
        assert all((e.phase_num, e.total_phases) == (1, 1) for e in events)

    def test_counters_follow_session(self, clock):
        timer = Timer(make_config(work=2, short=2, long=3, every=2, cycles=3),
                      clock=clock, tick_interval=1.0)
        events, _ = drive(timer, clock)

        firsts = [next(group) for _, group in itertools.groupby(events, key=lambda e: e.phase_num)]
        assert [(e.phase, e.cycle_num, e.phase_num) for e in firsts] == [
            (Phase.WORK, 1, 1),
            (Phase.SHORT_BREAK, 2, 2),
            (Phase.WORK, 2, 3),
            (Phase.LONG_BREAK, 3, 4),
            (Phase.WORK, 3, 5),
        ]
        assert all(e.total_phases == 5 for e in events)

    def test_overshoot_is_clamped(self, clock):
        timer = Timer(make_config(work=2.5, cycles=1), clock=clock, tick_interval=1.0)
        events, _ = drive(timer, clock)

        last = events[-1]
        assert last.elapsed_seconds == 3
        assert last.phase_complete
        assert last.fraction == 1.0
        assert last.remaining_seconds == 0

    def test_event_invariants(self, clock):
        timer = Timer(make_config(work=3, short=1, long=2, every=2, cycles=4),
                      clock=clock, tick_interval=0.5)
        events, _ = drive(timer, clock)

        for event in events:
            assert 0 <= event.fraction <= 1
            assert event.remaining_seconds >= 0
            assert event.elapsed_seconds >= 0

        for _, group in itertools.groupby(events, key=lambda e: e.phase_num):
            group = list(group)
            elapsed = [e.elapsed_seconds for e in group]
            assert elapsed == sorted(elapsed)
            assert group[-1].phase_complete
            assert not any(e.phase_complete for e in group[:-1])

    def test_zero_length_breaks_are_skipped(self, clock):
        timer = Timer(make_config(work=2, short=0, every=0, cycles=3),
                      clock=clock, tick_interval=1.0)
        events, outcome = drive(timer, clock)

        assert outcome is RunOutcome.COMPLETED
        assert {e.phase for e in events} == {Phase.WORK}
        assert sorted({e.phase_num for e in events}) == [1, 3, 5]
        assert timer.session.phases_complete == 5
        assert timer.session.cycles_complete == 3

    def test_all_zero_durations_complete_without_events(self, clock):
        timer = Timer(make_config(work=0, short=0, long=0, cycles=3), clock=clock)
        events, outcome = drive(timer, clock)

        assert events == []
        assert outcome is RunOutcome.COMPLETED
        assert timer.session.cycles_complete == 3

    def test_run_twice_raises(self, clock, cancel):
        timer = Timer(make_config(work=0, short=0, cycles=1), clock=clock)
        assert timer.run(EventChannel(), cancel) is RunOutcome.COMPLETED

        channel = EventChannel()
        with pytest.raises(RuntimeError):
            timer.run(channel, cancel)
        assert channel.closed


class TestCancellation:

    def test_cancel_before_start(self, clock, cancel):
        cancel.set()
        timer = Timer(make_config(), clock=clock, tick_interval=1.0)
        events, outcome = drive(timer, clock, cancel=cancel)

        assert outcome is RunOutcome.CANCELLED
        assert len(events) <= 1

    def test_cancel_mid_phase(self, clock):
        timer = Timer(make_config(work=60, cycles=2), clock=clock, tick_interval=1.0)
        events, outcome = drive(timer, clock, max_events=10)

        assert outcome is RunOutcome.CANCELLED
        assert len(events) == 10
        assert events[-1].elapsed_seconds == 9
        assert timer.session.current_phase is Phase.WORK
        assert timer.session.phases_complete == 0

    def test_unbounded_session_runs_until_cancelled(self, clock):
        timer = Timer(make_config(work=3, short=2, long=4, every=2, cycles=0),
                      clock=clock, tick_interval=1.0)
        events, outcome = drive(timer, clock, max_events=40)

        assert outcome is RunOutcome.CANCELLED
        assert all(e.total_phases == 0 and e.total_cycles == 0 for e in events)
        assert Phase.LONG_BREAK in phases_of(events)

    def test_cancel_while_consumer_is_not_reading(self, clock, cancel):
        timer = Timer(make_config(), clock=clock, tick_interval=1.0)
        run = TimerRun(timer, cancel).start()

        # Producer is blocked handing over the first event
        cancel.set()
        assert run.wait(timeout=RUN_TIMEOUT) is RunOutcome.CANCELLED
        assert run.events.closed


class TestRealClockRun:

    def test_short_session_completes(self):
        timer = Timer(make_config(work=0.05, short=0.05, cycles=2), tick_interval=0.01)
        run = TimerRun(timer).start()
        events = list(run)

        assert run.wait(timeout=RUN_TIMEOUT) is RunOutcome.COMPLETED
        assert phases_of(events) == [Phase.WORK, Phase.SHORT_BREAK, Phase.WORK]
        assert all(e.fraction <= 1.0 for e in events)

    def test_default_tick_interval(self):
        assert Timer(make_config()).tick_interval == DEFAULT_TICK_INTERVAL == 0.2

    def test_cancel_from_another_thread(self):
        cancel = threading.Event()
        timer = Timer(make_config(work=600, cycles=1), tick_interval=0.01)
        run = TimerRun(timer, cancel).start()

        threading.Timer(0.1, cancel.set).start()
        events = list(run)

        assert run.wait(timeout=RUN_TIMEOUT) is RunOutcome.CANCELLED
        assert events
        assert not events[-1].phase_complete
