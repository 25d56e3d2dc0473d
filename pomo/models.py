"""Data models for the pomo timer engine."""

from dataclasses import dataclass
from enum import Enum

SECONDS_PER_MINUTE = 60


class Phase(Enum):
    """Phase of a pomodoro session."""
    WORK = "work"
    SHORT_BREAK = "short_break"
    LONG_BREAK = "long_break"
    DONE = "done"

    @property
    def label(self) -> str:
        """Human readable phase name."""
        return _PHASE_LABELS[self]

    @property
    def is_break(self) -> bool:
        return self in (Phase.SHORT_BREAK, Phase.LONG_BREAK)


_PHASE_LABELS = {
    Phase.WORK: "Work",
    Phase.SHORT_BREAK: "Short Break",
    Phase.LONG_BREAK: "Long Break",
    Phase.DONE: "Done",
}


class RunOutcome(Enum):
    """How a timer run ended."""
    COMPLETED = "completed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class SessionConfig:
    """Durations and cycle settings for one session.

    Durations are in seconds. ``long_break_every`` of 0 disables long breaks,
    ``total_cycles`` of 0 runs until cancelled.
    """
    work_seconds: float = 50 * SECONDS_PER_MINUTE
    short_break_seconds: float = 10 * SECONDS_PER_MINUTE
    long_break_seconds: float = 30 * SECONDS_PER_MINUTE
    long_break_every: int = 4
    total_cycles: int = 0

    @classmethod
    def from_minutes(
        cls,
        work: int,
        short_break: int,
        long_break: int,
        long_break_every: int = 4,
        total_cycles: int = 0,
    ) -> "SessionConfig":
        """Create SessionConfig from whole-minute durations."""
        return cls(
            work_seconds=work * SECONDS_PER_MINUTE,
            short_break_seconds=short_break * SECONDS_PER_MINUTE,
            long_break_seconds=long_break * SECONDS_PER_MINUTE,
            long_break_every=long_break_every,
            total_cycles=total_cycles,
        )


@dataclass(frozen=True)
class TimerEvent:
    """Snapshot of the running phase, emitted on every tick."""
    phase: Phase
    elapsed_seconds: float
    remaining_seconds: float
    total_seconds: float
    fraction: float
    phase_complete: bool
    cycle_num: int
    total_cycles: int
    phase_num: int
    total_phases: int
