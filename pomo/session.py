"""Pomodoro phase state machine."""

import logging

from .models import Phase, SessionConfig

logger = logging.getLogger(__name__)


def count_total_phases(config: SessionConfig) -> int:
    """Number of phases a bounded session runs through.

    Args:
        config: Session configuration

    Returns:
        Work cycles plus the breaks between them, or 0 for an unbounded session
    """
    cycles = config.total_cycles
    if cycles == 0:
        return 0

    breaks = cycles - 1
    if config.long_break_every > 0:
        long_breaks = breaks // config.long_break_every
        short_breaks = breaks - long_breaks
    else:
        long_breaks = 0
        short_breaks = breaks

    return cycles + long_breaks + short_breaks


class Session:
    """Phase progression for one pomodoro session.

    Starts at WORK and only moves forward through ``next_phase()``.
    """

    def __init__(self, config: SessionConfig):
        self._config = config
        self._current_phase = Phase.WORK
        self._cycles_complete = 0
        self._phases_complete = 0
        self._total_phases = count_total_phases(config)

    @property
    def config(self) -> SessionConfig:
        return self._config

    @property
    def current_phase(self) -> Phase:
        return self._current_phase

    @property
    def cycles_complete(self) -> int:
        """Fully completed work phases."""
        return self._cycles_complete

    @property
    def phases_complete(self) -> int:
        """Fully completed phases of any kind."""
        return self._phases_complete

    @property
    def total_cycles(self) -> int:
        return self._config.total_cycles

    @property
    def total_phases(self) -> int:
        return self._total_phases

    @property
    def is_done(self) -> bool:
        return self._current_phase is Phase.DONE

    def phase_duration(self) -> float:
        """Configured duration of the current phase in seconds (0 when done)."""
        if self._current_phase is Phase.WORK:
            return self._config.work_seconds
        if self._current_phase is Phase.SHORT_BREAK:
            return self._config.short_break_seconds
        if self._current_phase is Phase.LONG_BREAK:
            return self._config.long_break_seconds
        return 0

    def next_phase(self) -> Phase:
        """Advance to the following phase and return it.

        Calling this once the session is done has no effect.
        """
        if self._current_phase is Phase.DONE:
            return Phase.DONE

        previous = self._current_phase
        self._phases_complete += 1

        if previous is Phase.WORK:
            self._cycles_complete += 1
            every = self._config.long_break_every

            if 0 < self.total_cycles <= self._cycles_complete:
                self._current_phase = Phase.DONE
            elif every > 0 and self._cycles_complete % every == 0:
                self._current_phase = Phase.LONG_BREAK
            else:
                self._current_phase = Phase.SHORT_BREAK
        else:
            self._current_phase = Phase.WORK

        logger.debug(
            f"Phase {previous.value} -> {self._current_phase.value} "
            f"(cycles={self._cycles_complete}, phases={self._phases_complete})"
        )
        return self._current_phase
