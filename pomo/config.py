"""Configuration and logging setup for the pomo CLI."""

import logging
import sys
from dataclasses import dataclass

from .models import SessionConfig

# Environment variables override option defaults, e.g. POMO_START_CYCLES=4
ENV_PREFIX = "POMO"

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass
class TimerSettings:
    """Timer duration settings as entered on the command line."""
    work_minutes: int = 50
    short_break_minutes: int = 10
    long_break_minutes: int = 30
    long_break_every: int = 4  # work cycles before a long break, 0 = never
    cycles: int = 0  # 0 = run until interrupted

    def to_session_config(self) -> SessionConfig:
        """Build the engine configuration for these settings."""
        return SessionConfig.from_minutes(
            work=self.work_minutes,
            short_break=self.short_break_minutes,
            long_break=self.long_break_minutes,
            long_break_every=self.long_break_every,
            total_cycles=self.cycles,
        )

    def describe(self) -> str:
        """One-line summary shown when a session starts."""
        text = f"{self.work_minutes}m work, {self.short_break_minutes}m short break"
        if self.long_break_every > 0:
            text += f", {self.long_break_minutes}m long break every {self.long_break_every} cycles"
        if self.cycles > 0:
            text += f" ({self.cycles} cycles)"
        return text


def configure_logging(verbose: bool = False) -> None:
    """Send log records to stderr.

    Args:
        verbose: Log debug records instead of warnings only
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
        stream=sys.stderr,
        force=True,
    )
