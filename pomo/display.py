"""Display formatting for pomo - progress bars and phase labels."""

from typing import IO, Optional

import click

from .models import Phase, TimerEvent

BAR_WIDTH = 30

PHASE_COLORS = {
    Phase.WORK: "red",
    Phase.SHORT_BREAK: "cyan",
    Phase.LONG_BREAK: "green",
}


def format_time(seconds: float) -> str:
    """Format seconds as MM:SS.

    Args:
        seconds: Number of seconds, rounded to the nearest second

    Returns:
        Formatted time string
    """
    total = int(round(max(seconds, 0)))
    minutes = total // 60
    secs = total % 60
    return f"{minutes:02d}:{secs:02d}"


def progress_bar(current: float, total: float, width: int = BAR_WIDTH,
                 filled: str = "=", tip: str = ">", empty: str = "-") -> str:
    """Create an ASCII progress bar.

    Args:
        current: Current value
        total: Total value
        width: Width of the bar in characters
        filled: Character for filled portion
        tip: Character at the leading edge of an unfinished bar
        empty: Character for empty portion

    Returns:
        Progress bar string
    """
    if total <= 0:
        return empty * width

    ratio = min(max(current / total, 0.0), 1.0)
    filled_width = int(width * ratio)
    if filled_width >= width:
        return filled * width
    return filled * filled_width + tip + empty * (width - filled_width - 1)


def phase_label(event: TimerEvent, color: bool = True) -> str:
    """Phase name, with the cycle position when cycles are bounded.

    Breaks show the cycle they follow.

    Args:
        event: Event for the running phase
        color: Whether to apply the phase colour

    Returns:
        Label such as ``Work (2/4)``
    """
    label = event.phase.label
    if event.total_cycles > 0:
        cycle = event.cycle_num
        if event.phase.is_break:
            cycle -= 1
        label = f"{label} ({cycle}/{event.total_cycles})"

    if not color:
        return label
    return click.style(label, fg=PHASE_COLORS.get(event.phase, "white"), bold=True)


class ProgressDisplay:
    """Renders timer events as one redrawn status line per phase."""

    def __init__(self, total_phases: int, output: Optional[IO] = None, color: Optional[bool] = None):
        """Initialize display.

        Args:
            total_phases: Phases in the session, 0 hides the overall bar
            output: Stream to write to, stdout if not provided
            color: Force colours on or off, auto-detected if not provided
        """
        self.total_phases = total_phases
        self.output = output
        self.color = color
        self.phases_done = 0
        self._last_phase: Optional[Phase] = None
        self._line_open = False

    @property
    def show_overall(self) -> bool:
        return self.total_phases > 0

    def update(self, event: TimerEvent) -> None:
        """Redraw the status line for an event."""
        if self._last_phase is not None and event.phase != self._last_phase:
            self._end_line()
        self._last_phase = event.phase

        # phase_num also counts zero-length phases the timer skipped
        self.phases_done = event.phase_num - 1
        if event.phase_complete:
            self.phases_done += 1

        self._echo("\r" + self.render(event), nl=False)
        self._line_open = True

        if event.phase_complete:
            self._end_line()

    def render(self, event: TimerEvent) -> str:
        """Status line text for an event."""
        use_color = self.color is not False
        bar = progress_bar(event.elapsed_seconds, event.total_seconds)
        if use_color:
            bar = click.style(bar, fg=PHASE_COLORS.get(event.phase))

        times = f"{format_time(event.elapsed_seconds)}/{format_time(event.total_seconds)}"
        if use_color:
            times = click.style(times, dim=True)
        line = f"{phase_label(event, color=use_color)} [{bar}] {times}"

        if self.show_overall:
            overall = progress_bar(self.phases_done, self.total_phases, width=10)
            line += f"  Total [{overall}] {self.phases_done}/{self.total_phases}"
        return line

    def finish(self) -> None:
        """Terminate the last status line."""
        self._end_line()

    def _end_line(self) -> None:
        if self._line_open:
            self._echo("")
            self._line_open = False

    def _echo(self, text: str, nl: bool = True) -> None:
        click.echo(text, file=self.output, nl=nl, color=self.color)
