"""Main CLI entry point for pomo - a command-line pomodoro timer."""

import logging
import signal

import click

from . import __version__
from .clock import RealClock
from .config import ENV_PREFIX, TimerSettings, configure_logging
from .display import ProgressDisplay
from .models import RunOutcome
from .timer import DEFAULT_TICK_INTERVAL, Timer, TimerRun

logger = logging.getLogger(__name__)

STOP_SIGNALS = (signal.SIGINT, signal.SIGTERM)

DEFAULTS = TimerSettings()


@click.group(invoke_without_command=True)
@click.option("--version", is_flag=True, help="Show version")
@click.pass_context
def main(ctx: click.Context, version: bool) -> None:
    """pomo - A command-line pomodoro timer.

    Use 'pomo start' to begin a session.
    """
    if version:
        click.echo(f"pomo {__version__}")
        return

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@main.command()
@click.option("--pomodoro", "-p", default=DEFAULTS.work_minutes, show_default=True,
              type=click.IntRange(min=0), help="Work duration in minutes")
@click.option("--short", "-s", default=DEFAULTS.short_break_minutes, show_default=True,
              type=click.IntRange(min=0), help="Short break duration in minutes")
@click.option("--long", "-l", default=DEFAULTS.long_break_minutes, show_default=True,
              type=click.IntRange(min=0), help="Long break duration in minutes")
@click.option("--long-every", "-e", default=DEFAULTS.long_break_every, show_default=True,
              type=click.IntRange(min=0), help="Long break every N work cycles (0 = no long breaks)")
@click.option("--cycles", "-c", default=DEFAULTS.cycles, show_default=True,
              type=click.IntRange(min=0), help="Total work cycles (0 = infinite)")
@click.option("--tick-ms", default=int(DEFAULT_TICK_INTERVAL * 1000), hidden=True,
              type=click.IntRange(min=1), help="Milliseconds between display updates")
@click.option("--verbose", "-v", is_flag=True, help="Log debug output to stderr")
@click.pass_context
def start(ctx: click.Context, pomodoro: int, short: int, long: int, long_every: int,
          cycles: int, tick_ms: int, verbose: bool) -> None:
    """Start a pomodoro session.

    \b
    Examples:
      pomo start                    # 50min work, 10min short, 30min long every 4
      pomo start -p 25 -s 5 -l 15   # Classic pomodoro
      pomo start -e 0               # Disable long breaks
      pomo start -c 4               # Run exactly 4 work cycles
    """
    configure_logging(verbose)

    settings = TimerSettings(
        work_minutes=pomodoro,
        short_break_minutes=short,
        long_break_minutes=long,
        long_break_every=long_every,
        cycles=cycles,
    )
    click.echo(f"Starting pomodoro: {settings.describe()}")
    click.echo()

    timer = Timer(
        settings.to_session_config(),
        clock=RealClock(),
        tick_interval=tick_ms / 1000,
    )
    run = TimerRun(timer)
    display = ProgressDisplay(timer.session.total_phases)

    def _signal_handler(signum, frame):
        """Handle interrupt and termination signals."""
        logger.info(f"Received signal {signum}, stopping timer")
        if not run.cancel.is_set():
            click.echo("\nInterrupted, stopping...")
        run.cancel.set()

    previous_handlers = {sig: signal.signal(sig, _signal_handler) for sig in STOP_SIGNALS}
    try:
        run.start()
        # Drain until the timer closes the channel
        for event in run:
            display.update(event)
        display.finish()
        outcome = run.wait()
    except Exception as e:
        logger.exception("Timer failed")
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)
    finally:
        run.cancel.set()
        for sig, handler in previous_handlers.items():
            signal.signal(sig, handler)

    click.echo()
    if outcome is RunOutcome.CANCELLED:
        click.echo("Session stopped.")
    else:
        click.secho("Session complete!", fg="green", bold=True)


def cli() -> None:
    """Console script entry point."""
    main(auto_envvar_prefix=ENV_PREFIX)


if __name__ == "__main__":
    cli()
