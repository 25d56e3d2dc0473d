"""pomo - A command-line pomodoro timer."""

__version__ = "0.1.0"
