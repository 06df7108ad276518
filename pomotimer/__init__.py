"""Pomotimer: a Pomodoro work/break timer with wall-clock timekeeping."""

__version__ = "0.1.0"
