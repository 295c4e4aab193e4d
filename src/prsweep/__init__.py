"""prsweep: clear GitHub notifications for pull requests that are already merged or closed."""

__version__ = "0.1.0"
