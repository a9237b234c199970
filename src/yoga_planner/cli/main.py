"""
CLI entry point using Typer.

Provides commands for practice plan management:
- init: Set up preferences and generate a plan
- plan / today: Show the active plan or today's practice
- log-session / complete-day: Record a practice
- history / progress: Review the log and plan progress
- evolve / edit-day / archive: Move on, adjust, or retire a plan
"""

from .app import app
from .commands import planning, profile, sessions  # noqa: F401  (register commands)

__all__ = ["app"]


if __name__ == "__main__":
    app()
