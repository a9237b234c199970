"""yoga-planner: personalized 4-week yoga practice plans."""

__version__ = "0.1.0"
