"""Core plan engine: models, catalog, planner, progress, evolution."""
