"""Local persistence for preferences, plans, and the practice log."""
