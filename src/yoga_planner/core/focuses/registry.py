"""
Goal → focus catalog lookup.

``FOCUS_REGISTRY`` is filled once, when this module is first imported, from
the bundled per-goal YAML files plus any files in ``~/.yoga-planner/focuses/``.
The week generator cannot draw labels without a catalog, so an empty result
stops the import with a RuntimeError instead of failing later mid-plan.
"""

from .base import GoalCatalog


def _build_registry() -> dict[str, GoalCatalog]:
    from .loader import load_catalogs_from_yaml

    loaded = load_catalogs_from_yaml()
    if not loaded:
        raise RuntimeError(
            "yoga-planner: no focus catalog loaded; expected at least one valid "
            "<goal>.yaml in the bundled focuses/ directory or ~/.yoga-planner/focuses/."
        )
    return loaded


FOCUS_REGISTRY: dict[str, GoalCatalog] = _build_registry()


def get_goal_catalog(goal: str) -> GoalCatalog:
    """Active and restorative pools for a goal; ValueError for an unknown goal."""
    try:
        return FOCUS_REGISTRY[goal]
    except KeyError:
        known = ", ".join(sorted(FOCUS_REGISTRY))
        raise ValueError(f"No focus catalog for goal {goal!r} (known: {known})") from None
