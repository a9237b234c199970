"""
YAML → GoalCatalog loader.

Loads focus pools from individual YAML files in the bundled
``src/yoga_planner/focuses/`` directory.  Each file (e.g. strength.yaml)
describes one goal:

    goal: Strength
    display_name: Strength
    active:
      - label: Warrior Series
        body_areas: [knees]
      - Core Strength          # plain string: tags inferred from the label
    restorative:
      - label: Supported Child's Pose

User overrides: place matching files in ``~/.yoga-planner/focuses/``.
A user file is deep-merged over the bundled definition, so only changed
keys need to be listed.  A user file whose stem does not match any bundled
file is treated as a new goal and added to the registry.

Usage (internal — called by registry.py):
    from .loader import load_catalogs_from_yaml
    catalogs = load_catalogs_from_yaml()   # dict or None on failure
"""

from __future__ import annotations

import os
import warnings
from pathlib import Path

import yaml

from ..config import BODY_AREA_KEYWORDS
from .base import FocusEntry, GoalCatalog

_REQUIRED_CATALOG_FIELDS: frozenset[str] = frozenset({"goal", "active", "restorative"})


def infer_body_areas(label: str) -> frozenset[str]:
    """Derive body-area tags from label keywords (case-sensitive substring match)."""
    return frozenset(
        area
        for area, keywords in BODY_AREA_KEYWORDS.items()
        if any(kw in label for kw in keywords)
    )


def _entry_from_raw(raw: object) -> FocusEntry:
    """Convert a YAML list item (str or mapping) to a FocusEntry."""
    if isinstance(raw, str):
        return FocusEntry(label=raw, body_areas=infer_body_areas(raw))
    if isinstance(raw, dict) and raw.get("label"):
        label = str(raw["label"])
        # explicit tags add to the keyword-derived ones, never remove them
        explicit = frozenset(str(a) for a in raw.get("body_areas") or [])
        return FocusEntry(label=label, body_areas=explicit | infer_body_areas(label))
    raise ValueError(f"Focus entry must be a label or a mapping with 'label', got {raw!r}")


def catalog_from_dict(d: dict) -> GoalCatalog:
    """Convert a raw dict (from YAML) to a GoalCatalog.

    Raises ValueError if any required field is absent or a pool is empty.
    """
    missing = _REQUIRED_CATALOG_FIELDS - set(d)
    if missing:
        raise ValueError(f"GoalCatalog missing fields: {sorted(missing)}")

    active = tuple(_entry_from_raw(r) for r in d["active"] or [])
    restorative = tuple(_entry_from_raw(r) for r in d["restorative"] or [])
    if not active:
        raise ValueError("GoalCatalog needs at least one active focus")
    if not restorative:
        raise ValueError("GoalCatalog needs at least one restorative focus")

    goal = str(d["goal"])
    return GoalCatalog(
        goal=goal,
        display_name=str(d.get("display_name", goal)),
        active=active,
        restorative=restorative,
    )


def _load_yaml_file(path: Path) -> dict:
    """Load a YAML file; return {} if it is unreadable or not a mapping."""
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as exc:
        warnings.warn(f"yoga-planner: cannot read {path} ({exc})", stacklevel=2)
        return {}
    return data if isinstance(data, dict) else {}


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge override into base (non-destructive to base)."""
    result = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(result.get(k), dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


def _get_bundled_focuses_dir() -> Path | None:
    """Return path to the bundled focuses/ data directory, or None if not found."""
    # loader.py lives at src/yoga_planner/core/focuses/loader.py
    # three levels up → src/yoga_planner/
    candidate = Path(__file__).parent.parent.parent / "focuses"
    return candidate if candidate.is_dir() else None


def _get_user_focuses_dir() -> Path | None:
    """Return ~/.yoga-planner/focuses/ if it exists, else None."""
    home = Path(os.environ.get("HOME", "~")).expanduser()
    p = home / ".yoga-planner" / "focuses"
    return p if p.is_dir() else None


def load_catalogs_from_yaml() -> dict[str, GoalCatalog] | None:
    """Return {goal: GoalCatalog} loaded from per-goal YAML files.

    Bundled files that fail validation are skipped with a warning; so are
    user files.  Returns None when nothing could be loaded so the registry
    can refuse to start.
    """
    bundled_dir = _get_bundled_focuses_dir()
    user_dir = _get_user_focuses_dir()

    if bundled_dir is None and user_dir is None:
        return None

    result: dict[str, GoalCatalog] = {}

    stems: dict[str, Path] = {}
    if bundled_dir is not None:
        for p in sorted(bundled_dir.glob("*.yaml")):
            stems[p.stem] = p

    user_only: list[Path] = []
    if user_dir is not None:
        for p in sorted(user_dir.glob("*.yaml")):
            if p.stem not in stems:
                user_only.append(p)

    for stem, bundled_path in stems.items():
        raw = _load_yaml_file(bundled_path)
        if not raw:
            continue
        if user_dir is not None:
            user_path = user_dir / f"{stem}.yaml"
            if user_path.exists():
                user_raw = _load_yaml_file(user_path)
                if user_raw:
                    raw = _deep_merge(raw, user_raw)
        try:
            catalog = catalog_from_dict(raw)
            result[catalog.goal] = catalog
        except ValueError as exc:
            warnings.warn(
                f"yoga-planner: skipping focus catalog '{stem}' — {exc}",
                stacklevel=2,
            )

    for p in user_only:
        raw = _load_yaml_file(p)
        if not raw:
            continue
        try:
            catalog = catalog_from_dict(raw)
            result[catalog.goal] = catalog
        except ValueError as exc:
            warnings.warn(
                f"yoga-planner: skipping user focus catalog '{p.stem}' — {exc}",
                stacklevel=2,
            )

    return result if result else None
