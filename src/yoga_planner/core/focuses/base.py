"""
Base types for the focus catalog.

A GoalCatalog holds the label pools the week generator draws from for one
goal. Each FocusEntry carries a structured set of body-area tags so that
discomfort adaptation matches on tags rather than on display text.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class FocusEntry:
    """One practice-focus label and the body areas it loads."""

    label: str                    # e.g. "Warrior Series"
    body_areas: frozenset[str] = field(default_factory=frozenset)  # e.g. {"knees"}

    def loads(self, body_area: str) -> bool:
        """Return True if this focus puts load on the given body area."""
        return body_area in self.body_areas


@dataclass(frozen=True)
class GoalCatalog:
    """Active and restorative focus pools for one goal."""

    goal: str                       # e.g. "Strength"
    display_name: str               # e.g. "Strength"
    active: tuple[FocusEntry, ...]
    restorative: tuple[FocusEntry, ...]

    @property
    def active_labels(self) -> list[str]:
        return [e.label for e in self.active]

    @property
    def restorative_labels(self) -> list[str]:
        return [e.label for e in self.restorative]

    def entry(self, label: str) -> FocusEntry | None:
        """Look up an active or restorative entry by label."""
        for e in self.active + self.restorative:
            if e.label == label:
                return e
        return None
