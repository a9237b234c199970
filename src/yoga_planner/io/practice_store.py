"""
Per-user local storage for preferences, plans, and the practice log.

Each user gets one directory under the data root:

    <root>/<user_id>/profile.json   preferences
    <root>/<user_id>/plans.json     {"active_plan_id": ..., "plans": [...]}
    <root>/<user_id>/history.jsonl  one SessionRecord per line, by date
"""

import json
import re
from pathlib import Path

from ..core.models import SessionRecord, TrainingPlan, UserPreferences
from .serializers import (
    ValidationError,
    dict_to_plan,
    dict_to_preferences,
    json_line_to_session,
    plan_to_dict,
    preferences_to_dict,
    session_to_json_line,
)

DEFAULT_USER_ID = "local"


def _safe_user_dir_name(user_id: str) -> str:
    """Directory name for a user id (path separators and oddities replaced)."""
    cleaned = re.sub(r"[^A-Za-z0-9_.@-]", "_", user_id).strip(".")
    return cleaned or DEFAULT_USER_ID


class PracticeStore:
    """
    Manages one user's stored data.

    The history log is append-only from the app's point of view; records
    are kept sorted by date on disk.
    """

    def __init__(self, root: str | Path, user_id: str = DEFAULT_USER_ID):
        """
        Initialize the store.

        Args:
            root: Data root directory holding one sub-directory per user
            user_id: User identifier used as the namespace
        """
        self.user_id = user_id
        self.user_dir = Path(root) / _safe_user_dir_name(user_id)
        self.profile_path = self.user_dir / "profile.json"
        self.plans_path = self.user_dir / "plans.json"
        self.history_path = self.user_dir / "history.jsonl"

    def exists(self) -> bool:
        """Check if the user has been initialized."""
        return self.profile_path.exists()

    def init(self) -> None:
        """
        Create the user directory and an empty history file.
        """
        self.user_dir.mkdir(parents=True, exist_ok=True)

        if not self.history_path.exists():
            self.history_path.touch()

    # -------------------------------------------------------------------------
    # Preferences
    # -------------------------------------------------------------------------

    def save_preferences(self, prefs: UserPreferences) -> None:
        """Write preferences to profile.json."""
        self.user_dir.mkdir(parents=True, exist_ok=True)
        with open(self.profile_path, "w") as f:
            json.dump(preferences_to_dict(prefs), f, indent=2)

    def load_preferences(self) -> UserPreferences | None:
        """
        Load preferences from profile.json.

        Returns:
            UserPreferences if file exists and is valid, None otherwise
        """
        if not self.profile_path.exists():
            return None

        try:
            with open(self.profile_path, "r") as f:
                data = json.load(f)
            return dict_to_preferences(data)
        except (json.JSONDecodeError, ValidationError):
            return None

    # -------------------------------------------------------------------------
    # Plans
    # -------------------------------------------------------------------------

    def _read_plans_file(self) -> dict:
        if not self.plans_path.exists():
            return {"active_plan_id": None, "plans": []}
        try:
            with open(self.plans_path, "r") as f:
                data = json.load(f)
        except json.JSONDecodeError:
            return {"active_plan_id": None, "plans": []}
        if not isinstance(data, dict):
            return {"active_plan_id": None, "plans": []}

        plans = data.get("plans")
        active_plan_id = data.get("active_plan_id")
        return {
            "active_plan_id": active_plan_id if isinstance(active_plan_id, str) else None,
            # entries that are not objects cannot be plans; drop them
            "plans": [p for p in plans if isinstance(p, dict)] if isinstance(plans, list) else [],
        }

    def _write_plans_file(self, data: dict) -> None:
        self.user_dir.mkdir(parents=True, exist_ok=True)
        with open(self.plans_path, "w") as f:
            json.dump(data, f, indent=2)

    def load_plans(self) -> list[TrainingPlan]:
        """
        Load all stored plans, oldest first.

        Plans that fail validation are skipped.
        """
        plans: list[TrainingPlan] = []
        for raw in self._read_plans_file()["plans"]:
            try:
                plans.append(dict_to_plan(raw))
            except ValidationError:
                continue
        return plans

    def load_plan(self, plan_id: str) -> TrainingPlan | None:
        """Return the stored plan with the given id, or None."""
        return next((p for p in self.load_plans() if p.id == plan_id), None)

    def get_active_plan_id(self) -> str | None:
        return self._read_plans_file()["active_plan_id"]

    def load_active_plan(self) -> TrainingPlan | None:
        """Return the active plan, or None if no plan is active."""
        plan_id = self.get_active_plan_id()
        if plan_id is None:
            return None
        return self.load_plan(plan_id)

    def save_plan(self, plan: TrainingPlan, make_active: bool = False) -> None:
        """
        Insert or replace a plan (matched by id).

        Args:
            plan: Plan to store
            make_active: Also point the active-plan marker at this plan
        """
        data = self._read_plans_file()
        serialized = plan_to_dict(plan)

        plans = data["plans"]
        for i, raw in enumerate(plans):
            if raw.get("id") == plan.id:
                plans[i] = serialized
                break
        else:
            plans.append(serialized)

        if make_active:
            data["active_plan_id"] = plan.id

        self._write_plans_file(data)

    def set_active_plan(self, plan_id: str | None) -> None:
        """
        Point the active-plan marker at a stored plan (None clears it).

        Raises:
            KeyError: If no stored plan has that id
        """
        data = self._read_plans_file()
        if plan_id is not None and not any(p.get("id") == plan_id for p in data["plans"]):
            raise KeyError(f"No stored plan with id {plan_id!r}")
        data["active_plan_id"] = plan_id
        self._write_plans_file(data)

    # -------------------------------------------------------------------------
    # Practice log
    # -------------------------------------------------------------------------

    def load_history(self) -> list[SessionRecord]:
        """
        Load all session records.

        Returns:
            List of SessionRecord, sorted by date

        Raises:
            FileNotFoundError: If history file doesn't exist
            ValidationError: If a line cannot be parsed
        """
        if not self.history_path.exists():
            raise FileNotFoundError(
                f"History file not found: {self.history_path}. Run 'init' first."
            )

        records: list[SessionRecord] = []

        with open(self.history_path, "r") as f:
            for line_num, line in enumerate(f, 1):
                line = line.strip()
                if not line:
                    continue

                try:
                    records.append(json_line_to_session(line))
                except ValidationError as e:
                    raise ValidationError(
                        f"Error parsing line {line_num} in {self.history_path}: {e}"
                    ) from e

        records.sort(key=lambda r: r.date)

        return records

    def append_session(self, record: SessionRecord) -> None:
        """
        Append a session record, keeping the file in date order.

        Records on the same date keep their insertion order.

        Raises:
            FileNotFoundError: If history file doesn't exist
            ValueError: If a record with the same id is already stored
        """
        records = self.load_history()

        if any(r.id == record.id for r in records):
            raise ValueError(f"Session {record.id!r} is already logged")

        insert_idx = len(records)
        for i, existing in enumerate(records):
            if record.date < existing.date:
                insert_idx = i
                break
        records.insert(insert_idx, record)

        self._write_history(records)

    def _write_history(self, records: list[SessionRecord]) -> None:
        with open(self.history_path, "w") as f:
            for record in records:
                f.write(session_to_json_line(record) + "\n")


def get_default_data_root() -> Path:
    """Default data root: ~/.yoga-planner/users"""
    return Path.home() / ".yoga-planner" / "users"
