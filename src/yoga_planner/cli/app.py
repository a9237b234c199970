"""Shared Typer app object, shared option types, and store utility."""

from pathlib import Path
from typing import Annotated, Optional

import typer

from ..io.practice_store import DEFAULT_USER_ID, PracticeStore, get_default_data_root

# Shared --user / --data-dir option types used across all commands
UserOption = Annotated[
    str,
    typer.Option("--user", "-u", help="User id whose data to use (default: local)"),
]
DataDirOption = Annotated[
    Optional[Path],
    typer.Option("--data-dir", help="Data root directory (default: ~/.yoga-planner/users)"),
]

app = typer.Typer(
    name="yoga-planner",
    help="Personal yoga practice planner: 4-week plans adapted to your goal and body.",
    no_args_is_help=True,
)


def get_store(data_dir: Path | None, user_id: str = DEFAULT_USER_ID) -> PracticeStore:
    """Get the practice store for a user from the given or default data root."""
    if data_dir is None:
        data_dir = get_default_data_root()
    return PracticeStore(data_dir, user_id=user_id)
