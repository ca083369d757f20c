import os
import textwrap
from pathlib import Path
from typing import Callable

import pytest

from src.db.migrations import EnsureMigrated
from src.db.connection import Database
from src.services.persistence import PersistenceService

VALID_COMMAND = """
from src.commands.structures import SlashCommand

command = SlashCommand(description="{description}", options=[])
"""

VALID_CONTEXT_MENU = """
from src.commands.structures import ContextMenu

command = ContextMenu("{description}", target="user")
"""

NOT_A_UNIT = """
command = {"description": "plain dict, not a definition"}
"""


@pytest.fixture()
def temp_db_path(tmp_path_factory: pytest.TempPathFactory):
    # Create a unique temporary database path per test
    tmpdir = tmp_path_factory.mktemp("db")
    db_path = os.path.join(str(tmpdir), "test.db")
    yield db_path
    # SQLite may leave a -journal file next to the database
    for suffix in ("", "-journal"):
        p = db_path + suffix
        if os.path.exists(p):
            os.remove(p)


@pytest.fixture()
def db(temp_db_path: str):
    # Run migrations and return Database instance
    EnsureMigrated(temp_db_path)
    database = Database(temp_db_path)
    # Ensure ORM create_all is idempotent
    database.CreateTables()
    return database


@pytest.fixture()  # type: ignore
def storage(db: Database) -> PersistenceService:
    """Persistence service bound to the temporary test database."""
    return PersistenceService(db)


@pytest.fixture()
def command_root(tmp_path: Path) -> Path:
    """Empty folder acting as the slash-command root."""
    root = tmp_path / "slashcommands"
    root.mkdir()
    return root


@pytest.fixture()
def write_unit() -> Callable[..., Path]:
    """Write a unit file below a root; defaults to a valid slash command named after the file."""

    def _write(root: Path, relative: str, source: str | None = None) -> Path:
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        if source is None:
            source = VALID_COMMAND.format(description=relative)
        path.write_text(textwrap.dedent(source), encoding="utf-8")
        return path

    return _write
