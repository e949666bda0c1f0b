import fcntl
import os
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from alembic.config import Config

from alembic import command
from stageflow.utils.logging import logger

PROJECT_ROOT = Path(__file__).resolve().parents[2]
MIGRATION_LOCK_PATH = os.path.join(tempfile.gettempdir(), "stageflow-alembic.lock")


@contextmanager
def migration_lock() -> Iterator[None]:
    """Serialize migrations between workers that start at the same time."""
    with open(MIGRATION_LOCK_PATH, "w", encoding="utf-8") as lock_file:
        fcntl.flock(lock_file, fcntl.LOCK_EX)
        try:
            yield
        finally:
            fcntl.flock(lock_file, fcntl.LOCK_UN)


def get_alembic_config() -> Config:
    alembic_config = Config(str(PROJECT_ROOT / "alembic.ini"))
    alembic_config.set_main_option("script_location", str(PROJECT_ROOT / "alembic"))
    return alembic_config


def alembic_run_migrations(revision: str = "head") -> None:
    with migration_lock():
        logger.info("Upgrading progression tables to revision %s", revision)
        command.upgrade(get_alembic_config(), revision)
