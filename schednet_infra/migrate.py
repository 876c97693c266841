from pathlib import Path
import logging

from alembic import command
from alembic.config import Config

logger = logging.getLogger(__name__)


def _project_root() -> Path:
    # schednet_infra/migrate.py -> schednet_infra -> project root
    return Path(__file__).resolve().parents[1]


def run_migrations(db_url: str) -> None:
    """Upgrade the database at db_url to the latest revision in migration/."""
    script_location = _project_root() / "migration"
    alembic_ini = script_location / "alembic.ini"

    if not script_location.exists():
        raise RuntimeError(f"Alembic script_location missing: {script_location}")
    if not alembic_ini.exists():
        raise RuntimeError(f"Alembic config missing: {alembic_ini}")

    cfg = Config(str(alembic_ini))
    cfg.set_main_option("script_location", str(script_location))
    cfg.set_main_option("sqlalchemy.url", db_url)

    logger.info("Running migrations against %s", db_url)
    command.upgrade(cfg, "head")
