"""Create the database and tables: ``python scripts/init_db.py [--env testing]``."""
from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

import click
from dotenv import load_dotenv

from config import get_settings_module

from src.shift_attendance.shift_attendance.database.bootstrap import apply_schema
from src.shift_attendance.shift_attendance.main import configure_logging


@click.command()
@click.option("--env", default=None, help="Settings to use (development, testing, production); defaults to APP_ENV.")
@click.option(
    "--schema",
    "schema_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Schema file to apply; defaults to the one bundled with the package.",
)
def main(env: str | None, schema_path: Path | None) -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module(env))
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    db_config = dict(settings.DB_CONFIG)
    source = schema_path.name if schema_path else "schema.sql"

    count = apply_schema(db_config, schema_path=schema_path)
    click.echo(
        f"Applied {count} statement(s) from {source} -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"
    )


if __name__ == "__main__":
    main()
