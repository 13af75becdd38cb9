from __future__ import annotations

import importlib
import logging.config
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module
from config.logging import build_logging_config

from src.school_attendance.school_attendance.database import bootstrap
from src.school_attendance.school_attendance.database.bootstrap import apply_seed_sql


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    package = bootstrap.__name__.rpartition(".database")[0]
    logging.config.dictConfig(build_logging_config(getattr(settings, "LOG_LEVEL", "INFO"), package=package))
    db_config = dict(settings.DB_CONFIG)

    apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")
    print(
        "OK: Seeded demo classes, teachers and students -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"
    )


if __name__ == "__main__":
    main()
