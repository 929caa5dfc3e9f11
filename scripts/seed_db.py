from __future__ import annotations

import argparse
import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.timeclock.timeclock.database.bootstrap import ensure_demo_admin


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Create the admin account, or reset its password and ADMIN role if it already exists."
    )
    parser.add_argument("--username", default="admin")
    parser.add_argument("--password", default="admin123")
    args = parser.parse_args()

    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)
    ensure_demo_admin(db_config, username=args.username, password=args.password)

    print(f"OK: admin account '{args.username}' ready in {db_config.get('database')}")


if __name__ == "__main__":
    main()
