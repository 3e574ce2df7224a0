from __future__ import annotations

import importlib

from dotenv import load_dotenv

from attendance_tracker.config import get_settings_module
from attendance_tracker.database.bootstrap import DEMO_USERS, ensure_demo_users
from attendance_tracker.database.connection import DBConfig, DatabaseConnection


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(dict(settings.DB_CONFIG)))

    ensure_demo_users(conn)
    print(f"OK: Seeded {len(DEMO_USERS)} demo users -> {conn.config.describe()}")
    for _, name, email, password, role, _ in DEMO_USERS:
        print(f"  {role:<9} {email:<24} {password}  ({name})")


if __name__ == "__main__":
    main()
