"""Create database tables and seed the fixed reference data.

Reads DATABASE_URL (or PG* variables) from .env / environment, creates all
registered ORM tables, then inserts the 1819 diaries and the prize
categories if they are missing.

Usage:
  python scripts/create_tables.py
"""

from __future__ import annotations

import os
import pathlib
import sys

from dotenv import load_dotenv

PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT))

from lottery_admin.config import resolve_database_url  # noqa: E402
from lottery_admin.db import create_app_engine, create_schema, create_session_factory  # noqa: E402
from lottery_admin.services.diary_service import DiaryService  # noqa: E402
from lottery_admin.services.winner_service import WinnerService  # noqa: E402


def main() -> int:
    """Create all ORM tables in the target database and seed them."""

    load_dotenv()
    env_local = PROJECT_ROOT / ".env.local"
    if env_local.exists():
        load_dotenv(dotenv_path=env_local, override=True)

    engine = create_app_engine(resolve_database_url())
    create_schema(engine)

    ticket_price = int(os.getenv("TICKET_PRICE", "500"))
    session = create_session_factory(engine)()
    try:
        diaries = DiaryService().seed_diaries(session, ticket_price)
        categories = WinnerService().seed_categories(session)
        session.commit()
    finally:
        session.close()

    print(f"Tables created (or already exist). Seeded {diaries} diaries and {categories} prize categories.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
