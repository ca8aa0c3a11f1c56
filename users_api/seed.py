"""
Seed sample users.

    python -m users_api.seed

Creates the database tables, inserts the sample users that are not already
present (matched by email) and writes ``users.json`` if it does not exist.
"""
import logging
import sys
from pathlib import Path
from typing import Union

from sqlalchemy import select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from users_api.config import configure_logging, get_settings
from users_api.data_store import JsonUserStore
from users_api.database import User, create_db_engine, create_tables
from users_api.models import Role

logger = logging.getLogger(__name__)

SAMPLE_USERS = [
    {"name": "Camilo", "email": "camilo@example.com"},
    {"name": "Cristina", "email": "cristina@example.com"},
]
# passwords are stored as given; hashing is out of scope
DEFAULT_PASSWORD = "changeme"


def seed_database(engine: Engine) -> int:
    """Insert the sample users missing from the database. Returns how many were added."""
    create_tables(engine)
    with Session(engine) as session, session.begin():
        existing = set(session.scalars(select(User.email)).all())
        new_users = [
            User(name=user["name"], email=user["email"], password=DEFAULT_PASSWORD, role=Role.USER)
            for user in SAMPLE_USERS
            if user["email"] not in existing
        ]
        session.add_all(new_users)
    return len(new_users)


def seed_users_file(path: Union[str, Path]) -> bool:
    """Write the sample users (ids 1..n) to ``path`` unless it already exists."""
    path = Path(path)
    if path.exists():
        return False
    users = [{"id": i, **user} for i, user in enumerate(SAMPLE_USERS, start=1)]
    JsonUserStore(path).save_all(users)
    return True


def main() -> int:
    settings = get_settings()
    configure_logging(settings.log_level)
    engine = create_db_engine(settings.database_url)
    try:
        added = seed_database(engine)
    except SQLAlchemyError:
        logger.exception("Seeding the database failed")
        return 1
    finally:
        engine.dispose()
    logger.info("Inserted %d users into the database", added)

    if seed_users_file(settings.users_file):
        logger.info("Wrote sample users to %s", settings.users_file)
    return 0


if __name__ == "__main__":
    sys.exit(main())
