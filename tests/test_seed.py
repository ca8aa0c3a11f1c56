"""Tests for the sample-data seeding."""
import json

from sqlalchemy import select
from sqlalchemy.orm import Session

from users_api.database import User, create_db_engine
from users_api.models import Role
from users_api.seed import SAMPLE_USERS, seed_database, seed_users_file


def test_seed_database_is_repeatable():
    engine = create_db_engine("sqlite://")
    assert seed_database(engine) == len(SAMPLE_USERS)
    assert seed_database(engine) == 0

    with Session(engine) as session:
        users = session.scalars(select(User).order_by(User.id)).all()
    assert [user.email for user in users] == ["camilo@example.com", "cristina@example.com"]
    assert all(user.role is Role.USER for user in users)
    engine.dispose()


def test_seed_users_file(tmp_path):
    path = tmp_path / "users.json"
    assert seed_users_file(path)
    users = json.loads(path.read_text(encoding="utf-8"))
    assert users == [
        {"id": 1, "name": "Camilo", "email": "camilo@example.com"},
        {"id": 2, "name": "Cristina", "email": "cristina@example.com"},
    ]


def test_seed_users_file_keeps_existing(tmp_path):
    path = tmp_path / "users.json"
    path.write_text("[]", encoding="utf-8")
    assert not seed_users_file(path)
    assert path.read_text(encoding="utf-8") == "[]"
