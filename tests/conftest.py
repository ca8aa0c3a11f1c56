"""
pytest configuration and fixtures.
"""
import json
from pathlib import Path
from typing import Callable, Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from users_api.config import Settings
from users_api.main import create_app

JWT_SECRET = "test-secret-that-is-at-least-32-bytes-long"

CAMILO = {"id": 1, "name": "Camilo", "email": "camilo@example.com"}
CRISTINA = {"id": 2, "name": "Cristina", "email": "cristina@example.com"}


@pytest.fixture
def users_file(tmp_path: Path) -> Path:
    """Backing document seeded with a single user."""
    path = tmp_path / "users.json"
    path.write_text(json.dumps([CAMILO], indent=2), encoding="utf-8")
    return path


@pytest.fixture
def write_users(users_file: Path) -> Callable[[list], None]:
    def write(users: list) -> None:
        users_file.write_text(json.dumps(users, indent=2), encoding="utf-8")
    return write


@pytest.fixture
def stored_users(users_file: Path) -> Callable[[], list]:
    def read() -> list:
        return json.loads(users_file.read_text(encoding="utf-8"))
    return read


@pytest.fixture
def settings(users_file: Path) -> Settings:
    return Settings(
        _env_file=None,
        users_file=users_file,
        database_url="sqlite://",
        jwt_secret=JWT_SECRET,
        node_env="test",
        port=3000,
    )


@pytest.fixture
def app(settings: Settings) -> FastAPI:
    return create_app(settings)


@pytest.fixture
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
