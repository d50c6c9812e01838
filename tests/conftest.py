from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from intranet.config import Settings
from intranet.main import create_app

FLAG_BYTES = b"FLAG{test_flag_bytes}\n"
STRONG_SECRET = "s" * 48


@pytest.fixture()
def protected_dir(tmp_path: Path) -> Path:
    """Protected directory holding the flag artifact."""
    d = tmp_path / "public"
    d.mkdir()
    (d / "flag.txt").write_bytes(FLAG_BYTES)
    return d


@pytest.fixture()
def employees_file(tmp_path: Path) -> Path:
    p = tmp_path / "users.txt"
    p.write_text("Alice Martin\nBruno Durand\n\nAlicia Keys\n", encoding="utf-8")
    return p


@pytest.fixture()
def settings(protected_dir: Path, employees_file: Path) -> Settings:
    return Settings(
        _env_file=None,
        environment="development",
        session_secret_key=STRONG_SECRET,
        database_url="sqlite://",
        protected_dir=str(protected_dir),
        employees_path=str(employees_file),
    )


@pytest.fixture()
def app(settings: Settings):
    # Fresh app per test: its own in-memory credential and session stores
    return create_app(settings)


@pytest.fixture()
def client(app):
    with TestClient(app) as c:
        yield c
