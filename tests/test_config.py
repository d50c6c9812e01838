import pytest
from fastapi.testclient import TestClient

from intranet.config import DEFAULT_SESSION_SECRET, Settings
from intranet.main import create_app
from intranet.resources import search_employees


def test_development_defaults():
    s = Settings(_env_file=None)
    assert s.cookie_name == "sid"
    assert s.session_expire_hours == 1
    assert s.cookie_secure is False
    assert s.uses_default_secret
    # only a warning outside production
    s.check_secret()


def test_production_marks_cookie_secure():
    s = Settings(_env_file=None, environment="production", session_secret_key="k" * 40)
    assert s.cookie_secure is True
    s.check_secret()


@pytest.mark.parametrize("secret", [DEFAULT_SESSION_SECRET, "too-short"])
def test_production_rejects_weak_secret(secret):
    s = Settings(_env_file=None, environment="production", session_secret_key=secret)
    with pytest.raises(RuntimeError):
        s.check_secret()


def test_startup_refuses_default_secret_in_production():
    app = create_app(Settings(_env_file=None, environment="production"))
    with pytest.raises(RuntimeError):
        with TestClient(app):
            pass


def test_search_employees_missing_file(tmp_path):
    assert search_employees(tmp_path / "absent.txt", "a") == []


def test_search_employees_skips_blank_lines(employees_file):
    assert search_employees(employees_file, "") == ["Alice Martin", "Bruno Durand", "Alicia Keys"]
