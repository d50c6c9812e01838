from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from intranet.config import Settings
from intranet.main import create_app
from intranet.resources import ArtifactMissing, ArtifactUnreadable, open_artifact
from intranet.users import find_user_by_username
from conftest import FLAG_BYTES


def login(client: TestClient, username: str, password: str):
    return client.post("/login", data={"username": username, "password": password})


def test_flag_without_session_is_401(client):
    r = client.get("/flag")
    assert r.status_code == 401
    assert 'href="/login"' in r.text


def test_flag_non_admin_is_403(client):
    login(client, "user", "userpass")
    assert client.get("/flag").status_code == 403


def test_flag_admin_gets_exact_bytes(client):
    login(client, "admin", "adminpass")
    r = client.get("/flag")
    assert r.status_code == 200
    assert r.content == FLAG_BYTES
    disposition = r.headers["content-disposition"]
    assert disposition.startswith("attachment")
    assert 'filename="flag.txt"' in disposition


def test_flag_missing_artifact_is_404(client, protected_dir):
    (protected_dir / "flag.txt").unlink()
    login(client, "admin", "adminpass")
    r = client.get("/flag")
    assert r.status_code == 404
    assert str(protected_dir) not in r.text


def test_flag_read_error_is_500(client, monkeypatch, protected_dir):
    real_open = Path.open

    def _denied(self, *args, **kwargs):
        if self.name == "flag.txt":
            raise PermissionError(13, "Permission denied", str(self))
        return real_open(self, *args, **kwargs)

    login(client, "admin", "adminpass")
    monkeypatch.setattr(Path, "open", _denied)
    r = client.get("/flag")
    assert r.status_code == 500
    assert "Erreur lecture flag" in r.text
    assert "Permission denied" not in r.text
    assert str(protected_dir) not in r.text


def test_open_artifact_maps_os_errors(tmp_path, monkeypatch):
    artifact = tmp_path / "flag.txt"
    with pytest.raises(ArtifactMissing):
        open_artifact(artifact)

    artifact.write_bytes(FLAG_BYTES)
    assert open_artifact(artifact).st_size == len(FLAG_BYTES)

    def _denied(self, *args, **kwargs):
        raise PermissionError(13, "Permission denied", str(self))

    monkeypatch.setattr(Path, "open", _denied)
    with pytest.raises(ArtifactUnreadable):
        open_artifact(artifact)


def test_live_session_without_user_is_403_for_admin_routes(client):
    login(client, "admin", "adminpass")

    db = client.app.state.session_factory()
    try:
        db.delete(find_user_by_username(db, "admin"))
        db.commit()
    finally:
        db.close()

    assert client.get("/flag").status_code == 403
    assert client.get("/admin").status_code == 403


def test_unhandled_error_page_keeps_security_headers(app, monkeypatch):
    def _crash(username):
        raise RuntimeError("internal detail")

    monkeypatch.setattr("intranet.routers.intranet_router.home_page", _crash)
    with TestClient(app, raise_server_exceptions=False) as c:
        r = c.get("/")
    assert r.status_code == 500
    assert "Erreur interne" in r.text
    assert "internal detail" not in r.text
    assert r.headers["x-content-type-options"] == "nosniff"
    assert r.headers["x-frame-options"] == "DENY"


def test_revoked_admin_is_rejected_despite_session_snapshot(client):
    login(client, "admin", "adminpass")
    assert client.get("/flag").status_code == 200

    db = client.app.state.session_factory()
    try:
        admin = find_user_by_username(db, "admin")
        admin.is_admin = False
        db.commit()
    finally:
        db.close()

    assert client.get("/flag").status_code == 403


def test_admin_console(client):
    assert client.get("/admin").status_code == 401
    login(client, "user", "userpass")
    assert client.get("/admin").status_code == 403
    login(client, "admin", "adminpass")
    r = client.get("/admin")
    assert r.status_code == 200
    assert "Console Admin" in r.text


def test_admin_query_token_no_longer_grants_access(client):
    assert client.get("/admin", params={"token": "admintoken123"}).status_code == 401


def test_search_requires_login(client):
    assert client.post("/search", data={"q": "ali"}).status_code == 401


def test_search_matches_case_insensitively(client):
    login(client, "user", "userpass")
    r = client.post("/search", data={"q": "ALI"})
    assert r.status_code == 200
    assert "Alice Martin" in r.text
    assert "Alicia Keys" in r.text
    assert "Bruno Durand" not in r.text


def test_search_escapes_query(client):
    login(client, "user", "userpass")
    r = client.post("/search", data={"q": "<script>alert(1)</script>"})
    assert r.status_code == 200
    assert "<script>" not in r.text
    assert "&lt;script&gt;" in r.text
    assert "Aucun" in r.text


def test_sessions_are_isolated_between_apps(settings: Settings):
    with TestClient(create_app(settings)) as first:
        login(first, "admin", "adminpass")
        cookie = first.cookies.get("sid")

    with TestClient(create_app(settings)) as second:
        second.cookies.set("sid", cookie)
        assert second.get("/flag").status_code == 401


@pytest.mark.parametrize("path", ["/flag", "/admin", "/me"])
def test_gates_answer_html_not_json(client, path):
    r = client.get(path)
    assert r.status_code == 401
    assert r.headers["content-type"].startswith("text/html")
