"""HTML fragments for the intranet pages. Every interpolated value is escaped."""

from html import escape
from typing import List, Optional

TITLE = "Intranet RH - Demo"


def _page(body: str, title: str = TITLE) -> str:
    return (
        "<!DOCTYPE html>\n"
        f"<html><head><meta charset=\"utf-8\"><title>{escape(title)}</title></head>\n"
        f"<body>\n{body}\n</body></html>\n"
    )


def home_page(username: Optional[str]) -> str:
    who = escape(username) if username else "aucun"
    return _page(f"""
<h1>{TITLE}</h1>
<p>Utilisateur connecté: {who}</p>
<p><a href="/login">/login</a> - <a href="/flag">/flag</a> (protégé) - <a href="/admin">/admin</a> (admin)</p>
<form method="POST" action="/search">
  <input name="q" placeholder="Nom ou partie du nom" />
  <button>Search</button>
</form>
<form method="POST" action="/logout" style="display:inline"><button>Logout</button></form>
""")


def login_page() -> str:
    return _page("""
<h1>Login</h1>
<form method="POST" action="/login">
  <label>username: <input name="username" /></label><br/>
  <label>password: <input type="password" name="password" /></label><br/>
  <button>Se connecter</button>
</form>
""", title="Login")


def logged_in_page(username: str) -> str:
    return _page(
        f"<p>Connecté en tant que <strong>{escape(username)}</strong>. <a href=\"/\">Accueil</a></p>"
    )


def search_results_page(query: str, hits: List[str]) -> str:
    rendered = "\n".join(escape(h) for h in hits) or "Aucun"
    return _page(
        f"<h2>Résultats</h2><p>Query: <code>{escape(query)}</code></p><pre>{rendered}</pre>"
    )


def admin_page(username: str) -> str:
    return _page(
        f"<h1>Console Admin</h1><p>Bienvenue, {escape(username)}.</p>",
        title="Console Admin",
    )


def error_page(status_code: int, detail: str) -> str:
    body = f"<h1>{status_code}</h1><p>{escape(detail)}</p>"
    if status_code == 401:
        body += '<p><a href="/login">Se connecter</a></p>'
    return _page(body, title=str(status_code))
