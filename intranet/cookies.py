from typing import Optional

from fastapi import Response
from itsdangerous import BadSignature, URLSafeTimedSerializer

from intranet.config import Settings

COOKIE_SALT = "intranet.session.v1"


def _serializer(settings: Settings) -> URLSafeTimedSerializer:
    return URLSafeTimedSerializer(secret_key=settings.session_secret_key, salt=COOKIE_SALT)


def sign_session_id(settings: Settings, session_id: str) -> str:
    return _serializer(settings).dumps(session_id)


def unsign_session_id(settings: Settings, token: Optional[str]) -> Optional[str]:
    """
    Recover the session id from a cookie value.
    Returns None for a missing, tampered or expired token.
    """
    if not token:
        return None
    try:
        session_id = _serializer(settings).loads(
            token, max_age=settings.session_expire_hours * 3600
        )
    except BadSignature:
        return None
    if not isinstance(session_id, str) or not session_id:
        return None
    return session_id


def set_session_cookie(response: Response, settings: Settings, session_id: str):
    """
    Set session cookie with security flags.

    The cookie only carries the signed session id (opaque token).
    All user data stays server-side.
    """
    response.set_cookie(
        key=settings.cookie_name,
        value=sign_session_id(settings, session_id),
        httponly=True,
        secure=settings.cookie_secure,
        samesite=settings.cookie_samesite,
        max_age=settings.session_expire_hours * 3600,
        path="/",
    )


def clear_session_cookie(response: Response, settings: Settings):
    response.delete_cookie(
        key=settings.cookie_name,
        path="/",
        httponly=True,
        secure=settings.cookie_secure,
        samesite=settings.cookie_samesite,
    )
