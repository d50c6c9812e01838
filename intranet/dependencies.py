from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from intranet.auth import resolve_session
from intranet.config import Settings
from intranet.cookies import unsign_session_id
from intranet.database import get_db
from intranet.models import Session as SessionModel
from intranet.models import User
from intranet.users import get_user


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_session_id(
    request: Request,
    settings: Settings = Depends(get_app_settings),
) -> Optional[str]:
    """Session id from the signed sid cookie, or None."""
    return unsign_session_id(settings, request.cookies.get(settings.cookie_name))


def get_current_session(
    session_id: Optional[str] = Depends(get_session_id),
    db: Session = Depends(get_db),
) -> Optional[SessionModel]:
    return resolve_session(db, session_id) if session_id else None


def get_optional_user(
    session: Optional[SessionModel] = Depends(get_current_session),
    db: Session = Depends(get_db),
) -> Optional[User]:
    if session is None:
        return None
    return get_user(db, session.user_id)


def _unauthenticated() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Vous devez être connecté pour accéder à cette page.",
    )


def require_session(
    session: Optional[SessionModel] = Depends(get_current_session),
) -> SessionModel:
    """Returns 401 if there is no live session."""
    if session is None:
        raise _unauthenticated()
    return session


def require_login(
    session: SessionModel = Depends(require_session),
    user: Optional[User] = Depends(get_optional_user),
) -> User:
    """
    Gate: an authenticated session is required.
    A session whose user has disappeared counts as no session.
    """
    if user is None:
        raise _unauthenticated()
    return user


def require_admin(
    session: SessionModel = Depends(require_session),
    user: Optional[User] = Depends(get_optional_user),
) -> User:
    """
    Gate: an authenticated session whose user is an admin.

    401 without a session; 403 when the session's user is missing or not
    an admin. The role is read from the credential store on each request
    rather than from the snapshot stored in the session, so a revoked role
    takes effect immediately.
    """
    if user is None or not user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Accès refusé",
        )
    return user
