from datetime import timedelta
from typing import Optional

from fastapi import APIRouter, Depends, Form, HTTPException, status
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from intranet.auth import cleanup_expired_sessions, create_session, delete_session
from intranet.config import Settings
from intranet.cookies import clear_session_cookie, set_session_cookie
from intranet.database import get_db
from intranet.dependencies import get_app_settings, get_session_id, require_login
from intranet.logger import logger
from intranet.models import User
from intranet.pages import logged_in_page, login_page
from intranet.schemas import UserResponse
from intranet.users import authenticate

router = APIRouter(tags=["auth"])

# One message for every credential failure so usernames cannot be enumerated
INVALID_CREDENTIALS = "Identifiants invalides"


@router.get("/login", response_class=HTMLResponse)
async def login_form():
    return login_page()


@router.post("/login", response_class=HTMLResponse)
def login(
    username: str = Form(""),
    password: str = Form(""),
    previous_session_id: Optional[str] = Depends(get_session_id),
    settings: Settings = Depends(get_app_settings),
    db: Session = Depends(get_db),
):
    """
    Authenticate user and create session.

    Process:
    1. Require both fields
    2. Look up user and verify password hash
    3. Replace any session the client already had with a fresh one
    4. Set cookie

    Error cases:
    - 400: username or password missing
    - 401: unknown user or wrong password (same response for both)
    - 500: session store failure

    Declared sync so argon2 verification runs in the threadpool.
    """
    if not username or not password:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="username & password requis"
        )

    user = authenticate(db, username, password)
    if user is None:
        logger.info("Failed login attempt")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=INVALID_CREDENTIALS
        )

    try:
        cleanup_expired_sessions(db)
        session_id = create_session(
            db,
            user.id,
            user.is_admin,
            lifetime=timedelta(hours=settings.session_expire_hours),
            previous_session_id=previous_session_id,
        )
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Session regenerate error")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Erreur session"
        )

    logger.info(f"User {user.username!r} logged in (admin={user.is_admin})")
    response = HTMLResponse(logged_in_page(user.username))
    set_session_cookie(response, settings, session_id)
    return response


@router.post("/logout")
def logout(
    session_id: Optional[str] = Depends(get_session_id),
    settings: Settings = Depends(get_app_settings),
    db: Session = Depends(get_db),
):
    """
    Invalidate session and clear cookie.

    Redirects to / even if no session existed (idempotent).
    """
    if session_id:
        try:
            delete_session(db, session_id)
        except SQLAlchemyError:
            db.rollback()
            logger.exception("Session destroy error")

    response = RedirectResponse(url="/", status_code=status.HTTP_302_FOUND)
    clear_session_cookie(response, settings)
    return response


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(user: User = Depends(require_login)):
    """
    Get authenticated user's information.
    Returns 401 if not authenticated (handled by dependency).
    """
    return user
