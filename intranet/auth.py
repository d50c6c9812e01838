from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional
from sqlalchemy.orm import Session
from intranet.models import Session as SessionModel

# Argon2id with the library's default cost parameters
ph = PasswordHasher()


def hash_password(password: str) -> str:
    """
    Hash password using Argon2id.

    Only used to seed the credential store at startup.
    Returns hash string that includes algorithm parameters and salt.
    Format: $argon2id$v=19$m=65536,t=3,p=4$salt$hash
    """
    if not password:
        raise ValueError("Password must not be empty")
    return ph.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """
    Verify password against stored hash.

    Returns False for any error to avoid information leakage.
    """
    if not password or not password_hash:
        return False
    try:
        return ph.verify(password_hash, password)
    except (VerificationError, InvalidHashError):
        return False


def _utcnow() -> datetime:
    # SQLite stores naive datetimes; keep everything naive UTC
    return datetime.now(timezone.utc).replace(tzinfo=None)


def generate_session_id() -> str:
    """
    Generate cryptographically secure session identifier.

    Uses 32 bytes (256 bits) of randomness.
    Hex encoded = 64 character string.
    """
    return secrets.token_hex(32)


def create_session(
    db: Session,
    user_id: int,
    is_admin: bool,
    lifetime: timedelta,
    previous_session_id: Optional[str] = None,
) -> str:
    """
    Create new session for user.

    Any session the client presented before logging in is deleted first, so
    an identifier planted before authentication never becomes authenticated.
    Returns session_id to be stored in cookie.
    """
    if previous_session_id:
        db.query(SessionModel).filter(
            SessionModel.session_id == previous_session_id
        ).delete()

    session_id = generate_session_id()
    session = SessionModel(
        session_id=session_id,
        user_id=user_id,
        is_admin=bool(is_admin),
        expires_at=_utcnow() + lifetime,
    )

    db.add(session)
    db.commit()

    return session_id


def resolve_session(db: Session, session_id: str) -> Optional[SessionModel]:
    """
    Look up a live session.

    Returns None if the session doesn't exist or is expired.
    """
    if not session_id:
        return None
    return db.query(SessionModel).filter(
        SessionModel.session_id == session_id,
        SessionModel.expires_at > _utcnow()
    ).first()


def delete_session(db: Session, session_id: str) -> bool:
    """
    Delete session (logout).

    Returns True if session was deleted, False if not found.
    """
    result = db.query(SessionModel).filter(
        SessionModel.session_id == session_id
    ).delete()

    db.commit()
    return result > 0


def cleanup_expired_sessions(db: Session) -> int:
    """
    Remove expired sessions from database.

    Called at startup and on every login.
    Returns number of sessions cleaned up.
    """
    result = db.query(SessionModel).filter(
        SessionModel.expires_at <= _utcnow()
    ).delete()

    db.commit()
    return result
