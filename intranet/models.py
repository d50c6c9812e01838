from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.sql import func
from intranet.database import Base


class User(Base):
    """
    Intranet account. Seeded at startup, read-only afterwards.

    - username is unique and case-sensitive
    - password_hash is an argon2id digest and never leaves the server
    - is_admin grants access to /flag and /admin
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(150), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    is_admin = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<User(id={self.id}, username={self.username}, is_admin={self.is_admin})>"


class Session(Base):
    """
    Server-side session storage.

    - session_id is the opaque token carried (signed) in the sid cookie
    - is_admin is a snapshot of the user's role at login time
    - expires_at is fixed at creation; it does not slide with activity

    Session lifecycle:
    1. Created on login, replacing any session the client presented
    2. Validated on each request against expires_at
    3. Deleted on logout or purged after expiration
    """
    __tablename__ = "sessions"

    id = Column(Integer, primary_key=True, index=True)
    session_id = Column(String(64), unique=True, nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    is_admin = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    expires_at = Column(DateTime, nullable=False, index=True)

    __table_args__ = (
        Index('ix_session_lookup', 'session_id', 'expires_at'),
    )

    def __repr__(self):
        return f"<Session(id={self.id}, user_id={self.user_id}, is_admin={self.is_admin})>"
