from dataclasses import dataclass
from typing import Iterable, Optional

from sqlalchemy.orm import Session

from intranet.auth import hash_password, verify_password
from intranet.logger import logger
from intranet.models import User


@dataclass(frozen=True)
class SeedUser:
    username: str
    password: str
    is_admin: bool = False


DEFAULT_SEED_USERS = (
    SeedUser("admin", "adminpass", is_admin=True),
    SeedUser("user", "userpass", is_admin=False),
)

# Verified when the username is unknown so both failure paths cost one argon2 check
_DUMMY_HASH = hash_password("not-a-real-password")


def seed_users(db: Session, seeds: Iterable[SeedUser] = DEFAULT_SEED_USERS) -> int:
    """
    Populate the credential store. Existing usernames are left untouched.
    Returns number of users created.
    """
    created = 0
    for seed in seeds:
        if find_user_by_username(db, seed.username) is not None:
            continue
        db.add(User(
            username=seed.username,
            password_hash=hash_password(seed.password),
            is_admin=seed.is_admin,
        ))
        created += 1
    db.commit()
    logger.info(f"Credential store seeded with {created} user(s)")
    return created


def find_user_by_username(db: Session, username: str) -> Optional[User]:
    if not username:
        return None
    return db.query(User).filter(User.username == username).first()


def get_user(db: Session, user_id: int) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


def authenticate(db: Session, username: str, password: str) -> Optional[User]:
    """
    Return the user if the credentials match, else None.

    Callers must not tell "unknown user" and "wrong password" apart,
    and neither does the timing: an unknown user still pays for a verify.
    """
    user = find_user_by_username(db, username)
    if user is None:
        verify_password(password, _DUMMY_HASH)
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user
