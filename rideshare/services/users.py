"""User lookups and registration updates."""

import logging

from sqlalchemy.orm import Session

from rideshare.models.user import User

logger = logging.getLogger(__name__)


def get_user(db: Session, user_id: int) -> User | None:
    """Get a user by ID."""
    return db.query(User).filter(User.id == user_id).first()


def get_user_by_email(db: Session, email: str) -> User | None:
    """Get a user by email."""
    return db.query(User).filter(User.email == email.lower()).first()


def create_user(db: Session, email: str, name: str | None = None) -> User:
    """Create a user who has signed in but not yet registered a phone number."""
    user = User(email=email.lower(), name=name)
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info(f"Created user {user.id} for {user.email}")
    return user


def set_phone_number(db: Session, user_id: int, phnum: str) -> User | None:
    """Attach a phone number, completing registration."""
    user = get_user(db, user_id)
    if user is None:
        return None
    user.phnum = phnum
    db.commit()
    db.refresh(user)
    logger.info(f"Registered phone number for user {user_id}")
    return user


def set_fcm_token(db: Session, user_id: int, token: str) -> User | None:
    """Store the push token for the user's device."""
    user = get_user(db, user_id)
    if user is None:
        return None
    user.fcm_token = token
    db.commit()
    db.refresh(user)
    logger.info(f"Registered an FCM token for user {user_id}")
    return user
