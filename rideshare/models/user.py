"""User model."""

from sqlalchemy import Boolean, Column, Integer, String

from rideshare.database import Base
from rideshare.models.mixins import TimestampMixin


class User(Base, TimestampMixin):
    """A rider or driver, created on first verified login."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    name = Column(String(255), nullable=True)
    phnum = Column(String(32), nullable=True)  # set by /users/register
    banned = Column(Boolean, default=False, nullable=False)
    fcm_token = Column(String(512), nullable=True)

    @property
    def is_registered(self) -> bool:
        """A user finishes registration once a phone number is attached."""
        return self.phnum is not None
