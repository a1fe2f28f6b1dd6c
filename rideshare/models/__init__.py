"""SQLAlchemy models."""

from rideshare.models.post import Post, PostPassenger
from rideshare.models.report import Report
from rideshare.models.user import User

__all__ = [
    "User",
    "Post",
    "PostPassenger",
    "Report",
]
