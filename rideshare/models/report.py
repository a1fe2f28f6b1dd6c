"""Report model."""

from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from rideshare.database import Base
from rideshare.models.mixins import TimestampMixin


class Report(Base, TimestampMixin):
    """Abuse report filed by one user against another. Never edited after creation."""

    __tablename__ = "reports"

    id = Column(Integer, primary_key=True, index=True)
    reporter_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    reported_email = Column(String(255), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    body = Column(String, nullable=False)

    # Relationships
    reporter = relationship("User", backref="reports")
