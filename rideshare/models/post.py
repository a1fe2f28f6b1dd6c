"""Post models."""

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from rideshare.database import Base
from rideshare.models.mixins import TimestampMixin


class Post(Base, TimestampMixin):
    """A ride offer or request with one driver slot and a fixed number of seats."""

    __tablename__ = "posts"

    id = Column(Integer, primary_key=True, index=True)
    departure_time = Column(DateTime(timezone=True), nullable=False, index=True)
    origin = Column(String(255), nullable=False, index=True)
    destination = Column(String(255), nullable=False, index=True)
    memo = Column(String, nullable=True)
    driver_needed = Column(Boolean, default=False, nullable=False)
    driver_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    driver_avail = Column(Integer, nullable=True)  # seats offered by a volunteering driver
    uploader_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    total_seats = Column(Integer, nullable=False)
    # Mirrors len(passengers); the seat check is a conditional UPDATE on this column
    passenger_count = Column(Integer, default=0, nullable=False)

    # Relationships
    driver = relationship("User", foreign_keys=[driver_id])
    uploader = relationship("User", foreign_keys=[uploader_id])
    passengers = relationship(
        "PostPassenger",
        back_populates="post",
        order_by=lambda: [PostPassenger.position, PostPassenger.id],
        cascade="all, delete-orphan",
    )

    @property
    def passenger_ids(self) -> list[int]:
        """Passenger user IDs in the order they joined."""
        return [p.user_id for p in self.passengers]

    @property
    def participant_ids(self) -> list[int]:
        """Uploader, driver and passengers, each listed once."""
        ids = [self.uploader_id]
        if self.driver_id is not None:
            ids.append(self.driver_id)
        ids.extend(self.passenger_ids)
        return list(dict.fromkeys(ids))

    @property
    def has_free_seat(self) -> bool:
        return self.passenger_count < self.total_seats


class PostPassenger(Base, TimestampMixin):
    """A passenger slot on a post."""

    __tablename__ = "post_passengers"
    __table_args__ = (UniqueConstraint("post_id", "user_id", name="uq_post_passenger"),)

    id = Column(Integer, primary_key=True, index=True)
    post_id = Column(Integer, ForeignKey("posts.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)

    # Relationships
    post = relationship("Post", back_populates="passengers")
    user = relationship("User", backref="passenger_slots")
