"""Post lifecycle: creation, slot assignment, edits and queries."""

import logging

from sqlalchemy import func, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from rideshare.models.post import Post, PostPassenger
from rideshare.models.user import User
from rideshare.schemas.post import PostCreate, PostDocument, PostEdit

logger = logging.getLogger(__name__)

# Search keyword that matches every origin or destination
SEARCH_ANY = "any"

# Fields that may not be cleared by a partial edit
REQUIRED_EDIT_FIELDS = {"departure_time", "origin", "destination", "total_seats"}


class PostActionError(ValueError):
    """A post mutation was refused. The message is shown to the client."""


class PostNotFoundError(PostActionError):
    def __init__(self, post_id: int) -> None:
        super().__init__("post not found")
        self.post_id = post_id


class SlotUnavailableError(PostActionError):
    """The driver or passenger slot the caller asked for is not free."""


class PostService:
    """Service for post-related operations.

    Slot assignment (add_passenger, add_driver) is done with a conditional
    UPDATE so that two riders racing for the last seat cannot both win.
    Full replacement via ``replace`` is last-write-wins.
    """

    def __init__(self, db: Session):
        self.db = db

    def get(self, post_id: int) -> Post | None:
        return self.db.query(Post).filter(Post.id == post_id).first()

    def _require_users(self, user_ids: list[int]) -> None:
        """Refuse references to users that do not exist."""
        wanted = set(user_ids)
        if not wanted:
            return
        found = {uid for (uid,) in self.db.query(User.id).filter(User.id.in_(wanted))}
        missing = sorted(wanted - found)
        if missing:
            raise PostActionError(f"unknown user {missing[0]}")

    def get_or_raise(self, post_id: int) -> Post:
        post = self.get(post_id)
        if post is None:
            raise PostNotFoundError(post_id)
        return post

    def list_all(self) -> list[Post]:
        return self.db.query(Post).order_by(Post.departure_time).all()

    def search(self, origin: str, destination: str) -> list[Post]:
        """Find posts between two places. ``any`` leaves that side unfiltered."""
        query = self.db.query(Post)
        if origin.strip().lower() != SEARCH_ANY:
            query = query.filter(func.lower(Post.origin) == origin.strip().lower())
        if destination.strip().lower() != SEARCH_ANY:
            query = query.filter(func.lower(Post.destination) == destination.strip().lower())
        return query.order_by(Post.departure_time).all()

    def for_user(self, user_id: int) -> list[Post]:
        """Posts the user uploaded, drives, or rides in."""
        riding = select(PostPassenger.post_id).where(PostPassenger.user_id == user_id)
        return (
            self.db.query(Post)
            .filter(
                or_(
                    Post.uploader_id == user_id,
                    Post.driver_id == user_id,
                    Post.id.in_(riding),
                )
            )
            .order_by(Post.departure_time)
            .all()
        )

    def create(self, data: PostCreate, user_id: int) -> Post:
        """Create a post uploaded by ``user_id``.

        The uploader takes the first slot: a passenger seat when the post asks
        for a driver, the driver seat otherwise.
        """
        passengers = list(data.passengers)
        if data.driver_needed:
            driver_id = None
            if user_id not in passengers:
                passengers.append(user_id)
        else:
            driver_id = user_id
            if user_id in passengers:
                raise PostActionError("driver cannot also be a passenger")

        if len(passengers) > data.total_seats:
            raise PostActionError("more passengers than total_seats")
        self._require_users(passengers)

        post = Post(
            departure_time=data.departure_time,
            origin=data.origin,
            destination=data.destination,
            memo=data.memo,
            driver_needed=data.driver_needed,
            driver_id=driver_id,
            uploader_id=user_id,
            total_seats=data.total_seats,
            passenger_count=len(passengers),
        )
        post.passengers = [
            PostPassenger(user_id=uid, position=position) for position, uid in enumerate(passengers)
        ]
        self.db.add(post)
        self.db.commit()
        self.db.refresh(post)

        logger.info(
            f"User {user_id} created post {post.id} ({post.origin} -> {post.destination}), "
            f"driver_needed={post.driver_needed}"
        )
        return post

    def add_passenger(self, post_id: int, user_id: int) -> Post:
        """Seat ``user_id`` on a post that has a driver and a free seat."""
        post = self.get_or_raise(post_id)
        if post.driver_id == user_id:
            raise SlotUnavailableError("the driver cannot join as a passenger")
        if user_id in post.passenger_ids:
            raise SlotUnavailableError("already a passenger on this post")
        position = post.passenger_count

        claimed = self.db.execute(
            update(Post)
            .where(
                Post.id == post_id,
                Post.driver_id.is_not(None),
                Post.passenger_count < Post.total_seats,
            )
            .values(passenger_count=Post.passenger_count + 1)
            .execution_options(synchronize_session=False)
        ).rowcount

        if not claimed:
            self.db.rollback()
            self.db.refresh(post)
            reason = "post has no driver" if post.driver_id is None else "post is full"
            logger.info(f"User {user_id} could not join post {post_id}: {reason}")
            raise SlotUnavailableError(reason)

        self.db.add(PostPassenger(post_id=post_id, user_id=user_id, position=position))
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise SlotUnavailableError("already a passenger on this post") from e

        self.db.refresh(post)
        logger.info(f"User {user_id} joined post {post_id} as a passenger")
        return post

    def add_driver(self, post_id: int, user_id: int, avail: int | None = None) -> Post:
        """Make ``user_id`` the driver of a post that has none.

        ``avail`` is the number of seats the driver can offer. When given it
        becomes the post's seat count and must cover the riders already on board.
        """
        post = self.get_or_raise(post_id)
        if user_id in post.passenger_ids:
            raise SlotUnavailableError("a passenger cannot drive the same post")

        conditions = [Post.id == post_id, Post.driver_id.is_(None)]
        values: dict = {"driver_id": user_id, "driver_avail": avail, "driver_needed": False}
        if avail is not None:
            conditions.append(Post.passenger_count <= avail)
            values["total_seats"] = avail

        claimed = self.db.execute(
            update(Post)
            .where(*conditions)
            .values(**values)
            .execution_options(synchronize_session=False)
        ).rowcount

        if not claimed:
            self.db.rollback()
            self.db.refresh(post)
            if post.driver_id is not None:
                reason = "post already has a driver"
            else:
                reason = "not enough seats for the current passengers"
            logger.info(f"User {user_id} could not drive post {post_id}: {reason}")
            raise SlotUnavailableError(reason)

        self.db.commit()
        self.db.refresh(post)
        logger.info(f"User {user_id} is now driving post {post_id}")
        return post

    def replace(self, document: PostDocument) -> Post:
        """Overwrite every client-controlled field of a post.

        The uploader and creation time stay as stored.
        """
        post = self.get_or_raise(document.id)
        referenced = list(document.passengers)
        if document.driver is not None:
            referenced.append(document.driver)
        self._require_users(referenced)

        post.departure_time = document.departure_time
        post.origin = document.origin
        post.destination = document.destination
        post.memo = document.memo
        post.driver_needed = document.driver_needed
        post.driver_id = document.driver
        post.driver_avail = document.driver_avail
        post.total_seats = document.total_seats

        # Reuse rows for riders who stay so the unique (post, user) pair is never
        # inserted before the old row is deleted
        existing = {p.user_id: p for p in post.passengers}
        slots = []
        for position, uid in enumerate(document.passengers):
            slot = existing.get(uid) or PostPassenger(user_id=uid)
            slot.position = position
            slots.append(slot)
        post.passengers = slots
        post.passenger_count = len(slots)

        self.db.commit()
        self.db.refresh(post)
        logger.info(f"Replaced post {post.id}")
        return post

    def edit(self, post_id: int, changes: PostEdit) -> Post:
        """Apply a partial edit. The seat count may not drop below the riders on board."""
        values = {
            field: value
            for field, value in changes.model_dump(exclude_unset=True).items()
            if value is not None or field not in REQUIRED_EDIT_FIELDS
        }
        if not values:
            return self.get_or_raise(post_id)

        stmt = update(Post).where(Post.id == post_id)
        if "total_seats" in values:
            stmt = stmt.where(Post.passenger_count <= values["total_seats"])

        edited = self.db.execute(
            stmt.values(**values).execution_options(synchronize_session=False)
        ).rowcount

        if not edited:
            self.db.rollback()
            self.get_or_raise(post_id)
            raise PostActionError("total_seats is below the current passenger count")

        self.db.commit()
        post = self.get_or_raise(post_id)
        logger.info(f"Edited post {post_id}: {', '.join(sorted(values))}")
        return post
