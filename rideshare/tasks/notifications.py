"""Celery tasks for post change notifications."""

import logging

from sqlalchemy.orm import Session

from rideshare.celery_app import app as celery_app
from rideshare.database import SessionLocal
from rideshare.models.post import Post
from rideshare.models.user import User
from rideshare.services.notifications import PushService, notification_recipients

logger = logging.getLogger(__name__)


@celery_app.task
def notify_post_participants(post_id: int, actor_id: int) -> dict:
    """Push one notification to every participant of a post except the actor.

    Not retried: a retry after a partial send would notify some users twice.

    Args:
        post_id: ID of the post that changed
        actor_id: ID of the user whose request changed it

    Returns:
        dict with delivery counts
    """
    db: Session = SessionLocal()
    push_service = PushService()

    try:
        post = db.query(Post).filter(Post.id == post_id).first()
        if not post:
            logger.warning(f"Post {post_id} not found, skipping notifications")
            return {"post_id": post_id, "recipients": 0, "sent": 0}

        recipient_ids = notification_recipients(post, actor_id)
        recipients = db.query(User).filter(User.id.in_(recipient_ids)).all()

        title = "Your ride was updated"
        body = f"{post.origin} to {post.destination} on {post.departure_time:%b %d, %H:%M}"

        sent = 0
        for user in recipients:
            if push_service.send_to_user(db, user, title, body, data={"post_id": str(post.id)}):
                sent += 1

        logger.info(f"Sent post {post_id} update to {sent}/{len(recipients)} participants")
        return {"post_id": post_id, "recipients": len(recipients), "sent": sent}

    except Exception as e:
        logger.error(f"Error in notify_post_participants: {e}", exc_info=True)
        db.rollback()
        return {"error": str(e)}

    finally:
        db.close()
