"""Push notifications to post participants via Firebase Cloud Messaging."""

import logging
from typing import Protocol

import httpx
from sqlalchemy.orm import Session

from rideshare.config import Settings, get_settings
from rideshare.models.post import Post
from rideshare.models.user import User

logger = logging.getLogger(__name__)

# FCM result errors meaning the device token will never work again
STALE_TOKEN_ERRORS = {"NotRegistered", "InvalidRegistration"}


def notification_recipients(post: Post, actor_id: int) -> list[int]:
    """Everyone on the post except the user who changed it, each once."""
    return [uid for uid in post.participant_ids if uid != actor_id]


class PostNotifier(Protocol):
    """Tells a post's participants that it changed."""

    def notify_post_changed(self, post_id: int, actor_id: int) -> None: ...


class CeleryPostNotifier:
    """Hands the fan-out to a Celery worker. Never raises into the request."""

    def notify_post_changed(self, post_id: int, actor_id: int) -> None:
        from rideshare.tasks.notifications import notify_post_participants

        try:
            notify_post_participants.delay(post_id, actor_id)
            logger.debug(f"Queued notifications for post {post_id}")
        except Exception as e:
            # Don't fail the request if the broker is unreachable
            logger.error(f"Failed to queue notifications for post {post_id}: {e}")


class PushService:
    """Sends FCM messages to users' registered devices."""

    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.transport = transport
        self.timeout = self.settings.fcm_timeout_seconds

    @property
    def enabled(self) -> bool:
        return bool(self.settings.fcm_server_key)

    def send_to_user(
        self,
        db: Session,
        user: User,
        title: str,
        body: str,
        data: dict | None = None,
    ) -> bool:
        """
        Send a push notification to the user's device.

        Returns True if FCM accepted the message. A token FCM reports as stale
        is cleared so it is not tried again.
        """
        if not self.enabled:
            logger.info("FCM server key not configured, push disabled")
            return False

        if not user.fcm_token:
            logger.info(f"No FCM token for user {user.id}")
            return False

        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.post(
                    self.settings.fcm_send_url,
                    headers={"Authorization": f"key={self.settings.fcm_server_key}"},
                    json={
                        "to": user.fcm_token,
                        "notification": {"title": title, "body": body},
                        "data": data or {},
                    },
                )
                response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"Push failed for user {user.id}: {e}")
            return False

        result = response.json()
        if result.get("success"):
            return True

        errors = {r.get("error") for r in result.get("results", [])}
        logger.warning(f"FCM rejected push for user {user.id}: {errors}")
        if errors & STALE_TOKEN_ERRORS:
            logger.info(f"Removing stale FCM token for user {user.id}")
            user.fcm_token = None
            db.commit()
        return False
