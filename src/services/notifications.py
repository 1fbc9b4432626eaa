"""Artist notification delivery for awards and publications."""

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from src.core.settings import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()


@dataclass
class Notification:
    """Outgoing message to one artist."""
    kind: str
    recipient: str
    subject: str
    body: str
    data: Dict[str, Any] = field(default_factory=dict)

    # Auto-generated fields
    notification_id: str = None
    timestamp: str = None

    def __post_init__(self):
        if self.notification_id is None:
            self.notification_id = str(uuid.uuid4())
        if self.timestamp is None:
            self.timestamp = datetime.utcnow().isoformat() + "Z"


class Notifier:
    """
    Delivers notifications to artists.

    Delivery is fire-and-forget: every send returns ``True`` on success and
    ``False`` after logging a failure, and never raises to the caller.
    """

    def __init__(self, notifier_type: Optional[str] = None):
        self.notifier_type = notifier_type or settings.notifier_type
        self.sender = settings.notification_sender
        self.ses_client = None

        if self.notifier_type == "ses":
            self._initialize_ses()

    def _initialize_ses(self):
        """Initialize SES client."""
        try:
            self.ses_client = boto3.client(
                "ses",
                region_name=settings.aws_region,
                aws_access_key_id=settings.aws_access_key_id,
                aws_secret_access_key=settings.aws_secret_access_key,
            )
            logger.info("SES client initialized for artist notifications")
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Failed to initialize SES client: {e}")
            self.ses_client = None

    async def send(self, notification: Notification) -> bool:
        """Deliver a notification over the configured transport."""
        try:
            if self.notifier_type == "ses":
                return await self._send_ses(notification)
            else:
                # Mock mode for development and tests
                return await self._send_mock(notification)
        except Exception as e:
            logger.error(f"Failed to send notification {notification.notification_id}: {e}")
            return False

    async def _send_ses(self, notification: Notification) -> bool:
        if not self.ses_client:
            logger.warning("SES not properly configured, skipping notification")
            return False

        try:
            response = self.ses_client.send_email(
                Source=self.sender,
                Destination={"ToAddresses": [notification.recipient]},
                Message={
                    "Subject": {"Data": notification.subject, "Charset": "UTF-8"},
                    "Body": {"Text": {"Data": notification.body, "Charset": "UTF-8"}},
                },
            )
            logger.info(
                f"Sent {notification.kind} notification {notification.notification_id} "
                f"via SES: {response['MessageId']}"
            )
            return True

        except (BotoCoreError, ClientError) as e:
            logger.error(f"SES error sending notification {notification.notification_id}: {e}")
            return False

    async def _send_mock(self, notification: Notification) -> bool:
        logger.info(
            f"MOCK NOTIFICATION: {notification.kind} to {notification.recipient} - "
            f"{notification.subject}"
        )
        return True

    async def send_award_notification(
        self,
        contact: str,
        artist_name: str,
        release_title: str,
        award_name: str,
        listens_count: int
    ) -> bool:
        """Tell an artist one of their singles crossed an award threshold."""
        notification = Notification(
            kind="award",
            recipient=contact,
            subject=f"Congratulations! \"{release_title}\" went {award_name}",
            body=(
                f"Hi {artist_name},\n\n"
                f"Your single \"{release_title}\" has reached {listens_count:,} listens "
                f"and earned the {award_name} award."
            ),
            data={
                "award": award_name,
                "release_title": release_title,
                "listens_count": listens_count,
            },
        )
        return await self.send(notification)

    async def send_publication_notification(
        self,
        contact: str,
        release_title: str,
        release_date: Optional[datetime],
        album_title: Optional[str] = None
    ) -> bool:
        """Confirm a release publication to its owner."""
        when = release_date.date().isoformat() if release_date else "an unscheduled date"
        body = f"Your single \"{release_title}\" is scheduled for release on {when}."
        if album_title:
            body += f" It is part of the album \"{album_title}\"."

        notification = Notification(
            kind="publication",
            recipient=contact,
            subject=f"\"{release_title}\" has been published",
            body=body,
            data={
                "release_title": release_title,
                "release_date": release_date.isoformat() if release_date else None,
                "album_title": album_title,
            },
        )
        return await self.send(notification)


# Global notifier instance
_notifier = None


def get_notifier() -> Notifier:
    """Get the global notifier instance."""
    global _notifier
    if _notifier is None:
        _notifier = Notifier()
    return _notifier
