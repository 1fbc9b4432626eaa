"""Tests for the artist notifier."""

import pytest

from src.services.notifications import Notifier


@pytest.mark.asyncio
async def test_mock_transport_delivers_without_keeping_history():
    notifier = Notifier(notifier_type="mock")

    for listens in (50000, 100000, 1000000):
        delivered = await notifier.send_award_notification(
            contact="nova@example.com",
            artist_name="Nova",
            release_title="Midnight",
            award_name="Gold",
            listens_count=listens,
        )
        assert delivered is True

    assert not hasattr(notifier, "sent")


@pytest.mark.asyncio
async def test_ses_failure_is_reported_not_raised(monkeypatch):
    notifier = Notifier(notifier_type="mock")
    notifier.notifier_type = "ses"

    async def broken_send(notification):
        raise RuntimeError("SES unavailable")

    monkeypatch.setattr(notifier, "_send_ses", broken_send)

    delivered = await notifier.send_award_notification(
        contact="nova@example.com",
        artist_name="Nova",
        release_title="Midnight",
        award_name="Gold",
        listens_count=50000,
    )

    assert delivered is False
