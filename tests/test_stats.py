"""Tests for listen counts, revenue, awards and popularity."""

from decimal import Decimal

import pytest
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.models import Single, Stat
from src.services.exceptions import InternalError, StatNotFound, StatsValidationError
from src.services.stats_service import StatsService


async def _single_with_stat(db_session, artist, genre, title="Midnight", listens=0, featurings=()):
    single = Single(title=title, artist_id=artist.id, genre_id=genre.id, featurings=list(featurings))
    db_session.add(single)
    await db_session.flush()
    stat = Stat(single_id=single.id)
    stat.set_listens(listens)
    db_session.add(stat)
    await db_session.commit()
    return single, stat


@pytest.mark.asyncio
async def test_update_recomputes_revenue(db_session, genres, artist, notifier):
    _, stat = await _single_with_stat(db_session, artist, genres["Pop"])

    updated, awards = await StatsService(db_session, notifier=notifier).update_listen_count(stat.id, 1000)

    assert updated.listens_count == 1000
    assert updated.revenue == Decimal("3.000")
    assert awards == []
    assert notifier.sent == []


@pytest.mark.asyncio
async def test_crossing_thresholds_notifies_each_award(db_session, genres, artist, notifier):
    _, stat = await _single_with_stat(db_session, artist, genres["Pop"], listens=40000)

    _, awards = await StatsService(db_session, notifier=notifier).update_listen_count(stat.id, 2000000)

    assert awards == ["Gold", "Platinum", "Diamond"]
    assert [n.data["award"] for n in notifier.sent] == ["Gold", "Platinum", "Diamond"]
    assert all(n.recipient == "nova@example.com" for n in notifier.sent)
    assert notifier.sent[0].data["listens_count"] == 2000000


@pytest.mark.asyncio
async def test_notification_failure_does_not_fail_update(db_session, genres, artist):
    class BrokenNotifier:
        async def send_award_notification(self, **kwargs):
            return False

    _, stat = await _single_with_stat(db_session, artist, genres["Pop"], listens=49000)

    updated, awards = await StatsService(db_session, notifier=BrokenNotifier()).update_listen_count(stat.id, 50000)

    assert awards == ["Gold"]
    assert updated.listens_count == 50000


@pytest.mark.asyncio
async def test_none_keeps_current_count(db_session, genres, artist, notifier):
    _, stat = await _single_with_stat(db_session, artist, genres["Pop"], listens=500)

    updated, awards = await StatsService(db_session, notifier=notifier).update_listen_count(stat.id, None)

    assert updated.listens_count == 500
    assert awards == []


@pytest.mark.asyncio
async def test_listens_cannot_decrease(db_session, genres, artist, notifier):
    _, stat = await _single_with_stat(db_session, artist, genres["Pop"], listens=500)

    with pytest.raises(StatsValidationError) as exc_info:
        await StatsService(db_session, notifier=notifier).update_listen_count(stat.id, 499)

    assert exc_info.value.code == "INVALID_LISTENS_COUNT"


@pytest.mark.asyncio
async def test_missing_stat(db_session, notifier):
    with pytest.raises(StatNotFound):
        await StatsService(db_session, notifier=notifier).update_listen_count(404, 10)


@pytest.mark.asyncio
async def test_popularity_counts_only_own_singles(db_session, genres, artist, featured_artist, notifier):
    _, own_stat = await _single_with_stat(db_session, artist, genres["Pop"])
    _, second_stat = await _single_with_stat(db_session, artist, genres["Rock"], title="Second")
    _, featured_stat = await _single_with_stat(
        db_session, featured_artist, genres["Pop"], title="Guest Spot", featurings=[artist]
    )

    service = StatsService(db_session, notifier=notifier)
    await service.update_listen_count(own_stat.id, 300)
    await service.update_listen_count(second_stat.id, 200)
    await service.update_listen_count(featured_stat.id, 10000)

    assert artist.popularity == 500
    assert featured_artist.popularity == 10000


@pytest.mark.asyncio
async def test_popularity_beyond_32_bit_range(db_session, genres, artist, notifier):
    _, first = await _single_with_stat(db_session, artist, genres["Pop"])
    _, second = await _single_with_stat(db_session, artist, genres["Rock"], title="Second")
    service = StatsService(db_session, notifier=notifier)

    await service.update_listen_count(first.id, 2_000_000_000)
    await service.update_listen_count(second.id, 2_000_000_000)

    assert artist.popularity == 4_000_000_000


@pytest.mark.asyncio
async def test_popularity_failure_is_reported_after_stat_is_saved(
    db_session, genres, artist, notifier, monkeypatch
):
    _, stat = await _single_with_stat(db_session, artist, genres["Pop"])
    commit = AsyncSession.commit
    commits = []

    async def fail_second_commit(session):
        commits.append(1)
        if len(commits) == 2:
            raise SQLAlchemyError("popularity write failed")
        await commit(session)

    monkeypatch.setattr(AsyncSession, "commit", fail_second_commit)

    with pytest.raises(InternalError):
        await StatsService(db_session, notifier=notifier).update_listen_count(stat.id, 700)

    monkeypatch.undo()
    stored = await db_session.get(Stat, stat.id)
    assert stored.listens_count == 700


@pytest.mark.asyncio
async def test_artist_totals(db_session, genres, artist, notifier):
    _, first = await _single_with_stat(db_session, artist, genres["Pop"])
    _, second = await _single_with_stat(db_session, artist, genres["Pop"], title="Other")
    service = StatsService(db_session, notifier=notifier)
    await service.update_listen_count(first.id, 1000)
    await service.update_listen_count(second.id, 2000)

    totals = await service.get_artist_totals(artist.id)

    assert totals["artist_id"] == artist.id
    assert totals["total_listens"] == 3000
    assert totals["total_revenue"] == pytest.approx(9.0)
