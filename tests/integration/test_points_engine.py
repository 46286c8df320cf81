"""Service-level tests for points, badges and NFT awards."""

from __future__ import annotations

import pytest
from sqlalchemy import func, select

from conftest import make_user
from sfdsa.db.models import Notification, PointsLog, User, UserBadge, UserNFTAward
from sfdsa.errors import InvalidPointsError, UserNotFoundError
from sfdsa.gamification.badge_service import check_and_award_badge
from sfdsa.gamification.catalog import BadgeType, PointsAction
from sfdsa.gamification.nft_service import check_and_award_nfts, get_next_award, get_user_nft_awards
from sfdsa.gamification.points_service import award_points, get_points_history


async def _ledger_total(db, user_id: str) -> int:
    return (
        await db.execute(
            select(func.coalesce(func.sum(PointsLog.points), 0)).where(PointsLog.user_id == user_id)
        )
    ).scalar_one()


class TestAwardPoints:
    @pytest.mark.asyncio
    async def test_ledger_matches_running_total(self, db_session, user):
        await award_points(db_session, user.id, 5, PointsAction.CHAT_PARTICIPATION.value)
        await award_points(db_session, user.id, 20, PointsAction.PRACTICE_TEST.value)
        await check_and_award_badge(db_session, None, user.id, BadgeType.FIRST_RESPONSE, points=None)
        await db_session.commit()

        refreshed = await db_session.get(User, user.id, populate_existing=True)
        assert refreshed.participation_count == await _ledger_total(db_session, user.id)
        assert refreshed.participation_count > 25

    @pytest.mark.asyncio
    async def test_zero_is_noop(self, db_session, user):
        assert await award_points(db_session, user.id, 0, "chat_participation") is None
        assert await _ledger_total(db_session, user.id) == 0

    @pytest.mark.asyncio
    async def test_negative_rejected(self, db_session, user):
        with pytest.raises(InvalidPointsError):
            await award_points(db_session, user.id, -5, "chat_participation")

    @pytest.mark.asyncio
    async def test_unknown_user(self, db_session):
        with pytest.raises(UserNotFoundError):
            await award_points(db_session, "missing", 5, "chat_participation")

    @pytest.mark.asyncio
    async def test_history_most_recent_first(self, db_session, user):
        for amount in (5, 10, 20):
            await award_points(db_session, user.id, amount, "practice_test")
        await db_session.commit()

        entries, total = await get_points_history(db_session, user.id, page=1, per_page=2)
        assert total == 3
        assert [e.points for e in entries] == [20, 10]


class TestBadges:
    @pytest.mark.asyncio
    async def test_badge_awarded_once(self, db_session, user):
        first = await check_and_award_badge(db_session, None, user.id, BadgeType.CONNECTOR, points=15)
        second = await check_and_award_badge(db_session, None, user.id, BadgeType.CONNECTOR, points=15)
        await db_session.commit()

        assert first.awarded and first.points_awarded == 15
        assert not second.awarded and second.points_awarded == 0
        count = (
            await db_session.execute(
                select(func.count()).select_from(UserBadge).where(UserBadge.user_id == user.id)
            )
        ).scalar_one()
        assert count == 1
        assert await _ledger_total(db_session, user.id) == 15

    @pytest.mark.asyncio
    async def test_badge_creates_notification(self, db_session, user):
        await check_and_award_badge(db_session, None, user.id, BadgeType.WRITTEN, points=0)
        await db_session.commit()

        notification = (
            await db_session.execute(select(Notification).where(Notification.user_id == user.id))
        ).scalar_one()
        assert notification.type == "badge"
        assert notification.action_url == "/badge/written"
        assert notification.notification_metadata["badgeType"] == "written"

    @pytest.mark.asyncio
    async def test_unknown_badge_type(self, db_session, user):
        with pytest.raises(ValueError):
            await check_and_award_badge(db_session, None, user.id, "not-a-badge")

    @pytest.mark.asyncio
    async def test_missing_user(self, db_session):
        with pytest.raises(UserNotFoundError):
            await check_and_award_badge(db_session, None, "missing", BadgeType.WRITTEN)


class TestNFTAwards:
    @pytest.mark.asyncio
    async def test_crossing_two_tiers_awards_both_ascending(self, db_session, user):
        await award_points(db_session, user.id, 2600, PointsAction.APPLICATION_SUBMISSION.value)
        await db_session.commit()

        awards = (
            await db_session.execute(
                select(UserNFTAward).where(UserNFTAward.user_id == user.id).order_by(UserNFTAward.id)
            )
        ).scalars().all()
        assert [a.nft_award_id for a in awards] == ["bronze", "silver"]
        assert all(a.points_at_award == 2600 for a in awards)

    @pytest.mark.asyncio
    async def test_tier_not_awarded_twice(self, db_session, user):
        await award_points(db_session, user.id, 1000, "application_submission")
        await award_points(db_session, user.id, 10, "resource_download")
        again = await check_and_award_nfts(db_session, None, user.id, 1010)
        await db_session.commit()

        assert again == []
        assert [a.nft_award_id for a in await get_user_nft_awards(db_session, user.id)] == ["bronze"]

    @pytest.mark.asyncio
    async def test_below_first_threshold(self, db_session, user):
        await award_points(db_session, user.id, 999, "application_submission")
        assert await get_user_nft_awards(db_session, user.id) == []

    @pytest.mark.asyncio
    async def test_next_award(self, db_session):
        user = await make_user(db_session, name="Next Award", participation_count=1200)
        next_award = await get_next_award(db_session, user.id, 1200)
        assert next_award.tier.id == "silver"
        assert next_award.points_needed == 1300
