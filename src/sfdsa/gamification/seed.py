"""Catalog seed data: badges, NFT award tiers and default donation rules."""

from __future__ import annotations

import logging
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from sfdsa.db.models import Badge, DonationPointRule, NFTAwardTier
from sfdsa.db.upsert import dialect_insert
from sfdsa.gamification.catalog import NFT_AWARD_TIERS

logger = logging.getLogger(__name__)

BADGE_SEED_DATA: list[dict] = [
    # Application preparation
    {"type": "written", "name": "Written Test", "description": "Completed written test preparation", "rarity": "common", "points": 50},
    {"type": "oral", "name": "Oral Board", "description": "Prepared for oral board interviews", "rarity": "common", "points": 50},
    {"type": "physical", "name": "Physical Test", "description": "Completed physical test preparation", "rarity": "common", "points": 50},
    {"type": "polygraph", "name": "Polygraph", "description": "Learned about the polygraph process", "rarity": "uncommon", "points": 50},
    {"type": "psychological", "name": "Psychological", "description": "Prepared for psychological evaluation", "rarity": "uncommon", "points": 50},
    {"type": "full", "name": "Full Process", "description": "Completed all preparation areas", "rarity": "epic", "points": 200},
    # Participation
    {"type": "chat-participation", "name": "Chat Participation", "description": "Engaged with Sgt. Ken", "rarity": "common", "points": 10},
    {"type": "first-response", "name": "First Response", "description": "Received first response from Sgt. Ken", "rarity": "common", "points": 10},
    {"type": "application-started", "name": "Application Started", "description": "Started the application process", "rarity": "uncommon", "points": 25},
    {"type": "application-completed", "name": "Application Completed", "description": "Completed the application process", "rarity": "rare", "points": 100},
    {"type": "frequent-user", "name": "Frequent User", "description": "Regularly engages with the recruitment platform", "rarity": "uncommon", "points": 25},
    {"type": "resource-downloader", "name": "Resource Downloader", "description": "Downloaded recruitment resources and materials", "rarity": "common", "points": 10},
    {"type": "hard-charger", "name": "Hard Charger", "description": "Consistently asks questions and has applied", "rarity": "rare", "points": 75},
    {"type": "connector", "name": "Connector", "description": "Connects with other participants", "rarity": "uncommon", "points": 25},
    {"type": "deep-diver", "name": "Deep Diver", "description": "Explores topics in great detail", "rarity": "rare", "points": 50},
    {"type": "quick-learner", "name": "Quick Learner", "description": "Rapidly progresses through recruitment information", "rarity": "uncommon", "points": 25},
    {"type": "persistent-explorer", "name": "Persistent Explorer", "description": "Returns regularly to learn more", "rarity": "uncommon", "points": 25},
    {"type": "dedicated-applicant", "name": "Dedicated Applicant", "description": "Applied and continues to engage", "rarity": "epic", "points": 100},
    # Donations (awarded automatically, no participation points)
    {"type": "first-donation", "name": "First Donation", "description": "Made a first donation to the SFDSA", "rarity": "common", "points": 0},
    {"type": "recurring-donor", "name": "Recurring Donor", "description": "Set up a recurring donation", "rarity": "rare", "points": 0},
    {"type": "generous-donor", "name": "Generous Donor", "description": "Made a single donation of $100 or more", "rarity": "rare", "points": 0},
    {"type": "donation-milestone-5", "name": "Five Donations", "description": "Made 5 donations", "rarity": "uncommon", "points": 0},
    {"type": "donation-milestone-10", "name": "Ten Donations", "description": "Made 10 donations", "rarity": "rare", "points": 0},
    {"type": "donation-milestone-25", "name": "Twenty-Five Donations", "description": "Made 25 donations", "rarity": "epic", "points": 0},
    {"type": "donation-amount-250", "name": "Supporter", "description": "Donated $250 in total", "rarity": "uncommon", "points": 0},
    {"type": "donation-amount-500", "name": "Champion", "description": "Donated $500 in total", "rarity": "rare", "points": 0},
    {"type": "donation-amount-1000", "name": "Benefactor", "description": "Donated $1,000 in total", "rarity": "legendary", "points": 0},
    # Volunteer recruiters (awarded automatically, no participation points)
    {"type": "successful-recruiter", "name": "Successful Recruiter", "description": "Referred a candidate who was hired", "rarity": "epic", "points": 0},
    {"type": "active-recruiter", "name": "Active Recruiter", "description": "Logged 10 recruiting activities", "rarity": "uncommon", "points": 0},
    {"type": "expert-recruiter", "name": "Expert Recruiter", "description": "Logged 50 recruiting activities", "rarity": "legendary", "points": 0},
]

DEFAULT_DONATION_RULES: list[dict] = [
    {
        "name": "Standard Donation",
        "description": "1 point per dollar for donations under $100",
        "min_amount": Decimal("1"),
        "max_amount": Decimal("100"),
        "points_per_dollar": Decimal("1"),
        "recurring_multiplier": Decimal("1.5"),
    },
    {
        "name": "Major Donor",
        "description": "2 points per dollar for donations of $100 or more",
        "min_amount": Decimal("100"),
        "max_amount": None,
        "points_per_dollar": Decimal("2"),
        "recurring_multiplier": Decimal("1.5"),
    },
]


async def seed_badges(db: AsyncSession) -> int:
    """Upsert the badge catalog. Returns number of badges seeded."""
    seeded = 0
    for sort_order, badge_data in enumerate(BADGE_SEED_DATA, start=1):
        stmt = dialect_insert(db, Badge).values(**badge_data, sort_order=sort_order)
        stmt = stmt.on_conflict_do_update(
            index_elements=["type"],
            set_={
                "name": stmt.excluded.name,
                "description": stmt.excluded.description,
                "rarity": stmt.excluded.rarity,
                "points": stmt.excluded.points,
                "sort_order": stmt.excluded.sort_order,
            },
        )
        await db.execute(stmt)
        seeded += 1
    return seeded


async def seed_nft_tiers(db: AsyncSession) -> int:
    """Upsert the NFT award tiers. Returns number of tiers seeded."""
    for tier_data in NFT_AWARD_TIERS:
        stmt = dialect_insert(db, NFTAwardTier).values(**tier_data)
        stmt = stmt.on_conflict_do_update(
            index_elements=["id"],
            set_={
                "tier": stmt.excluded.tier,
                "name": stmt.excluded.name,
                "description": stmt.excluded.description,
                "point_threshold": stmt.excluded.point_threshold,
                "image_url": stmt.excluded.image_url,
            },
        )
        await db.execute(stmt)
    return len(NFT_AWARD_TIERS)


async def seed_donation_rules(db: AsyncSession) -> int:
    """Insert the default donation rules, only into an empty rule table.

    Rules are admin-editable, so existing rows are never overwritten.
    """
    existing = (await db.execute(select(func.count()).select_from(DonationPointRule))).scalar_one()
    if existing:
        return 0
    for rule_data in DEFAULT_DONATION_RULES:
        db.add(DonationPointRule(**rule_data))
    await db.flush()
    return len(DEFAULT_DONATION_RULES)


async def seed_catalogs(db: AsyncSession) -> None:
    """Seed every catalog in one transaction."""
    badges = await seed_badges(db)
    tiers = await seed_nft_tiers(db)
    rules = await seed_donation_rules(db)
    await db.commit()
    logger.info("Seeded %d badges, %d NFT tiers, %d donation rules", badges, tiers, rules)
