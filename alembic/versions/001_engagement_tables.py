"""Engagement schema.

Creates users, points_log, badges, user_badges, nft_award_tiers,
user_nft_awards, donation_point_rules, donation_points, the volunteer
recruiter tables, volunteer_applications, the daily briefing tables and
notifications. Catalog rows are seeded by the API at startup.

Revision ID: 001_engagement_tables
Revises:
Create Date: 2026-10-19
"""

from collections.abc import Sequence

from alembic import op

revision: str = "001_engagement_tables"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    # --- Users & points ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS users (
            id VARCHAR(36) PRIMARY KEY,
            email VARCHAR(320) UNIQUE NOT NULL,
            name VARCHAR(128),
            bio VARCHAR(500),
            avatar_url TEXT,
            participation_count INTEGER NOT NULL DEFAULT 0,
            donation_points INTEGER NOT NULL DEFAULT 0,
            has_applied BOOLEAN NOT NULL DEFAULT false,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)
    op.execute("""
        CREATE INDEX IF NOT EXISTS idx_users_participation
        ON users(participation_count DESC)
    """)

    op.execute("""
        CREATE TABLE IF NOT EXISTS points_log (
            id BIGSERIAL PRIMARY KEY,
            user_id VARCHAR(36) NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            action VARCHAR(64) NOT NULL,
            points INTEGER NOT NULL,
            description VARCHAR(256),
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)
    op.execute("""
        CREATE INDEX IF NOT EXISTS idx_points_log_user_created
        ON points_log(user_id, created_at DESC)
    """)

    # --- Badges & NFT awards ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS badges (
            id SERIAL PRIMARY KEY,
            type VARCHAR(64) UNIQUE NOT NULL,
            name VARCHAR(128) NOT NULL,
            description TEXT NOT NULL,
            rarity VARCHAR(16) NOT NULL,
            points INTEGER NOT NULL DEFAULT 0,
            sort_order INTEGER NOT NULL DEFAULT 0
        )
    """)
    op.execute("""
        CREATE TABLE IF NOT EXISTS user_badges (
            id BIGSERIAL PRIMARY KEY,
            user_id VARCHAR(36) NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            badge_id INTEGER NOT NULL REFERENCES badges(id),
            earned_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            CONSTRAINT user_badges_user_id_badge_id_key UNIQUE (user_id, badge_id)
        )
    """)

    op.execute("""
        CREATE TABLE IF NOT EXISTS nft_award_tiers (
            id VARCHAR(32) PRIMARY KEY,
            tier INTEGER NOT NULL,
            name VARCHAR(128) NOT NULL,
            description TEXT NOT NULL,
            point_threshold INTEGER UNIQUE NOT NULL,
            image_url VARCHAR(256) NOT NULL
        )
    """)
    op.execute("""
        CREATE TABLE IF NOT EXISTS user_nft_awards (
            id BIGSERIAL PRIMARY KEY,
            user_id VARCHAR(36) NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            nft_award_id VARCHAR(32) NOT NULL REFERENCES nft_award_tiers(id),
            awarded_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            points_at_award INTEGER NOT NULL DEFAULT 0,
            token_id VARCHAR(128),
            contract_address VARCHAR(64),
            CONSTRAINT user_nft_awards_user_id_nft_award_id_key UNIQUE (user_id, nft_award_id)
        )
    """)

    # --- Donations ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS donation_point_rules (
            id SERIAL PRIMARY KEY,
            name VARCHAR(128) NOT NULL,
            description TEXT NOT NULL DEFAULT '',
            min_amount NUMERIC(12, 2) NOT NULL,
            max_amount NUMERIC(12, 2),
            points_per_dollar NUMERIC(8, 2) NOT NULL,
            recurring_multiplier NUMERIC(6, 2) NOT NULL DEFAULT 1,
            is_active BOOLEAN NOT NULL DEFAULT true,
            campaign_id VARCHAR(64),
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            CHECK (max_amount IS NULL OR max_amount > min_amount)
        )
    """)
    op.execute("""
        CREATE TABLE IF NOT EXISTS donation_points (
            id BIGSERIAL PRIMARY KEY,
            user_id VARCHAR(36) NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            donation_id VARCHAR(128) UNIQUE NOT NULL,
            amount NUMERIC(12, 2) NOT NULL,
            points INTEGER NOT NULL DEFAULT 0,
            is_recurring BOOLEAN NOT NULL DEFAULT false,
            rule_id INTEGER REFERENCES donation_point_rules(id),
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)
    op.execute("""
        CREATE INDEX IF NOT EXISTS idx_donation_points_user
        ON donation_points(user_id)
    """)

    # --- Volunteer recruiters ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS volunteer_referrals (
            id VARCHAR(36) PRIMARY KEY,
            recruiter_id VARCHAR(36) NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            referral_email VARCHAR(320) NOT NULL,
            referral_name VARCHAR(128),
            status VARCHAR(16) NOT NULL DEFAULT 'pending',
            notes TEXT,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            CONSTRAINT volunteer_referrals_recruiter_email_key UNIQUE (recruiter_id, referral_email)
        )
    """)
    op.execute("""
        CREATE INDEX IF NOT EXISTS idx_volunteer_referrals_recruiter
        ON volunteer_referrals(recruiter_id, created_at DESC)
    """)
    op.execute("""
        CREATE TABLE IF NOT EXISTS volunteer_recruiter_stats (
            user_id VARCHAR(36) PRIMARY KEY REFERENCES users(id) ON DELETE CASCADE,
            referrals_count INTEGER NOT NULL DEFAULT 0,
            successful_referrals INTEGER NOT NULL DEFAULT 0,
            total_points INTEGER NOT NULL DEFAULT 0,
            events_participated INTEGER NOT NULL DEFAULT 0,
            last_active TIMESTAMPTZ,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)
    op.execute("""
        CREATE TABLE IF NOT EXISTS recruiter_activities (
            id BIGSERIAL PRIMARY KEY,
            recruiter_id VARCHAR(36) NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            activity_type VARCHAR(32) NOT NULL,
            points INTEGER NOT NULL DEFAULT 0,
            description VARCHAR(256),
            referral_id VARCHAR(36) REFERENCES volunteer_referrals(id),
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)
    op.execute("""
        CREATE INDEX IF NOT EXISTS idx_recruiter_activities_recruiter
        ON recruiter_activities(recruiter_id, created_at)
    """)
    op.execute("""
        CREATE TABLE IF NOT EXISTS volunteer_events (
            id SERIAL PRIMARY KEY,
            title VARCHAR(200) NOT NULL,
            description TEXT,
            location VARCHAR(200),
            start_time TIMESTAMPTZ NOT NULL,
            max_participants INTEGER NOT NULL DEFAULT 100
        )
    """)
    op.execute("""
        CREATE TABLE IF NOT EXISTS volunteer_applications (
            id BIGSERIAL PRIMARY KEY,
            application_id VARCHAR(32) UNIQUE NOT NULL,
            first_name VARCHAR(100) NOT NULL,
            last_name VARCHAR(100) NOT NULL,
            email VARCHAR(320) NOT NULL,
            phone VARCHAR(32) NOT NULL,
            address VARCHAR(256) NOT NULL DEFAULT '',
            city VARCHAR(100) NOT NULL DEFAULT '',
            state VARCHAR(32) NOT NULL DEFAULT '',
            zip_code VARCHAR(16) NOT NULL DEFAULT '',
            experience TEXT NOT NULL DEFAULT '',
            motivation TEXT NOT NULL,
            availability TEXT NOT NULL,
            terms_agreement BOOLEAN NOT NULL DEFAULT false,
            resume_filename VARCHAR(256),
            status VARCHAR(16) NOT NULL DEFAULT 'pending',
            ip_address VARCHAR(64),
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)

    # --- Daily briefings ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS daily_briefings (
            id VARCHAR(36) PRIMARY KEY,
            date DATE UNIQUE NOT NULL,
            title VARCHAR(200) NOT NULL,
            theme VARCHAR(16) NOT NULL,
            content TEXT NOT NULL DEFAULT '',
            quote TEXT,
            quote_author VARCHAR(128),
            sgt_ken_take TEXT,
            call_to_action TEXT,
            cycle_day INTEGER NOT NULL DEFAULT 1,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)
    op.execute("""
        CREATE TABLE IF NOT EXISTS briefing_attendance (
            id BIGSERIAL PRIMARY KEY,
            user_id VARCHAR(36) NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            briefing_id VARCHAR(36) NOT NULL REFERENCES daily_briefings(id) ON DELETE CASCADE,
            attended_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            CONSTRAINT briefing_attendance_user_briefing_key UNIQUE (user_id, briefing_id)
        )
    """)
    op.execute("""
        CREATE TABLE IF NOT EXISTS briefing_shares (
            id BIGSERIAL PRIMARY KEY,
            user_id VARCHAR(36) NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            briefing_id VARCHAR(36) NOT NULL REFERENCES daily_briefings(id) ON DELETE CASCADE,
            platform VARCHAR(32) NOT NULL,
            shared_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            CONSTRAINT briefing_shares_user_briefing_platform_key UNIQUE (user_id, briefing_id, platform)
        )
    """)

    # --- Notifications ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS notifications (
            id BIGSERIAL PRIMARY KEY,
            user_id VARCHAR(36) NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            type VARCHAR(32) NOT NULL,
            title VARCHAR(256) NOT NULL,
            message TEXT,
            action_url VARCHAR(256),
            read BOOLEAN NOT NULL DEFAULT false,
            metadata JSONB NOT NULL DEFAULT '{}',
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)
    op.execute("""
        CREATE INDEX IF NOT EXISTS idx_notifications_user_unread
        ON notifications(user_id, read, created_at DESC)
    """)


def downgrade() -> None:
    for table in (
        "notifications",
        "briefing_shares",
        "briefing_attendance",
        "daily_briefings",
        "volunteer_applications",
        "volunteer_events",
        "recruiter_activities",
        "volunteer_recruiter_stats",
        "volunteer_referrals",
        "donation_points",
        "donation_point_rules",
        "user_nft_awards",
        "nft_award_tiers",
        "user_badges",
        "badges",
        "points_log",
        "users",
    ):
        op.execute(f"DROP TABLE IF EXISTS {table} CASCADE")
