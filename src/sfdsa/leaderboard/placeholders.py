"""Illustrative leaderboard entries.

Shown when live participation is sparse and as the fallback dataset when
the database is unavailable. Values are fixed so the board renders the
same way on every request.
"""

from __future__ import annotations

from sfdsa.leaderboard.schemas import LeaderboardEntry

_PLACEHOLDER_ROWS: list[tuple[str, int, int, int, bool]] = [
    # name, participation points, badges, nfts, has applied
    ("John Smith", 1850, 7, 2, True),
    ("Maria Garcia", 1620, 6, 1, True),
    ("James Johnson", 1340, 5, 1, False),
    ("David Williams", 1125, 5, 1, True),
    ("Sarah Brown", 960, 4, 0, False),
    ("Michael Jones", 840, 4, 0, True),
    ("Jessica Miller", 715, 3, 0, False),
    ("Robert Davis", 590, 3, 0, False),
    ("Jennifer Wilson", 470, 2, 0, True),
    ("Thomas Moore", 355, 2, 0, False),
    ("Lisa Taylor", 240, 1, 0, False),
    ("Daniel Anderson", 125, 1, 0, False),
]


def placeholder_entries() -> list[LeaderboardEntry]:
    """Fresh copies of the illustrative entries (callers mutate rank)."""
    return [
        LeaderboardEntry(
            id=f"placeholder-{i}",
            name=name,
            avatar_url=f"/placeholder.svg?height=40&width=40&query=avatar {i}",
            participation_count=points,
            badge_count=badges,
            nft_count=nfts,
            has_applied=applied,
            is_placeholder=True,
        )
        for i, (name, points, badges, nfts, applied) in enumerate(_PLACEHOLDER_ROWS, start=1)
    ]
