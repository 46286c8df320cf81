"""Unit tests for leaderboard ranking and placeholder merging."""

from sfdsa.leaderboard.placeholders import placeholder_entries
from sfdsa.leaderboard.schemas import LeaderboardCategory, LeaderboardEntry
from sfdsa.leaderboard.service import matches_search, merge_placeholders, rank_and_page, score


def _entry(id, points, badges=0, nfts=0, applied=False, placeholder=False):  # noqa: A002, ANN001
    return LeaderboardEntry(
        id=id,
        name=id,
        participation_count=points,
        badge_count=badges,
        nft_count=nfts,
        has_applied=applied,
        is_placeholder=placeholder,
    )


class TestScore:
    def test_application_category_ranks_applicants_first(self):
        applicant = _entry("a", 10, applied=True)
        high_scorer = _entry("b", 5000)
        cat = LeaderboardCategory.APPLICATION
        assert score(applicant, cat) > score(high_scorer, cat)

    def test_badges_category(self):
        assert score(_entry("a", 0, badges=3), LeaderboardCategory.BADGES) == (3,)


class TestMerge:
    def test_sparse_board_gets_every_placeholder(self):
        live = [_entry("live", 50)]
        placeholders = [_entry("p1", 900, placeholder=True), _entry("p2", 10, placeholder=True)]
        merged, did_merge = merge_placeholders(live, placeholders, LeaderboardCategory.PARTICIPATION)
        assert did_merge
        assert [e.id for e in merged] == ["p1", "live", "p2"]

    def test_full_board_only_takes_outscoring_placeholders(self):
        live = [_entry("a", 500), _entry("b", 400), _entry("c", 300)]
        placeholders = [_entry("p-high", 450, placeholder=True), _entry("p-low", 100, placeholder=True)]
        merged, did_merge = merge_placeholders(live, placeholders, LeaderboardCategory.PARTICIPATION)
        assert did_merge
        assert [e.id for e in merged] == ["a", "p-high", "b", "c"]

    def test_full_board_with_no_outscoring_placeholders(self):
        live = [_entry("a", 5000), _entry("b", 4000), _entry("c", 3000)]
        merged, did_merge = merge_placeholders(live, placeholder_entries(), LeaderboardCategory.PARTICIPATION)
        assert not did_merge
        assert merged == live

    def test_ties_keep_live_entry_first(self):
        live = [_entry("live", 100)]
        merged, _ = merge_placeholders(live, [_entry("p", 100, placeholder=True)], LeaderboardCategory.PARTICIPATION)
        assert [e.id for e in merged] == ["live", "p"]


class TestRankAndPage:
    def test_rank_is_position_regardless_of_offset(self):
        entries = [_entry(str(i), 100 - i) for i in range(10)]
        page = rank_and_page(entries, limit=3, offset=4)
        assert [e.rank for e in page] == [5, 6, 7]
        assert [e.id for e in page] == ["4", "5", "6"]

    def test_offset_past_end(self):
        assert rank_and_page([_entry("a", 1)], limit=10, offset=5) == []


class TestPlaceholders:
    def test_fixed_dataset(self):
        entries = placeholder_entries()
        assert len(entries) == 12
        assert entries[0].name == "John Smith"
        assert all(e.is_placeholder for e in entries)

    def test_fresh_copies(self):
        first = placeholder_entries()
        first[0].rank = 99
        assert placeholder_entries()[0].rank == 0

    def test_search_is_case_insensitive(self):
        assert matches_search(_entry("Maria Garcia", 1), "garcia")
        assert matches_search(_entry("x", 1), None)
