"""
Unit tests for the XP and aggregation engine.
"""
import math

import pytest

from models.enums import ActivityStatus
from services.exceptions import ValidationError
from services.xp_engine import (
    compute_category_stats,
    compute_leaderboard,
    compute_level,
    compute_profile_totals,
    compute_report_card,
    compute_xp_for_activity,
    MAX_XP,
    level_title,
    round_half_up,
    sum_hours,
)


class TestComputeXP:
    """XP earned by a single activity."""

    def test_multiplier_example(self, category_factory):
        assert compute_xp_for_activity(2.5, category_factory(xp_multiplier=3)) == 375

    def test_stem_two_hours(self, category_factory):
        assert compute_xp_for_activity(2, category_factory(xp_multiplier=2.5)) == 250

    def test_halves_round_up(self, category_factory):
        """50 * 0.05 = 2.5 rounds to 3, not to the even 2."""
        assert compute_xp_for_activity(0.05, category_factory(xp_multiplier=1)) == 3
        assert round_half_up(0.5) == 1
        assert round_half_up(1.49) == 1

    @pytest.mark.parametrize('hours', [0, -1, float('nan'), float('inf'), None, '2', True])
    def test_rejects_bad_duration(self, category_factory, hours):
        with pytest.raises(ValidationError):
            compute_xp_for_activity(hours, category_factory())

    @pytest.mark.parametrize('multiplier', [0, -2, float('nan')])
    def test_rejects_bad_multiplier(self, category_factory, multiplier):
        with pytest.raises(ValidationError):
            compute_xp_for_activity(1, category_factory(xp_multiplier=multiplier))

    def test_requires_category(self):
        with pytest.raises(ValidationError):
            compute_xp_for_activity(1, None)

    @pytest.mark.parametrize('hours, multiplier', [
        (1e308, 1),
        (1, 1e308),
        (50000000, 1),
    ])
    def test_rejects_xp_beyond_maximum(self, category_factory, hours, multiplier):
        with pytest.raises(ValidationError):
            compute_xp_for_activity(hours, category_factory(xp_multiplier=multiplier))

    def test_large_but_representable_xp(self, category_factory):
        assert compute_xp_for_activity(1000, category_factory(xp_multiplier=10)) == 500000
        assert compute_xp_for_activity(1000, category_factory(xp_multiplier=10)) < MAX_XP


class TestComputeLevel:
    """Level bands of 1000 XP."""

    @pytest.mark.parametrize('total_xp, level', [
        (0, 1),
        (999, 1),
        (1000, 2),
        (1150, 2),
        (2500, 3),
        (49999, 50),
    ])
    def test_boundaries(self, total_xp, level):
        assert compute_level(total_xp) == level

    def test_rejects_negative_total(self):
        with pytest.raises(ValidationError):
            compute_level(-1)

    @pytest.mark.parametrize('total_xp', [float('nan'), float('inf'), float('-inf'), None, '10', True])
    def test_rejects_non_finite_total(self, total_xp):
        with pytest.raises(ValidationError):
            compute_level(total_xp)

    @pytest.mark.parametrize('level, title', [
        (1, 'Newcomer'),
        (4, 'Newcomer'),
        (5, 'Rising Star'),
        (10, 'Trailblazer'),
        (50, 'Legend'),
        (120, 'Legend'),
    ])
    def test_level_titles(self, level, title):
        assert level_title(level) == title


class TestProfileTotals:
    """Running total and level after an approval."""

    def test_crossing_a_level(self):
        totals = compute_profile_totals(900, 250)

        assert totals.total_xp == 1150
        assert totals.level == 2
        assert totals.previous_level == 1
        assert totals.leveled_up is True

    def test_same_level(self):
        totals = compute_profile_totals(100, 50)

        assert totals.level == 1
        assert totals.leveled_up is False

    def test_rejects_negative_delta(self):
        with pytest.raises(ValidationError):
            compute_profile_totals(100, -5)


class TestCategoryStats:
    """Per-category aggregation for one user."""

    def test_sums_are_exact(self, activity_factory, category_factory):
        activities = [
            activity_factory(duration_hours=1.5, xp_earned=188),
            activity_factory(duration_hours=2.25, xp_earned=281),
            activity_factory(duration_hours=0.25, xp_earned=31),
        ]

        stats = compute_category_stats(activities, category_factory(), target_hours=50)

        assert stats.total_hours == 4.0
        assert stats.total_xp == 500
        assert stats.activities_count == 3
        assert stats.progress_percentage == pytest.approx(8.0)

    def test_tenths_of_an_hour_add_up(self, activity_factory, category_factory):
        activities = [activity_factory(duration_hours=0.1, xp_earned=5) for _ in range(10)]

        stats = compute_category_stats(activities, category_factory(), target_hours=1)

        assert sum_hours([0.1] * 10) == 1.0
        assert stats.total_hours == 1.0
        assert stats.progress_percentage == 100.0

    def test_progress_is_clamped(self, activity_factory, category_factory):
        activities = [activity_factory(duration_hours=80, xp_earned=4000)]

        stats = compute_category_stats(activities, category_factory(), target_hours=50)

        assert stats.total_hours == 80
        assert stats.progress_percentage == 100.0

    def test_empty_input(self, category_factory):
        stats = compute_category_stats([], category_factory(category_id=7))

        assert stats.category_id == 7
        assert stats.total_hours == 0
        assert stats.total_xp == 0
        assert stats.activities_count == 0
        assert stats.progress_percentage == 0.0

    def test_ignores_unapproved(self, activity_factory, category_factory):
        activities = [
            activity_factory(duration_hours=2, xp_earned=100),
            activity_factory(duration_hours=3, xp_earned=150, status=ActivityStatus.PENDING.value),
            activity_factory(duration_hours=4, xp_earned=200, status=ActivityStatus.DENIED.value),
        ]

        stats = compute_category_stats(activities, category_factory())

        assert stats.total_hours == 2
        assert stats.activities_count == 1

    @pytest.mark.parametrize('target', [0, -10, float('nan')])
    def test_rejects_bad_target(self, category_factory, target):
        with pytest.raises(ValidationError):
            compute_category_stats([], category_factory(), target_hours=target)

    def test_rejects_corrupt_duration(self, activity_factory, category_factory):
        with pytest.raises(ValidationError):
            compute_category_stats([activity_factory(duration_hours=0)], category_factory())


class TestLeaderboard:
    """Ranking users inside one category."""

    def test_empty(self):
        assert compute_leaderboard([]) == []

    def test_ranks_by_xp(self, activity_factory):
        activities = [
            activity_factory(user_id=1, xp_earned=100),
            activity_factory(user_id=2, xp_earned=300),
            activity_factory(user_id=1, xp_earned=50),
            activity_factory(user_id=3, xp_earned=200),
        ]

        board = compute_leaderboard(activities)

        assert [(e.user_id, e.total_xp, e.rank) for e in board] == [
            (2, 300, 1),
            (3, 200, 2),
            (1, 150, 3),
        ]
        assert board[2].activities_count == 2

    def test_tie_break_on_count_then_user_id(self, activity_factory):
        activities = [
            activity_factory(user_id=9, xp_earned=100),
            activity_factory(user_id=4, xp_earned=100),
            activity_factory(user_id=6, xp_earned=50),
            activity_factory(user_id=6, xp_earned=50),
        ]

        board = compute_leaderboard(activities)

        assert [e.user_id for e in board] == [6, 4, 9]

    def test_order_independent(self, activity_factory):
        activities = [
            activity_factory(user_id=user_id, xp_earned=xp)
            for user_id, xp in [(5, 10), (3, 10), (8, 40), (1, 25)]
        ]

        forward = compute_leaderboard(activities)
        backward = compute_leaderboard(list(reversed(activities)))

        assert forward == backward

    @pytest.mark.parametrize('users, limit', [(0, 10), (3, 10), (25, 10), (5, 0), (5, 5)])
    def test_ranks_contiguous_and_limited(self, activity_factory, users, limit):
        activities = [activity_factory(user_id=u, xp_earned=10 * (u + 1)) for u in range(users)]

        board = compute_leaderboard(activities, limit=limit)

        assert len(board) == min(users, limit)
        assert [e.rank for e in board] == list(range(1, len(board) + 1))

    def test_ignores_pending(self, activity_factory):
        activities = [
            activity_factory(user_id=1, xp_earned=500, status=ActivityStatus.PENDING.value),
            activity_factory(user_id=2, xp_earned=10),
        ]

        assert [e.user_id for e in compute_leaderboard(activities)] == [2]

    def test_rejects_negative_limit(self):
        with pytest.raises(ValidationError):
            compute_leaderboard([], limit=-1)


class TestReportCard:
    """Totals over every category for one user."""

    def test_totals_across_categories(self, activity_factory, category_factory):
        categories = [category_factory(category_id=1), category_factory(category_id=2)]
        activities = [
            activity_factory(category_id=1, duration_hours=2, xp_earned=100),
            activity_factory(category_id=2, duration_hours=3, xp_earned=375),
            activity_factory(category_id=2, duration_hours=1, xp_earned=125,
                             status=ActivityStatus.PENDING.value),
        ]

        report = compute_report_card(activities, categories, target_hours=10)

        assert [s.category_id for s in report.categories] == [1, 2]
        assert report.total_hours == 5
        assert report.total_xp == 475
        assert report.activities_count == 2
        assert report.categories[1].progress_percentage == pytest.approx(30.0)
        assert not math.isnan(report.categories[0].progress_percentage)

    def test_categories_without_activity(self, category_factory):
        report = compute_report_card([], [category_factory(category_id=3)])

        assert report.to_dict()['categories'][0]['activities_count'] == 0
        assert report.total_xp == 0
