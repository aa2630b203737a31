"""
Unit tests for goal creation and progress evaluation.
"""
from datetime import date

import pytest

from models.enums import ActivityStatus, GoalPeriod
from services.exceptions import ValidationError
from services.goal_lifecycle import create_goal, derive_end_date, evaluate_goal


class TestDeriveEndDate:
    """End dates per period."""

    @pytest.mark.parametrize('period, start, end', [
        ('semester', date(2026, 1, 15), date(2026, 5, 15)),
        ('year', date(2026, 9, 1), date(2027, 9, 1)),
        ('semester', date(2026, 10, 31), date(2027, 2, 28)),
        ('year', date(2024, 2, 29), date(2025, 2, 28)),
        (GoalPeriod.SEMESTER, date(2027, 10, 31), date(2028, 2, 29)),
    ])
    def test_calendar_periods(self, period, start, end):
        assert derive_end_date(period, start) == end

    def test_custom_uses_explicit_end(self):
        assert derive_end_date('custom', date(2026, 1, 1), date(2026, 2, 1)) == date(2026, 2, 1)

    def test_custom_requires_end(self):
        with pytest.raises(ValidationError):
            derive_end_date('custom', date(2026, 1, 1))

    @pytest.mark.parametrize('end', [date(2026, 1, 1), date(2025, 12, 31)])
    def test_custom_end_must_follow_start(self, end):
        with pytest.raises(ValidationError):
            derive_end_date('custom', date(2026, 1, 1), end)

    def test_unknown_period(self):
        with pytest.raises(ValidationError):
            derive_end_date('fortnight', date(2026, 1, 1))


class TestCreateGoal:
    """Derived fields on a new goal."""

    def test_target_xp_frozen_from_multiplier(self, category_factory):
        goal = create_goal(
            user_id=1,
            category=category_factory(category_id=4, xp_multiplier=2),
            target_hours=10,
            period='semester',
            start_date=date(2026, 1, 10)
        )

        assert goal.target_xp == 1000
        assert goal.category_id == 4
        assert goal.end_date == date(2026, 5, 10)
        assert goal.is_completed is False
        assert goal.completed_at is None

    @pytest.mark.parametrize('target', [0, -3, float('nan')])
    def test_rejects_bad_target(self, category_factory, target):
        with pytest.raises(ValidationError):
            create_goal(1, category_factory(), target, 'year', date(2026, 1, 1))

    def test_requires_category(self):
        with pytest.raises(ValidationError):
            create_goal(1, None, 10, 'year', date(2026, 1, 1))


class TestEvaluateGoal:
    """Live progress and the one-time completion signal."""

    @pytest.fixture
    def goal(self, category_factory):
        return create_goal(
            user_id=1,
            category=category_factory(category_id=1, xp_multiplier=2),
            target_hours=10,
            period='semester',
            start_date=date(2026, 1, 1)
        )

    def test_partial_progress(self, goal, activity_factory):
        evaluated = evaluate_goal(goal, [activity_factory(duration_hours=4, xp_earned=400)])

        assert evaluated.current_hours == 4
        assert evaluated.current_xp == 400
        assert evaluated.progress_percentage == pytest.approx(40.0)
        assert evaluated.completion_event is False

    def test_completion_fires_once(self, goal, activity_factory):
        activities = [
            activity_factory(duration_hours=6, xp_earned=600),
            activity_factory(duration_hours=4, xp_earned=400),
        ]

        first = evaluate_goal(goal, activities)
        assert first.progress_percentage == 100.0
        assert first.completion_event is True

        goal.is_completed = True
        second = evaluate_goal(goal, activities)
        assert second.progress_percentage == first.progress_percentage
        assert second.completion_event is False

    def test_progress_is_clamped(self, goal, activity_factory):
        evaluated = evaluate_goal(goal, [activity_factory(duration_hours=35, xp_earned=3500)])

        assert evaluated.current_hours == 35
        assert evaluated.progress_percentage == 100.0

    def test_fractional_hours_reach_the_target(self, category_factory, activity_factory):
        goal = create_goal(
            user_id=1,
            category=category_factory(category_id=1),
            target_hours=1,
            period='semester',
            start_date=date(2026, 1, 1)
        )
        activities = [activity_factory(duration_hours=0.1, xp_earned=5) for _ in range(10)]

        evaluated = evaluate_goal(goal, activities)

        assert evaluated.current_hours == 1.0
        assert evaluated.progress_percentage == 100.0
        assert evaluated.completion_event is True

    def test_window_is_inclusive(self, goal, activity_factory):
        activities = [
            activity_factory(duration_hours=1, day=date(2026, 1, 1)),
            activity_factory(duration_hours=1, day=date(2026, 5, 1)),
            activity_factory(duration_hours=5, day=date(2025, 12, 31)),
            activity_factory(duration_hours=5, day=date(2026, 5, 2)),
        ]

        assert evaluate_goal(goal, activities).current_hours == 2

    def test_ignores_other_categories_and_unapproved(self, goal, activity_factory):
        activities = [
            activity_factory(duration_hours=2),
            activity_factory(duration_hours=9, category_id=2),
            activity_factory(duration_hours=9, status=ActivityStatus.PENDING.value),
            activity_factory(duration_hours=9, status=ActivityStatus.DENIED.value),
        ]

        assert evaluate_goal(goal, activities).current_hours == 2

    def test_to_dict_includes_progress(self, goal, activity_factory):
        data = evaluate_goal(goal, [activity_factory(duration_hours=5, xp_earned=500)]).to_dict()

        assert data['target_xp'] == 1000
        assert data['progress_percentage'] == pytest.approx(50.0)
        assert data['completion_event'] is False
        assert data['start_date'] == '2026-01-01'
