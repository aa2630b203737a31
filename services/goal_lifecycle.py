"""
Goal lifecycle: creation with derived fields and live progress evaluation.

A goal moves from active to completed exactly once, when an evaluation
first reports progress of 100% or more. Nothing here touches the database;
the completion event is a signal for the caller to persist.
"""
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional

from dateutil.relativedelta import relativedelta

from models.enums import ActivityStatus, GoalPeriod
from models.goal import Goal
from services.exceptions import ValidationError
from services.xp_engine import HOURS_PRECISION, compute_xp_for_activity, require_positive, sum_hours

PERIOD_LENGTHS = {
    GoalPeriod.SEMESTER: relativedelta(months=4),
    GoalPeriod.YEAR: relativedelta(months=12),
}


@dataclass
class EvaluatedGoal:
    goal: Goal
    current_hours: float
    current_xp: int
    progress_percentage: float
    completion_event: bool

    def to_dict(self):
        data = self.goal.to_dict()
        data.update({
            'current_hours': self.current_hours,
            'current_xp': self.current_xp,
            'progress_percentage': self.progress_percentage,
            'completion_event': self.completion_event
        })
        return data


def parse_period(period) -> GoalPeriod:
    try:
        return GoalPeriod(period)
    except ValueError:
        allowed = ', '.join(p.value for p in GoalPeriod)
        raise ValidationError(f"period must be one of: {allowed}; got {period!r}")


def derive_end_date(period, start_date: date, explicit_end_date: Optional[date] = None) -> date:
    """
    Compute a goal's end date from its period.

    semester and year add 4 and 12 calendar months (clamped to the end of
    the month, so Oct 31 + 4 months is Feb 28/29). custom takes the explicit
    end date, which must come after start_date.
    """
    period = parse_period(period)
    if not isinstance(start_date, date):
        raise ValidationError("start_date is required")

    if period is GoalPeriod.CUSTOM:
        if explicit_end_date is None:
            raise ValidationError("end_date is required for custom goals")
        if explicit_end_date <= start_date:
            raise ValidationError("end_date must be after start_date")
        return explicit_end_date

    return start_date + PERIOD_LENGTHS[period]


def create_goal(
    user_id: int,
    category,
    target_hours: float,
    period,
    start_date: date,
    explicit_end_date: Optional[date] = None
) -> Goal:
    """
    Build a new, unsaved goal.

    target_xp is frozen from the category's multiplier at this moment and
    is not updated if the multiplier changes later.

    Args:
        user_id: Owner of the goal
        category: Category the goal counts hours in
        target_hours: Hours needed for 100% progress
        period: semester, year or custom
        start_date: First day of the window
        explicit_end_date: Last day of the window, custom goals only

    Returns:
        Goal instance with is_completed False
    """
    if category is None:
        raise ValidationError("category is required")
    target = require_positive(target_hours, 'target_hours')
    goal_period = parse_period(period)
    end_date = derive_end_date(goal_period, start_date, explicit_end_date)

    return Goal(
        user_id=user_id,
        category_id=category.id,
        target_hours=target,
        target_xp=compute_xp_for_activity(target, category),
        period=goal_period.value,
        start_date=start_date,
        end_date=end_date,
        is_completed=False,
        completed_at=None
    )


def in_window(goal: Goal, activity) -> bool:
    return goal.start_date <= activity.date <= goal.end_date


def evaluate_goal(goal: Goal, activities_in_window: Iterable) -> EvaluatedGoal:
    """
    Measure live progress of a goal.

    Only approved activities of the goal's category dated inside
    [start_date, end_date] are counted. completion_event is True only when
    progress reaches 100% on a goal not yet marked completed, so evaluating
    a completed goal again never signals a second completion.
    """
    target = require_positive(goal.target_hours, 'target_hours')

    hours = []
    current_xp = 0
    for activity in activities_in_window:
        if activity.status != ActivityStatus.APPROVED.value:
            continue
        if activity.category_id != goal.category_id or not in_window(goal, activity):
            continue
        hours.append(require_positive(activity.duration_hours, 'duration_hours'))
        current_xp += int(activity.xp_earned)

    current_hours = sum_hours(hours)
    reached = current_hours >= round(target, HOURS_PRECISION)
    progress = 100.0 if reached else min(100.0, 100.0 * current_hours / target)

    return EvaluatedGoal(
        goal=goal,
        current_hours=current_hours,
        current_xp=current_xp,
        progress_percentage=progress,
        completion_event=reached and not goal.is_completed
    )
