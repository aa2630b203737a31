"""
XP and aggregation engine.

Pure computation over activities and categories that have already been
loaded: no session, no I/O. Activities and categories are read through
their attributes, so ORM instances and any lookalike objects both work.
"""
import math
from dataclasses import dataclass, field, asdict
from numbers import Real
from typing import Iterable, List, Optional

from models.enums import ActivityStatus
from services.exceptions import ValidationError

BASE_XP_PER_HOUR = 50
XP_PER_LEVEL = 1000
DEFAULT_TARGET_HOURS = 50
DEFAULT_LEADERBOARD_LIMIT = 10
MAX_XP = 2 ** 31 - 1
# Longest single activity that can be logged
MAX_ACTIVITY_HOURS = 24
# Hour totals are rounded to this many decimals before comparing with targets
HOURS_PRECISION = 6

# (minimum level, title), highest first
LEVEL_TITLES = [
    (50, 'Legend'),
    (40, 'Elite'),
    (30, 'Expert'),
    (20, 'Advanced'),
    (10, 'Trailblazer'),
    (5, 'Rising Star'),
    (1, 'Newcomer'),
]


@dataclass
class CategoryStats:
    category_id: Optional[int]
    total_hours: float = 0.0
    total_xp: int = 0
    activities_count: int = 0
    progress_percentage: float = 0.0

    def to_dict(self):
        return asdict(self)


@dataclass
class LeaderboardEntry:
    user_id: int
    total_xp: int
    activities_count: int
    rank: int

    def to_dict(self):
        return asdict(self)


@dataclass
class ProfileTotals:
    """New running totals for a profile after an XP change."""
    total_xp: int
    level: int
    previous_level: int

    @property
    def leveled_up(self) -> bool:
        return self.level > self.previous_level

    def to_dict(self):
        return {
            'total_xp': self.total_xp,
            'level': self.level,
            'previous_level': self.previous_level,
            'leveled_up': self.leveled_up
        }


@dataclass
class ReportCard:
    categories: List[CategoryStats] = field(default_factory=list)
    total_hours: float = 0.0
    total_xp: int = 0
    activities_count: int = 0

    def to_dict(self):
        return {
            'categories': [stats.to_dict() for stats in self.categories],
            'total_hours': self.total_hours,
            'total_xp': self.total_xp,
            'activities_count': self.activities_count
        }


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves going up (0.5 -> 1, 2.5 -> 3)."""
    return int(math.floor(value + 0.5))


def _is_positive_number(value) -> bool:
    return (
        isinstance(value, Real)
        and not isinstance(value, bool)
        and math.isfinite(value)
        and value > 0
    )


def require_positive(value, name: str) -> float:
    if not _is_positive_number(value):
        raise ValidationError(f"{name} must be a positive number, got {value!r}")
    return float(value)


def sum_hours(hours: Iterable) -> float:
    """Exact float sum, rounded so 10 x 0.1h totals 1.0h."""
    return round(math.fsum(float(h) for h in hours), HOURS_PRECISION)


def _approved(activities: Iterable) -> List:
    approved = []
    for activity in activities:
        if activity.status != ActivityStatus.APPROVED.value:
            continue
        require_positive(activity.duration_hours, 'duration_hours')
        approved.append(activity)
    return approved


def compute_xp_for_activity(duration_hours: float, category) -> int:
    """
    Compute the XP an activity earns.

    The result is stored on the activity when it is created and is the
    record of its XP from then on, even if the category multiplier changes.

    Args:
        duration_hours: Hours spent, must be positive
        category: Object with an xp_multiplier attribute

    Returns:
        round(50 * duration_hours * xp_multiplier), at most MAX_XP
    """
    if category is None:
        raise ValidationError("category is required to compute XP")
    hours = require_positive(duration_hours, 'duration_hours')
    multiplier = require_positive(category.xp_multiplier, 'xp_multiplier')
    xp = BASE_XP_PER_HOUR * hours * multiplier
    if not math.isfinite(xp) or xp > MAX_XP:
        raise ValidationError(f"XP for {hours}h at x{multiplier} exceeds the maximum of {MAX_XP}")
    return round_half_up(xp)


def compute_level(total_xp: int) -> int:
    """Level from cumulative XP in 1000-point bands; level 1 at zero XP."""
    if (
        isinstance(total_xp, bool)
        or not isinstance(total_xp, Real)
        or (isinstance(total_xp, float) and not math.isfinite(total_xp))
        or total_xp < 0
    ):
        raise ValidationError(f"total_xp must be a non-negative number, got {total_xp!r}")
    return int(total_xp // XP_PER_LEVEL) + 1


def level_title(level: int) -> str:
    for minimum, title in LEVEL_TITLES:
        if level >= minimum:
            return title
    return LEVEL_TITLES[-1][1]


def compute_profile_totals(current_total_xp: int, xp_delta: int) -> ProfileTotals:
    """
    Derive the paired total_xp/level values after adding xp_delta.

    Callers write both fields from the returned object in one transaction.
    """
    if xp_delta < 0:
        raise ValidationError(f"xp_delta must not be negative, got {xp_delta}")
    previous_level = compute_level(current_total_xp)
    new_total = int(current_total_xp) + int(xp_delta)
    return ProfileTotals(
        total_xp=new_total,
        level=compute_level(new_total),
        previous_level=previous_level
    )


def compute_category_stats(
    activities: Iterable,
    category,
    target_hours: float = DEFAULT_TARGET_HOURS
) -> CategoryStats:
    """
    Aggregate one user's approved activities in one category.

    Args:
        activities: Activities of this user and category
        category: The category (only its id is read)
        target_hours: Hours that count as 100% progress

    Returns:
        CategoryStats with progress clamped to [0, 100]
    """
    target = require_positive(target_hours, 'target_hours')
    approved = _approved(activities)

    total_hours = sum_hours(a.duration_hours for a in approved)
    total_xp = sum(int(a.xp_earned) for a in approved)

    return CategoryStats(
        category_id=getattr(category, 'id', None),
        total_hours=total_hours,
        total_xp=total_xp,
        activities_count=len(approved),
        progress_percentage=min(100.0, 100.0 * total_hours / target)
    )


def compute_leaderboard(
    activities: Iterable,
    limit: int = DEFAULT_LEADERBOARD_LIMIT
) -> List[LeaderboardEntry]:
    """
    Rank users by summed XP over approved activities of one category.

    Ties on XP are broken by activity count (more first), then by user id
    (lower first), so ranks never depend on input order.

    Args:
        activities: Approved activities of a single category, any users
        limit: Maximum entries returned

    Returns:
        Entries with contiguous ranks starting at 1
    """
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 0:
        raise ValidationError(f"limit must be a non-negative integer, got {limit!r}")

    totals = {}
    for activity in _approved(activities):
        xp, count = totals.get(activity.user_id, (0, 0))
        totals[activity.user_id] = (xp + int(activity.xp_earned), count + 1)

    ordered = sorted(
        totals.items(),
        key=lambda item: (-item[1][0], -item[1][1], item[0])
    )

    return [
        LeaderboardEntry(user_id=user_id, total_xp=xp, activities_count=count, rank=index + 1)
        for index, (user_id, (xp, count)) in enumerate(ordered[:limit])
    ]


def compute_report_card(
    activities: Iterable,
    categories: Iterable,
    target_hours: float = DEFAULT_TARGET_HOURS
) -> ReportCard:
    """Per-category stats for every category plus overall totals for one user."""
    by_category = {}
    for activity in activities:
        by_category.setdefault(activity.category_id, []).append(activity)

    report = ReportCard()
    for category in categories:
        stats = compute_category_stats(by_category.get(category.id, []), category, target_hours)
        report.categories.append(stats)
        report.total_xp += stats.total_xp
        report.activities_count += stats.activities_count

    report.total_hours = sum_hours(stats.total_hours for stats in report.categories)
    return report
