"""
Activity repository: ledger reads and the verification status writes.
"""
from typing import List, Optional, Tuple
from datetime import date, datetime, timezone
from sqlalchemy.orm import Session, joinedload

from repositories.base_repository import BaseRepository
from models.activity import Activity
from models.enums import ActivityStatus


class ActivityRepository(BaseRepository[Activity]):
    """Repository for Activity entity operations."""

    def __init__(self):
        """Initialize ActivityRepository."""
        super().__init__(Activity)

    def create_activity(
        self,
        session: Session,
        user_id: int,
        category_id: int,
        title: str,
        activity_date: date,
        duration_hours: float,
        xp_earned: int,
        status: str,
        description: Optional[str] = None,
        photo_url: Optional[str] = None,
        proof_link: Optional[str] = None,
        is_posted: bool = True
    ) -> Activity:
        """
        Create activity record.

        Args:
            session: Database session
            user_id: Owning profile ID
            category_id: Category ID
            title: Activity title
            activity_date: Day the activity took place
            duration_hours: Hours spent
            xp_earned: XP snapshot computed at creation
            status: Initial review status
            description: Free text description
            photo_url: Optional photo link
            proof_link: Optional proof link
            is_posted: Whether the activity shows in the public feed

        Returns:
            Created activity instance
        """
        activity = Activity(
            user_id=user_id,
            category_id=category_id,
            title=title,
            description=description,
            date=activity_date,
            duration_hours=duration_hours,
            xp_earned=xp_earned,
            photo_url=photo_url,
            proof_link=proof_link,
            status=status,
            is_posted=is_posted,
            created_at=datetime.now(timezone.utc)
        )
        session.add(activity)
        session.flush()
        return activity

    def get_approved(
        self,
        session: Session,
        user_id: Optional[int] = None,
        category_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None
    ) -> List[Activity]:
        """
        Get approved activities, optionally scoped by user, category and date window.

        Both window bounds are inclusive.

        Args:
            session: Database session
            user_id: Restrict to one user
            category_id: Restrict to one category
            start_date: Earliest activity date
            end_date: Latest activity date

        Returns:
            Approved activities in insertion order
        """
        query = session.query(Activity).filter(
            Activity.status == ActivityStatus.APPROVED.value
        )

        if user_id is not None:
            query = query.filter(Activity.user_id == user_id)
        if category_id is not None:
            query = query.filter(Activity.category_id == category_id)
        if start_date is not None:
            query = query.filter(Activity.date >= start_date)
        if end_date is not None:
            query = query.filter(Activity.date <= end_date)

        return query.order_by(Activity.id).all()

    def get_pending(
        self,
        session: Session,
        page: int = 1,
        per_page: int = 20
    ) -> Tuple[List[Activity], int]:
        """
        Get activities waiting for verification, oldest first.

        Args:
            session: Database session
            page: Page number (1-based)
            per_page: Items per page

        Returns:
            Tuple of (activities, total pending count)
        """
        query = session.query(Activity).filter(
            Activity.status == ActivityStatus.PENDING.value
        )
        total = query.count()

        activities = query.options(
            joinedload(Activity.profile),
            joinedload(Activity.category)
        ).order_by(
            Activity.created_at.asc(), Activity.id.asc()
        ).offset((page - 1) * per_page).limit(per_page).all()

        return activities, total

    def get_feed(
        self,
        session: Session,
        user_id: Optional[int] = None,
        category_id: Optional[int] = None,
        limit: int = 20
    ) -> List[Activity]:
        """
        Get posted, approved activities, newest first.

        Args:
            session: Database session
            user_id: Restrict to one user
            category_id: Restrict to one category
            limit: Maximum number of results

        Returns:
            List of activities with profile and category loaded
        """
        query = session.query(Activity).options(
            joinedload(Activity.profile),
            joinedload(Activity.category)
        ).filter(
            Activity.status == ActivityStatus.APPROVED.value,
            Activity.is_posted.is_(True)
        )

        if user_id is not None:
            query = query.filter(Activity.user_id == user_id)
        if category_id is not None:
            query = query.filter(Activity.category_id == category_id)

        return query.order_by(
            Activity.date.desc(), Activity.id.desc()
        ).limit(limit).all()

    def get_for_update(self, session: Session, activity_id: int) -> Optional[Activity]:
        """
        Load an activity and lock its row until the transaction ends.

        Args:
            session: Database session
            activity_id: Activity ID

        Returns:
            Activity instance or None if not found
        """
        return session.query(Activity).filter(
            Activity.id == activity_id
        ).with_for_update().first()

    def set_status(
        self,
        session: Session,
        activity: Activity,
        status: str,
        verifier_id: int
    ) -> Activity:
        """
        Record a verification decision.

        Args:
            session: Database session
            activity: Activity to update
            status: approved or denied
            verifier_id: Admin profile ID

        Returns:
            Updated activity instance
        """
        activity.status = status
        activity.verified_by = verifier_id
        activity.verified_at = datetime.now(timezone.utc)
        session.flush()
        return activity
