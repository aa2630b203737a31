"""
Profile service for registration, running XP totals and the report card.
"""
import logging
from typing import Optional, Dict, Any
from datetime import datetime, timezone
from injector import inject
from sqlalchemy.orm import Session

from database.connection import get_db_session
from models.profile import Profile
from repositories.profile_repository import ProfileRepository
from repositories.activity_repository import ActivityRepository
from repositories.category_repository import CategoryRepository
from services.exceptions import ValidationError, ConflictError, PermissionDeniedError
from services.xp_engine import (
    ProfileTotals,
    compute_level,
    compute_profile_totals,
    compute_report_card,
    level_title
)
import config.settings as settings

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ('full_name', 'avatar_url', 'school', 'graduation_year', 'bio', 'is_public')


def serialize_profile(profile: Profile) -> Dict[str, Any]:
    data = profile.to_dict()
    data['level_title'] = level_title(profile.level)
    return data


class ProfileService:
    """Service class for profile-related business operations."""

    @inject
    def __init__(
        self,
        profile_repository: ProfileRepository,
        activity_repository: ActivityRepository,
        category_repository: CategoryRepository
    ):
        """Initialize ProfileService."""
        self.profile_repository = profile_repository
        self.activity_repository = activity_repository
        self.category_repository = category_repository

    def register_profile(
        self,
        email: str,
        full_name: str,
        school: Optional[str] = None,
        graduation_year: Optional[int] = None,
        bio: Optional[str] = None,
        is_admin: bool = False
    ) -> Dict[str, Any]:
        """
        Register a new profile.

        Args:
            email: Email address (unique)
            full_name: Display name
            school: School name (optional)
            graduation_year: Expected graduation year (optional)
            bio: Short biography (optional)
            is_admin: Grant administrator rights

        Returns:
            Serialized profile

        Raises:
            ValidationError: If a required field is missing or malformed
            ConflictError: If the email is already registered
        """
        email = (email or '').strip().lower()
        full_name = (full_name or '').strip()

        if not email or '@' not in email:
            raise ValidationError("A valid email is required")
        if not full_name:
            raise ValidationError("full_name is required")
        if graduation_year is not None and not isinstance(graduation_year, int):
            raise ValidationError("graduation_year must be an integer")

        with get_db_session() as session:
            if self.profile_repository.get_by_email(session, email):
                raise ConflictError(f"Profile with email {email} already exists")

            now = datetime.now(timezone.utc)
            profile = self.profile_repository.create(
                session,
                email=email,
                full_name=full_name,
                school=school,
                graduation_year=graduation_year,
                bio=bio,
                is_admin=bool(is_admin),
                total_xp=0,
                level=compute_level(0),
                streak=0,
                created_at=now,
                updated_at=now
            )
            result = serialize_profile(profile)

        logger.info(f"Profile registered: {result['id']} ({email})")
        return result

    def get_profile(self, profile_id: int) -> Dict[str, Any]:
        """
        Get profile by ID.

        Args:
            profile_id: Profile ID

        Returns:
            Serialized profile including level title
        """
        with get_db_session() as session:
            profile = self.profile_repository.get_by_id_or_raise(session, profile_id)
            return serialize_profile(profile)

    def update_profile(self, profile_id: int, **update_data) -> Dict[str, Any]:
        """
        Update editable profile fields.

        XP totals, level and admin rights are not editable here.

        Args:
            profile_id: Profile ID
            **update_data: Fields to update

        Returns:
            Serialized profile
        """
        clean_update_data = {
            key: value for key, value in update_data.items() if key in UPDATABLE_FIELDS
        }

        if 'full_name' in clean_update_data:
            name = (clean_update_data['full_name'] or '').strip()
            if not name:
                raise ValidationError("full_name cannot be empty")
            clean_update_data['full_name'] = name

        if not clean_update_data:
            raise ValidationError("No valid fields to update")

        clean_update_data['updated_at'] = datetime.now(timezone.utc)

        with get_db_session() as session:
            profile = self.profile_repository.get_by_id_or_raise(session, profile_id)
            self.profile_repository.update(session, profile, **clean_update_data)
            result = serialize_profile(profile)

        logger.info(f"Profile updated: {profile_id}")
        return result

    def require_admin(self, session: Session, admin_id: Optional[int]) -> Profile:
        """
        Resolve the acting profile and check it has admin rights.

        Raises:
            PermissionDeniedError: If admin_id is missing or not an administrator
        """
        if admin_id is None:
            raise PermissionDeniedError("admin_id is required")

        admin = self.profile_repository.get_by_id(session, admin_id)
        if admin is None or not admin.is_admin:
            logger.warning(f"Admin operation refused for profile {admin_id}")
            raise PermissionDeniedError("Administrator privileges required")
        return admin

    def apply_xp(self, session: Session, user_id: int, xp_earned: int) -> ProfileTotals:
        """
        Add XP to a profile's running total and recompute its level.

        Must be called inside the same transaction that approves the
        activity, so the ledger and the running total commit together.

        Args:
            session: Open database session
            user_id: Profile ID
            xp_earned: XP of the newly approved activity

        Returns:
            The new totals
        """
        profile = self.profile_repository.get_for_update(session, user_id)
        totals = compute_profile_totals(profile.total_xp or 0, xp_earned)
        self.profile_repository.set_totals(session, profile, totals.total_xp, totals.level)

        if totals.leveled_up:
            logger.info(f"Profile {user_id} reached level {totals.level}")
        return totals

    def reconcile_totals(self, profile_id: int, admin_id: int) -> Dict[str, Any]:
        """
        Recompute a profile's total_xp and level from the approved ledger.

        This is the reconciliation job for the running total; it repairs
        drift left by writes made outside apply_xp.

        Args:
            profile_id: Profile to reconcile
            admin_id: Acting administrator

        Returns:
            Dictionary with the previous and reconciled totals
        """
        with get_db_session() as session:
            self.require_admin(session, admin_id)
            profile = self.profile_repository.get_for_update(session, profile_id)
            previous = {'total_xp': profile.total_xp, 'level': profile.level}

            approved = self.activity_repository.get_approved(session, user_id=profile_id)
            total_xp = sum(int(activity.xp_earned) for activity in approved)
            self.profile_repository.set_totals(session, profile, total_xp, compute_level(total_xp))

            result = {
                'profile_id': profile_id,
                'previous': previous,
                'reconciled': {'total_xp': profile.total_xp, 'level': profile.level},
                'changed': previous['total_xp'] != profile.total_xp
            }

        if result['changed']:
            logger.warning(
                f"Profile {profile_id} total_xp drifted: "
                f"{previous['total_xp']} -> {result['reconciled']['total_xp']}"
            )
        return result

    def get_report_card(self, profile_id: int) -> Dict[str, Any]:
        """
        Build the skills report card for a profile.

        Args:
            profile_id: Profile ID

        Returns:
            Profile summary, per-category stats, overall totals and the
            approved activities newest first
        """
        with get_db_session() as session:
            profile = self.profile_repository.get_by_id_or_raise(session, profile_id)
            categories = self.category_repository.get_all_categories(session)
            activities = self.activity_repository.get_approved(session, user_id=profile_id)

            report = compute_report_card(activities, categories, settings.CATEGORY_TARGET_HOURS)
            names = {category.id: category.name for category in categories}

            category_rows = []
            for stats in report.categories:
                row = stats.to_dict()
                row['category_name'] = names.get(stats.category_id)
                category_rows.append(row)

            recent = sorted(activities, key=lambda a: (a.date, a.id), reverse=True)

            return {
                'profile': serialize_profile(profile),
                'target_hours': settings.CATEGORY_TARGET_HOURS,
                'categories': category_rows,
                'total_hours': report.total_hours,
                'total_xp': report.total_xp,
                'activities_count': report.activities_count,
                'activities': [
                    dict(activity.to_dict(), category_name=names.get(activity.category_id))
                    for activity in recent
                ]
            }
