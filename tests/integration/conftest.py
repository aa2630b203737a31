"""
Fixtures for service and route tests against the SQLite test database.
"""
from datetime import date
from types import SimpleNamespace

import pytest

from database import Base
from database.connection import engine
import models  # noqa: F401
from repositories import (
    ActivityRepository,
    BadgeRepository,
    CategoryRepository,
    GoalRepository,
    KudosRepository,
    ProfileRepository,
    SubSkillRepository,
    UserBadgeRepository,
)
from services.activity_service import ActivityService
from services.badge_service import BadgeService
from services.category_service import CategoryService
from services.goal_service import GoalService
from services.profile_service import ProfileService
from services.verification_service import VerificationService


@pytest.fixture(autouse=True)
def database():
    """Fresh schema for every test."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def services(kafka_service):
    """Services wired the same way config.injection wires them."""
    profile_repository = ProfileRepository()
    category_repository = CategoryRepository()
    activity_repository = ActivityRepository()
    badge_repository = BadgeRepository()
    user_badge_repository = UserBadgeRepository()

    profile_service = ProfileService(profile_repository, activity_repository, category_repository)
    badge_service = BadgeService(
        badge_repository,
        user_badge_repository,
        activity_repository,
        category_repository,
        profile_repository,
        profile_service,
        kafka_service
    )

    return SimpleNamespace(
        kafka=kafka_service,
        profiles=profile_service,
        badges=badge_service,
        categories=CategoryService(
            category_repository,
            activity_repository,
            profile_repository,
            badge_repository,
            user_badge_repository,
            SubSkillRepository(),
            profile_service
        ),
        activities=ActivityService(
            activity_repository,
            category_repository,
            profile_repository,
            KudosRepository(),
            profile_service,
            badge_service,
            kafka_service
        ),
        verification=VerificationService(
            activity_repository, profile_service, badge_service, kafka_service
        ),
        goals=GoalService(
            GoalRepository(),
            category_repository,
            activity_repository,
            profile_repository,
            kafka_service
        )
    )


@pytest.fixture
def admin(services):
    return services.profiles.register_profile(
        email='coach@example.com', full_name='Coach Admin', is_admin=True
    )


@pytest.fixture
def student(services):
    return services.profiles.register_profile(
        email='student@example.com', full_name='Sam Student', school='North High'
    )


@pytest.fixture
def other_student(services):
    return services.profiles.register_profile(
        email='other@example.com', full_name='Alex Other'
    )


@pytest.fixture
def stem(services, admin):
    return services.categories.create_category(
        admin['id'], name='STEM', xp_multiplier=2.5
    )


@pytest.fixture
def arts(services, admin):
    return services.categories.create_category(
        admin['id'], name='Arts', xp_multiplier=1.0
    )


@pytest.fixture
def log(services):
    """Log an activity with sensible defaults."""
    def _log(user, category, hours, day=date(2026, 3, 1), **kwargs):
        return services.activities.log_activity(
            user_id=user['id'],
            category_id=category['id'],
            title=kwargs.pop('title', f"{hours}h of {category['name']}"),
            activity_date=day,
            duration_hours=hours,
            **kwargs
        )
    return _log


@pytest.fixture
def client():
    from main import create_app
    app = create_app()
    app.config['TESTING'] = True
    return app.test_client()
