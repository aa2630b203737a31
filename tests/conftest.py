"""
Shared fixtures for the SkillForge test suite.

The database URL and Kafka switch are read when config.settings is first
imported, so they are set here before any application module is loaded.
Integration tests run against a throwaway SQLite file.
"""
import os
import tempfile

_DB_DIR = tempfile.mkdtemp(prefix='skillforge-tests-')
os.environ['DATABASE_URL'] = f"sqlite:///{os.path.join(_DB_DIR, 'skillforge.db')}"
os.environ['KAFKA_ENABLED'] = 'false'
os.environ['AUTO_APPROVE_ACTIVITIES'] = 'true'

from datetime import date
from types import SimpleNamespace
from unittest import mock

import pytest

from models.enums import ActivityStatus


def make_activity(
    user_id=1,
    category_id=1,
    duration_hours=1.0,
    xp_earned=50,
    status=ActivityStatus.APPROVED.value,
    day=date(2026, 3, 1),
    activity_id=None
):
    """Lightweight stand-in for an Activity row, for engine tests."""
    return SimpleNamespace(
        id=activity_id,
        user_id=user_id,
        category_id=category_id,
        duration_hours=duration_hours,
        xp_earned=xp_earned,
        status=status,
        date=day
    )


@pytest.fixture
def activity_factory():
    return make_activity


@pytest.fixture
def category_factory():
    def _make(category_id=1, xp_multiplier=1.0):
        return SimpleNamespace(id=category_id, xp_multiplier=xp_multiplier)
    return _make


@pytest.fixture
def kafka_service():
    """Kafka publisher double that records calls."""
    from services.kafka_service import KafkaService
    return mock.create_autospec(KafkaService, instance=True)
