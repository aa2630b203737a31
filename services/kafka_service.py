"""
Kafka Service for publishing gamification events to Kafka topics.
"""
import json
import logging
from datetime import datetime, timezone
from typing import Dict, Any, Optional
from kafka import KafkaProducer
from kafka.errors import KafkaError
import config.settings as settings

logger = logging.getLogger(__name__)

TOPIC_ACTIVITY_LOGGED = 'activity.logged'
TOPIC_ACTIVITY_VERIFIED = 'activity.verified'
TOPIC_LEVEL_UP = 'profile.level_up'
TOPIC_GOAL_COMPLETED = 'goal.completed'
TOPIC_BADGE_AWARDED = 'badge.awarded'


class KafkaService:
    """Service for handling Kafka operations."""

    def __init__(self, enabled: Optional[bool] = None):
        """Initialize Kafka service; no producer is created when disabled."""
        self.enabled = settings.KAFKA_ENABLED if enabled is None else enabled
        self.bootstrap_servers = settings.KAFKA_BOOTSTRAP_SERVERS
        self.producer = None
        if self.enabled:
            self._init_producer()

    def _init_producer(self) -> None:
        """Initialize Kafka producer."""
        try:
            self.producer = KafkaProducer(
                bootstrap_servers=self.bootstrap_servers,
                value_serializer=lambda x: json.dumps(x).encode('utf-8'),
                key_serializer=lambda x: x.encode('utf-8') if x else None,
                acks='all',  # Wait for all replicas to acknowledge
                retries=3,
                retry_backoff_ms=1000,
                request_timeout_ms=30000
            )
            logger.info(f"Kafka producer initialized with servers: {self.bootstrap_servers}")
        except Exception as e:
            logger.error(f"Failed to initialize Kafka producer: {e}")
            self.producer = None

    def publish_activity_logged(self, activity: Dict[str, Any]) -> bool:
        """
        Publish message to activity.logged topic.

        Args:
            activity: Serialized activity

        Returns:
            True if published successfully, False otherwise
        """
        return self._publish_message(
            topic=TOPIC_ACTIVITY_LOGGED,
            key=str(activity['user_id']),
            value={
                'activity_id': activity['id'],
                'user_id': activity['user_id'],
                'category_id': activity['category_id'],
                'duration_hours': activity['duration_hours'],
                'xp_earned': activity['xp_earned'],
                'status': activity['status'],
                'timestamp': self._get_timestamp()
            }
        )

    def publish_activity_verified(self, activity: Dict[str, Any]) -> bool:
        """
        Publish message to activity.verified topic.

        Args:
            activity: Serialized activity after the status change

        Returns:
            True if published successfully, False otherwise
        """
        return self._publish_message(
            topic=TOPIC_ACTIVITY_VERIFIED,
            key=str(activity['user_id']),
            value={
                'activity_id': activity['id'],
                'user_id': activity['user_id'],
                'status': activity['status'],
                'verified_by': activity['verified_by'],
                'xp_earned': activity['xp_earned'],
                'timestamp': self._get_timestamp()
            }
        )

    def publish_level_up(self, user_id: int, old_level: int, new_level: int, total_xp: int) -> bool:
        """
        Publish message to profile.level_up topic.

        Args:
            user_id: Profile ID
            old_level: Level before the XP change
            new_level: Level after the XP change
            total_xp: Running total after the XP change

        Returns:
            True if published successfully, False otherwise
        """
        return self._publish_message(
            topic=TOPIC_LEVEL_UP,
            key=str(user_id),
            value={
                'user_id': user_id,
                'old_level': old_level,
                'new_level': new_level,
                'total_xp': total_xp,
                'timestamp': self._get_timestamp()
            }
        )

    def publish_goal_completed(self, goal: Dict[str, Any]) -> bool:
        """
        Publish message to goal.completed topic.

        Args:
            goal: Serialized goal including completed_at

        Returns:
            True if published successfully, False otherwise
        """
        return self._publish_message(
            topic=TOPIC_GOAL_COMPLETED,
            key=str(goal['user_id']),
            value={
                'goal_id': goal['id'],
                'user_id': goal['user_id'],
                'category_id': goal['category_id'],
                'target_hours': goal['target_hours'],
                'completed_at': goal['completed_at'],
                'timestamp': self._get_timestamp()
            }
        )

    def publish_badge_awarded(self, user_id: int, badge: Dict[str, Any], manual: bool) -> bool:
        """
        Publish message to badge.awarded topic.

        Args:
            user_id: Profile ID
            badge: Serialized badge definition
            manual: True when an admin awarded it, False when criteria unlocked it

        Returns:
            True if published successfully, False otherwise
        """
        return self._publish_message(
            topic=TOPIC_BADGE_AWARDED,
            key=str(user_id),
            value={
                'user_id': user_id,
                'badge_id': badge['id'],
                'badge_name': badge['name'],
                'tier': badge['tier'],
                'manual': manual,
                'timestamp': self._get_timestamp()
            }
        )

    def _publish_message(self, topic: str, key: str, value: Dict[str, Any]) -> bool:
        """
        Publish message to Kafka topic.

        Args:
            topic: Kafka topic name
            key: Message key
            value: Message value

        Returns:
            True if published successfully, False otherwise
        """
        if not self.enabled:
            logger.debug(f"Kafka disabled, skipping message to {topic}")
            return False

        if not self.producer:
            logger.error("Kafka producer not initialized")
            return False

        try:
            future = self.producer.send(topic, key=key, value=value)
            record_metadata = future.get(timeout=settings.KAFKA_SEND_TIMEOUT)
            logger.info(
                f"Message published to {topic} - "
                f"partition: {record_metadata.partition}, "
                f"offset: {record_metadata.offset}"
            )
            return True

        except KafkaError as e:
            logger.error(f"Failed to publish message to {topic}: {e}")
            return False

    def _get_timestamp(self) -> str:
        """Get current timestamp in ISO format."""
        return datetime.now(timezone.utc).isoformat()

    def close(self) -> None:
        """Close Kafka producer."""
        if self.producer:
            self.producer.close()
            logger.info("Kafka producer closed")
