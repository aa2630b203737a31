"""
Dependency injection configuration using Flask-Injector.
"""
from injector import Module, provider, singleton
from services.kafka_service import KafkaService
from services.profile_service import ProfileService
from services.category_service import CategoryService
from services.badge_service import BadgeService
from services.activity_service import ActivityService
from services.verification_service import VerificationService
from services.goal_service import GoalService
from repositories.profile_repository import ProfileRepository
from repositories.category_repository import CategoryRepository
from repositories.activity_repository import ActivityRepository
from repositories.goal_repository import GoalRepository
from repositories.badge_repository import BadgeRepository, UserBadgeRepository
from repositories.kudos_repository import KudosRepository
from repositories.sub_skill_repository import SubSkillRepository


class ServiceModule(Module):
    """Module that configures dependency injection bindings."""

    @singleton
    @provider
    def provide_kafka_service(self) -> KafkaService:
        """Provide Kafka service instance."""
        return KafkaService()

    @singleton
    @provider
    def provide_profile_service(
        self,
        profile_repository: ProfileRepository,
        activity_repository: ActivityRepository,
        category_repository: CategoryRepository
    ) -> ProfileService:
        """Provide profile service instance."""
        return ProfileService(profile_repository, activity_repository, category_repository)

    @singleton
    @provider
    def provide_category_service(
        self,
        category_repository: CategoryRepository,
        activity_repository: ActivityRepository,
        profile_repository: ProfileRepository,
        badge_repository: BadgeRepository,
        user_badge_repository: UserBadgeRepository,
        sub_skill_repository: SubSkillRepository,
        profile_service: ProfileService
    ) -> CategoryService:
        """Provide category service instance."""
        return CategoryService(
            category_repository,
            activity_repository,
            profile_repository,
            badge_repository,
            user_badge_repository,
            sub_skill_repository,
            profile_service
        )

    @singleton
    @provider
    def provide_badge_service(
        self,
        badge_repository: BadgeRepository,
        user_badge_repository: UserBadgeRepository,
        activity_repository: ActivityRepository,
        category_repository: CategoryRepository,
        profile_repository: ProfileRepository,
        profile_service: ProfileService,
        kafka_service: KafkaService
    ) -> BadgeService:
        """Provide badge service instance."""
        return BadgeService(
            badge_repository,
            user_badge_repository,
            activity_repository,
            category_repository,
            profile_repository,
            profile_service,
            kafka_service
        )

    @singleton
    @provider
    def provide_activity_service(
        self,
        activity_repository: ActivityRepository,
        category_repository: CategoryRepository,
        profile_repository: ProfileRepository,
        kudos_repository: KudosRepository,
        profile_service: ProfileService,
        badge_service: BadgeService,
        kafka_service: KafkaService
    ) -> ActivityService:
        """Provide activity service instance with dependencies injected."""
        return ActivityService(
            activity_repository,
            category_repository,
            profile_repository,
            kudos_repository,
            profile_service,
            badge_service,
            kafka_service
        )

    @singleton
    @provider
    def provide_verification_service(
        self,
        activity_repository: ActivityRepository,
        profile_service: ProfileService,
        badge_service: BadgeService,
        kafka_service: KafkaService
    ) -> VerificationService:
        """Provide verification service instance."""
        return VerificationService(activity_repository, profile_service, badge_service, kafka_service)

    @singleton
    @provider
    def provide_goal_service(
        self,
        goal_repository: GoalRepository,
        category_repository: CategoryRepository,
        activity_repository: ActivityRepository,
        profile_repository: ProfileRepository,
        kafka_service: KafkaService
    ) -> GoalService:
        """Provide goal service instance."""
        return GoalService(
            goal_repository,
            category_repository,
            activity_repository,
            profile_repository,
            kafka_service
        )

    # Repository Providers
    @singleton
    @provider
    def provide_profile_repository(self) -> ProfileRepository:
        """Provide profile repository instance."""
        return ProfileRepository()

    @singleton
    @provider
    def provide_category_repository(self) -> CategoryRepository:
        """Provide category repository instance."""
        return CategoryRepository()

    @singleton
    @provider
    def provide_activity_repository(self) -> ActivityRepository:
        """Provide activity repository instance."""
        return ActivityRepository()

    @singleton
    @provider
    def provide_goal_repository(self) -> GoalRepository:
        """Provide goal repository instance."""
        return GoalRepository()

    @singleton
    @provider
    def provide_badge_repository(self) -> BadgeRepository:
        """Provide badge repository instance."""
        return BadgeRepository()

    @singleton
    @provider
    def provide_user_badge_repository(self) -> UserBadgeRepository:
        """Provide user badge repository instance."""
        return UserBadgeRepository()

    @singleton
    @provider
    def provide_kudos_repository(self) -> KudosRepository:
        """Provide kudos repository instance."""
        return KudosRepository()

    @singleton
    @provider
    def provide_sub_skill_repository(self) -> SubSkillRepository:
        """Provide sub-skill repository instance."""
        return SubSkillRepository()
