import structlog
from sqlalchemy.orm import Session

from ..models.user_preference import UserPreference
from ..news.schemas.requests import UserPreferencesData
from ..news.schemas.responses import UserPreferencesResponse
from ..repositories.preferences_repository import PreferencesRepository
from .cache_service import CacheService

logger = structlog.get_logger(__name__)


class PreferencesService:
    def __init__(self, db: Session, cache: CacheService):
        self.repository = PreferencesRepository(db)
        self.cache = cache

    def get_user_preferences(self, user_id: int) -> UserPreferencesResponse:
        record = self.repository.get_by_user_id(user_id)
        if record is None:
            return UserPreferencesResponse()
        return self._to_response(record)

    def update_user_preferences(self, user_id: int, data: UserPreferencesData) -> UserPreferencesResponse:
        record = self.repository.upsert_for_user(user_id, data.model_dump())

        # Feed keys are hashed, so the user's own entries cannot be singled out
        self.cache.forget_by_prefix("personalized_feed:")
        logger.info("user_preferences_updated", user_id=user_id)

        return self._to_response(record)

    @staticmethod
    def _to_response(record: UserPreference) -> UserPreferencesResponse:
        stored = UserPreferencesData.model_validate(record.preferences or {})
        return UserPreferencesResponse(
            id=record.id,
            user_id=record.user_id,
            created_at=record.created_at,
            updated_at=record.updated_at,
            **stored.model_dump(),
        )
