from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from ..models.user_preference import UserPreference


class PreferencesRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_user_id(self, user_id: int) -> Optional[UserPreference]:
        return self.db.query(UserPreference).filter(UserPreference.user_id == user_id).first()

    def upsert_for_user(self, user_id: int, preferences: Dict[str, Any]) -> UserPreference:
        record = self.get_by_user_id(user_id)
        if record is None:
            record = UserPreference(user_id=user_id, preferences=preferences)
            self.db.add(record)
        else:
            # Reassign so the JSON column is marked dirty
            record.preferences = dict(preferences)

        self.db.commit()
        self.db.refresh(record)
        return record
