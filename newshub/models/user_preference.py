from sqlalchemy import Column, Integer, DateTime, JSON
from sqlalchemy.sql import func

from ..core.database import Base


class UserPreference(Base):
    __tablename__ = "user_preferences"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, nullable=False, unique=True, index=True)
    preferences = Column(JSON, nullable=False, default=dict)

    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<UserPreference(user_id={self.user_id})>"
