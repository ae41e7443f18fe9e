from .user_preference import UserPreference

__all__ = ["UserPreference"]
