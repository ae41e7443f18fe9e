from fastapi import APIRouter, Depends

from ...dependencies import get_current_user_id, get_preferences_service
from ....news.schemas.requests import UserPreferencesData
from ....news.schemas.responses import UserPreferencesResponse
from ....services.preferences_service import PreferencesService

router = APIRouter()


@router.get("/preferences", response_model=UserPreferencesResponse)
async def get_preferences(
    user_id: int = Depends(get_current_user_id),
    preferences: PreferencesService = Depends(get_preferences_service)
):
    return preferences.get_user_preferences(user_id)


@router.put("/preferences", response_model=UserPreferencesResponse)
async def update_preferences(
    data: UserPreferencesData,
    user_id: int = Depends(get_current_user_id),
    preferences: PreferencesService = Depends(get_preferences_service)
):
    return preferences.update_user_preferences(user_id, data)
