"""사용자 API - 등록 장소, 적립 점수"""
from fastapi import APIRouter, Depends

from reciapp.api.deps import get_locations_repo, get_users_repo
from reciapp.repositories.locations import LocationsRepository
from reciapp.repositories.users import UsersRepository
from reciapp.schemas.user import ScoreResponse, UserLocationsResponse
from reciapp.services import picking

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("/{user_id}/score", response_model=ScoreResponse)
def get_location_score(
    user_id: str,
    users: UsersRepository = Depends(get_users_repo),
    locations: LocationsRepository = Depends(get_locations_repo),
):
    """장소 balance 합계 (장소가 없으면 0)"""
    return picking.location_score(users, locations, user_id)


@router.get("/{user_id}/locations", response_model=UserLocationsResponse)
def list_user_locations(
    user_id: str,
    users: UsersRepository = Depends(get_users_repo),
    locations: LocationsRepository = Depends(get_locations_repo),
):
    return picking.user_locations(users, locations, user_id)
