"""gatherer API - 본인에게 배정된 루트"""
from fastapi import APIRouter, Depends

from reciapp.api.deps import get_routes_repo, get_time_helper, get_users_repo
from reciapp.core.time_helper import TimeHelper
from reciapp.repositories.routes import RoutesRepository
from reciapp.repositories.users import UsersRepository
from reciapp.schemas.route import AssignedRoutesResponse
from reciapp.services import picking

router = APIRouter(prefix="/api/gatherers", tags=["gatherers"])


@router.get("/{user_id}/assigned-routes", response_model=AssignedRoutesResponse)
def list_assigned_routes(
    user_id: str,
    users: UsersRepository = Depends(get_users_repo),
    routes: RoutesRepository = Depends(get_routes_repo),
    time_helper: TimeHelper = Depends(get_time_helper),
):
    return picking.list_assigned_routes(users, routes, time_helper, user_id)
