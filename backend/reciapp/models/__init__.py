"""DB 모델"""
from reciapp.models.user import User
from reciapp.models.location import Location
from reciapp.models.route import PickingRoute, PickingPoint

__all__ = [
    "User",
    "Location",
    "PickingRoute",
    "PickingPoint",
]
