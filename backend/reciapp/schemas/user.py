"""사용자/장소 응답 스키마"""
from pydantic import BaseModel, Field


class ScoreResponse(BaseModel):
    username: str
    score: int = 0


class LocationView(BaseModel):
    id: str
    name: str
    country: str
    city: str
    address_1: str
    address_2: str
    latitude: float
    longitude: float
    balance: float = 0

    model_config = {"from_attributes": True}


class UserLocationsResponse(BaseModel):
    locations: list[LocationView] = Field(default_factory=list)
