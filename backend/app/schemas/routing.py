from pydantic import BaseModel

from app.schemas.track import PointOut


class LatLng(BaseModel):
    # Range checks happen in the stitcher so they surface as routing input errors
    lat: float
    lng: float


class RouteRequest(BaseModel):
    waypoints: list[LatLng]
    mode: str


class RouteResponse(BaseModel):
    points: list[PointOut]
    distance_km: float
    mode: str
    color: str
    track_mode: str  # mode to save the route under
