from fastapi import APIRouter, Depends

from app.api.deps import get_current_user
from app.core.config import settings
from app.core.geometry import Point
from app.models.user import User
from app.schemas.routing import RouteRequest, RouteResponse
from app.schemas.track import PointOut
from app.services.routing import BRouterProvider, RouteStitcher, RoutingProvider

router = APIRouter(prefix="/routing", tags=["routing"])


def get_routing_provider() -> RoutingProvider:
    return BRouterProvider(settings.routing_url, timeout=settings.routing_timeout_s)


@router.post("/route", response_model=RouteResponse)
def calculate_route(
    payload: RouteRequest,
    provider: RoutingProvider = Depends(get_routing_provider),
    user: User = Depends(get_current_user),
):
    """Route through the waypoints in order; the result is saved as a track separately."""
    stitcher = RouteStitcher(provider, max_workers=settings.routing_max_workers)
    waypoints = [Point(lat=w.lat, lng=w.lng) for w in payload.waypoints]
    route = stitcher.stitch(waypoints, payload.mode)
    return RouteResponse(
        points=[PointOut(**p.to_dict()) for p in route.points],
        distance_km=route.distance_km,
        mode=route.mode,
        color=route.color,
        track_mode=route.track_mode,
    )
