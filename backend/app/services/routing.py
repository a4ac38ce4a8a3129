"""Multi-leg routing.

Each consecutive waypoint pair is routed independently by an external
provider (BRouter by default). The legs are stitched into one path: every
leg after the first starts on the waypoint the previous leg ended on, so
that shared point is dropped once. The route distance is recomputed from
the stitched points with the same haversine used for uploaded tracks;
provider-reported lengths are ignored.
"""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Optional, Protocol, Sequence

import httpx

from app.core.constants import ROUTING_MODES
from app.core.errors import (
    InsufficientWaypointsError,
    RoutingProviderError,
    RoutingServiceUnavailable,
    UnsupportedModeError,
    ValidationError,
)
from app.core.geometry import Point, track_distance_km, validate_points

logger = logging.getLogger(__name__)


class RoutingProvider(Protocol):
    def route_leg(self, start: Point, end: Point, profile: str) -> list[Point]:
        ...


def geojson_to_points(data: dict) -> list[Point]:
    """Collect LineString coordinates ([lng, lat, ele?]) from a FeatureCollection."""
    points: list[Point] = []
    for feature in (data or {}).get("features") or []:
        geometry = (feature or {}).get("geometry") or {}
        if geometry.get("type") != "LineString":
            continue
        for coord in geometry.get("coordinates") or []:
            if len(coord) < 2:
                continue
            ele = coord[2] if len(coord) > 2 else None
            points.append(
                Point(
                    lat=float(coord[1]),
                    lng=float(coord[0]),
                    elevation=float(ele) if ele is not None else None,
                )
            )
    return points


class BRouterProvider:
    """HTTP client for a BRouter-compatible ``/brouter`` endpoint."""

    def __init__(self, base_url: str, timeout: float = 60.0, client: Optional[httpx.Client] = None):
        self.base_url = base_url
        self.timeout = timeout
        self._client = client

    def _get(self, client: httpx.Client, params: dict) -> httpx.Response:
        try:
            return client.get(self.base_url, params=params)
        except httpx.TimeoutException as e:
            raise RoutingServiceUnavailable(f"Routing service timed out after {self.timeout}s") from e
        except httpx.RequestError as e:
            raise RoutingServiceUnavailable(f"Routing service unavailable: {e}") from e

    def route_leg(self, start: Point, end: Point, profile: str) -> list[Point]:
        params = {
            "lonlats": f"{start.lng},{start.lat}|{end.lng},{end.lat}",
            "profile": profile,
            "format": "geojson",
        }
        if self._client is not None:
            r = self._get(self._client, params)
        else:
            with httpx.Client(timeout=self.timeout) as client:
                r = self._get(client, params)

        if not r.is_success:
            raise RoutingProviderError(r.status_code, r.text)
        try:
            data = r.json()
        except ValueError:
            raise RoutingProviderError(r.status_code, "Routing provider returned invalid JSON")
        try:
            return geojson_to_points(data)
        except (AttributeError, TypeError, ValueError, IndexError) as e:
            raise RoutingProviderError(r.status_code, "Routing provider returned malformed GeoJSON") from e


def stitch_legs(legs: Sequence[Sequence[Point]]) -> list[Point]:
    """Concatenate legs, dropping each leg's first point once something is accumulated."""
    stitched: list[Point] = []
    for leg in legs:
        if stitched and leg:
            leg = leg[1:]
        stitched.extend(leg)
    return stitched


@dataclass
class StitchedRoute:
    mode: str
    color: str
    track_mode: str
    points: list[Point] = field(default_factory=list)
    distance_km: float = 0.0


class RouteStitcher:
    def __init__(self, provider: RoutingProvider, max_workers: int = 1):
        self.provider = provider
        self.max_workers = max(1, int(max_workers))

    def _route_leg(self, leg: int, start: Point, end: Point, profile: str) -> list[Point]:
        logger.debug("Routing leg %d (%s): %s -> %s", leg, profile, start, end)
        try:
            return self.provider.route_leg(start, end, profile)
        except RoutingProviderError as e:
            logger.warning("Routing provider error on leg %d: %s %s", leg, e.status, e.body)
            raise RoutingProviderError(e.status, e.body, leg=leg) from e
        except RoutingServiceUnavailable as e:
            logger.warning("Routing service unavailable on leg %d: %s", leg, e.detail)
            raise

    def stitch(self, waypoints: Sequence[Point], mode: str) -> StitchedRoute:
        if waypoints is None or len(waypoints) < 2:
            raise InsufficientWaypointsError("At least 2 waypoints required (start and end)")
        if mode not in ROUTING_MODES:
            supported = ", ".join(ROUTING_MODES)
            raise UnsupportedModeError(f"Invalid mode '{mode}'. Supported: {supported}")
        try:
            validate_points(waypoints)
        except ValidationError as e:
            raise ValidationError(f"Invalid waypoint: {e.detail}") from e

        profile, color, track_mode = ROUTING_MODES[mode]
        pairs = [(i, waypoints[i], waypoints[i + 1], profile) for i in range(len(waypoints) - 1)]

        if self.max_workers > 1 and len(pairs) > 1:
            # map() yields in submission order, so legs stay in waypoint order
            with ThreadPoolExecutor(max_workers=min(self.max_workers, len(pairs))) as pool:
                legs = list(pool.map(lambda args: self._route_leg(*args), pairs))
        else:
            legs = [self._route_leg(*args) for args in pairs]

        points = stitch_legs(legs)
        route = StitchedRoute(
            mode=mode,
            color=color,
            track_mode=track_mode,
            points=points,
            distance_km=track_distance_km(points),
        )
        logger.info(
            "Stitched %d legs (%s): %d points, %.2f km",
            len(legs), mode, len(points), route.distance_km,
        )
        return route
