"""Derived geometry for track points.

Pure functions only: distances, bounding boxes and the map viewport
heuristic. Every distance uses ``EARTH_RADIUS_M`` (6 371 000 m) so track
distances, route distances and adventure totals always agree.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, asdict
from typing import Iterable, Optional, Sequence

from app.core.constants import EARTH_RADIUS_M, ZOOM_STEPS, ZOOM_FLOOR
from app.core.errors import EmptyInputError, ValidationError


@dataclass(frozen=True)
class Point:
    lat: float
    lng: float
    elevation: Optional[float] = None
    timestamp: Optional[str] = None

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: dict) -> "Point":
        # "lon"/"ele"/"time" are accepted for payloads written by GPX-minded clients
        lng = d.get("lng", d.get("lon"))
        ele = d.get("elevation", d.get("ele"))
        return cls(
            lat=float(d["lat"]),
            lng=float(lng),
            elevation=float(ele) if ele is not None else None,
            timestamp=d.get("timestamp", d.get("time")),
        )


@dataclass(frozen=True)
class BoundingBox:
    min_lat: float
    min_lng: float
    max_lat: float
    max_lng: float

    @property
    def lat_range(self) -> float:
        return self.max_lat - self.min_lat

    @property
    def lng_range(self) -> float:
        return self.max_lng - self.min_lng


def distance_meters(a: Point, b: Point) -> float:
    """Great-circle distance in meters between two points (haversine)."""
    phi1, phi2 = math.radians(a.lat), math.radians(b.lat)
    dphi = math.radians(b.lat - a.lat)
    dlambda = math.radians(b.lng - a.lng)
    h = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return EARTH_RADIUS_M * c


def track_distance_km(points: Sequence[Point]) -> float:
    """Sum of consecutive segment lengths in km, rounded to 2 decimals."""
    if len(points) < 2:
        return 0.0
    total_m = 0.0
    for i in range(1, len(points)):
        total_m += distance_meters(points[i - 1], points[i])
    return round(total_m / 1000.0, 2)


def bounding_box(points: Iterable[Point]) -> BoundingBox:
    pts = list(points)
    if not pts:
        raise EmptyInputError("Cannot compute a bounding box of zero points")
    lats = [p.lat for p in pts]
    lngs = [p.lng for p in pts]
    return BoundingBox(
        min_lat=min(lats),
        min_lng=min(lngs),
        max_lat=max(lats),
        max_lng=max(lngs),
    )


def derive_zoom(bbox: BoundingBox) -> int:
    """Map zoom level as a step function of the widest bbox axis.

    <0.01 -> 15, <0.1 -> 12, <1 -> 9, <10 -> 6, else 4. A presentation
    heuristic, not a viewport fit.
    """
    max_range = max(bbox.lat_range, bbox.lng_range)
    for upper, zoom in ZOOM_STEPS:
        if max_range < upper:
            return zoom
    return ZOOM_FLOOR


def center_of(bbox: BoundingBox) -> Point:
    # Midpoint of the box, not the centroid of the points
    return Point(
        lat=(bbox.min_lat + bbox.max_lat) / 2,
        lng=(bbox.min_lng + bbox.max_lng) / 2,
    )


def viewport(points: Sequence[Point]) -> tuple[Point, int]:
    bbox = bounding_box(points)
    return center_of(bbox), derive_zoom(bbox)


def validate_point(lat, lng) -> None:
    """Raise ValidationError unless (lat, lng) is a finite WGS84 coordinate."""
    try:
        lat_f, lng_f = float(lat), float(lng)
    except (TypeError, ValueError):
        raise ValidationError("lat/lng must be numbers")
    if not (math.isfinite(lat_f) and math.isfinite(lng_f)):
        raise ValidationError("lat/lng must be finite")
    if not -90.0 <= lat_f <= 90.0:
        raise ValidationError(f"lat {lat_f} out of range [-90, 90]")
    if not -180.0 <= lng_f <= 180.0:
        raise ValidationError(f"lng {lng_f} out of range [-180, 180]")


def validate_points(points: Iterable[Point]) -> None:
    for p in points:
        validate_point(p.lat, p.lng)
