from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from app.core.geometry import Point


class TrackMode(str, Enum):
    walking = "walking"
    hiking = "hiking"
    cycling = "cycling"
    bus = "bus"
    metro = "metro"
    train = "train"
    boat = "boat"
    car = "car"
    other = "other"


class PointIn(BaseModel):
    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)
    elevation: Optional[float] = None
    timestamp: Optional[str] = None

    def to_point(self) -> Point:
        return Point(lat=self.lat, lng=self.lng, elevation=self.elevation, timestamp=self.timestamp)


class PointOut(BaseModel):
    lat: float
    lng: float
    elevation: Optional[float] = None
    timestamp: Optional[str] = None


class TrackCreate(BaseModel):
    """Drawn or routed track saved from the editor."""
    name: str = Field(min_length=1)
    mode: TrackMode = TrackMode.hiking
    color: Optional[str] = None  # overrides the mode color
    points: list[PointIn]


class TrackUpdate(BaseModel):
    name: Optional[str] = None
    mode: Optional[TrackMode] = None
    color: Optional[str] = None
    points: Optional[list[PointIn]] = None

    # distance and ids are derived server-side; ignore them if sent
    model_config = ConfigDict(extra="ignore")


class TrackSummary(BaseModel):
    id: int
    name: str
    mode: str
    color: str
    distance_km: float

    model_config = ConfigDict(from_attributes=True)


class TrackRead(TrackSummary):
    adventure_id: int
    points: list[PointOut]
    point_count: int


class MapTrack(TrackRead):
    """Track plus its adventure, for the combined map of all adventures."""
    adventure_name: str
