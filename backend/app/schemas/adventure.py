from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.track import TrackRead


class SortField(str, Enum):
    date = "date"
    createdAt = "createdAt"
    name = "name"


class SortOrder(str, Enum):
    asc = "asc"
    desc = "desc"


class AdventureCreate(BaseModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    adventure_date: Optional[date] = None
    center_lat: Optional[float] = Field(default=None, ge=-90, le=90)
    center_lng: Optional[float] = Field(default=None, ge=-180, le=180)
    zoom: Optional[int] = Field(default=None, ge=0, le=22)


class AdventureUpdate(BaseModel):
    """All fields optional; only those sent are applied."""
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    adventure_date: Optional[date] = None
    center_lat: Optional[float] = Field(default=None, ge=-90, le=90)
    center_lng: Optional[float] = Field(default=None, ge=-180, le=180)
    zoom: Optional[int] = Field(default=None, ge=0, le=22)
    preview_picture_id: Optional[int] = None

    # Be lenient with extra fields from clients
    model_config = ConfigDict(extra="ignore")


class TagRead(BaseModel):
    id: int
    name: str
    color: str
    category: str

    model_config = ConfigDict(from_attributes=True)


class TagCreate(BaseModel):
    name: str = Field(min_length=1)
    color: Optional[str] = None
    category: Optional[str] = None


class AdventureTagsUpdate(BaseModel):
    tag_ids: list[int]


class WaypointCreate(BaseModel):
    name: Optional[str] = None
    icon: Optional[str] = None
    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)


class WaypointUpdate(BaseModel):
    # Waypoints can be renamed / re-iconed but not moved
    name: Optional[str] = None
    icon: Optional[str] = None

    model_config = ConfigDict(extra="ignore")


class WaypointRead(BaseModel):
    id: int
    name: Optional[str] = None
    icon: str
    latitude: float
    longitude: float

    model_config = ConfigDict(from_attributes=True)


class PictureCreate(BaseModel):
    asset_id: Optional[str] = None
    filename: Optional[str] = None
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)
    taken_at: Optional[datetime] = None
    thumbnail_url: Optional[str] = None


class PictureRead(PictureCreate):
    id: int

    model_config = ConfigDict(from_attributes=True)


class AdventureSummary(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    adventure_date: Optional[date] = None
    center_lat: float
    center_lng: float
    zoom: int
    track_count: int
    picture_count: int
    tracks_by_mode: dict[str, int]
    total_distance_km: float
    is_owner: bool
    permission: str
    owner: Optional[str] = None
    preview_picture: Optional[PictureRead] = None
    tags: list[TagRead] = []
    created_at: datetime
    updated_at: datetime


class AdventureDetail(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    adventure_date: Optional[date] = None
    center_lat: float
    center_lng: float
    zoom: int
    viewport_derived: bool
    is_owner: bool
    permission: str
    owner: Optional[str] = None
    preview_picture_id: Optional[int] = None
    tracks: list[TrackRead]
    waypoints: list[WaypointRead]
    pictures: list[PictureRead]
    tags: list[TagRead]
    created_at: datetime
    updated_at: datetime
