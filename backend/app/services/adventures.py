"""Adventure listing and detail with derived stats.

Viewports are recomputed from current track points on every read: when any
track has points, center = bbox midpoint and zoom = step heuristic over the
bbox; otherwise the stored (or default) viewport is returned. Nothing derived
is cached between requests.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.errors import NotFoundError, ValidationError
from app.core.geometry import viewport
from app.models.adventure import Adventure
from app.models.share import AdventureShare
from app.schemas.adventure import (
    AdventureDetail,
    AdventureSummary,
    PictureRead,
    TagRead,
    WaypointRead,
)
from app.schemas.track import MapTrack
from app.services.access import Permission, SHARE_PERMISSIONS, resolve
from app.services.tracks import track_to_read

logger = logging.getLogger(__name__)


SORT_KEYS = {
    "date": lambda a: a.adventure_date,
    "createdAt": lambda a: a.created_at,
    "name": lambda a: a.name.lower() if a.name else None,
}
SORT_ORDERS = ("asc", "desc")


@dataclass
class Viewport:
    center_lat: float
    center_lng: float
    zoom: int
    derived: bool


def derive_viewport(adventure: Adventure) -> Viewport:
    points = [p for track in adventure.tracks for p in track.get_points()]
    if points:
        center, zoom = viewport(points)
        return Viewport(center.lat, center.lng, zoom, True)
    return Viewport(
        center_lat=adventure.center_lat if adventure.center_lat is not None else settings.default_center_lat,
        center_lng=adventure.center_lng if adventure.center_lng is not None else settings.default_center_lng,
        zoom=adventure.zoom if adventure.zoom is not None else settings.default_zoom,
        derived=False,
    )


def sort_adventures(adventures: Iterable[Adventure], sort_field: str, sort_order: str) -> list[Adventure]:
    """Sort by field; nulls go last when descending, first when ascending.

    The sort is stable, so ties keep their incoming order (owned first).
    """
    if sort_field not in SORT_KEYS:
        raise ValidationError(f"sort must be one of: {', '.join(SORT_KEYS)}")
    if sort_order not in SORT_ORDERS:
        raise ValidationError("order must be 'asc' or 'desc'")

    key = SORT_KEYS[sort_field]
    items = list(adventures)
    present = [a for a in items if key(a) is not None]
    missing = [a for a in items if key(a) is None]
    descending = sort_order == "desc"
    present.sort(key=key, reverse=descending)
    return present + missing if descending else missing + present


def _readable_adventures(db: Session, user_id: int) -> list[tuple[Adventure, Permission]]:
    owned = (
        db.query(Adventure)
        .filter(Adventure.user_id == user_id)
        .order_by(Adventure.created_at.desc(), Adventure.id.desc())
        .all()
    )
    shares = db.query(AdventureShare).filter(AdventureShare.user_id == user_id).all()
    perms = {s.adventure_id: SHARE_PERMISSIONS.get(s.permission, Permission.NONE) for s in shares}

    shared: list[Adventure] = []
    if perms:
        shared = (
            db.query(Adventure)
            .filter(Adventure.id.in_(list(perms)))
            .filter(Adventure.user_id != user_id)
            .order_by(Adventure.created_at.desc(), Adventure.id.desc())
            .all()
        )
    return [(a, Permission.OWNER) for a in owned] + [
        (a, perms[a.id]) for a in shared if perms[a.id].can_read
    ]


def _preview_picture(adventure: Adventure) -> Optional[PictureRead]:
    pictures = adventure.pictures or []
    if adventure.preview_picture_id is not None:
        for pic in pictures:
            if pic.id == adventure.preview_picture_id:
                return PictureRead.model_validate(pic)
    return PictureRead.model_validate(pictures[0]) if pictures else None


def summarize(adventure: Adventure, permission: Permission) -> AdventureSummary:
    vp = derive_viewport(adventure)
    by_mode: dict[str, int] = {}
    for t in adventure.tracks:
        by_mode[t.mode] = by_mode.get(t.mode, 0) + 1
    return AdventureSummary(
        id=adventure.id,
        name=adventure.name,
        description=adventure.description,
        adventure_date=adventure.adventure_date,
        center_lat=vp.center_lat,
        center_lng=vp.center_lng,
        zoom=vp.zoom,
        track_count=len(adventure.tracks),
        picture_count=len(adventure.pictures),
        tracks_by_mode=by_mode,
        total_distance_km=round(sum(float(t.distance_km or 0.0) for t in adventure.tracks), 2),
        is_owner=permission.is_owner,
        permission=permission.value,
        owner=adventure.owner.username if adventure.owner else None,
        preview_picture=_preview_picture(adventure),
        tags=[TagRead.model_validate(t) for t in adventure.tags],
        created_at=adventure.created_at,
        updated_at=adventure.updated_at,
    )


def list_for_principal(
    db: Session,
    user_id: int,
    sort_field: str = "createdAt",
    sort_order: str = "desc",
    tag_ids: Optional[Iterable[int]] = None,
) -> list[AdventureSummary]:
    rows = _readable_adventures(db, user_id)
    if tag_ids:
        wanted = set(tag_ids)
        rows = [(a, p) for a, p in rows if any(t.id in wanted for t in a.tags)]

    perms = {a.id: p for a, p in rows}
    ordered = sort_adventures([a for a, _ in rows], sort_field, sort_order)
    return [summarize(a, perms[a.id]) for a in ordered]


@dataclass
class AdventureView:
    adventure: Adventure
    permission: Permission
    viewport: Viewport


def get_one(db: Session, adventure_id: int, user_id: int) -> AdventureView:
    access = resolve(db, adventure_id, user_id)
    if not access.permission.can_read:
        raise NotFoundError("Adventure not found")
    return AdventureView(access.adventure, access.permission, derive_viewport(access.adventure))


def to_detail(view: AdventureView) -> AdventureDetail:
    adventure = view.adventure
    return AdventureDetail(
        id=adventure.id,
        name=adventure.name,
        description=adventure.description,
        adventure_date=adventure.adventure_date,
        center_lat=view.viewport.center_lat,
        center_lng=view.viewport.center_lng,
        zoom=view.viewport.zoom,
        viewport_derived=view.viewport.derived,
        is_owner=view.permission.is_owner,
        permission=view.permission.value,
        owner=adventure.owner.username if adventure.owner else None,
        preview_picture_id=adventure.preview_picture_id,
        tracks=[track_to_read(t) for t in adventure.tracks],
        waypoints=[WaypointRead.model_validate(w) for w in adventure.waypoints],
        pictures=[PictureRead.model_validate(p) for p in adventure.pictures],
        tags=[TagRead.model_validate(t) for t in adventure.tags],
        created_at=adventure.created_at,
        updated_at=adventure.updated_at,
    )


def all_tracks_for_principal(db: Session, user_id: int) -> list[MapTrack]:
    tracks: list[MapTrack] = []
    for adventure, _ in _readable_adventures(db, user_id):
        for t in adventure.tracks:
            read = track_to_read(t)
            tracks.append(MapTrack(**read.model_dump(), adventure_name=adventure.name))
    return tracks
