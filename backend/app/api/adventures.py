import logging
import os
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile
from sqlalchemy.orm import Session

from app.api.deps import get_current_user
from app.core.gpx_ingest import parse_gpx_bytes
from app.core.errors import NotFoundError
from app.db import get_db
from app.models.adventure import Adventure
from app.models.picture import Picture
from app.models.tag import Tag
from app.models.user import User
from app.models.waypoint import Waypoint
from app.schemas.adventure import (
    AdventureCreate,
    AdventureDetail,
    AdventureSummary,
    AdventureTagsUpdate,
    AdventureUpdate,
    PictureCreate,
    PictureRead,
    SortField,
    SortOrder,
    TagRead,
    WaypointCreate,
    WaypointRead,
    WaypointUpdate,
)
from app.schemas.share import ShareCreate, ShareRead
from app.schemas.track import MapTrack, TrackCreate, TrackRead
from app.core.constants import DEFAULT_WAYPOINT_ICON
from app.services import access, shares as share_service
from app.services.adventures import all_tracks_for_principal, get_one, list_for_principal, to_detail
from app.services.tracks import new_track, normalize_upload_mode, track_to_read

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/adventures", tags=["adventures"])

GPX_CONTENT_TYPES = ("application/gpx+xml", "application/xml", "text/xml")


def _parse_tag_ids(raw: Optional[str]) -> Optional[list[int]]:
    if not raw:
        return None
    try:
        return [int(x) for x in raw.split(",") if x.strip()]
    except ValueError:
        raise HTTPException(status_code=422, detail="tags must be a comma-separated list of ids")


@router.get("/", response_model=list[AdventureSummary])
def list_adventures(
    sort: SortField = Query(SortField.createdAt),
    order: SortOrder = Query(SortOrder.desc),
    tags: Optional[str] = Query(None, description="Comma-separated tag ids; any match"),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Owned and shared adventures with derived stats, e.g.
      GET /adventures?sort=date&order=asc&tags=1,3
    """
    return list_for_principal(db, user.id, sort.value, order.value, _parse_tag_ids(tags))


@router.post("/", response_model=AdventureDetail, status_code=201)
def create_adventure(
    payload: AdventureCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    adventure = Adventure(
        user_id=user.id,
        name=payload.name,
        description=payload.description,
        adventure_date=payload.adventure_date,
        center_lat=payload.center_lat,
        center_lng=payload.center_lng,
        zoom=payload.zoom,
    )
    db.add(adventure)
    db.commit()
    db.refresh(adventure)
    logger.info("Adventure %s created by %s", adventure.id, user.username)
    return to_detail(get_one(db, adventure.id, user.id))


# Declared before /{adventure_id} so the literal path wins
@router.get("/all-tracks", response_model=list[MapTrack])
def list_all_tracks(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return all_tracks_for_principal(db, user.id)


@router.get("/{adventure_id}", response_model=AdventureDetail)
def get_adventure(adventure_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return to_detail(get_one(db, adventure_id, user.id))


@router.put("/{adventure_id}", response_model=AdventureDetail)
def update_adventure(
    adventure_id: int,
    payload: AdventureUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    adventure = access.require_edit(db, adventure_id, user.id).adventure
    update_data = payload.model_dump(exclude_unset=True)
    if update_data.get("name", "") is None:
        raise HTTPException(status_code=422, detail="name must not be null")
    for key, value in update_data.items():
        setattr(adventure, key, value)
    db.commit()
    return to_detail(get_one(db, adventure_id, user.id))


@router.delete("/{adventure_id}")
def delete_adventure(adventure_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    adventure = access.require_owner(db, adventure_id, user.id).adventure
    db.delete(adventure)
    db.commit()
    logger.info("Adventure %s deleted by %s", adventure_id, user.username)
    return {"message": "Adventure deleted"}


# --------- Shares (owner only) --------- #

def _share_read(share) -> ShareRead:
    return ShareRead(id=share.id, user_id=share.user_id, username=share.user.username, permission=share.permission)


@router.get("/{adventure_id}/shares", response_model=list[ShareRead])
def list_shares(adventure_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    adventure = access.require_owner(db, adventure_id, user.id).adventure
    return [_share_read(s) for s in share_service.list_shares(db, adventure)]


@router.post("/{adventure_id}/shares", response_model=ShareRead)
def share_adventure(
    adventure_id: int,
    payload: ShareCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    adventure = access.require_owner(db, adventure_id, user.id).adventure
    share = share_service.grant_share(db, adventure, payload.username, payload.permission.value)
    return _share_read(share)


@router.delete("/{adventure_id}/shares/{share_id}")
def revoke_share(
    adventure_id: int,
    share_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    adventure = access.require_owner(db, adventure_id, user.id).adventure
    share_service.revoke_share(db, adventure, share_id)
    return {"success": True}


# --------- Tracks --------- #

@router.post("/{adventure_id}/tracks/upload", response_model=TrackRead, status_code=201)
def upload_track(
    adventure_id: int,
    file: UploadFile = File(...),
    mode: Optional[str] = Form(None),
    name: Optional[str] = Form(None),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    adventure = access.require_edit(db, adventure_id, user.id).adventure

    filename = file.filename or "upload.gpx"
    ext = os.path.splitext(filename)[1].lower()
    if ext != ".gpx" and (file.content_type or "") not in GPX_CONTENT_TYPES:
        raise HTTPException(status_code=400, detail="Only GPX files are allowed")

    points = parse_gpx_bytes(file.file.read())
    track_mode = normalize_upload_mode(mode)
    track = new_track(
        adventure_id=adventure.id,
        name=name or os.path.splitext(filename)[0],
        mode=track_mode,
        points=points,
    )
    db.add(track)
    db.commit()
    db.refresh(track)
    logger.info(
        "Track %s uploaded to adventure %s: %d points, %.2f km",
        track.id, adventure.id, len(points), track.distance_km,
    )
    return track_to_read(track)


@router.post("/{adventure_id}/tracks", response_model=TrackRead, status_code=201)
def create_track(
    adventure_id: int,
    payload: TrackCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Save a drawn or routed track."""
    adventure = access.require_edit(db, adventure_id, user.id).adventure
    track = new_track(
        adventure_id=adventure.id,
        name=payload.name,
        mode=payload.mode.value,
        points=[p.to_point() for p in payload.points],
        color=payload.color,
    )
    db.add(track)
    db.commit()
    db.refresh(track)
    return track_to_read(track)


# --------- Waypoints --------- #

def _get_waypoint(db: Session, adventure: Adventure, waypoint_id: int) -> Waypoint:
    wp = (
        db.query(Waypoint)
        .filter(Waypoint.id == waypoint_id)
        .filter(Waypoint.adventure_id == adventure.id)
        .first()
    )
    if not wp:
        raise NotFoundError("Waypoint not found")
    return wp


@router.post("/{adventure_id}/waypoints", response_model=WaypointRead, status_code=201)
def create_waypoint(
    adventure_id: int,
    payload: WaypointCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    adventure = access.require_edit(db, adventure_id, user.id).adventure
    wp = Waypoint(
        adventure_id=adventure.id,
        name=payload.name,
        icon=payload.icon or DEFAULT_WAYPOINT_ICON,
        latitude=payload.lat,
        longitude=payload.lng,
    )
    db.add(wp)
    db.commit()
    db.refresh(wp)
    return wp


@router.put("/{adventure_id}/waypoints/{waypoint_id}", response_model=WaypointRead)
def update_waypoint(
    adventure_id: int,
    waypoint_id: int,
    payload: WaypointUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    adventure = access.require_edit(db, adventure_id, user.id).adventure
    wp = _get_waypoint(db, adventure, waypoint_id)
    update_data = payload.model_dump(exclude_unset=True)
    if "name" in update_data:
        wp.name = update_data["name"]
    if update_data.get("icon"):
        wp.icon = update_data["icon"]
    db.commit()
    db.refresh(wp)
    return wp


@router.delete("/{adventure_id}/waypoints/{waypoint_id}")
def delete_waypoint(
    adventure_id: int,
    waypoint_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    adventure = access.require_edit(db, adventure_id, user.id).adventure
    db.delete(_get_waypoint(db, adventure, waypoint_id))
    db.commit()
    return {"message": "Waypoint deleted"}


# --------- Pictures --------- #

@router.post("/{adventure_id}/pictures", response_model=PictureRead, status_code=201)
def add_picture(
    adventure_id: int,
    payload: PictureCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    adventure = access.require_edit(db, adventure_id, user.id).adventure
    picture = Picture(adventure_id=adventure.id, **payload.model_dump())
    db.add(picture)
    db.commit()
    db.refresh(picture)
    return picture


@router.delete("/{adventure_id}/pictures/{picture_id}")
def delete_picture(
    adventure_id: int,
    picture_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    adventure = access.require_edit(db, adventure_id, user.id).adventure
    picture = (
        db.query(Picture)
        .filter(Picture.id == picture_id)
        .filter(Picture.adventure_id == adventure.id)
        .first()
    )
    if not picture:
        raise NotFoundError("Picture not found")
    if adventure.preview_picture_id == picture.id:
        adventure.preview_picture_id = None
    db.delete(picture)
    db.commit()
    return {"message": "Picture deleted"}


# --------- Tags --------- #

@router.put("/{adventure_id}/tags", response_model=list[TagRead])
def set_adventure_tags(
    adventure_id: int,
    payload: AdventureTagsUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    adventure = access.require_edit(db, adventure_id, user.id).adventure
    ids = list(dict.fromkeys(payload.tag_ids))
    tags = db.query(Tag).filter(Tag.id.in_(ids)).all() if ids else []
    if len(tags) != len(ids):
        raise NotFoundError("Tag not found")
    adventure.tags = tags
    db.commit()
    return [TagRead.model_validate(t) for t in adventure.tags]
