import logging

from fastapi import APIRouter, Depends
from fastapi.responses import Response
from sqlalchemy.orm import Session

from app.api.deps import get_current_user
from app.core.errors import NotFoundError
from app.core.gpx_ingest import build_gpx
from app.db import get_db
from app.models.track import Track
from app.models.user import User
from app.schemas.track import TrackRead, TrackUpdate
from app.services import access
from app.services.tracks import apply_points, color_for_mode, reverse_track, track_to_read

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tracks", tags=["tracks"])


def _readable_track(db: Session, track_id: int, user_id: int) -> Track:
    track = db.get(Track, track_id)
    if not track:
        raise NotFoundError("Track not found")
    # A track is visible exactly when its adventure is
    try:
        access.require_read(db, track.adventure_id, user_id)
    except NotFoundError:
        raise NotFoundError("Track not found")
    return track


def _editable_track(db: Session, track_id: int, user_id: int) -> Track:
    track = _readable_track(db, track_id, user_id)
    access.require_edit(db, track.adventure_id, user_id)
    return track


@router.get("/{track_id}", response_model=TrackRead)
def get_track(track_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return track_to_read(_readable_track(db, track_id, user.id))


@router.get("/{track_id}/gpx")
def export_track_gpx(track_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    track = _readable_track(db, track_id, user.id)
    xml = build_gpx(track.name, track.get_points())
    filename = f"{track.name or 'track'}.gpx".replace('"', "")
    return Response(
        content=xml,
        media_type="application/gpx+xml",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.put("/{track_id}", response_model=TrackRead)
def update_track(
    track_id: int,
    payload: TrackUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    track = _editable_track(db, track_id, user.id)
    update_data = payload.model_dump(exclude_unset=True)

    if update_data.get("name"):
        track.name = update_data["name"]
    if update_data.get("mode") is not None:
        track.mode = payload.mode.value
        # Mode change re-derives the color unless one is sent alongside
        if not update_data.get("color"):
            track.color = color_for_mode(track.mode)
    if update_data.get("color"):
        track.color = update_data["color"]
    if payload.points is not None:
        apply_points(track, [p.to_point() for p in payload.points])

    db.commit()
    db.refresh(track)
    return track_to_read(track)


@router.post("/{track_id}/reverse", response_model=TrackRead)
def reverse(track_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    track = _editable_track(db, track_id, user.id)
    reverse_track(track)
    db.commit()
    db.refresh(track)
    return track_to_read(track)


@router.delete("/{track_id}")
def delete_track(track_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    track = _editable_track(db, track_id, user.id)
    db.delete(track)
    db.commit()
    logger.info("Track %s deleted by %s", track_id, user.username)
    return {"message": "Track deleted"}
