"""Track construction and point updates.

All paths that change a track's points go through ``apply_points`` so the
minimum-length rule, coordinate ranges and the derived distance are
enforced in one place.
"""
import logging
from typing import Optional, Sequence

from app.core.constants import (
    DEFAULT_TRACK_MODE,
    FALLBACK_TRACK_MODE,
    MIN_TRACK_POINTS,
    TRACK_MODE_COLORS,
)
from app.core.errors import ValidationError
from app.core.geometry import Point, validate_points
from app.models.track import Track
from app.schemas.track import PointOut, TrackRead

logger = logging.getLogger(__name__)


def color_for_mode(mode: str) -> str:
    return TRACK_MODE_COLORS.get(mode, TRACK_MODE_COLORS[FALLBACK_TRACK_MODE])


def normalize_upload_mode(raw: Optional[str]) -> str:
    """Lenient mode parsing for uploads: unknown values become "other"."""
    mode = (raw or DEFAULT_TRACK_MODE).strip().lower()
    if mode not in TRACK_MODE_COLORS:
        logger.info("Unknown track mode %r, falling back to %r", raw, FALLBACK_TRACK_MODE)
        return FALLBACK_TRACK_MODE
    return mode


def apply_points(track: Track, points: Sequence[Point]) -> None:
    if len(points) < MIN_TRACK_POINTS:
        raise ValidationError("a track must have at least 2 points")
    validate_points(points)
    track.set_points(list(points))


def new_track(
    adventure_id: int,
    name: str,
    mode: str,
    points: Sequence[Point],
    color: Optional[str] = None,
) -> Track:
    track = Track(
        adventure_id=adventure_id,
        name=name,
        mode=mode,
        color=color or color_for_mode(mode),
    )
    apply_points(track, points)
    return track


def reverse_track(track: Track) -> None:
    apply_points(track, list(reversed(track.get_points())))


def track_to_read(track: Track) -> TrackRead:
    points = track.get_points()
    return TrackRead(
        id=track.id,
        adventure_id=track.adventure_id,
        name=track.name,
        mode=track.mode,
        color=track.color,
        distance_km=float(track.distance_km or 0.0),
        points=[PointOut(**p.to_dict()) for p in points],
        point_count=len(points),
    )
