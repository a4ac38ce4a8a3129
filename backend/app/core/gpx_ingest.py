"""GPX ingestion and export.

Ingestion is deliberately tolerant: uploaded documents come from many
devices and apps, some truncated or not quite XML. Instead of a strict
parser we scan for point tags and keep whatever coordinates parse.

- Kinds are scanned in a fixed order (trkpt, rtept, wpt) and concatenated,
  so a document mixing kinds is *not* re-interleaved by position.
- For each point tag, ``<ele>`` and ``<time>`` are taken from the first
  match inside a 500 character window starting at the tag.
- Points whose lat/lon do not parse as finite floats are dropped silently.
"""
from __future__ import annotations

import logging
import math
import re
from datetime import datetime
from typing import Optional, Sequence

import gpxpy
import gpxpy.gpx

from app.core.constants import INGEST_LOOKAHEAD_CHARS
from app.core.geometry import Point

logger = logging.getLogger(__name__)

POINT_KINDS = ("trkpt", "rtept", "wpt")

_TAG_RES = {kind: re.compile(rf"<{kind}\b([^>]*)>") for kind in POINT_KINDS}
_LAT_RE = re.compile(r"""\blat\s*=\s*["']([^"']+)["']""")
_LON_RE = re.compile(r"""\blon\s*=\s*["']([^"']+)["']""")
_ELE_RE = re.compile(r"<ele>([^<]+)</ele>")
_TIME_RE = re.compile(r"<time>([^<]+)</time>")


def _finite_float(raw: Optional[str]) -> Optional[float]:
    if raw is None:
        return None
    try:
        val = float(raw)
    except ValueError:
        return None
    return val if math.isfinite(val) else None


def _scan_kind(text: str, kind: str) -> list[Point]:
    points: list[Point] = []
    for m in _TAG_RES[kind].finditer(text):
        attrs = m.group(1)
        lat_m = _LAT_RE.search(attrs)
        lon_m = _LON_RE.search(attrs)
        lat = _finite_float(lat_m.group(1) if lat_m else None)
        lng = _finite_float(lon_m.group(1) if lon_m else None)
        if lat is None or lng is None:
            continue

        window = text[m.start(): m.start() + INGEST_LOOKAHEAD_CHARS]
        ele_m = _ELE_RE.search(window)
        time_m = _TIME_RE.search(window)
        points.append(
            Point(
                lat=lat,
                lng=lng,
                elevation=_finite_float(ele_m.group(1).strip()) if ele_m else None,
                timestamp=time_m.group(1).strip() if time_m else None,
            )
        )
    return points


def parse_gpx_text(text: str) -> list[Point]:
    """Extract every usable point from a GPX-like document.

    Never raises on bad input; an empty list means nothing was usable.
    """
    if not text:
        return []
    points: list[Point] = []
    counts = {}
    for kind in POINT_KINDS:
        found = _scan_kind(text, kind)
        counts[kind] = len(found)
        points.extend(found)
    logger.debug("GPX ingest: %s (total %d)", counts, len(points))
    return points


def parse_gpx_bytes(data: bytes) -> list[Point]:
    return parse_gpx_text(data.decode("utf-8", errors="replace"))


def _parse_iso(ts):
    try:
        return datetime.fromisoformat(ts.replace("Z", "+00:00")) if ts else None
    except ValueError:
        return None


def build_gpx(name: str, points: Sequence[Point]) -> str:
    """Serialize a track as a GPX 1.1 document with a single segment."""
    gpx = gpxpy.gpx.GPX()
    gpx.creator = "adventures"
    track = gpxpy.gpx.GPXTrack(name=name)
    gpx.tracks.append(track)
    segment = gpxpy.gpx.GPXTrackSegment()
    track.segments.append(segment)
    for p in points:
        segment.points.append(
            gpxpy.gpx.GPXTrackPoint(
                latitude=p.lat,
                longitude=p.lng,
                elevation=p.elevation,
                time=_parse_iso(p.timestamp),
            )
        )
    return gpx.to_xml()
