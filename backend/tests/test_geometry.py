import pytest

from app.core.errors import EmptyInputError, ValidationError
from app.core.geometry import (
    BoundingBox,
    Point,
    bounding_box,
    center_of,
    derive_zoom,
    distance_meters,
    track_distance_km,
    validate_point,
    viewport,
)


SAMPLE = [
    Point(45.0, 5.0),
    Point(45.01, 5.0),
    Point(45.02, 5.015),
    Point(45.05, 5.1),
    Point(44.9, 5.2),
]


def _bbox_with_range(r: float) -> BoundingBox:
    # anchored at 0 so the range is exactly r (10.01 - 10.0 != 0.01 in floats)
    return BoundingBox(min_lat=0.0, min_lng=20.0, max_lat=r, max_lng=20.0)


def test_distance_is_symmetric_and_zero_on_self():
    for a in SAMPLE:
        assert distance_meters(a, a) == 0
        for b in SAMPLE:
            assert distance_meters(a, b) == distance_meters(b, a)


def test_distance_known_value():
    # 0.01 degree of latitude ~ 1.112 km on a 6371 km sphere
    d = distance_meters(Point(45.0, 5.0), Point(45.01, 5.0))
    assert d == pytest.approx(1111.95, abs=0.05)


def test_track_distance_short_sequences_are_zero():
    assert track_distance_km([]) == 0
    assert track_distance_km([Point(1, 1)]) == 0


def test_track_distance_rounded_and_reversible():
    km = track_distance_km(SAMPLE)
    assert km > 0
    assert km == round(km, 2)
    assert track_distance_km(list(reversed(SAMPLE))) == pytest.approx(km, abs=0.01)


def test_track_distance_two_points():
    assert track_distance_km([Point(45.0, 5.0), Point(45.01, 5.0)]) == 1.11


def test_bounding_box_and_center():
    bbox = bounding_box(SAMPLE)
    assert bbox == BoundingBox(min_lat=44.9, min_lng=5.0, max_lat=45.05, max_lng=5.2)
    center = center_of(bbox)
    # midpoint of the box, not the mean of the points
    assert center.lat == pytest.approx(44.975)
    assert center.lng == pytest.approx(5.1)


def test_bounding_box_empty_raises():
    with pytest.raises(EmptyInputError):
        bounding_box([])


@pytest.mark.parametrize(
    "r, zoom",
    [
        (0.0, 15),
        (0.005, 15),
        (0.01, 12),
        (0.05, 12),
        (0.1, 9),
        (0.5, 9),
        (1.0, 6),
        (9.99, 6),
        (10.0, 4),
        (120.0, 4),
    ],
)
def test_derive_zoom_steps(r, zoom):
    assert derive_zoom(_bbox_with_range(r)) == zoom


def test_derive_zoom_uses_widest_axis():
    bbox = BoundingBox(min_lat=0.0, min_lng=0.0, max_lat=0.001, max_lng=2.0)
    assert derive_zoom(bbox) == 6


def test_viewport_single_point():
    center, zoom = viewport([Point(45.0, 5.0)])
    assert (center.lat, center.lng, zoom) == (45.0, 5.0, 15)


@pytest.mark.parametrize("lat, lng", [(91, 0), (-90.5, 0), (0, 180.1), (0, -181), ("x", 0), (float("nan"), 0)])
def test_validate_point_rejects(lat, lng):
    with pytest.raises(ValidationError):
        validate_point(lat, lng)


def test_validate_point_accepts_bounds():
    validate_point(90, 180)
    validate_point(-90, -180)


def test_point_dict_accepts_gpx_style_keys():
    p = Point.from_dict({"lat": "45.1", "lon": 5.2, "ele": "310.5", "time": "2024-05-01T10:00:00Z"})
    assert p == Point(45.1, 5.2, 310.5, "2024-05-01T10:00:00Z")
    assert Point.from_dict(p.to_dict()) == p
