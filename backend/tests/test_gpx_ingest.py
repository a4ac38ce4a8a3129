from app.core.geometry import Point
from app.core.gpx_ingest import build_gpx, parse_gpx_bytes, parse_gpx_text


def gpx(body: str) -> str:
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<gpx version="1.1" creator="test" xmlns="http://www.topografix.com/GPX/1/1">\n'
        f"{body}\n</gpx>"
    )


def test_three_plain_track_points():
    doc = gpx(
        "<trk><trkseg>"
        '<trkpt lat="45.0" lon="5.0"></trkpt>'
        '<trkpt lat="45.001" lon="5.001"></trkpt>'
        '<trkpt lat="45.002" lon="5.002"></trkpt>'
        "</trkseg></trk>"
    )
    points = parse_gpx_text(doc)
    assert len(points) == 3
    assert all(p.elevation is None and p.timestamp is None for p in points)
    assert [p.lat for p in points] == [45.0, 45.001, 45.002]


def test_elevation_and_time_are_read():
    doc = gpx(
        "<trk><trkseg>"
        '<trkpt lat="45.0" lon="5.0"><ele>812.4</ele><time>2024-06-01T08:00:00Z</time></trkpt>'
        "</trkseg></trk>"
    )
    (p,) = parse_gpx_text(doc)
    assert p == Point(45.0, 5.0, 812.4, "2024-06-01T08:00:00Z")


def test_unparseable_coordinates_are_dropped():
    doc = gpx(
        "<trk><trkseg>"
        '<trkpt lat="abc" lon="5.0"></trkpt>'
        '<trkpt lat="45.0" lon=""></trkpt>'
        '<trkpt lat="NaN" lon="5.0"></trkpt>'
        '<trkpt lat="45.0" lon="5.0"></trkpt>'
        "</trkseg></trk>"
    )
    assert parse_gpx_text(doc) == [Point(45.0, 5.0)]


def test_kinds_are_grouped_not_interleaved():
    doc = gpx(
        '<wpt lat="1.0" lon="1.0"><name>summit</name></wpt>'
        '<rte><rtept lat="2.0" lon="2.0"></rtept></rte>'
        '<trk><trkseg><trkpt lat="3.0" lon="3.0"></trkpt></trkseg></trk>'
    )
    assert [p.lat for p in parse_gpx_text(doc)] == [3.0, 2.0, 1.0]


def test_companion_fields_outside_window_are_ignored():
    doc = '<trkpt lat="1.0" lon="2.0">' + " " * 600 + "<ele>99</ele></trkpt>"
    (p,) = parse_gpx_text(doc)
    assert p.elevation is None


def test_bad_elevation_becomes_none():
    (p,) = parse_gpx_text('<trkpt lat="1.0" lon="2.0"><ele>high</ele></trkpt>')
    assert p.elevation is None


def test_attribute_order_and_quotes_are_tolerated():
    points = parse_gpx_text("<trkpt lon='7.5' lat='46.5'/>")
    assert points == [Point(46.5, 7.5)]


def test_garbage_and_truncated_input_yield_empty():
    assert parse_gpx_text("") == []
    assert parse_gpx_text("this is not xml at all") == []
    assert parse_gpx_text('<gpx><trk><trkseg><trkpt lat="45.0" lon="5') == []


def test_truncated_document_keeps_complete_points():
    doc = '<gpx><trk><trkseg><trkpt lat="45.0" lon="5.0"></trkpt><trkpt lat="45.1" lo'
    assert parse_gpx_text(doc) == [Point(45.0, 5.0)]


def test_bytes_with_invalid_utf8():
    data = b'<trkpt lat="45.0" lon="5.0"><name>\xff\xfe</name></trkpt>'
    assert parse_gpx_bytes(data) == [Point(45.0, 5.0)]


def test_exported_gpx_reingests():
    points = [
        Point(45.0, 5.0, 500.0, "2024-06-01T08:00:00+00:00"),
        Point(45.01, 5.0, 510.0, None),
    ]
    xml = build_gpx("Morning hike", points)
    assert "<name>Morning hike</name>" in xml
    again = parse_gpx_text(xml)
    assert [(p.lat, p.lng, p.elevation) for p in again] == [(45.0, 5.0, 500.0), (45.01, 5.0, 510.0)]
