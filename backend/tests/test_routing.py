import time

import httpx
import pytest

from app.core.errors import (
    InsufficientWaypointsError,
    RoutingProviderError,
    RoutingServiceUnavailable,
    UnsupportedModeError,
    ValidationError,
)
from app.core.geometry import Point, track_distance_km
from app.services.routing import BRouterProvider, RouteStitcher, geojson_to_points, stitch_legs

A, B, C = Point(45.0, 5.0), Point(45.02, 5.01), Point(45.03, 5.05)


def test_three_waypoints_share_junction_points(fake_provider):
    route = RouteStitcher(fake_provider).stitch([A, B, C], "foot")
    # two legs of 3 points each, junction point counted once
    assert len(route.points) == 3 + 3 - 1
    assert route.points[0] == A
    assert (route.points[2].lat, route.points[2].lng) == (pytest.approx(B.lat), pytest.approx(B.lng))
    assert (route.points[-1].lat, route.points[-1].lng) == (pytest.approx(C.lat), pytest.approx(C.lng))
    assert route.distance_km == track_distance_km(route.points)
    assert (route.color, route.track_mode) == ("#FF9F43", "hiking")
    assert [call[2] for call in fake_provider.calls] == ["hiking", "hiking"]


def test_stitch_legs_skips_empty_first_leg():
    assert stitch_legs([[], [A, B], [B, C]]) == [A, B, C]
    assert stitch_legs([]) == []


@pytest.mark.parametrize("waypoints", [[], [A]])
def test_needs_two_waypoints(fake_provider, waypoints):
    with pytest.raises(InsufficientWaypointsError):
        RouteStitcher(fake_provider).stitch(waypoints, "car")
    assert fake_provider.calls == []


def test_unknown_mode_rejected_before_any_call(fake_provider):
    with pytest.raises(UnsupportedModeError) as exc:
        RouteStitcher(fake_provider).stitch([A, B], "rocket")
    assert "car" in exc.value.detail
    assert fake_provider.calls == []


def test_out_of_range_waypoint(fake_provider):
    with pytest.raises(ValidationError) as exc:
        RouteStitcher(fake_provider).stitch([A, Point(95.0, 5.0)], "bike")
    assert exc.value.detail.startswith("Invalid waypoint")
    assert fake_provider.calls == []


def test_provider_error_carries_leg(fake_provider):
    fake_provider.error = RoutingProviderError(500, "no route found")
    with pytest.raises(RoutingProviderError) as exc:
        RouteStitcher(fake_provider).stitch([A, B, C], "car")
    assert (exc.value.status, exc.value.body, exc.value.leg) == (500, "no route found", 0)


class SlowFirstLeg:
    """Returns legs out of order in time: the first leg finishes last."""

    def route_leg(self, start, end, profile):
        if start == A:
            time.sleep(0.05)
        return [start, end]


def test_parallel_legs_keep_waypoint_order():
    provider = SlowFirstLeg()
    route = RouteStitcher(provider, max_workers=4).stitch([A, B, C], "train")
    assert route.points == [A, B, C]
    assert route.track_mode == "train"


def _geojson(coords):
    return {
        "type": "FeatureCollection",
        "features": [{"type": "Feature", "geometry": {"type": "LineString", "coordinates": coords}}],
    }


def test_geojson_to_points_reads_lng_lat_order():
    pts = geojson_to_points(_geojson([[5.0, 45.0, 210.0], [5.01, 45.02]]))
    assert pts == [Point(45.0, 5.0, 210.0), Point(45.02, 5.01)]
    assert geojson_to_points({}) == []


def _provider(handler) -> BRouterProvider:
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return BRouterProvider("http://brouter.test/brouter", timeout=5, client=client)


def test_brouter_request_and_parse():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen.update(request.url.params)
        return httpx.Response(200, json=_geojson([[5.0, 45.0], [5.01, 45.02]]))

    pts = _provider(handler).route_leg(A, B, "trekking")
    assert seen == {"lonlats": "5.0,45.0|5.01,45.02", "profile": "trekking", "format": "geojson"}
    assert pts == [Point(45.0, 5.0), Point(45.02, 5.01)]


def test_brouter_error_status():
    provider = _provider(lambda request: httpx.Response(500, text="target island detected"))
    with pytest.raises(RoutingProviderError) as exc:
        provider.route_leg(A, B, "car-vario")
    assert exc.value.status == 500
    assert exc.value.body == "target island detected"


def test_brouter_invalid_json():
    provider = _provider(lambda request: httpx.Response(200, text="<html>oops</html>"))
    with pytest.raises(RoutingProviderError):
        provider.route_leg(A, B, "car-vario")


@pytest.mark.parametrize(
    "body",
    [
        [1, 2, 3],
        _geojson([[None, 45.0]]),
        _geojson([5.0, 45.0]),
    ],
)
def test_brouter_malformed_geojson(body):
    provider = _provider(lambda request: httpx.Response(200, json=body))
    with pytest.raises(RoutingProviderError) as exc:
        RouteStitcher(provider).stitch([A, B], "car")
    assert exc.value.status == 200
    assert exc.value.leg == 0
    assert "malformed" in exc.value.body


@pytest.mark.parametrize(
    "exc_type", [httpx.ConnectError, httpx.ReadTimeout, httpx.TooManyRedirects, httpx.DecodingError]
)
def test_brouter_unreachable(exc_type):
    def handler(request):
        raise exc_type("boom", request=request)

    with pytest.raises(RoutingServiceUnavailable):
        _provider(handler).route_leg(A, B, "hiking")


def test_stitcher_reports_leg_from_http_provider():
    def handler(request):
        if request.url.params["lonlats"].startswith("5.01,"):
            return httpx.Response(400, text="no path")
        return httpx.Response(200, json=_geojson([[5.0, 45.0], [5.01, 45.02]]))

    with pytest.raises(RoutingProviderError) as exc:
        RouteStitcher(_provider(handler)).stitch([A, B, C], "car")
    assert exc.value.leg == 1
    assert "on leg 1" in exc.value.detail
