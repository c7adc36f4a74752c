from datetime import datetime, timezone
from types import SimpleNamespace

import gpxpy
import gpxpy.gpx
import pytest

from minigps import gpx as GPX
from minigps.datatype import AID, POI, Trail

TIMESTAMP = datetime(2022, 1, 15, 6, 59, 15, tzinfo=timezone.utc)

WAYPOINTS = """<?xml version="1.0" encoding="UTF-8"?>
<gpx version="1.1" creator="test" xmlns="http://www.topografix.com/GPX/1/1">
  <wpt lat="55.789389" lon="37.536833">
    <time>2022-01-15T06:59:15Z</time>
    <name>Home</name>
  </wpt>
  <wpt lat="-33.8688" lon="151.2093">
    <name>Sydney</name>
  </wpt>
</gpx>
"""


def test_from_waypoint():
    waypoint = gpxpy.gpx.GPXWaypoint(latitude=55.789389, longitude=37.536833, time=TIMESTAMP)
    poi = GPX.from_waypoint(waypoint)
    assert isinstance(poi, POI)
    assert poi.lat == 55.789389
    assert poi.lon == 37.536833
    assert poi.timestamp == TIMESTAMP


def test_from_waypoint_without_time():
    waypoint = gpxpy.gpx.GPXWaypoint(latitude=1.5, longitude=2.5)
    before = datetime.now(timezone.utc)
    poi = GPX.from_waypoint(waypoint)
    assert before <= poi.timestamp <= datetime.now(timezone.utc)


def test_from_waypoint_needs_only_position():
    poi = GPX.from_waypoint(SimpleNamespace(latitude=10.0, longitude=20.0))
    assert (poi.lat, poi.lon) == (10.0, 20.0)
    assert poi.timestamp.tzinfo == timezone.utc


def test_to_waypoint():
    waypoint = GPX.to_waypoint(POI(timestamp=TIMESTAMP, lat=55.0, lon=37.0), name='POI01')
    assert isinstance(waypoint, gpxpy.gpx.GPXWaypoint)
    assert waypoint.latitude == 55.0
    assert waypoint.longitude == 37.0
    assert waypoint.time == TIMESTAMP
    assert waypoint.name == 'POI01'


def test_gpx_waypoints():
    pois = [POI(timestamp=TIMESTAMP, lat=55.5, lon=37.5), POI(timestamp=TIMESTAMP, lat=-1.25, lon=2.75)]
    gpx = gpxpy.parse(str(GPX.GPXWaypoints(pois)))
    assert [point.name for point in gpx.waypoints] == ['POI01', 'POI02']
    assert gpx.waypoints[1].latitude == pytest.approx(-1.25)
    assert gpx.waypoints[1].longitude == pytest.approx(2.75)
    assert gpx.waypoints[0].time == TIMESTAMP
    assert gpx.creator == 'minigps'


def test_gpx_positions():
    aid = AID(lat=55.7878, lon=37.5387, elev=154.7, timestamp=TIMESTAMP)
    trail = Trail(lat=55.788, lon=37.5388, points=1972, dist=3011.489, time=1983, speed=3.57)
    gpx = gpxpy.parse(str(GPX.GPXPositions(aid=aid, trail=trail)))
    aid_point, trail_point = gpx.waypoints
    assert aid_point.name == 'AID'
    assert aid_point.elevation == pytest.approx(154.7)
    assert aid_point.time == TIMESTAMP
    assert trail_point.name == 'TRAIL'
    assert trail_point.description == '1972 points, 3011.5 m in 0:33:03'


def test_minigps_waypoints():
    pois = GPX.MiniGPSWaypoints(WAYPOINTS).pois
    assert len(pois) == 2
    assert pois[0].lat == pytest.approx(55.789389)
    assert pois[0].timestamp == TIMESTAMP
    assert pois[1].lon == pytest.approx(151.2093)


def test_waypoints_round_trip():
    pois = [POI(timestamp=TIMESTAMP, lat=55.5, lon=37.5)]
    assert GPX.MiniGPSWaypoints(str(GPX.GPXWaypoints(pois))).pois == pois
