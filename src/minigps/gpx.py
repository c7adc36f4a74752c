"""gpx.py: Converts MiniGPS records to and from the GPS Exchange Format."""

import gpxpy
import gpxpy.gpx
from . import datatype as mod_datatype
from . import logger as mod_logger


def from_waypoint(waypoint):
    """Return a POI with the position and time of a waypoint.

    Any object with ``latitude`` and ``longitude`` attributes is accepted, such
    as a ``gpxpy.gpx.GPXWaypoint``. If it has no ``time``, the current time is
    used.

    """
    timestamp = getattr(waypoint, 'time', None)
    if timestamp is None:
        timestamp = mod_datatype.utcnow()
    return mod_datatype.POI(timestamp=timestamp,
                            lat=waypoint.latitude,
                            lon=waypoint.longitude)


def to_waypoint(poi, name=None):
    """Return a ``gpxpy.gpx.GPXWaypoint`` of a POI."""
    return gpxpy.gpx.GPXWaypoint(latitude=poi.lat,
                                 longitude=poi.lon,
                                 time=poi.timestamp,
                                 name=name)


class GPX:
    creator = "minigps"

    def new_gpx(self, name):
        gpx = gpxpy.gpx.GPX()
        gpx.name = name
        gpx.description = name
        gpx.creator = self.creator
        return gpx

    def __str__(self):
        return self.gpx.to_xml()


class GPXWaypoints(GPX):

    def __init__(self, pois=()):
        self.gpx = self.pois_to_gpx(pois)

    def pois_to_gpx(self, pois):
        gpx = self.new_gpx('Waypoints')
        for idx, poi in enumerate(pois, start=1):
            name = f'POI{idx:02}'
            mod_logger.log.info(f"Adding waypoint {name}")
            gpx.waypoints.append(to_waypoint(poi, name))
        return gpx


class GPXPositions(GPX):
    """Last fix and the end of the last track as waypoints."""

    def __init__(self, aid=None, trail=None):
        self.gpx = self.positions_to_gpx(aid, trail)

    def positions_to_gpx(self, aid, trail):
        gpx = self.new_gpx('Positions')
        if aid is not None:
            mod_logger.log.info("Adding last fix")
            gpx_point = gpxpy.gpx.GPXWaypoint(latitude=aid.lat,
                                              longitude=aid.lon,
                                              elevation=aid.elev,
                                              time=aid.timestamp,
                                              name='AID')
            gpx.waypoints.append(gpx_point)
        if trail is not None:
            mod_logger.log.info("Adding end of trail")
            description = f"{trail.points} points, {trail.dist:.1f} m in {trail.get_timedelta()}"
            gpx_point = gpxpy.gpx.GPXWaypoint(latitude=trail.lat,
                                              longitude=trail.lon,
                                              name='TRAIL',
                                              description=description)
            gpx.waypoints.append(gpx_point)
        return gpx


class MiniGPSWaypoints:

    def __init__(self, xml_or_file):
        self.pois = self.gpx_to_pois(xml_or_file)

    def gpx_to_pois(self, xml_or_file):
        gpx = gpxpy.parse(xml_or_file)
        pois = []
        for point in gpx.waypoints:
            mod_logger.log.info(f"Adding waypoint {point.name}")
            pois.append(from_waypoint(point))
        return pois
