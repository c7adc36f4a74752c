"""Support for the files of the MiniGPS handheld GPS receiver."""

__version__ = "0.1.0"

from .datatype import AID, POI, Trail, read_pois, write_pois
