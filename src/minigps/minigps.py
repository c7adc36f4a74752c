#!/usr/bin/env python3
"""MiniGPS

   This is a console user application for reading and writing the files of
   the MiniGPS handheld GPS receiver.

   This file is part of the minigps distribution.

   This program is free software: you can redistribute it and/or modify it under
   the terms of the GNU General Public License as published by the Free Software
   Foundation, version 3.

   This program is distributed in the hope that it will be useful, but WITHOUT
   ANY WARRANTY; without even the implied warranty of MERCHANTABILITY or FITNESS
   FOR A PARTICULAR PURPOSE. See the GNU General Public License for more
   details.

   You should have received a copy of the GNU General Public License along with
   this program. If not, see <http://www.gnu.org/licenses/>.

"""

import argparse
from datetime import datetime
import io
import json
import logging
import pathlib
import sys
from tabulate import tabulate
from . import __version__
from . import datatype as mod_datatype
from . import error as mod_error
from . import logger as mod_logger
from . import gpx as GPX

logging_levels = {
    0: logging.NOTSET,
    1: logging.WARNING,
    2: logging.INFO,
    3: logging.DEBUG,
}

mod_logger.log.addHandler(logging.StreamHandler())

def _write(path, data):
    if type(data) == bytes:
        path.write_bytes(data)
    elif type(data) == str:
        path.write_text(data)


class DatetimeEncoder(json.JSONEncoder):
    """Custom encoder to serialize datetimes as ISO 8601 strings."""

    def default(self, o):
        if isinstance(o, datetime):
            return o.isoformat()
        else:
            return super().default(o)


class DatetimeDecoder(json.JSONDecoder):
    """Custom decoder to deserialize ISO 8601 timestamps."""

    def __init__(self, *args, **kwargs):
        json.JSONDecoder.__init__(self, object_hook=self.object_hook, *args, **kwargs)

    def object_hook(self, dct):
        timestamp = dct.get('timestamp')
        if isinstance(timestamp, str):
            if timestamp.endswith('Z'):
                timestamp = timestamp[:-1] + '+00:00'
            dct['timestamp'] = datetime.fromisoformat(timestamp)
        elif isinstance(timestamp, int):
            dct['timestamp'] = mod_datatype.to_datetime(timestamp)
        return dct


class MiniGPS:

    def _dump(self, args, datatypes, gpx):
        if args.format == 'txt':
            for datatype in datatypes:
                args.filename.write(f"{str(datatype)}\n")
        elif args.format == 'table':
            rows = [{'slot': idx, **datatype.get_dict()} for idx, datatype in datatypes.items()]
            args.filename.write(f"{tabulate(rows, headers='keys', tablefmt='plain')}\n")
        elif args.format == 'json':
            json.dump([datatype.get_dict() for datatype in datatypes], args.filename, cls=DatetimeEncoder)
            args.filename.write("\n")
        elif args.format == 'gpx':
            args.filename.write(f"{gpx.gpx.to_xml()}\n")
        else:
            sys.exit(f"Output format {args.format} is not supported")

    def aid(self, args):
        aid = mod_datatype.AID.read(args.file)
        self._dump(args, [aid], GPX.GPXPositions(aid=aid))

    def trail(self, args):
        trail = mod_datatype.Trail.read(args.file)
        self._dump(args, [trail], GPX.GPXPositions(trail=trail))

    def get_poi(self, args):
        pois = mod_datatype.read_pois(args.file)
        slots = {idx: poi for idx, poi in enumerate(pois, start=1) if args.all or not poi.is_empty()}
        mod_logger.log.info(f"{len(slots)} of {len(pois)} slots in use")
        if args.format == 'table':
            self._dump(args, slots, None)
        else:
            self._dump(args, list(slots.values()), GPX.GPXWaypoints(slots.values()))

    def put_poi(self, args):
        if args.format == 'json':
            data = json.load(args.filename, cls=DatetimeDecoder)
            pois = [mod_datatype.POI(**poi) for poi in data]
        elif args.format == 'gpx':
            gpx = GPX.MiniGPSWaypoints(args.filename)
            pois = gpx.pois
        else:
            sys.exit(f"Input format {args.format} is not supported")
        if args.truncate and len(pois) > mod_datatype.POI_SLOTS:
            mod_logger.log.warning(f"Dropping {len(pois) - mod_datatype.POI_SLOTS} waypoints")
            pois = pois[:mod_datatype.POI_SLOTS]
        buffer = io.BytesIO()
        mod_datatype.write_pois(pois, buffer)
        mod_logger.log.info(f"Saving {args.file}")
        _write(args.file, buffer.getvalue())


parser = argparse.ArgumentParser(
    prog='minigps',
    formatter_class=argparse.RawDescriptionHelpFormatter,
    description="""Command line application to read and write the files of the MiniGPS.

The MiniGPS stores the last position fix in AID.DAT, a summary of the last
track in TRAIL.DAT and up to 16 waypoints in POI.DAT. The files can be copied
from the device when it is connected as a USB mass storage device.

Waypoints can be converted to and from JSON and the GPS Exchange Format (GPX).
""")
parser.add_argument('-v',
                    '--verbosity',
                    action='count',
                    default=0,
                    help="Increase output verbosity")
parser.add_argument('-D',
                    '--debug',
                    action='store_const',
                    const=3,
                    default=0,
                    help="Enable debugging")
parser.add_argument('--version',
                    action='store_true',
                    help="Dump version and exit")
subparsers = parser.add_subparsers(help="Command help")
aid = subparsers.add_parser('aid', help="Show the last position fix")
aid.set_defaults(command='aid')
aid.add_argument('-t',
                 '--format',
                 choices=['txt', 'json', 'gpx'],
                 default='txt',
                 help="Set output format")
aid.add_argument('file',
                 type=argparse.FileType(mode='rb'),
                 help="AID.DAT file")
aid.add_argument('filename',
                 nargs='?',
                 type=argparse.FileType(mode='w'),
                 default=sys.stdout,
                 help="Set output file")
trail = subparsers.add_parser('trail', help="Show the summary of the last track")
trail.set_defaults(command='trail')
trail.add_argument('-t',
                   '--format',
                   choices=['txt', 'json', 'gpx'],
                   default='txt',
                   help="Set output format")
trail.add_argument('file',
                   type=argparse.FileType(mode='rb'),
                   help="TRAIL.DAT file")
trail.add_argument('filename',
                   nargs='?',
                   type=argparse.FileType(mode='w'),
                   default=sys.stdout,
                   help="Set output file")
get_poi = subparsers.add_parser('get-poi', help="Show waypoints")
get_poi.set_defaults(command='get_poi')
get_poi.add_argument('-t',
                     '--format',
                     choices=['txt', 'table', 'json', 'gpx'],
                     default='table',
                     help="Set output format. ``txt`` returns a human readable string of a dictionary per waypoint. ``table`` returns a table with the slot number. ``json`` returns a JSON list of waypoints. ``gpx`` returns a string in GPS Exchange Format (GPX).")
get_poi.add_argument('-a',
                     '--all',
                     action='store_true',
                     help="Include unused slots")
get_poi.add_argument('file',
                     type=argparse.FileType(mode='rb'),
                     help="POI.DAT file")
get_poi.add_argument('filename',
                     nargs='?',
                     type=argparse.FileType(mode='w'),
                     default=sys.stdout,
                     help="Set output file")
put_poi = subparsers.add_parser('put-poi', help="Create a POI.DAT file")
put_poi.set_defaults(command='put_poi')
put_poi.add_argument('-t',
                     '--format',
                     choices=['json', 'gpx'],
                     default='gpx',
                     help="Set input format")
put_poi.add_argument('--truncate',
                     action='store_true',
                     help=f"Keep the first {mod_datatype.POI_SLOTS} waypoints if there are more")
put_poi.add_argument('filename',
                     type=argparse.FileType(mode='r'),
                     help="Set input file")
put_poi.add_argument('file',
                     type=pathlib.Path,
                     help="POI.DAT file")

def main(argv=None):
    args = parser.parse_args(argv)
    logging_level = logging_levels.get(min(max(args.verbosity, args.debug), 3))
    mod_logger.log.setLevel(logging_level)
    mod_logger.log.info(f"Version {__version__}")
    if hasattr(args, 'command'):
        app = MiniGPS()
        command = getattr(app, args.command)
        try:
            command(args)
        except mod_error.MiniGPSError as e:
            sys.exit(f"minigps: {e.value}")
    elif args.version:
        print(f"minigps version {__version__}")
    else:
        parser.print_usage()

if __name__ == '__main__':
    main()
