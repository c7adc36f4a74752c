"""Datatypes of the MiniGPS memory dump files.

   The MiniGPS is a small handheld GPS receiver without a display for
   coordinates. It keeps its data in three files which can be copied from
   the device when it is mounted as a mass storage device:

   =========== ======= =======================================
    File        Size    Content
   =========== ======= =======================================
    AID.DAT     32      last position fix
    TRAIL.DAT   48      summary of the last track
    POI.DAT     512     16 slots of waypoints (points of interest)
   =========== ======= =======================================

   The files have no header, footer, checksum or magic number. All values are
   little endian.

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

from datetime import datetime, timedelta, timezone
import rawutil
from . import error as mod_error
from . import logger as mod_logger

#: number of record slots in a POI.DAT file
POI_SLOTS = 16

#: ``datetime`` of the Unix epoch
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def utcnow():
    return datetime.now(timezone.utc)


def as_utc(value):
    """Return the datetime in UTC.

    A naive datetime is taken to be in UTC already.

    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_datetime(seconds, now=utcnow):
    """Return a datetime object of the Unix timestamp.

    The device sometimes stores garbage instead of a timestamp. If ``seconds``
    is outside the range of a ``datetime``, the value returned by ``now`` is
    used instead.

    :param seconds: seconds since the Unix epoch
    :type seconds: int
    :param now: callable returning the fallback datetime
    :return: datetime in UTC
    :rtype: datetime

    """
    try:
        return EPOCH + timedelta(seconds=seconds)
    except OverflowError:
        fallback = now()
        mod_logger.log.warning(f"Timestamp {seconds} is out of range, using {fallback}")
        return fallback


def to_seconds(value):
    """Return the number of whole seconds since the Unix epoch.

    Fractions of a second are dropped.

    """
    delta = as_utc(value) - EPOCH
    return delta.days * 86400 + delta.seconds


class DataType():
    """Base datatype.

    Datatypes must derive from the DataType base class. It uses the ``rawutil``
    module to pack and unpack binary data. Each subclass must define a _fields
    attribute. _fields must be a list of 2-tuples, containing a field name and a
    field type. The field type must be a ``rawutil`` `format character
    <https://github.com/Tyulis/rawutil#elements>`_.

    Fields listed in _reserved are not kept in memory. They are skipped on
    unpacking and always packed as zero.

    """
    byteorder = 'little'
    #: binary data
    data = bytes()
    #: size of the packed record in bytes
    size = 0
    _fields = []
    _reserved = []

    @classmethod
    def get_keys(cls):
        """Return the list of keys of the structure fields.

        :return: list of _field keys
        :rtype: list[str]

        """
        keys = list(zip(*cls._fields))[0]
        return keys

    @classmethod
    def get_format(cls):
        """Return the format string of the structure fields.

        :return: ``rawutil`` format string
        :rtype: str

        """
        fmt_chars = list(zip(*cls._fields))[1]
        fmt = ' '.join(fmt_chars)
        return fmt

    @classmethod
    def get_struct(cls):
        """Return a ``rawutil.Struct`` object with the structure fields.

        :return: struct object
        :rtype: ``rawutil.Struct``

        """
        struct = rawutil.Struct(cls.get_format(),
                                names=cls.get_keys())
        struct.setbyteorder(cls.byteorder)
        return struct

    def get_dict(self):
        """Return a dictionary with the datatype properties.

        Reserved fields are left out.

        :return: dictionary with datatype properties
        :rtype: dict
        """
        keys = self.get_keys()
        return {key: self.__dict__.get(key) for key in keys if key not in self._reserved}

    def get_values(self):
        """Return the list of values of the datatype properties.

        :return: list of values
        :rtype: list

        """
        return list(self.get_dict().values())

    def get_packed_dict(self):
        """Return a dictionary with the values as they are packed.

        :return: dictionary with all structure fields
        :rtype: dict

        """
        keys = self.get_keys()
        return {key: 0 if key in self._reserved else self.__dict__.get(key) for key in keys}

    def get_data(self):
        """Return the packed data.

        :return: packed data
        :rtype: bytes

        """

        return self.data

    def unpack(self, data):
        """Unpack binary data according to the structure.

        :param data: binary data
        :type data: bytes
        :return: None

        """
        struct = self.get_struct()
        values = struct.unpack(data)
        self.data = data
        self.__dict__.update({key: value for key, value in values._asdict().items() if key not in self._reserved})

    def get_packed_data(self):
        """Return the packed data without storing it.

        :return: packed data
        :rtype: bytes

        """
        struct = self.get_struct()
        values = self.get_packed_dict().values()
        return struct.pack(*values)

    def pack(self):
        """Pack the datatype properties in the format defined by the structure."""
        self.data = self.get_packed_data()

    @classmethod
    def read(cls, stream):
        """Read one record from a byte source.

        :param stream: object with a ``read`` method returning bytes
        :return: the unpacked datatype
        :raises EndOfDataError: if the stream has no bytes left
        :raises RecordError: if the stream ends within the record

        """
        data = bytes()
        while len(data) < cls.size:
            chunk = stream.read(cls.size - len(data))
            if not chunk:
                break
            data += chunk
        if not data:
            raise mod_error.EndOfDataError(f"No {cls.__name__} record left", cls.size, 0)
        if len(data) < cls.size:
            raise mod_error.RecordError(f"{cls.__name__} record truncated after {len(data)} of {cls.size} bytes",
                                        cls.size,
                                        len(data))
        datatype = cls()
        datatype.unpack(data)
        mod_logger.log.debug(f"Unpacked {datatype!r}")
        return datatype

    def write(self, stream):
        """Pack the record and write it to a byte sink."""
        self.pack()
        stream.write(self.data)

    def __eq__(self, other):
        if not isinstance(other, DataType):
            return NotImplemented
        return type(self) is type(other) and self.get_dict() == other.get_dict()

    # records are mutable
    __hash__ = None

    def __str__(self):
        return str(self.get_dict())

    def __repr__(self):
        keys = self.get_dict().keys()
        values = map(repr, self.get_values())
        kwargs = ', '.join(map('='.join, zip(keys, values)))
        return f"{self.__class__.__name__}({kwargs})"


class Timestamped(DataType):
    """Datatype with a ``timestamp`` field of seconds since the Unix epoch.

    In memory the timestamp is a ``datetime`` in UTC. An unrepresentable value
    is replaced by the current time on unpacking.

    """

    def unpack(self, data):
        super().unpack(data)
        self.timestamp = to_datetime(self.timestamp)

    def get_packed_dict(self):
        values = super().get_packed_dict()
        values['timestamp'] = to_seconds(self.timestamp)
        return values

    def set_datetime(self, timestamp):
        if timestamp is None:
            timestamp = utcnow()
        self.timestamp = as_utc(timestamp)


class AID(Timestamped):
    """The AID record contains the last position fix of the device.

    ============ ========= ==============================
     Byte Number  Type      Description
    ============ ========= ==============================
          0 to 7  float64   latitude in degrees
         8 to 15  float64   longitude in degrees
        16 to 23  float64   elevation in meters
        24 to 31  int64     seconds since the Unix epoch
    ============ ========= ==============================

    """
    size = 32
    _fields = [('lat', 'd'),        # latitude in degrees
               ('lon', 'd'),        # longitude in degrees
               ('elev', 'd'),       # elevation in meters
               ('timestamp', 'q'),  # seconds since the Unix epoch
               ]

    def __init__(self, lat=0.0, lon=0.0, elev=0.0, timestamp=None):
        self.lat = lat
        self.lon = lon
        self.elev = elev
        self.set_datetime(timestamp)


class POI(Timestamped):
    """The POI record contains a waypoint and the time it was saved.

    ============ ========= ==============================
     Byte Number  Type      Description
    ============ ========= ==============================
          0 to 7  int64     seconds since the Unix epoch
         8 to 15  float64   latitude in degrees
        16 to 23  float64   longitude in degrees
        24 to 31  uint64    reserved, zero
    ============ ========= ==============================

    """
    size = 32
    _fields = [('timestamp', 'q'),  # seconds since the Unix epoch
               ('lat', 'd'),        # latitude in degrees
               ('lon', 'd'),        # longitude in degrees
               ('reserved', 'Q'),   # should be set to zero
               ]
    _reserved = ['reserved']

    def __init__(self, timestamp=None, lat=0.0, lon=0.0):
        self.set_datetime(timestamp)
        self.lat = lat
        self.lon = lon

    def is_empty(self):
        """Return whether the record is an unused slot.

        Unused slots of the POI.DAT file are filled with zeros.

        """
        return self.lat == 0 and self.lon == 0 and self.timestamp == EPOCH


class Trail(DataType):
    """The Trail record contains a summary of the last recorded track.

    ============ ========= =====================================
     Byte Number  Type      Description
    ============ ========= =====================================
          0 to 7  uint64    reserved, zero
         8 to 15  float64   latitude of the last point
        16 to 23  float64   longitude of the last point
        24 to 27  uint32    reserved, zero
        28 to 31  uint32    number of track points
        32 to 39  float64   distance in meters
        40 to 43  uint32    duration in seconds
        44 to 47  float32   speed
    ============ ========= =====================================

    It is unknown whether ``speed`` is the average speed or the speed at the
    last point, so the value is kept as is.

    """
    size = 48
    _fields = [('reserved0', 'Q'),  # should be set to zero
               ('lat', 'd'),        # latitude of the last point
               ('lon', 'd'),        # longitude of the last point
               ('reserved1', 'I'),  # should be set to zero
               ('points', 'I'),     # number of track points
               ('dist', 'd'),       # distance in meters
               ('time', 'I'),       # duration in seconds
               ('speed', 'f'),      # speed
               ]
    _reserved = ['reserved0', 'reserved1']

    def __init__(self, lat=0.0, lon=0.0, points=0, dist=0.0, time=0, speed=0.0):
        self.lat = lat
        self.lon = lon
        self.points = points
        self.dist = dist
        self.time = time
        self.speed = speed

    def get_timedelta(self):
        return timedelta(seconds=self.time)


def read_pois(stream):
    """Read the records of a POI.DAT file.

    Records are read until the stream is exhausted at a record boundary. Empty
    slots are returned as well.

    :param stream: byte source
    :return: list of POI records
    :rtype: list[POI]
    :raises RecordError: if the stream ends within a record

    """
    pois = []
    while True:
        try:
            poi = POI.read(stream)
        except mod_error.EndOfDataError:
            break
        pois.append(poi)
    mod_logger.log.info(f"Read {len(pois)} POI records")
    return pois


def write_pois(pois, stream):
    """Write the records as a POI.DAT file.

    The file always has :data:`POI_SLOTS` slots. Unused slots are padded with
    zeros.

    :param pois: sequence of at most :data:`POI_SLOTS` records
    :param stream: byte sink
    :raises CapacityError: if there are too many records; nothing is written

    """
    pois = list(pois)
    if len(pois) > POI_SLOTS:
        raise mod_error.CapacityError(f"Too many POI records: {len(pois)} (at most {POI_SLOTS})")
    data = bytearray()
    for poi in pois:
        data += poi.get_packed_data()
    padding = POI_SLOTS - len(pois)
    mod_logger.log.debug(f"Padding {padding} unused POI slots")
    data += bytes(POI.size * padding)
    stream.write(bytes(data))
    mod_logger.log.info(f"Wrote {len(pois)} POI records")
