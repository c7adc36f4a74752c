class MiniGPSError(Exception):
    """Base class for exceptions."""
    def __init__(self, value):
        self.value = value

    def __str__(self):
        return repr(self.value)


class RecordError(MiniGPSError):
    """Exception raised when a byte source cannot supply a whole record."""
    def __init__(self, value, expected=0, received=0):
        super().__init__(value)
        self.expected = expected
        self.received = received


class EndOfDataError(RecordError):
    """Exception raised when no bytes remain at a record boundary."""
    pass


class CapacityError(MiniGPSError):
    "Exception raised when a file cannot hold the given number of records."
    pass
