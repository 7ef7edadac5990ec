"""
Error taxonomy for stats normalization.

InvalidFormat is fatal to a load and surfaces once to the caller.
MalformedEntry is per-record: the normalizer logs it, skips the record
and keeps going. Dangling references have no exception type; they are
dropped where they are resolved.
"""


class StatsError(Exception):
    """Base class for everything the normalizer raises."""


class InvalidFormat(StatsError):
    """The raw object is not a recognizable stats document."""


class MalformedEntry(StatsError):
    """A single raw record is missing a required field or has a bad value."""

    def __init__(self, collection: str, index: int, reason: str):
        self.collection = collection
        self.index      = index
        self.reason     = reason
        super().__init__(f"{collection}[{index}]: {reason}")


class StatsFileError(StatsError):
    """A stats file could not be read or is not valid JSON."""
