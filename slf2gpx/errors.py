"""
Exceptions raised while reading and decoding SLF logs.
"""


class SlfError(Exception):
    """Base class for SLF conversion failures."""


class SlfReadError(SlfError):
    """The source file is unreadable or not shaped like an SLF log."""


class SlfDecodeError(SlfError):
    """A field of the log could not be decoded into a valid value."""
