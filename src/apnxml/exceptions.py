"""APN conversion exception classes."""

from __future__ import annotations


class APNError(Exception):
    """Base exception for all APN conversion errors."""


class UnknownFlagNameError(APNError, ValueError):
    """Name not present in the name table of a type codec."""


class OutOfRangeError(APNError, ValueError):
    """Numeric encoding outside the bounds of a type codec."""


class MalformedInputError(APNError, ValueError):
    """Source bytes are not well-formed XML/JSON, or a value has the wrong shape."""


class InvalidRootElementError(MalformedInputError):
    """XML document root element is not ``apns``."""


class UnrecognizedFormatError(APNError, ValueError):
    """Input could not be identified as XML or JSON."""


class IngestionError(APNError):
    """File or network read/write failure."""
