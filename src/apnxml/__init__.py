"""
apnxml: Conversion of mobile-network APN configurations between
Android apns-conf XML, JSON and Python objects.

Records from heterogeneous carrier sources are normalized, grouped by
network identity and deduplicated by capability type.
"""

from __future__ import annotations

__version__ = "0.1.0"

from .exceptions import (  # noqa: E402
    APNError,
    IngestionError,
    InvalidRootElementError,
    MalformedInputError,
    OutOfRangeError,
    UnknownFlagNameError,
    UnrecognizedFormatError,
)
from .model import (  # noqa: E402
    APNCollection,
    APNRecord,
    decode_json,
    decode_xml,
    encode_json,
    encode_xml,
)

__all__ = [
    "__version__",
    # Exceptions
    "APNError",
    "IngestionError",
    "InvalidRootElementError",
    "MalformedInputError",
    "OutOfRangeError",
    "UnknownFlagNameError",
    "UnrecognizedFormatError",
    # Core
    "APNCollection",
    "APNRecord",
    "decode_json",
    "decode_xml",
    "encode_json",
    "encode_xml",
]
