"""Common types shared across the APN model components."""

from enum import Enum, auto


class CodecFormat(Enum):
    """External representation a value is encoded to or decoded from."""

    JSON = auto()
    XML = auto()


class XMLStyle(Enum):
    """How a type codec renders values in XML attributes.

    - STRING: canonical name (optionally upper-cased)
    - ORDER: 1-based position of the flag in the ordered flag list
    - INDEX: raw integer value
    """

    STRING = auto()
    ORDER = auto()
    INDEX = auto()
