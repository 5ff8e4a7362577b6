"""APN model components: type codecs, field groups, records and documents.

This package contains the pure, synchronous transformation core.
"""

from .apntype import (
    APNTypeCodec,
    APNTypes,
    AuthType,
    BaseType,
    BearerProtocol,
    CodecOptions,
    NetworkType,
    build_types,
    default_types,
)
from .collection import APNCollection, flatten_records, merge_records
from .common import CodecFormat, XMLStyle
from .document import decode_json, decode_xml, decode_xml_records, encode_json, encode_xml
from .fields import (
    APNIdentity,
    AuthGroup,
    BaseGroup,
    BearerGroup,
    FieldGroup,
    LimitGroup,
    MmsGroup,
    MvnoGroup,
    OtherGroup,
    ProxyGroup,
)
from .record import APNRecord

__all__ = [
    # Common types
    "CodecFormat",
    "XMLStyle",
    # Type codecs
    "APNTypeCodec",
    "APNTypes",
    "AuthType",
    "BaseType",
    "BearerProtocol",
    "CodecOptions",
    "NetworkType",
    "build_types",
    "default_types",
    # Field groups
    "APNIdentity",
    "AuthGroup",
    "BaseGroup",
    "BearerGroup",
    "FieldGroup",
    "LimitGroup",
    "MmsGroup",
    "MvnoGroup",
    "OtherGroup",
    "ProxyGroup",
    # Records and collections
    "APNCollection",
    "APNRecord",
    "flatten_records",
    "merge_records",
    # Documents
    "decode_json",
    "decode_xml",
    "decode_xml_records",
    "encode_json",
    "encode_xml",
]
