"""Document-level XML and JSON encoding/decoding of APN collections.

XML (Android apns-conf style):

    <apns version="8">
        <apn carrier="Orange FR" mcc="208" mnc="01" apn="orange" type="default"/>
        ...
    </apns>

    Decoding yields one flat record per ``apn`` element (at any depth below
    the root) and merges them into representatives. Encoding flattens the
    representatives back to one ``apn`` element per variant.

JSON:

    A list of representative records; the grouped shape round-trips as is,
    so decoding does not merge.

Decoding is fail-fast: the first malformed element or value aborts the whole
call and no partial collection is returned.
"""

from __future__ import annotations

import json
import xml.etree.ElementTree as ET
from typing import Any

from ..exceptions import InvalidRootElementError, MalformedInputError
from .apntype import APNTypes, default_types
from .collection import APNCollection, flatten_records
from .record import APNRecord

# =============================================================================
# Document Constants
# =============================================================================


XML_ROOT_TAG = "apns"
XML_RECORD_TAG = "apn"
XML_VERSION = "8"

INDENT = "\t"


# =============================================================================
# XML
# =============================================================================


def parse_xml(data: bytes | str) -> ET.Element:
    """Parse XML bytes into an element tree root.

    Raises:
        MalformedInputError: If the data is not well-formed XML
    """
    try:
        return ET.fromstring(data)
    except ET.ParseError as e:
        raise MalformedInputError(f"APN XML is not well-formed: {e}") from e


def decode_xml_records(data: bytes | str, types: APNTypes | None = None) -> list[APNRecord]:
    """Decode every ``apn`` element into a flat record, without merging.

    Raises:
        MalformedInputError: If the XML or any attribute value is malformed
        InvalidRootElementError: If the root element is not ``apns``
        UnknownFlagNameError: If a flag attribute holds an unknown name
        OutOfRangeError: If a numeric flag attribute is out of range
    """
    types = types or default_types()

    root = parse_xml(data)

    if root.tag != XML_ROOT_TAG:
        raise InvalidRootElementError(f"APN XML has incorrect root element: {root.tag!r}")

    return [APNRecord.from_xml_attrs(dict(element.attrib), types) for element in root.iter(XML_RECORD_TAG)]


def decode_xml(data: bytes | str, types: APNTypes | None = None) -> APNCollection:
    """Decode an apns-conf XML document into a merged collection."""
    types = types or default_types()

    return APNCollection.from_records(decode_xml_records(data, types), types)


def encode_xml(collection: APNCollection, types: APNTypes | None = None) -> bytes:
    """Encode a collection as tab-indented apns-conf XML (UTF-8, with declaration)."""
    types = types or default_types()

    root = ET.Element(XML_ROOT_TAG, {"version": XML_VERSION})

    for record in flatten_records(collection):
        ET.SubElement(root, XML_RECORD_TAG, record.to_xml_attrs(types))

    ET.indent(root, space=INDENT)

    return ET.tostring(root, encoding="utf-8", xml_declaration=True) + b"\n"


# =============================================================================
# JSON
# =============================================================================


def parse_json(data: bytes | str) -> Any:
    """Parse JSON bytes.

    Raises:
        MalformedInputError: If the data is not well-formed JSON
    """
    try:
        return json.loads(data)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise MalformedInputError(f"APN JSON is not well-formed: {e}") from e


def decode_json(data: bytes | str, types: APNTypes | None = None) -> APNCollection:
    """Decode a JSON list of (already grouped) records.

    Raises:
        MalformedInputError: If the JSON is malformed or has the wrong shape
        UnknownFlagNameError: If a flag value holds an unknown name
    """
    types = types or default_types()

    document = parse_json(data)

    if document is None:
        return APNCollection()

    if not isinstance(document, list):
        raise MalformedInputError(f"APN JSON expects a list of records, got {type(document).__name__}")

    return APNCollection(APNRecord.from_json_dict(item, types) for item in document)


def encode_json(collection: APNCollection, types: APNTypes | None = None) -> bytes:
    """Encode a collection as tab-indented JSON (UTF-8)."""
    types = types or default_types()

    document = [record.to_json_dict(types) for record in collection]

    return json.dumps(document, indent=INDENT, ensure_ascii=False).encode("utf-8")
