"""APN field groups: identity and the eight optional sub-records.

This module implements the small validated records an APN is composed of.
It provides:

Classes:
    - FieldKind: Scalar kinds a field can hold (string, integer, boolean)
    - FieldGroup: Shared base class (clone, validation, matching, encoding)
    - APNIdentity: Carrier name, carrier ID, MCC and MNC
    - BaseGroup: APN name, capability type, profile ID
    - AuthGroup: Authentication type, username, password
    - BearerGroup: Protocol, roaming protocol, MTU, server
    - ProxyGroup: Proxy server and port
    - MmsGroup: MMSC, MMS proxy and port
    - MvnoGroup: MVNO match type and data
    - LimitGroup: Connection limits
    - OtherGroup: Network type bitmask and carrier control flags

Every group declares a static field table mapping attribute names to their
XML attribute name and JSON key. The names are a compatibility contract with
Android apns-conf XML and existing JSON consumers.

Validation may normalize the receiver (AuthGroup fills a missing credential
with an empty string, BaseGroup defaults a missing type to DEFAULT). Cloning
an invalid group yields None so encoders can omit the group entirely.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from enum import Enum, IntFlag, auto
from typing import Any, ClassVar, Self

from ..exceptions import MalformedInputError
from .apntype import APNTypes, AuthType, BaseType, BearerProtocol, NetworkType
from .common import CodecFormat

# =============================================================================
# Field Constants
# =============================================================================


XML_TRUE = "true"
XML_FALSE = "false"

_XMLBooleans: dict[str, bool] = {
    "1": True,
    "t": True,
    "true": True,
    "0": False,
    "f": False,
    "false": False,
}

# Words dropped from carrier names by APNIdentity.display_name() (compared lowercase)
CARRIER_STOPWORDS: frozenset[str] = frozenset(
    {
        # Network generations
        "2g",
        "3g",
        "4g",
        "5g",
        "lte",
        "nsa",
        "sa",
        "gprs",
        # Capability types
        "none",
        "default",
        "mms",
        "supl",
        "dun",
        "hipri",
        "fota",
        "ims",
        "cbs",
        "ia",
        "emergency",
        "mcx",
        "xcap",
        "vsim",
        "bip",
        "enterprise",
        "rcs",
        "oem_paid",
        "oem_private",
        # Connection purposes
        "internet",
        "data",
        "web",
        "wap",
        "wifi",
        "vowifi",
        "volte",
        "hotspot",
        "tether",
        "ota",
        "admin",
        "ut",
        # Placeholders
        "-",
    }
)

# Tried in order; the first one present in the carrier name splits it
CARRIER_SEPARATORS: tuple[str, ...] = (" ", "-", "_", ".", ",", ":", ";", "|")


# =============================================================================
# Field Descriptors
# =============================================================================


class FieldKind(Enum):
    STRING = auto()
    INTEGER = auto()
    BOOLEAN = auto()


@dataclass(frozen=True, kw_only=True)
class _FieldDescriptor:
    attr: str  # Python attribute name
    xml: str  # XML attribute name
    json: str  # JSON key

    kind: FieldKind | type[IntFlag]  # Scalar kind or flag type (encoded through its codec)

    width: int = 0  # Minimum digits of integers in XML (zero-padded)


# =============================================================================
# Field helpers
# =============================================================================


def _is_like_string(candidate: str | None, query: str | None) -> bool:
    if query is None:
        return True

    if candidate is None:
        return False

    return query.lower() in candidate.lower()


def _is_like_value(candidate: Any, query: Any) -> bool:
    if query is None:
        return True

    return candidate == query


def _is_like_mask(candidate: int | None, query: int | None) -> bool:
    if query is None:
        return True

    if candidate is None:
        return False

    return candidate & query == query


def _decode_xml_scalar(kind: FieldKind, name: str, raw: str) -> str | int | bool | None:
    if kind is FieldKind.STRING:
        return raw

    text = raw.strip()
    if not text:
        return None

    if kind is FieldKind.INTEGER:
        try:
            return int(text)
        except ValueError:
            raise MalformedInputError(f"XML attribute {name!r} has invalid integer: {raw!r}") from None

    try:
        return _XMLBooleans[text.lower()]
    except KeyError:
        raise MalformedInputError(f"XML attribute {name!r} has invalid boolean: {raw!r}") from None


def _encode_xml_scalar(kind: FieldKind, value: str | int | bool, width: int = 0) -> str:
    if kind is FieldKind.BOOLEAN:
        return XML_TRUE if value else XML_FALSE

    if kind is FieldKind.INTEGER and width:
        return f"{value:0{width}d}"

    return str(value)


def _check_json_scalar(kind: FieldKind, name: str, raw: Any) -> str | int | bool:
    if kind is FieldKind.STRING:
        expected: tuple[type, ...] = (str,)
    elif kind is FieldKind.INTEGER:
        expected = (int,)
    else:
        expected = (bool,)

    # bool is an int subclass, so it is rejected explicitly for integer fields
    if not isinstance(raw, expected) or (kind is FieldKind.INTEGER and isinstance(raw, bool)):
        raise MalformedInputError(f"JSON key {name!r} expects {kind.name.lower()}, got {raw!r}")

    return raw


# =============================================================================
# Field Group Base
# =============================================================================


class FieldGroup:
    """Shared capability of the APN sub-records.

    Subclasses are dataclasses whose fields default to None (absent) and
    declare their wire names in ``_fields``.
    """

    _fields: ClassVar[tuple[_FieldDescriptor, ...]]

    def is_valid(self) -> bool:
        raise NotImplementedError

    def is_like(self, query: Self | None) -> bool:
        """Partial match: absent query fields match anything.

        Strings match by case-insensitive containment of the query in the
        receiver, flag fields when every query flag is set in the receiver,
        other fields by equality.
        """
        if query is None:
            return True

        for field in self._like_fields():
            candidate = getattr(self, field.attr)
            wanted = getattr(query, field.attr)

            if field.kind is FieldKind.STRING:
                matched = _is_like_string(candidate, wanted)
            elif isinstance(field.kind, FieldKind):
                matched = _is_like_value(candidate, wanted)
            else:
                matched = _is_like_mask(candidate, wanted)

            if not matched:
                return False

        return True

    def _like_fields(self) -> tuple[_FieldDescriptor, ...]:
        return self._fields

    def clone(self) -> Self | None:
        """Return an independent copy, or None if the group is invalid.

        Validation defaults are applied to the copy; self is left unchanged.
        """
        copy = dataclasses.replace(self)  # type: ignore[type-var]
        if not copy.is_valid():
            return None

        return copy

    def is_empty(self) -> bool:
        return all(getattr(self, field.attr) is None for field in self._fields)

    # -------------------------------------------------------------------------
    # XML attributes
    # -------------------------------------------------------------------------

    def to_xml_attrs(self, types: APNTypes) -> dict[str, str]:
        attrs: dict[str, str] = {}

        for field in self._fields:
            value = getattr(self, field.attr)
            if value is None:
                continue

            if isinstance(field.kind, FieldKind):
                attrs[field.xml] = _encode_xml_scalar(field.kind, value, field.width)
            else:
                encoded = types.codec_for(field.kind).encode(value, CodecFormat.XML)
                assert isinstance(encoded, str)
                attrs[field.xml] = encoded

        return attrs

    @classmethod
    def from_xml_attrs(cls, attrs: dict[str, str], types: APNTypes) -> Self:
        values: dict[str, Any] = {}

        for field in cls._fields:
            raw = attrs.get(field.xml)
            if raw is None:
                continue

            if isinstance(field.kind, FieldKind):
                values[field.attr] = _decode_xml_scalar(field.kind, field.xml, raw)
            else:
                values[field.attr] = types.codec_for(field.kind).decode(raw, CodecFormat.XML)

        return cls(**values)

    # -------------------------------------------------------------------------
    # JSON objects
    # -------------------------------------------------------------------------

    def to_json_dict(self, types: APNTypes) -> dict[str, Any]:
        data: dict[str, Any] = {}

        for field in self._fields:
            value = getattr(self, field.attr)
            if value is None:
                continue

            if isinstance(field.kind, FieldKind):
                data[field.json] = value
            else:
                data[field.json] = types.codec_for(field.kind).encode(value, CodecFormat.JSON)

        return data

    @classmethod
    def from_json_dict(cls, data: Any, types: APNTypes) -> Self:
        if not isinstance(data, dict):
            raise MalformedInputError(f"{cls.__name__} expects a JSON object, got {data!r}")

        values: dict[str, Any] = {}

        for field in cls._fields:
            raw = data.get(field.json)
            if raw is None:
                continue

            if isinstance(field.kind, FieldKind):
                values[field.attr] = _check_json_scalar(field.kind, field.json, raw)
            else:
                values[field.attr] = types.codec_for(field.kind).decode(raw, CodecFormat.JSON)

        return cls(**values)


# =============================================================================
# Identity
# =============================================================================


@dataclass(kw_only=True)
class APNIdentity(FieldGroup):
    """Network identity of an APN: carrier name, carrier ID and PLMN.

    The minimal required record for a valid APN; MCC and MNC must be present.
    """

    carrier: str = ""
    carrier_id: int | None = None
    mcc: int | None = None
    mnc: int | None = None

    _fields: ClassVar[tuple[_FieldDescriptor, ...]] = (
        _FieldDescriptor(attr="carrier", xml="carrier", json="carrierName", kind=FieldKind.STRING),
        _FieldDescriptor(attr="carrier_id", xml="carrier_id", json="carrierID", kind=FieldKind.INTEGER),
        _FieldDescriptor(attr="mcc", xml="mcc", json="mcc", kind=FieldKind.INTEGER, width=3),
        _FieldDescriptor(attr="mnc", xml="mnc", json="mnc", kind=FieldKind.INTEGER, width=2),
    )

    def is_valid(self) -> bool:
        return self.mcc is not None and self.mnc is not None

    def is_like(self, query: Self | None) -> bool:
        """Match carrier by containment, carrier ID and PLMN by equality.

        The PLMN is only compared when the query carries both MCC and MNC.
        """
        if query is None:
            return True

        if query.carrier_id is not None and self.carrier_id != query.carrier_id:
            return False

        if query.mcc is not None and query.mnc is not None:
            if (self.mcc, self.mnc) != (query.mcc, query.mnc):
                return False

        return _is_like_string(self.carrier, query.carrier)

    def to_xml_attrs(self, types: APNTypes) -> dict[str, str]:
        attrs = super().to_xml_attrs(types)
        if not self.carrier:
            attrs.pop("carrier", None)
        return attrs

    def to_json_dict(self, types: APNTypes) -> dict[str, Any]:
        data = super().to_json_dict(types)
        data.setdefault("carrierName", self.carrier)
        return data

    def plmn(self) -> str:
        """Return the 5-digit PLMN ("%03d%02d" of MCC, MNC), "00000" if incomplete."""
        if self.mcc is None or self.mnc is None:
            return "00000"

        return f"{self.mcc:03d}{self.mnc:02d}"

    def key(self) -> str:
        """Return the grouping key, e.g. "CID:1234;PLMN:20801;"."""
        key = ""

        if self.carrier_id is not None:
            key += f"CID:{self.carrier_id};"

        return key + f"PLMN:{self.plmn()};"

    def display_name(self) -> str:
        """Return the carrier name without generic or technical words.

        Splits on the first separator found, drops stopwords and joins the
        remaining words with a space. If every word is dropped, returns the
        carrier name unchanged.
        """
        carrier = self.carrier

        words = [carrier]
        for separator in CARRIER_SEPARATORS:
            if separator in carrier:
                words = carrier.split(separator)
                break

        kept = [word for word in words if word.strip().lower() not in CARRIER_STOPWORDS]

        if not kept:
            return carrier

        return " ".join(kept)


# =============================================================================
# Field Groups
# =============================================================================


@dataclass(kw_only=True)
class BaseGroup(FieldGroup):
    """APN name, capability type and profile ID."""

    apn: str | None = None
    type: BaseType | None = None
    profile_id: int | None = None

    _fields: ClassVar[tuple[_FieldDescriptor, ...]] = (
        _FieldDescriptor(attr="apn", xml="apn", json="apn", kind=FieldKind.STRING),
        _FieldDescriptor(attr="type", xml="type", json="type", kind=BaseType),
        _FieldDescriptor(attr="profile_id", xml="profile_id", json="profileID", kind=FieldKind.INTEGER),
    )

    def is_valid(self) -> bool:
        if self.apn is not None and self.type is None:
            self.type = BaseType.DEFAULT

        return not self.is_empty()


@dataclass(kw_only=True)
class AuthGroup(FieldGroup):
    """Authentication type and credentials."""

    type: AuthType | None = None
    username: str | None = None
    password: str | None = None

    _fields: ClassVar[tuple[_FieldDescriptor, ...]] = (
        _FieldDescriptor(attr="type", xml="authtype", json="type", kind=AuthType),
        _FieldDescriptor(attr="username", xml="user", json="username", kind=FieldKind.STRING),
        _FieldDescriptor(attr="password", xml="password", json="password", kind=FieldKind.STRING),
    )

    def is_valid(self) -> bool:
        if self.type is None:
            return False

        if self.username is None and self.password is None:
            return False

        if self.username is None:
            self.username = ""

        if self.password is None:
            self.password = ""

        return True


@dataclass(kw_only=True)
class BearerGroup(FieldGroup):
    """Bearer protocol (home and roaming), MTU and server."""

    type: BearerProtocol | None = None
    type_roaming: BearerProtocol | None = None
    mtu: int | None = None
    server: str | None = None

    _fields: ClassVar[tuple[_FieldDescriptor, ...]] = (
        _FieldDescriptor(attr="type", xml="protocol", json="type", kind=BearerProtocol),
        _FieldDescriptor(attr="type_roaming", xml="roaming_protocol", json="typeRoaming", kind=BearerProtocol),
        _FieldDescriptor(attr="mtu", xml="mtu", json="mtu", kind=FieldKind.INTEGER),
        _FieldDescriptor(attr="server", xml="server", json="server", kind=FieldKind.STRING),
    )

    def is_valid(self) -> bool:
        return self.type is not None or self.type_roaming is not None


@dataclass(kw_only=True)
class ProxyGroup(FieldGroup):
    """HTTP proxy server and port."""

    server: str | None = None
    port: int | None = None

    _fields: ClassVar[tuple[_FieldDescriptor, ...]] = (
        _FieldDescriptor(attr="server", xml="proxy", json="server", kind=FieldKind.STRING),
        _FieldDescriptor(attr="port", xml="port", json="port", kind=FieldKind.INTEGER),
    )

    def is_valid(self) -> bool:
        return bool(self.server) and self.port is not None


@dataclass(kw_only=True)
class MmsGroup(FieldGroup):
    """MMS center URL, MMS proxy and port."""

    center: str | None = None
    server: str | None = None
    port: int | None = None

    _fields: ClassVar[tuple[_FieldDescriptor, ...]] = (
        _FieldDescriptor(attr="center", xml="mmsc", json="center", kind=FieldKind.STRING),
        _FieldDescriptor(attr="server", xml="mmsproxy", json="server", kind=FieldKind.STRING),
        _FieldDescriptor(attr="port", xml="mmsport", json="port", kind=FieldKind.INTEGER),
    )

    def is_valid(self) -> bool:
        return bool(self.center) or bool(self.server) or self.port is not None


@dataclass(kw_only=True)
class MvnoGroup(FieldGroup):
    """MVNO match type (spn, imsi, gid, iccid) and match data."""

    type: str | None = None
    data: str | None = None

    _fields: ClassVar[tuple[_FieldDescriptor, ...]] = (
        _FieldDescriptor(attr="type", xml="mvno_type", json="type", kind=FieldKind.STRING),
        _FieldDescriptor(attr="data", xml="mvno_match_data", json="data", kind=FieldKind.STRING),
    )

    def is_valid(self) -> bool:
        return not self.is_empty()


@dataclass(kw_only=True)
class LimitGroup(FieldGroup):
    """Maximum connections and the time window they are counted in."""

    max_conn: int | None = None
    max_conn_time: int | None = None

    _fields: ClassVar[tuple[_FieldDescriptor, ...]] = (
        _FieldDescriptor(attr="max_conn", xml="max_conns", json="maxConn", kind=FieldKind.INTEGER),
        _FieldDescriptor(attr="max_conn_time", xml="max_conns_time", json="maxConnTime", kind=FieldKind.INTEGER),
    )

    def is_valid(self) -> bool:
        return not self.is_empty()


@dataclass(kw_only=True)
class OtherGroup(FieldGroup):
    """Network restrictions, modem settings and carrier control flags."""

    network_type_bitmask: NetworkType | None = None
    modem_cognitive: bool | None = None
    carrier_enabled: bool | None = None
    user_visible: bool | None = None
    user_editable: bool | None = None

    _fields: ClassVar[tuple[_FieldDescriptor, ...]] = (
        _FieldDescriptor(
            attr="network_type_bitmask", xml="network_type_bitmask", json="networkTypeBitmask", kind=NetworkType
        ),
        _FieldDescriptor(attr="modem_cognitive", xml="modem_cognitive", json="modemCognitive", kind=FieldKind.BOOLEAN),
        _FieldDescriptor(attr="carrier_enabled", xml="carrier_enabled", json="IsEnabled", kind=FieldKind.BOOLEAN),
        _FieldDescriptor(attr="user_visible", xml="user_visible", json="IsVisible", kind=FieldKind.BOOLEAN),
        _FieldDescriptor(attr="user_editable", xml="user_editable", json="IsEditable", kind=FieldKind.BOOLEAN),
    )

    def is_valid(self) -> bool:
        return not self.is_empty()

    def _like_fields(self) -> tuple[_FieldDescriptor, ...]:
        # Only the network restriction takes part in matching
        return self._fields[:1]
