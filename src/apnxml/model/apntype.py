"""APN type codecs: bitmask value tables and per-format serialization.

This module implements the generic, table-driven codec used by every APN
field that holds a categorical or multi-flag value. It provides:

Classes:
    - CodecOptions: Presentation policy for JSON and XML output
    - APNTypeCodec: Bidirectional value <-> name mapping for one flag type
    - BaseType: APN capabilities (default, mms, supl, dun, ...)
    - AuthType: Authentication methods (pap, chap)
    - NetworkType: Radio technologies (gprs, lte, nr, ...)
    - BearerProtocol: Bearer protocols (ip, ipv4v6, ppp, ...)
    - APNTypes: Registry holding one codec per flag type

Each codec keeps two independent name tables over one canonical bit layout:

    JSON: always canonical lowercase names (array or scalar)
    XML:  names, 1-based order numbers or raw integer values, optionally
          joined with a separator

    The XML tables follow the Android apns-conf conventions, e.g.
    network_type_bitmask="13|20" for LTE and NR, authtype="3" for PAP or CHAP.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import IntFlag
from functools import lru_cache
from typing import Any, Generic, TypeVar

from ..exceptions import MalformedInputError, OutOfRangeError, UnknownFlagNameError
from .common import CodecFormat, XMLStyle

# =============================================================================
# Codec Constants
# =============================================================================


WILDCARD_NAME = "*"  # Input alias for "every defined flag" (or the default of an enum codec)

DESCRIBE_SEPARATOR = "|"  # Separator used for human-readable descriptions

FlagT = TypeVar("FlagT", bound=IntFlag)


# =============================================================================
# Codec Options
# =============================================================================


@dataclass(frozen=True, kw_only=True)
class CodecOptions:
    """Serialization options of a type codec, fixed at construction.

    Attributes:
        json_array: Encode JSON values as an array of names (else a single name)
        xml_separator: Encode XML values as tokens joined by this separator
            (None encodes a single token)
        xml_style: Token style for XML (name, 1-based order or raw value)
        xml_upper: Upper-case XML names (STRING style only)
    """

    json_array: bool = False

    xml_separator: str | None = None
    xml_style: XMLStyle = XMLStyle.STRING
    xml_upper: bool = False


class _NameTable:
    """Bidirectional value <-> name table for one output format.

    Lookup by name is case-insensitive. The empty string and the wildcard
    are always accepted as input names.
    """

    by_value: dict[int, str]
    by_name: dict[str, int]

    def __init__(self, names: Mapping[int, str], none: int, wildcard: int) -> None:
        self.by_value = {}
        self.by_name = {"": none, WILDCARD_NAME: wildcard}

        for value, name in names.items():
            name = name.strip()

            self.by_value[int(value)] = name
            self.by_name[name.lower()] = int(value)

    def name_for(self, value: int, none: int) -> str:
        return self.by_value.get(int(value), self.by_value.get(none, ""))


# =============================================================================
# Type Codec
# =============================================================================


class APNTypeCodec(Generic[FlagT]):
    """Generic codec for one bounded bitmask type.

    Values are valid when ``none < value < maximum``. Each value decomposes
    into the defined flags whose bits it fully contains; recombining those
    flags with bitwise OR reproduces the value.

    Enum codecs (built with a default) hold one flag at a time and map the
    "*" alias to their default instead of to all_value.

    Construction is a pure function of its arguments; instances are never
    mutated afterwards and can be shared freely.

    Attributes:
        flag_type: IntFlag subclass produced by decoding
        none: Sentinel value meaning "unset" / "no flags"
        maximum: Exclusive upper bound of valid values
        all_value: Bitwise OR of every defined flag
        wildcard: Value of the "*" alias (all_value, or the default of an enum codec)
        ordered_flags: Every defined flag except none, ascending
        options: Serialization options
    """

    flag_type: type[FlagT]

    none: FlagT
    maximum: int
    all_value: FlagT
    wildcard: FlagT

    ordered_flags: tuple[FlagT, ...]

    options: CodecOptions

    _json_table: _NameTable
    _xml_table: _NameTable

    def __init__(
        self,
        flag_type: type[FlagT],
        none: int,
        maximum: int,
        names: Mapping[int, str],
        options: CodecOptions | None = None,
        default: int | None = None,
    ) -> None:
        self.flag_type = flag_type
        self.none = flag_type(none)
        self.maximum = int(maximum)
        self.options = options or CodecOptions()

        self.ordered_flags = tuple(sorted(flag_type(value) for value in names if none < value < maximum))

        all_value = int(none)
        for flag in self.ordered_flags:
            all_value |= flag
        self.all_value = flag_type(all_value)

        # Enum codecs hold a single value, so "*" stands for their default
        self.wildcard = self.all_value if default is None else flag_type(default)

        self._json_table = _NameTable(names, int(self.none), int(self.wildcard))
        self._xml_table = _NameTable(self._xml_names(names), int(self.none), int(self.wildcard))

        if self.options.xml_style is XMLStyle.ORDER:
            self._xml_table.by_name.setdefault("0", int(self.none))

    def _xml_names(self, names: Mapping[int, str]) -> dict[int, str]:
        style = self.options.xml_style

        if style is XMLStyle.ORDER:
            xml_names = {int(self.none): ""}
            for order, flag in enumerate(self.ordered_flags, start=1):
                xml_names[int(flag)] = str(order)
            return xml_names

        if style is XMLStyle.INDEX:
            return {int(value): str(int(value)) for value in names}

        if self.options.xml_upper:
            return {int(value): name.strip().upper() for value, name in names.items()}

        return {int(value): name.strip() for value, name in names.items()}

    @property
    def name(self) -> str:
        return self.flag_type.__name__

    # -------------------------------------------------------------------------
    # Bitmask algebra
    # -------------------------------------------------------------------------

    def is_in_bounds(self, value: int) -> bool:
        return self.none < value < self.maximum

    def decompose(self, value: int) -> tuple[FlagT, ...]:
        """Return every defined flag fully contained in value, ascending.

        Returns (none,) if the value contains no defined flag.
        """
        flags = tuple(flag for flag in self.ordered_flags if value & flag == flag)

        return flags or (self.none,)

    def compose(self, names: Iterable[str]) -> FlagT:
        """Combine flag names with bitwise OR.

        Raises:
            UnknownFlagNameError: If any name is not defined
        """
        return self._compose(self._json_table, names)

    def name_for(self, value: int) -> str:
        """Return the name of an exactly-known value, else the name of none."""
        return self._json_table.name_for(value, int(self.none))

    def names_for(self, value: int) -> list[str]:
        return [self._json_table.by_value[int(flag)] for flag in self.decompose(value)]

    def value_for(self, name: str) -> FlagT:
        """Return the value of a single name (aliases "" and "*" included).

        Raises:
            UnknownFlagNameError: If the name is not defined
        """
        return self.flag_type(self._lookup(self._json_table, name))

    def describe(self, value: int) -> str:
        """Human-readable form, e.g. "default|mms"."""
        return DESCRIBE_SEPARATOR.join(self.names_for(value))

    def _compose(self, table: _NameTable, names: Iterable[str]) -> FlagT:
        value = int(self.none)
        for name in names:
            value |= self._lookup(table, name)

        return self.flag_type(value)

    def _lookup(self, table: _NameTable, name: str) -> int:
        key = name.strip().lower()

        try:
            return table.by_name[key]
        except KeyError:
            if key.isdigit() and self.options.xml_style is not XMLStyle.STRING and table is self._xml_table:
                raise OutOfRangeError(f"{self.name} has out of range number: {key}") from None
            raise UnknownFlagNameError(f"{self.name} has incorrect name: {name!r}") from None

    # -------------------------------------------------------------------------
    # Format encoding
    # -------------------------------------------------------------------------

    def encode(self, value: int, fmt: CodecFormat) -> str | list[str]:
        """Encode value for the given format.

        Returns:
            JSON: list of names (json_array) or a single name
            XML: attribute string
        """
        if fmt is CodecFormat.JSON:
            if self.options.json_array:
                return self.names_for(value)
            return self.name_for(value)

        return self._encode_xml(value)

    def decode(self, raw: Any, fmt: CodecFormat) -> FlagT:
        """Decode a value from the given format.

        Raises:
            UnknownFlagNameError: If a name is not defined
            OutOfRangeError: If a numeric value is outside [none, maximum)
            MalformedInputError: If the raw value has the wrong shape
        """
        if fmt is CodecFormat.JSON:
            return self._decode_json(raw)

        if not isinstance(raw, str):
            raise MalformedInputError(f"{self.name} expects an XML attribute string, got {raw!r}")

        return self._decode_xml(raw)

    def _encode_xml(self, value: int) -> str:
        options = self.options

        if options.xml_separator is not None:
            return options.xml_separator.join(self._xml_table.by_value[int(flag)] for flag in self.decompose(value))

        if options.xml_style is XMLStyle.INDEX:
            return str(int(value) if self.is_in_bounds(value) else int(self.none))

        return self._xml_table.name_for(value, int(self.none))

    def _decode_xml(self, raw: str) -> FlagT:
        options = self.options

        if options.xml_separator is not None:
            return self._compose(self._xml_table, raw.split(options.xml_separator))

        if options.xml_style is XMLStyle.INDEX:
            text = raw.strip()
            if not text:
                return self.none

            if text == WILDCARD_NAME:
                return self.wildcard

            try:
                number = int(text)
            except ValueError:
                raise MalformedInputError(f"{self.name} has invalid number: {raw!r}") from None

            if not (self.none <= number < self.maximum):
                raise OutOfRangeError(f"{self.name} has out of range number: {number}")

            return self.flag_type(number)

        return self.flag_type(self._lookup(self._xml_table, raw))

    def _decode_json(self, raw: Any) -> FlagT:
        if self.options.json_array:
            if not isinstance(raw, list) or not all(isinstance(name, str) for name in raw):
                raise MalformedInputError(f"{self.name} expects a JSON array of strings, got {raw!r}")
            return self._compose(self._json_table, raw)

        if not isinstance(raw, str):
            raise MalformedInputError(f"{self.name} expects a JSON string, got {raw!r}")

        return self.flag_type(self._lookup(self._json_table, raw))


# =============================================================================
# APN Flag Types
# =============================================================================


class BaseType(IntFlag):
    """APN capabilities (Android ApnSetting TYPE_*)."""

    NONE = 0
    DEFAULT = 1 << 0
    MMS = 1 << 1
    SUPL = 1 << 2
    DUN = 1 << 3
    HIPRI = 1 << 4
    FOTA = 1 << 5
    IMS = 1 << 6
    CBS = 1 << 7
    IA = 1 << 8
    EMERGENCY = 1 << 9
    MCX = 1 << 10
    XCAP = 1 << 11
    VSIM = 1 << 12
    BIP = 1 << 13
    ENTERPRISE = 1 << 14
    RCS = 1 << 15
    OEM_PAID = 1 << 16
    OEM_PRIVATE = 1 << 17


BASE_TYPE_MAX = 1 << 18

_BaseTypeNames: dict[int, str] = {
    BaseType.NONE: "none",
    BaseType.DEFAULT: "default",
    BaseType.MMS: "mms",
    BaseType.SUPL: "supl",
    BaseType.DUN: "dun",
    BaseType.HIPRI: "hipri",
    BaseType.FOTA: "fota",
    BaseType.IMS: "ims",
    BaseType.CBS: "cbs",
    BaseType.IA: "ia",
    BaseType.EMERGENCY: "emergency",
    BaseType.MCX: "mcx",
    BaseType.XCAP: "xcap",
    BaseType.VSIM: "vsim",
    BaseType.BIP: "bip",
    BaseType.ENTERPRISE: "enterprise",
    BaseType.RCS: "rcs",
    BaseType.OEM_PAID: "oem_paid",
    BaseType.OEM_PRIVATE: "oem_private",
}


class AuthType(IntFlag):
    """Authentication methods. PAP | CHAP means "PAP or CHAP"."""

    NONE = 0
    PAP = 1 << 0
    CHAP = 1 << 1


AUTH_TYPE_MAX = 1 << 2

_AuthTypeNames: dict[int, str] = {
    AuthType.NONE: "none",
    AuthType.PAP: "pap",
    AuthType.CHAP: "chap",
}


class NetworkType(IntFlag):
    """Radio access technologies (Android TelephonyManager NETWORK_TYPE_* bits)."""

    NONE = 0
    GPRS = 1 << 0
    EDGE = 1 << 1
    UMTS = 1 << 2
    CDMA = 1 << 3
    EVDO_0 = 1 << 4
    EVDO_A = 1 << 5
    ONE_X_RTT = 1 << 6
    HSDPA = 1 << 7
    HSUPA = 1 << 8
    HSPA = 1 << 9
    IDEN = 1 << 10
    EVDO_B = 1 << 11
    LTE = 1 << 12
    EHRPD = 1 << 13
    HSPAP = 1 << 14
    GSM = 1 << 15
    TD_SCDMA = 1 << 16
    IWLAN = 1 << 17
    LTE_CA = 1 << 18
    NR = 1 << 19


NETWORK_TYPE_MAX = 1 << 20

_NetworkTypeNames: dict[int, str] = {
    NetworkType.NONE: "unknown",
    NetworkType.GPRS: "gprs",
    NetworkType.EDGE: "edge",
    NetworkType.UMTS: "umts",
    NetworkType.CDMA: "cdma",
    NetworkType.EVDO_0: "evdo_0",
    NetworkType.EVDO_A: "evdo_a",
    NetworkType.ONE_X_RTT: "1xrtt",
    NetworkType.HSDPA: "hsdpa",
    NetworkType.HSUPA: "hsupa",
    NetworkType.HSPA: "hspa",
    NetworkType.IDEN: "iden",
    NetworkType.EVDO_B: "evdo_b",
    NetworkType.LTE: "lte",
    NetworkType.EHRPD: "ehrpd",
    NetworkType.HSPAP: "hspap",
    NetworkType.GSM: "gsm",
    NetworkType.TD_SCDMA: "td_scdma",
    NetworkType.IWLAN: "iwlan",
    NetworkType.LTE_CA: "lte_ca",
    NetworkType.NR: "nr",
}


class BearerProtocol(IntFlag):
    """Bearer protocols. Single-valued in practice."""

    NONE = 0
    IP = 1 << 0
    IPV4 = 1 << 1
    IPV6 = 1 << 2
    IPV4V6 = 1 << 3
    PPP = 1 << 4
    NON_IP = 1 << 5
    UNSTRUCTURED = 1 << 6


BEARER_PROTOCOL_MAX = 1 << 7

_BearerProtocolNames: dict[int, str] = {
    BearerProtocol.NONE: "none",
    BearerProtocol.IP: "ip",
    BearerProtocol.IPV4: "ipv4",
    BearerProtocol.IPV6: "ipv6",
    BearerProtocol.IPV4V6: "ipv4v6",
    BearerProtocol.PPP: "ppp",
    BearerProtocol.NON_IP: "non-ip",
    BearerProtocol.UNSTRUCTURED: "unstructured",
}


# =============================================================================
# Codec Registry
# =============================================================================


@dataclass(frozen=True)
class APNTypes:
    """One codec per APN flag type.

    Passed explicitly to every encode/decode function so that callers can
    substitute differently configured codecs.
    """

    base: APNTypeCodec[BaseType]
    auth: APNTypeCodec[AuthType]
    network: APNTypeCodec[NetworkType]
    bearer: APNTypeCodec[BearerProtocol]

    def codec_for(self, flag_type: type[IntFlag]) -> APNTypeCodec[Any]:
        for codec in (self.base, self.auth, self.network, self.bearer):
            if codec.flag_type is flag_type:
                return codec

        raise LookupError(f"No codec registered for {flag_type.__name__}")


def build_types() -> APNTypes:
    """Construct the codec registry with the Android apns-conf conventions."""
    return APNTypes(
        base=APNTypeCodec(
            BaseType,
            BaseType.NONE,
            BASE_TYPE_MAX,
            _BaseTypeNames,
            CodecOptions(json_array=True, xml_separator=","),
        ),
        auth=APNTypeCodec(
            AuthType,
            AuthType.NONE,
            AUTH_TYPE_MAX,
            _AuthTypeNames,
            CodecOptions(json_array=True, xml_style=XMLStyle.INDEX),
        ),
        network=APNTypeCodec(
            NetworkType,
            NetworkType.NONE,
            NETWORK_TYPE_MAX,
            _NetworkTypeNames,
            CodecOptions(json_array=True, xml_separator="|", xml_style=XMLStyle.ORDER),
        ),
        bearer=APNTypeCodec(
            BearerProtocol,
            BearerProtocol.NONE,
            BEARER_PROTOCOL_MAX,
            _BearerProtocolNames,
            CodecOptions(json_array=False, xml_upper=True),
            default=BearerProtocol.IP,
        ),
    )


@lru_cache(maxsize=1)
def default_types() -> APNTypes:
    """Return the shared default codec registry (built once)."""
    return build_types()
