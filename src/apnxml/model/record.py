"""APN record: identity plus the eight optional field groups.

A record either stands alone (flat, as decoded from one XML ``apn`` element)
or acts as the representative of every record sharing its network identity.
A representative carries only its identity and one child record per
capability type in ``variants``; the children carry no identity.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any

from ..exceptions import MalformedInputError
from .apntype import APNTypes
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

# =============================================================================
# Record Constants
# =============================================================================


VARIANTS_JSON_KEY = "groupMap"

# Group attribute names double as their JSON keys
_GroupTable: tuple[tuple[str, type[FieldGroup]], ...] = (
    ("base", BaseGroup),
    ("auth", AuthGroup),
    ("bearer", BearerGroup),
    ("proxy", ProxyGroup),
    ("mms", MmsGroup),
    ("mvno", MvnoGroup),
    ("limit", LimitGroup),
    ("other", OtherGroup),
)

_IdentityJSONKeys = frozenset({"carrierName", "carrierID", "mcc", "mnc"})


def _clone_group(group: FieldGroup | None) -> Any:
    if group is None:
        return None

    return group.clone()


def _group_is_like(candidate: FieldGroup | None, query: FieldGroup | None) -> bool:
    if candidate is None or query is None:
        return query is None

    return candidate.is_like(query)


# =============================================================================
# APN Record
# =============================================================================


@dataclass(kw_only=True)
class APNRecord:
    """A complete APN configuration.

    Attributes:
        identity: Carrier name, carrier ID, MCC and MNC (None on variants)
        base .. other: Optional field groups
        variants: Capability name -> child record (representatives only)
    """

    identity: APNIdentity | None = None

    base: BaseGroup | None = None
    auth: AuthGroup | None = None
    bearer: BearerGroup | None = None
    proxy: ProxyGroup | None = None
    mms: MmsGroup | None = None
    mvno: MvnoGroup | None = None
    limit: LimitGroup | None = None
    other: OtherGroup | None = None

    variants: dict[str, APNRecord] | None = None

    def is_valid(self) -> bool:
        """A record is valid when its identity has both MCC and MNC."""
        return self.identity is not None and self.identity.is_valid()

    def identity_key(self) -> str:
        return (self.identity or APNIdentity()).key()

    def plmn(self) -> str:
        return (self.identity or APNIdentity()).plmn()

    def carrier_display_name(self) -> str:
        if self.identity is None:
            return ""

        return self.identity.display_name()

    def groups(self) -> Iterator[tuple[str, FieldGroup | None]]:
        for attr, _ in _GroupTable:
            yield attr, getattr(self, attr)

    def clone(self) -> APNRecord:
        """Deep copy; invalid groups are dropped, variants are cloned recursively."""
        record = APNRecord(
            identity=_clone_group(self.identity),
            **{attr: _clone_group(group) for attr, group in self.groups()},
        )

        if self.variants is not None:
            record.variants = {type_name: variant.clone() for type_name, variant in self.variants.items()}

        return record

    # -------------------------------------------------------------------------
    # Fuzzy matching
    # -------------------------------------------------------------------------

    def find_like(self, query: APNRecord | None) -> APNRecord | None:
        """Return the record (or variant) matching the query, None if none does.

        The query is an ordinary record holding only the fields of interest;
        absent groups and fields match anything. For a representative the
        identity is matched first, then the variants in ascending key order.
        """
        if query is None:
            return self

        if self.identity is not None and not self.identity.is_like(query.identity):
            return None

        if self.variants is not None:
            for type_name in sorted(self.variants):
                match = self.variants[type_name].find_like(query)
                if match is not None:
                    return match
            return None

        for attr, group in self.groups():
            if not _group_is_like(group, getattr(query, attr)):
                return None

        return self

    def is_like(self, query: APNRecord | None) -> bool:
        return self.find_like(query) is not None

    # -------------------------------------------------------------------------
    # XML attributes (one flat ``apn`` element)
    # -------------------------------------------------------------------------

    def to_xml_attrs(self, types: APNTypes) -> dict[str, str]:
        attrs: dict[str, str] = {}

        identity = _clone_group(self.identity)
        if identity is not None:
            attrs.update(identity.to_xml_attrs(types))

        for _, group in self.groups():
            group = _clone_group(group)
            if group is not None:
                attrs.update(group.to_xml_attrs(types))

        return attrs

    @classmethod
    def from_xml_attrs(cls, attrs: dict[str, str], types: APNTypes) -> APNRecord:
        """Decode one flat record; invalid groups (and identity) become None."""
        return cls(
            identity=APNIdentity.from_xml_attrs(attrs, types).clone(),
            **{attr: group_type.from_xml_attrs(attrs, types).clone() for attr, group_type in _GroupTable},
        )

    # -------------------------------------------------------------------------
    # JSON objects
    # -------------------------------------------------------------------------

    def to_json_dict(self, types: APNTypes) -> dict[str, Any]:
        data: dict[str, Any] = {}

        if self.identity is not None:
            data.update(self.identity.to_json_dict(types))

        for attr, group in self.groups():
            group = _clone_group(group)
            if group is not None:
                data[attr] = group.to_json_dict(types)

        if self.variants:
            data[VARIANTS_JSON_KEY] = {
                type_name: self.variants[type_name].to_json_dict(types) for type_name in sorted(self.variants)
            }

        return data

    @classmethod
    def from_json_dict(cls, data: Any, types: APNTypes) -> APNRecord:
        if not isinstance(data, dict):
            raise MalformedInputError(f"APN record expects a JSON object, got {data!r}")

        record = cls()

        if _IdentityJSONKeys & data.keys():
            record.identity = APNIdentity.from_json_dict(data, types)

        for attr, group_type in _GroupTable:
            if data.get(attr) is not None:
                setattr(record, attr, group_type.from_json_dict(data[attr], types).clone())

        variants = data.get(VARIANTS_JSON_KEY)
        if variants is not None:
            if not isinstance(variants, dict):
                raise MalformedInputError(f"{VARIANTS_JSON_KEY!r} expects a JSON object, got {variants!r}")

            record.variants = {
                str(type_name): cls.from_json_dict(variant, types) for type_name, variant in variants.items()
            }

        return record
