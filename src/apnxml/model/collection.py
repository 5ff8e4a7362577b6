"""APN collection: identity grouping, merging and ordering of records.

The merge engine turns a flat sequence of decoded records into one
representative record per network identity:

    1. Records without MCC or MNC are discarded
    2. Records are grouped by identity key ("CID:<id>;PLMN:<mccmnc>;")
    3. The longest carrier name seen per key becomes the representative
       identity, cleaned with APNIdentity.display_name()
    4. Every capability flag of a member's Base type becomes one variant
       of the representative, keyed by the flag name; a later member
       providing the same capability replaces the earlier one
    5. Representatives are sorted by MCC, MNC and identity key

Flattening is the inverse used for XML encoding: one flat record per variant,
in ascending key order, each carrying the representative's identity.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from typing import overload

from .apntype import WILDCARD_NAME, APNTypes, BaseType, default_types
from .fields import APNIdentity
from .record import APNRecord

logger = logging.getLogger(__name__)


# =============================================================================
# Merge helpers
# =============================================================================


def _sort_key(record: APNRecord) -> tuple[int, int, str]:
    identity = record.identity or APNIdentity()

    return (identity.mcc or 0, identity.mnc or 0, record.identity_key())


def _split_by_type(record: APNRecord, types: APNTypes) -> Iterator[tuple[str, APNRecord]]:
    """Yield (capability name, variant) pairs for one flat record.

    Each variant is a clone without identity whose Base type is narrowed to a
    single capability flag. A type holding every flag is kept whole under "*".
    """
    # Cloning validates, which defaults a missing type to DEFAULT
    base = record.base.clone() if record.base is not None else None
    if base is None or base.type is None:
        return

    codec = types.base
    base_type = base.type

    if base_type == codec.all_value and len(codec.ordered_flags) > 1:
        variant = record.clone()
        variant.identity = None
        yield WILDCARD_NAME, variant
        return

    for flag in codec.decompose(base_type):
        variant = record.clone()
        variant.identity = None

        assert variant.base is not None
        variant.base.type = BaseType(flag)

        yield codec.name_for(flag), variant


def merge_records(records: Iterable[APNRecord], types: APNTypes | None = None) -> list[APNRecord]:
    """Group flat records by identity into sorted representative records.

    Input records are never modified; representatives hold clones.

    Args:
        records: Flat records, typically one per decoded XML ``apn`` element
        types: Codec registry (defaults to default_types())

    Returns:
        Representatives sorted by (MCC, MNC, identity key)
    """
    types = types or default_types()

    members: dict[str, list[APNRecord]] = {}
    identities: dict[str, APNIdentity] = {}

    discarded = 0

    for record in records:
        if not record.is_valid():
            discarded += 1
            continue

        assert record.identity is not None

        key = record.identity_key()
        members.setdefault(key, []).append(record)

        best = identities.get(key)
        if best is None or len(best.carrier) < len(record.identity.carrier):
            identities[key] = record.identity

    if discarded:
        logger.debug("Discarded %d APN records without MCC/MNC", discarded)

    merged: list[APNRecord] = []

    for key, group in members.items():
        identity = identities[key].clone()
        assert identity is not None
        identity.carrier = identity.display_name()

        representative = APNRecord(identity=identity, variants={})
        assert representative.variants is not None

        for member in group:
            for type_name, variant in _split_by_type(member, types):
                if type_name in representative.variants:
                    logger.debug("Duplicate %r APN for %s replaces the earlier one", type_name, key)

                representative.variants[type_name] = variant

        merged.append(representative)

    merged.sort(key=_sort_key)

    return merged


def flatten_records(records: Iterable[APNRecord]) -> Iterator[APNRecord]:
    """Yield one flat record per variant (ascending key order) or per standalone record."""
    for record in records:
        if record.variants is None:
            yield record.clone()
            continue

        for type_name in sorted(record.variants):
            flat = record.variants[type_name].clone()
            flat.identity = record.identity.clone() if record.identity is not None else None
            flat.variants = None
            yield flat


# =============================================================================
# APN Collection
# =============================================================================


class APNCollection:
    """Ordered collection of representative APN records.

    The unit handed to format encoders. Build one from flat records with
    from_records() (runs the merge) or directly from already-grouped records.
    """

    records: list[APNRecord]

    def __init__(self, records: Iterable[APNRecord] = ()) -> None:
        self.records = list(records)

    @classmethod
    def from_records(cls, records: Iterable[APNRecord], types: APNTypes | None = None) -> APNCollection:
        return cls(merge_records(records, types))

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[APNRecord]:
        return iter(self.records)

    @overload
    def __getitem__(self, index: int) -> APNRecord: ...

    @overload
    def __getitem__(self, index: slice) -> list[APNRecord]: ...

    def __getitem__(self, index: int | slice) -> APNRecord | list[APNRecord]:
        return self.records[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, APNCollection):
            return NotImplemented
        return self.records == other.records

    def __repr__(self) -> str:
        return f"APNCollection({len(self.records)} records)"

    def flatten(self) -> list[APNRecord]:
        return list(flatten_records(self.records))

    def plmns(self) -> list[str]:
        """Distinct PLMNs in collection order."""
        return list(dict.fromkeys(record.plmn() for record in self.records))

    def filter_like(self, query: APNRecord) -> list[APNRecord]:
        """Representatives matching the query (see APNRecord.find_like)."""
        return [record for record in self.records if record.is_like(query)]

    def find_like(self, query: APNRecord) -> APNRecord | None:
        """First matching flat record, with the representative identity attached."""
        for record in self.records:
            match = record.find_like(query)
            if match is None:
                continue

            if match is record:
                return match.clone()

            flat = match.clone()
            flat.identity = record.identity.clone() if record.identity is not None else None
            return flat

        return None
