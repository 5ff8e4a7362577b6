"""Unit tests for APNRecord."""

import pytest

from apnxml.exceptions import MalformedInputError
from apnxml.model import (
    APNIdentity,
    APNRecord,
    APNTypes,
    AuthGroup,
    AuthType,
    BaseGroup,
    BaseType,
    BearerGroup,
    BearerProtocol,
    MmsGroup,
    ProxyGroup,
)

# =============================================================================
# Test Constants
# =============================================================================

TEST_MCC = 208
TEST_MNC = 1


def make_identity(carrier: str = "Orange FR") -> APNIdentity:
    return APNIdentity(carrier=carrier, mcc=TEST_MCC, mnc=TEST_MNC)


def make_representative() -> APNRecord:
    """Representative with a default and an mms variant."""
    return APNRecord(
        identity=make_identity(),
        variants={
            "default": APNRecord(base=BaseGroup(apn="orange", type=BaseType.DEFAULT)),
            "mms": APNRecord(
                base=BaseGroup(apn="orange.mms", type=BaseType.MMS),
                mms=MmsGroup(center="http://mms.orange.fr", port=8080),
            ),
        },
    )


# =============================================================================
# Record Helper Tests
# =============================================================================


class TestRecordHelpers:
    """Tests for validity, identity helpers and cloning."""

    def test_valid_needs_identity(self) -> None:
        """Test that validity is decided by the identity alone."""
        assert APNRecord(identity=make_identity()).is_valid()
        assert not APNRecord(base=BaseGroup(apn="orange")).is_valid()
        assert not APNRecord(identity=APNIdentity(carrier="Orange", mcc=TEST_MCC)).is_valid()

    def test_identity_helpers(self) -> None:
        """Test the PLMN, key and display name helpers."""
        record = APNRecord(identity=make_identity("Orange-4G-LTE"))
        assert record.plmn() == "20801"
        assert record.identity_key() == "PLMN:20801;"
        assert record.carrier_display_name() == "Orange"

    def test_identity_helpers_without_identity(self) -> None:
        """Test the helpers of a record without identity."""
        record = APNRecord()
        assert record.plmn() == "00000"
        assert record.carrier_display_name() == ""

    def test_groups_order(self) -> None:
        """Test that groups are listed in wire order."""
        names = [attr for attr, _ in APNRecord().groups()]
        assert names == ["base", "auth", "bearer", "proxy", "mms", "mvno", "limit", "other"]

    def test_clone_drops_invalid_groups(self) -> None:
        """Test that invalid groups are removed by cloning."""
        record = APNRecord(
            identity=make_identity(),
            base=BaseGroup(apn="orange"),
            proxy=ProxyGroup(server=""),
        )
        clone = record.clone()
        assert clone.proxy is None
        assert clone.base == BaseGroup(apn="orange", type=BaseType.DEFAULT)

    def test_clone_is_deep(self) -> None:
        """Test that variants and groups are copied, not shared."""
        record = make_representative()
        clone = record.clone()
        assert clone == record

        assert clone.variants is not None
        clone.variants["default"].base.apn = "changed"
        assert record.variants["default"].base.apn == "orange"


# =============================================================================
# Fuzzy Matching Tests
# =============================================================================


class TestFindLike:
    """Tests for APNRecord.find_like and is_like."""

    def test_none_query_returns_self(self) -> None:
        """Test that a missing query matches the record itself."""
        record = make_representative()
        assert record.find_like(None) is record

    def test_empty_query_returns_first_variant(self) -> None:
        """Test that an empty query matches the first variant in key order."""
        record = make_representative()
        assert record.find_like(APNRecord()) is record.variants["default"]

    def test_variant_by_type(self) -> None:
        """Test finding a variant by capability."""
        record = make_representative()
        match = record.find_like(APNRecord(base=BaseGroup(type=BaseType.MMS)))
        assert match is record.variants["mms"]

    def test_variant_by_group(self) -> None:
        """Test that a query group absent from every variant matches nothing."""
        record = make_representative()
        assert record.find_like(APNRecord(mms=MmsGroup(port=8080))) is record.variants["mms"]
        assert record.find_like(APNRecord(proxy=ProxyGroup(server="10.0.0.1", port=80))) is None

    def test_identity_checked_first(self) -> None:
        """Test that the representative identity must match."""
        record = make_representative()
        assert record.is_like(APNRecord(identity=APNIdentity(carrier="orange")))
        assert not record.is_like(APNRecord(identity=APNIdentity(carrier="SFR")))

    def test_flat_record(self) -> None:
        """Test matching a record without variants."""
        record = APNRecord(identity=make_identity(), base=BaseGroup(apn="orange", type=BaseType.DEFAULT))
        assert record.find_like(APNRecord(base=BaseGroup(apn="ORANGE"))) is record
        assert record.find_like(APNRecord(base=BaseGroup(apn="sfr"))) is None


# =============================================================================
# XML Attribute Tests
# =============================================================================


class TestRecordXML:
    """Tests for flat record XML attributes."""

    def test_from_xml_attrs(self, types: APNTypes) -> None:
        """Test decoding one apn element's attributes."""
        attrs = {
            "carrier": "Orange FR",
            "mcc": "208",
            "mnc": "01",
            "apn": "orange",
            "type": "default,supl",
            "authtype": "1",
            "user": "orange",
            "protocol": "IPV4V6",
            "proxy": "",
            "port": "",
        }
        record = APNRecord.from_xml_attrs(attrs, types)

        assert record.identity == make_identity()
        assert record.base == BaseGroup(apn="orange", type=BaseType.DEFAULT | BaseType.SUPL)
        assert record.auth == AuthGroup(type=AuthType.PAP, username="orange", password="")
        assert record.bearer == BearerGroup(type=BearerProtocol.IPV4V6)
        assert record.proxy is None
        assert record.mms is None
        assert record.variants is None

    def test_from_xml_attrs_without_mnc(self, types: APNTypes) -> None:
        """Test that an incomplete identity is dropped."""
        record = APNRecord.from_xml_attrs({"carrier": "Orange", "mcc": "208", "apn": "orange"}, types)
        assert record.identity is None
        assert not record.is_valid()

    def test_to_xml_attrs(self, types: APNTypes) -> None:
        """Test encoding identity and groups into one attribute map."""
        record = APNRecord(
            identity=make_identity(),
            base=BaseGroup(apn="orange", type=BaseType.MMS),
            auth=AuthGroup(type=AuthType.CHAP, username="orange"),
            mms=MmsGroup(center="http://mms.orange.fr"),
        )
        assert record.to_xml_attrs(types) == {
            "carrier": "Orange FR",
            "mcc": "208",
            "mnc": "01",
            "apn": "orange",
            "type": "mms",
            "authtype": "2",
            "user": "orange",
            "password": "",
            "mmsc": "http://mms.orange.fr",
        }

    def test_to_xml_attrs_skips_invalid_groups(self, types: APNTypes) -> None:
        """Test that invalid groups are not written."""
        record = APNRecord(identity=make_identity(), auth=AuthGroup(type=AuthType.PAP))
        assert "authtype" not in record.to_xml_attrs(types)


# =============================================================================
# JSON Object Tests
# =============================================================================


class TestRecordJSON:
    """Tests for record JSON objects."""

    def test_to_json_dict_representative(self, types: APNTypes) -> None:
        """Test identity keys at top level and children under groupMap."""
        data = make_representative().to_json_dict(types)

        assert data == {
            "carrierName": "Orange FR",
            "mcc": TEST_MCC,
            "mnc": TEST_MNC,
            "groupMap": {
                "default": {"base": {"apn": "orange", "type": ["default"]}},
                "mms": {
                    "base": {"apn": "orange.mms", "type": ["mms"]},
                    "mms": {"center": "http://mms.orange.fr", "port": 8080},
                },
            },
        }

    def test_to_json_dict_sorts_variants(self, types: APNTypes) -> None:
        """Test that groupMap keys are written in ascending order."""
        record = make_representative()
        record.variants = dict(reversed(list(record.variants.items())))
        assert list(record.to_json_dict(types)["groupMap"]) == ["default", "mms"]

    def test_from_json_dict_representative(self, types: APNTypes) -> None:
        """Test decoding a grouped record."""
        data = make_representative().to_json_dict(types)
        assert APNRecord.from_json_dict(data, types) == make_representative()

    def test_from_json_dict_child_has_no_identity(self, types: APNTypes) -> None:
        """Test that a child object without identity keys has no identity."""
        record = APNRecord.from_json_dict({"base": {"apn": "orange"}}, types)
        assert record.identity is None
        assert record.base == BaseGroup(apn="orange", type=BaseType.DEFAULT)

    def test_from_json_dict_drops_invalid_groups(self, types: APNTypes) -> None:
        """Test that invalid groups are decoded as absent."""
        record = APNRecord.from_json_dict({"mcc": TEST_MCC, "mnc": TEST_MNC, "auth": {"type": ["pap"]}}, types)
        assert record.auth is None

    @pytest.mark.parametrize(
        "data",
        [
            ["not", "an", "object"],
            {"mcc": TEST_MCC, "mnc": TEST_MNC, "groupMap": ["default"]},
            {"mcc": "208"},
            {"base": {"type": "default"}},
        ],
    )
    def test_from_json_dict_malformed(self, types: APNTypes, data: object) -> None:
        """Test that shape errors are malformed input."""
        with pytest.raises(MalformedInputError):
            APNRecord.from_json_dict(data, types)
