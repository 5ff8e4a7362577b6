"""Shared test fixtures for apnxml tests."""

from __future__ import annotations

import pytest

from apnxml.model import APNTypes, default_types


@pytest.fixture
def types() -> APNTypes:
    """Default codec registry."""
    return default_types()


@pytest.fixture
def orange_xml() -> bytes:
    """Two Orange FR elements sharing one identity, plus an invalid one without MNC."""
    return b"""<?xml version="1.0" encoding="utf-8"?>
<apns version="8">
  <apn carrier="Orange FR" mcc="208" mnc="01" apn="orange" type="default,mms"
       mmsc="http://mms.orange.fr" mmsproxy="192.168.10.200" mmsport="8080"/>
  <apn carrier="Orange-4G-LTE" mcc="208" mnc="01" apn="orange.ims" type="ims"
       protocol="IPV4V6" network_type_bitmask="13|20"/>
  <apn carrier="Broken" mcc="208" apn="broken" type="default"/>
</apns>
"""


@pytest.fixture
def multi_carrier_xml() -> bytes:
    """Three carriers in unsorted order, one nested below an intermediate element."""
    return b"""<?xml version="1.0" encoding="utf-8"?>
<apns version="8">
  <apn carrier="Vodafone DE" mcc="262" mnc="2" apn="web.vodafone.de" type="default,supl"/>
  <apn carrier="SFR" mcc="208" mnc="10" apn="sl2sfr" type="default"
       authtype="3" user="sfr" password=""/>
  <group>
    <apn carrier="Orange" mcc="208" mnc="1" apn="orange" type="default"/>
  </group>
</apns>
"""


@pytest.fixture
def orange_json() -> bytes:
    """Grouped Orange FR record as produced by encode_json."""
    return b"""[
  {
    "carrierName": "Orange FR",
    "mcc": 208,
    "mnc": 1,
    "groupMap": {
      "default": {
        "base": {"apn": "orange", "type": ["default"]},
        "auth": {"type": ["pap", "chap"], "username": "orange", "password": "orange"}
      },
      "mms": {
        "base": {"apn": "orange.mms", "type": ["mms"]},
        "mms": {"center": "http://mms.orange.fr", "port": 8080}
      }
    }
  }
]
"""
