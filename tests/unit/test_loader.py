"""Unit tests for document ingestion and export helpers."""

import base64
import logging
from pathlib import Path

import httpx
import pytest
import respx

from apnxml.config import Settings
from apnxml.exceptions import IngestionError, UnrecognizedFormatError
from apnxml.loader import (
    export_bytes,
    export_file,
    fetch_url,
    format_for_path,
    load_bytes,
    load_file,
    load_url,
    read_file,
    sniff_format,
)
from apnxml.model import APNCollection, CodecFormat, decode_xml

# =============================================================================
# Test Constants
# =============================================================================

TEST_URL = "https://example.com/apns-conf.xml"
TEST_XML = b'<apns version="8"><apn carrier="Orange FR" mcc="208" mnc="01" apn="orange" type="default"/></apns>'
TEST_JSON = b'[{"carrierName": "Orange FR", "mcc": 208, "mnc": 1}]'


# =============================================================================
# Format Detection Tests
# =============================================================================


class TestFormatDetection:
    """Tests for sniff_format and format_for_path."""

    @pytest.mark.parametrize(
        ("data", "expected"),
        [
            (TEST_XML, CodecFormat.XML),
            (b"<?xml version='1.0'?>\n<apns/>", CodecFormat.XML),
            (TEST_JSON, CodecFormat.JSON),
            (b"null", CodecFormat.JSON),
        ],
    )
    def test_sniff_format(self, data: bytes, expected: CodecFormat) -> None:
        """Test detecting XML and JSON documents."""
        assert sniff_format(data) is expected

    @pytest.mark.parametrize("data", [b"", b"carrier=Orange", b"<apns>"])
    def test_sniff_format_unrecognized(self, data: bytes) -> None:
        """Test that data which is neither XML nor JSON is rejected."""
        with pytest.raises(UnrecognizedFormatError):
            sniff_format(data)

    @pytest.mark.parametrize(
        ("path", "expected"),
        [
            ("apns-conf.xml", CodecFormat.XML),
            ("APNS.XML", CodecFormat.XML),
            (Path("out/apns.json"), CodecFormat.JSON),
        ],
    )
    def test_format_for_path(self, path: str | Path, expected: CodecFormat) -> None:
        """Test case-insensitive extension dispatch."""
        assert format_for_path(path) is expected

    def test_format_for_path_unsupported(self) -> None:
        """Test that other extensions are rejected."""
        with pytest.raises(UnrecognizedFormatError, match=".txt"):
            format_for_path("apns.txt")

    def test_load_bytes(self) -> None:
        """Test decoding bytes of either format."""
        assert load_bytes(TEST_XML).plmns() == ["20801"]
        assert load_bytes(TEST_JSON).plmns() == ["20801"]


# =============================================================================
# File Tests
# =============================================================================


class TestFiles:
    """Tests for reading and writing files."""

    def test_load_file(self, tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
        """Test loading an XML file."""
        path = tmp_path / "apns-conf.xml"
        path.write_bytes(TEST_XML)

        with caplog.at_level(logging.INFO, logger="apnxml.loader"):
            collection = load_file(path)

        assert len(collection) == 1
        assert "Loaded 1 APN carriers" in caplog.text

    def test_load_file_by_extension(self, tmp_path: Path) -> None:
        """Test that the extension decides the decoder."""
        path = tmp_path / "apns.json"
        path.write_bytes(TEST_XML)

        with pytest.raises(ValueError):
            load_file(path)

    def test_read_missing_file(self, tmp_path: Path) -> None:
        """Test that read failures are ingestion errors."""
        with pytest.raises(IngestionError, match="missing.xml") as exc_info:
            read_file(tmp_path / "missing.xml")

        assert isinstance(exc_info.value.__cause__, OSError)

    def test_export_file(self, tmp_path: Path) -> None:
        """Test writing a collection in the format of the extension."""
        collection = decode_xml(TEST_XML)

        export_file(collection, tmp_path / "apns.json")
        export_file(collection, tmp_path / "apns.xml")

        assert (tmp_path / "apns.json").read_bytes() == export_bytes(collection, CodecFormat.JSON)
        assert (tmp_path / "apns.xml").read_bytes() == export_bytes(collection, CodecFormat.XML)

    def test_export_file_unwritable(self, tmp_path: Path) -> None:
        """Test that write failures are ingestion errors."""
        with pytest.raises(IngestionError):
            export_file(APNCollection(), tmp_path / "missing" / "apns.xml")

    def test_export_file_unsupported(self, tmp_path: Path) -> None:
        """Test that nothing is written for an unsupported extension."""
        with pytest.raises(UnrecognizedFormatError):
            export_file(APNCollection(), tmp_path / "apns.csv")

        assert not (tmp_path / "apns.csv").exists()


# =============================================================================
# URL Tests
# =============================================================================


class TestURLs:
    """Tests for fetching documents over HTTP."""

    @respx.mock
    def test_fetch_url(self) -> None:
        """Test fetching a document body."""
        route = respx.get(TEST_URL).mock(return_value=httpx.Response(200, content=TEST_XML))

        assert fetch_url(TEST_URL) == TEST_XML
        assert route.called

    @respx.mock
    def test_fetch_url_uses_settings(self) -> None:
        """Test that the user agent comes from the settings."""
        route = respx.get(TEST_URL).mock(return_value=httpx.Response(200, content=TEST_XML))

        fetch_url(TEST_URL, config=Settings(user_agent="mirror/1.0"))

        assert route.calls.last.request.headers["User-Agent"] == "mirror/1.0"

    @respx.mock
    def test_fetch_url_with_client(self) -> None:
        """Test fetching through a caller-provided client."""
        route = respx.get(TEST_URL).mock(return_value=httpx.Response(200, content=TEST_JSON))

        with httpx.Client() as client:
            assert fetch_url(TEST_URL, client=client) == TEST_JSON

        assert route.call_count == 1

    @respx.mock
    def test_fetch_url_base64(self) -> None:
        """Test decoding a base64 body."""
        respx.get(TEST_URL).mock(return_value=httpx.Response(200, content=base64.b64encode(TEST_XML)))

        assert fetch_url(TEST_URL, base64_body=True) == TEST_XML

    @respx.mock
    def test_fetch_url_invalid_base64(self) -> None:
        """Test that an invalid base64 body is an ingestion error."""
        respx.get(TEST_URL).mock(return_value=httpx.Response(200, content=b"abc"))

        with pytest.raises(IngestionError, match="base64"):
            fetch_url(TEST_URL, base64_body=True)

    @respx.mock
    def test_fetch_url_status_error(self) -> None:
        """Test that a non-200 status is an ingestion error."""
        respx.get(TEST_URL).mock(return_value=httpx.Response(404))

        with pytest.raises(IngestionError, match="404"):
            fetch_url(TEST_URL)

    @respx.mock
    def test_fetch_url_transport_error(self) -> None:
        """Test that transport errors are wrapped and chained."""
        respx.get(TEST_URL).mock(side_effect=httpx.ConnectError("connection refused"))

        with pytest.raises(IngestionError, match="Failed to fetch") as exc_info:
            fetch_url(TEST_URL)

        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    @respx.mock
    def test_load_url(self) -> None:
        """Test fetching and decoding in one step."""
        respx.get(TEST_URL).mock(return_value=httpx.Response(200, content=base64.b64encode(TEST_JSON)))

        collection = load_url(TEST_URL, base64_body=True)

        assert collection.plmns() == ["20801"]
