"""APN document ingestion and export: raw bytes, files and URLs.

Thin blocking wrappers around the model layer:

    - sniff_format / load_bytes: detect XML (tried first) or JSON and decode
    - read_file / load_file: extension dispatch (.xml, .json)
    - fetch_url / load_url: HTTP GET via httpx, optional base64 body
    - export_bytes / export_file: encode a collection to a format or file

No retries are performed; callers wrap fetch_url with their own policy.
"""

from __future__ import annotations

import base64
import binascii
import logging
from pathlib import Path

import httpx

from .config import Settings, settings
from .exceptions import IngestionError, MalformedInputError, UnrecognizedFormatError
from .model import APNCollection, APNTypes, CodecFormat
from .model.document import decode_json, decode_xml, encode_json, encode_xml, parse_json, parse_xml

logger = logging.getLogger(__name__)

_ExtensionTable: dict[str, CodecFormat] = {
    ".xml": CodecFormat.XML,
    ".json": CodecFormat.JSON,
}


# =============================================================================
# Format detection
# =============================================================================


def sniff_format(data: bytes) -> CodecFormat:
    """Detect the document format: well-formed XML first, then JSON.

    Raises:
        UnrecognizedFormatError: If the data is neither
    """
    for fmt, parse in ((CodecFormat.XML, parse_xml), (CodecFormat.JSON, parse_json)):
        try:
            parse(data)
        except MalformedInputError:
            continue
        return fmt

    raise UnrecognizedFormatError("APN document is neither well-formed XML nor JSON")


def format_for_path(path: str | Path) -> CodecFormat:
    """Map a file extension (case-insensitive) to a document format.

    Raises:
        UnrecognizedFormatError: If the extension is not .xml or .json
    """
    suffix = Path(path).suffix.lower()

    try:
        return _ExtensionTable[suffix]
    except KeyError:
        raise UnrecognizedFormatError(f"APN file has unsupported extension: {suffix!r}") from None


def decode_bytes(data: bytes, fmt: CodecFormat, types: APNTypes | None = None) -> APNCollection:
    if fmt is CodecFormat.XML:
        return decode_xml(data, types)

    return decode_json(data, types)


def load_bytes(data: bytes, types: APNTypes | None = None) -> APNCollection:
    """Decode a document of unknown format."""
    return decode_bytes(data, sniff_format(data), types)


# =============================================================================
# Files
# =============================================================================


def read_file(path: str | Path) -> bytes:
    """Read a file completely.

    Raises:
        IngestionError: If the file cannot be read
    """
    try:
        return Path(path).read_bytes()
    except OSError as e:
        raise IngestionError(f"Failed to read APN file {path}: {e}") from e


def load_file(path: str | Path, types: APNTypes | None = None) -> APNCollection:
    """Load an .xml or .json APN file."""
    fmt = format_for_path(path)

    collection = decode_bytes(read_file(path), fmt, types)

    logger.info("Loaded %d APN carriers from %s", len(collection), path)

    return collection


# =============================================================================
# URLs
# =============================================================================


def fetch_url(
    url: str,
    *,
    base64_body: bool = False,
    client: httpx.Client | None = None,
    config: Settings | None = None,
) -> bytes:
    """Fetch a document over HTTP(S).

    Args:
        url: Document URL
        base64_body: Decode the response body from base64 (e.g. gitiles ?format=TEXT)
        client: Optional httpx client for connection reuse
        config: Settings for timeout, user agent and redirects (defaults to settings)

    Returns:
        Response body (base64-decoded if requested)

    Raises:
        IngestionError: On transport errors, non-200 status or invalid base64
    """
    config = config or settings

    try:
        if client:
            response = client.get(url)
        else:
            response = httpx.get(
                url,
                headers={"User-Agent": config.user_agent},
                timeout=config.http_timeout,
                follow_redirects=config.follow_redirects,
            )
    except httpx.HTTPError as e:
        raise IngestionError(f"Failed to fetch APN URL {url}: {e}") from e

    if response.status_code != httpx.codes.OK:
        raise IngestionError(f"APN URL {url} returned status {response.status_code}")

    body = response.content

    if base64_body:
        try:
            body = base64.b64decode(body)
        except binascii.Error as e:
            raise IngestionError(f"APN URL {url} has invalid base64 body: {e}") from e

    logger.info("Fetched %d bytes from %s", len(body), url)

    return body


def load_url(
    url: str,
    *,
    base64_body: bool = False,
    client: httpx.Client | None = None,
    config: Settings | None = None,
    types: APNTypes | None = None,
) -> APNCollection:
    """Fetch and decode a document of unknown format."""
    return load_bytes(fetch_url(url, base64_body=base64_body, client=client, config=config), types)


# =============================================================================
# Export
# =============================================================================


def export_bytes(collection: APNCollection, fmt: CodecFormat, types: APNTypes | None = None) -> bytes:
    if fmt is CodecFormat.XML:
        return encode_xml(collection, types)

    return encode_json(collection, types)


def export_file(collection: APNCollection, path: str | Path, types: APNTypes | None = None) -> None:
    """Write a collection to an .xml or .json file.

    Raises:
        UnrecognizedFormatError: If the extension is not .xml or .json
        IngestionError: If the file cannot be written
    """
    data = export_bytes(collection, format_for_path(path), types)

    try:
        Path(path).write_bytes(data)
    except OSError as e:
        raise IngestionError(f"Failed to write APN file {path}: {e}") from e

    logger.info("Exported %d APN carriers to %s", len(collection), path)
