"""Conditional and ranged content serving for seekable streams.

``serve_content`` is the general routine the asset responder hands its
stream to. It owns everything that depends on the request headers rather
than on the asset source:

1. ``Last-Modified`` when the content has a modification time
2. Preconditions: ``If-Match`` / ``If-Unmodified-Since`` (412),
   ``If-None-Match`` / ``If-Modified-Since`` (304)
3. Content-Type: caller-forced, by extension, or sniffed from the first
   512 bytes
4. ``Range`` / ``If-Range``: 206 for one or several ranges (the latter as
   ``multipart/byteranges``), 416 when unsatisfiable
5. ``Accept-Ranges`` and ``Content-Length``

Date comparisons use one-second resolution, matching HTTP-date precision.
A missing modification time (or the Unix epoch) disables all date checks.
"""

import io
import mimetypes
import secrets
from dataclasses import dataclass
from datetime import UTC, datetime
from email.utils import format_datetime, parsedate_to_datetime
from typing import BinaryIO

from spa_assets.http.request import Request
from spa_assets.http.response import Response
from spa_assets.server.errors import error_response

SNIFF_LEN = 512

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


# ------------------------------------------------------------------
# Ranges
# ------------------------------------------------------------------


class RangeError(ValueError):
    """The ``Range`` header is malformed or cannot be satisfied."""

    def __init__(self, message: str, *, no_overlap: bool = False) -> None:
        super().__init__(message)
        self.no_overlap = no_overlap


@dataclass(frozen=True, slots=True)
class ByteRange:
    start: int
    length: int

    def content_range(self, size: int) -> str:
        return f"bytes {self.start}-{self.start + self.length - 1}/{size}"


def _parse_offset(value: str) -> int:
    if not (value.isascii() and value.isdigit()):
        raise RangeError("invalid range")
    return int(value)


def parse_range(header: str, size: int) -> list[ByteRange]:
    """Parse a ``Range: bytes=...`` header against content of *size* bytes.

    Returns an empty list when *header* is empty. Ranges starting at or past
    the end are dropped; if that leaves nothing, the range fails to overlap.

    Raises:
        RangeError: Malformed header, or no range overlaps the content
            (``no_overlap`` set).
    """
    if not header:
        return []
    unit = "bytes="
    if not header.startswith(unit):
        raise RangeError("invalid range")

    ranges: list[ByteRange] = []
    no_overlap = False
    for part in header[len(unit) :].split(","):
        part = part.strip()
        if not part:
            continue
        first, sep, last = part.partition("-")
        if not sep:
            raise RangeError("invalid range")
        first, last = first.strip(), last.strip()

        if not first:
            # Suffix range: the final N bytes.
            if not last or last.startswith("-"):
                raise RangeError("invalid range")
            suffix = min(_parse_offset(last), size)
            if suffix == 0:
                no_overlap = True
                continue
            ranges.append(ByteRange(start=size - suffix, length=suffix))
            continue

        start = _parse_offset(first)
        if start >= size:
            no_overlap = True
            continue
        if not last:
            length = size - start
        else:
            end = _parse_offset(last)
            if start > end:
                raise RangeError("invalid range")
            length = min(end, size - 1) - start + 1
        ranges.append(ByteRange(start=start, length=length))

    if no_overlap and not ranges:
        raise RangeError("invalid range: failed to overlap", no_overlap=True)
    return ranges


# ------------------------------------------------------------------
# Validators
# ------------------------------------------------------------------


def _etag_char(ch: str) -> bool:
    code = ord(ch)
    return code == 0x21 or 0x23 <= code <= 0x7E or code >= 0x80


def scan_etag(value: str) -> tuple[str, str]:
    """Split the first entity-tag off *value*.

    Returns ``(etag, remainder)``, or ``("", "")`` when *value* does not
    start with a well-formed entity-tag.
    """
    value = value.lstrip(" \t")
    start = 2 if value.startswith("W/") else 0
    if len(value) - start < 2 or value[start] != '"':
        return "", ""
    for i in range(start + 1, len(value)):
        ch = value[i]
        if ch == '"':
            return value[: i + 1], value[i + 1 :]
        if not _etag_char(ch):
            return "", ""
    return "", ""


def etag_strong_match(a: str, b: str) -> bool:
    return a == b and a != "" and a[0] == '"'


def etag_weak_match(a: str, b: str) -> bool:
    return a.removeprefix("W/") == b.removeprefix("W/")


def _etag_list_matches(header: str, etag: str, *, weak: bool) -> bool:
    """Match *etag* against a comma-separated list (``*`` matches anything).

    Scanning stops at the first malformed entry.
    """
    matcher = etag_weak_match if weak else etag_strong_match
    rest = header
    while True:
        rest = rest.strip(" \t")
        if not rest:
            return False
        if rest[0] == ",":
            rest = rest[1:]
            continue
        if rest[0] == "*":
            return True
        candidate, rest = scan_etag(rest)
        if not candidate:
            return False
        if matcher(candidate, etag):
            return True


# ------------------------------------------------------------------
# Dates
# ------------------------------------------------------------------


def known_mtime(mtime: datetime | None) -> datetime | None:
    """*mtime*, or None when it is unset or the Unix epoch."""
    if mtime is None or mtime == _EPOCH:
        return None
    return mtime


def format_http_date(moment: datetime) -> str:
    """RFC 1123 date in GMT, as used by ``Last-Modified``."""
    return format_datetime(moment.astimezone(UTC).replace(microsecond=0), usegmt=True)


def parse_http_date(value: str) -> datetime | None:
    try:
        parsed = parsedate_to_datetime(value)
    except (TypeError, ValueError, IndexError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def _seconds(moment: datetime) -> datetime:
    return moment.replace(microsecond=0)


# ------------------------------------------------------------------
# Preconditions
#
# Each check returns True/False, or None when the header is absent or
# does not apply.
# ------------------------------------------------------------------


def check_if_match(request: Request, etag: str) -> bool | None:
    header = request.headers.get_joined("if-match")
    if not header:
        return None
    return bool(_etag_list_matches(header, etag, weak=False))


def check_if_unmodified_since(request: Request, mtime: datetime | None) -> bool | None:
    header = request.headers.get("if-unmodified-since")
    modified = known_mtime(mtime)
    if not header or modified is None:
        return None
    since = parse_http_date(header)
    if since is None:
        return None
    return _seconds(modified) <= since


def check_if_none_match(request: Request, etag: str) -> bool | None:
    header = request.headers.get_joined("if-none-match")
    if not header:
        return None
    return not _etag_list_matches(header, etag, weak=True)


def check_if_modified_since(request: Request, mtime: datetime | None) -> bool | None:
    if not request.is_get_or_head:
        return None
    header = request.headers.get("if-modified-since")
    modified = known_mtime(mtime)
    if not header or modified is None:
        return None
    since = parse_http_date(header)
    if since is None:
        return None
    return _seconds(modified) > since


def check_if_range(request: Request, etag: str, mtime: datetime | None) -> bool | None:
    if not request.is_get_or_head:
        return None
    header = request.headers.get("if-range")
    if not header:
        return None
    candidate, _ = scan_etag(header)
    if candidate:
        return etag_strong_match(candidate, etag)
    modified = known_mtime(mtime)
    if modified is None:
        return False
    since = parse_http_date(header)
    if since is None:
        return False
    return _seconds(modified) == since


# ------------------------------------------------------------------
# Content type
# ------------------------------------------------------------------

_HTML_SIGNATURES = (
    b"<!doctype html", b"<html", b"<head", b"<script", b"<iframe", b"<h1", b"<div",
    b"<font", b"<table", b"<a", b"<style", b"<title", b"<b", b"<body", b"<br",
    b"<p", b"<!--",
)  # fmt: skip

_MAGIC_SIGNATURES = (
    (b"%PDF-", "application/pdf"),
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"GIF87a", "image/gif"),
    (b"GIF89a", "image/gif"),
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"wOFF", "font/woff"),
    (b"wOF2", "font/woff2"),
    (b"\x1f\x8b\x08", "application/x-gzip"),
    (b"PK\x03\x04", "application/zip"),
)

_BINARY_BYTES = frozenset((*range(0x00, 0x09), 0x0B, *range(0x0E, 0x1B), *range(0x1C, 0x20)))


def sniff_content_type(head: bytes) -> str:
    """Guess a content type from the leading bytes of a file."""
    text = head.lstrip(b"\t\n\x0c\r ").lower()
    for signature in _HTML_SIGNATURES:
        if text.startswith(signature) and text[len(signature) : len(signature) + 1] in (b" ", b">"):
            return "text/html; charset=utf-8"
    if text.startswith(b"<?xml"):
        return "text/xml; charset=utf-8"
    for magic, content_type in _MAGIC_SIGNATURES:
        if head.startswith(magic):
            return content_type
    if head.startswith(b"RIFF") and head[8:14] == b"WEBPVP":
        return "image/webp"
    if not any(byte in _BINARY_BYTES for byte in head):
        return "text/plain; charset=utf-8"
    return "application/octet-stream"


def guess_content_type(name: str, content: BinaryIO) -> str:
    """Content type by file extension, falling back to sniffing *content*.

    Leaves *content* positioned at the start.
    """
    content_type, encoding = mimetypes.guess_type(name)
    if content_type is not None and encoding is None:
        return content_type
    head = content.read(SNIFF_LEN)
    content.seek(0)
    return sniff_content_type(head)


# ------------------------------------------------------------------
# Serving
# ------------------------------------------------------------------


def _not_modified(response: Response, etag: str) -> Response:
    response = response.with_status(304).with_content_type(None)
    if etag:
        response = response.without_header("Last-Modified")
    return response


def _multipart_body(
    content: BinaryIO,
    ranges: list[ByteRange],
    content_type: str,
    size: int,
    boundary: str,
) -> bytes:
    out = io.BytesIO()
    for i, byte_range in enumerate(ranges):
        out.write(b"\r\n" if i else b"")
        out.write(f"--{boundary}\r\n".encode("latin-1"))
        out.write(f"Content-Range: {byte_range.content_range(size)}\r\n".encode("latin-1"))
        out.write(f"Content-Type: {content_type}\r\n\r\n".encode("latin-1"))
        content.seek(byte_range.start)
        out.write(content.read(byte_range.length))
    out.write(f"\r\n--{boundary}--\r\n".encode("latin-1"))
    return out.getvalue()


def serve_content(
    request: Request,
    name: str,
    mtime: datetime | None,
    content: BinaryIO,
    *,
    etag: str = "",
    content_type: str | None = None,
) -> Response:
    """Build the response for *content*, honouring conditional and range headers.

    Args:
        request: The incoming request (method and headers are consulted).
        name: Path used for extension-based content-type inference.
        mtime: Modification time, or None when unknown.
        content: A readable, seekable binary stream positioned anywhere.
        etag: Validator to emit and to compare preconditions against.
        content_type: Forced content type; skips inference when set.

    The caller keeps ownership of *content*: it is read fully before
    returning and never closed here.
    """
    response = Response(content_type=content_type)
    if etag:
        response = response.with_header("ETag", etag)
    modified = known_mtime(mtime)
    if modified is not None:
        response = response.with_header("Last-Modified", format_http_date(modified))

    # -- Preconditions --
    matched = check_if_match(request, etag)
    if matched is None:
        matched = check_if_unmodified_since(request, mtime)
    if matched is False:
        return response.with_status(412)

    none_match = check_if_none_match(request, etag)
    if none_match is False:
        if request.is_get_or_head:
            return _not_modified(response, etag)
        return response.with_status(412)
    if none_match is None and check_if_modified_since(request, mtime) is False:
        return _not_modified(response, etag)

    range_header = request.headers.get("range") or ""
    if range_header and check_if_range(request, etag, mtime) is False:
        range_header = ""

    # -- Content type and size --
    if content_type is None:
        content_type = guess_content_type(name, content)
        response = response.with_content_type(content_type)

    size = content.seek(0, io.SEEK_END)
    content.seek(0)

    try:
        ranges = parse_range(range_header, size)
    except RangeError as exc:
        headers: tuple[tuple[str, str], ...] = response.headers
        if exc.no_overlap:
            headers = (*headers, ("Content-Range", f"bytes */{size}"))
        return error_response(416, str(exc), headers=headers)

    if sum(r.length for r in ranges) > size:
        # Overlapping or absurd range sets: send the whole thing instead.
        ranges = []

    response = response.with_header("Accept-Ranges", "bytes")

    if len(ranges) == 1:
        (byte_range,) = ranges
        content.seek(byte_range.start)
        return (
            response.with_status(206)
            .with_header("Content-Range", byte_range.content_range(size))
            .with_body(content.read(byte_range.length))
        )

    if ranges:
        boundary = secrets.token_hex(30)
        return (
            response.with_status(206)
            .with_content_type(f"multipart/byteranges; boundary={boundary}")
            .with_body(_multipart_body(content, ranges, content_type, size, boundary))
        )

    return response.with_body(content.read())
