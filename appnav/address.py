"""Opaque document addresses for files inside app folders.

An address looks like::

    appnav://<category>/<title>/<title> [<LABEL>]?path=<base64 real path>&label=<title> [<LABEL>]

The category is only a grouping component; decoding relies on the ``path``
parameter. Older addresses of the form ``appnav:/<base64 real path>/<name>``
still decode through the legacy segment shape.
"""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass
import logging
import os
import re
from urllib.parse import SplitResult, parse_qs, quote, unquote, urlencode, urlsplit

from .errors import DecodeError

logger = logging.getLogger(__name__)

ADDRESS_SCHEME = "appnav"
PATH_PARAMETER = "path"
LABEL_PARAMETER = "label"
PATH_SEPARATORS = ("/", "\\")

_SEPARATOR_RE = re.compile(r"[/\\]")
_KIND_LABEL_RE = re.compile(r"\[([^\[\]]*)\]\s*$")


@dataclass(frozen=True)
class VirtualAddress:
    """Logical content of an address; only ``real_path`` is needed to decode."""

    real_path: str
    category: str = ""
    title: str = ""
    kind_label: str = ""

    @property
    def label(self) -> str:
        return display_label(self.title, self.kind_label)


def sanitize_segment(text: str) -> str:
    """Replace directory separators so ``text`` fits one path segment."""
    return _SEPARATOR_RE.sub(" ", text)


def display_label(title: str, kind_label: str) -> str:
    """Human-readable document name, e.g. ``"home [UI]"``."""
    return sanitize_segment(f"{title} [{kind_label}]")


def _b64encode_path(real_path: str) -> str:
    return base64.b64encode(real_path.encode("utf-8", "surrogateescape")).decode("ascii")


def encode_address(
    real_path: str | os.PathLike[str],
    category: str,
    title: str,
    kind_label: str,
) -> str:
    """Encode a real path plus display metadata into an address string."""
    path_text = os.fspath(real_path)
    label = display_label(title, kind_label)
    segments = (sanitize_segment(title), label)
    address_path = "/" + "/".join(quote(segment, safe="") for segment in segments)
    query = urlencode(
        {PATH_PARAMETER: _b64encode_path(path_text), LABEL_PARAMETER: label},
        quote_via=quote,
        safe="",
    )
    authority = quote(str(category), safe="")
    return f"{ADDRESS_SCHEME}://{authority}{address_path}?{query}"


def encode_virtual_address(address: VirtualAddress) -> str:
    return encode_address(address.real_path, address.category, address.title, address.kind_label)


def is_address(document: object) -> bool:
    """Return whether ``document`` is a string carrying the address scheme."""
    return isinstance(document, str) and document.startswith(f"{ADDRESS_SCHEME}:")


def _split(address: str) -> SplitResult:
    try:
        return urlsplit(address)
    except ValueError as exc:
        raise DecodeError(f"malformed address: {address!r}") from exc


def _query_values(parts: SplitResult) -> dict[str, list[str]]:
    return parse_qs(parts.query, keep_blank_values=True)


def _path_segments(parts: SplitResult) -> list[str]:
    return parts.path.split("/")[1:]


def _kind_label_of(label: str) -> str:
    match = _KIND_LABEL_RE.search(label)
    return match.group(1) if match else ""


class AddressShape:
    """One recognizable address layout; ``extract`` returns ``None`` when it does not apply."""

    name = "shape"

    def extract(self, parts: SplitResult) -> VirtualAddress | None:
        raise NotImplementedError


class QueryPathShape(AddressShape):
    """Current layout: Base64 real path in the ``path`` query parameter."""

    name = "query-path"

    def extract(self, parts: SplitResult) -> VirtualAddress | None:
        query = _query_values(parts)
        values = query.get(PATH_PARAMETER)
        if not values or not values[0]:
            return None
        # parse_qs maps a raw "+" to a space; Base64 never contains spaces.
        encoded = values[0].replace(" ", "+")
        try:
            real_path = base64.b64decode(encoded, validate=True).decode("utf-8", "surrogateescape")
        except (binascii.Error, ValueError) as exc:
            logger.debug("path parameter is not valid Base64: %s", exc)
            return None

        label = (query.get(LABEL_PARAMETER) or [""])[0]
        segments = _path_segments(parts)
        title = unquote(segments[0]) if len(segments) >= 2 else ""
        return VirtualAddress(
            real_path=real_path,
            category=unquote(parts.netloc),
            title=title,
            kind_label=_kind_label_of(label),
        )


class LegacySegmentShape(AddressShape):
    """Older layout: Base64 real path as the first path segment.

    Any decoded text containing a directory separator is accepted as-is.
    """

    name = "legacy-segment"

    def extract(self, parts: SplitResult) -> VirtualAddress | None:
        segments = _path_segments(parts)
        if not segments or not segments[0]:
            return None
        encoded = unquote(segments[0])
        try:
            decoded = base64.b64decode(encoded + "=" * (-len(encoded) % 4)).decode("utf-8")
        except (binascii.Error, ValueError):
            return None
        if not any(separator in decoded for separator in PATH_SEPARATORS):
            return None
        name = unquote(segments[-1]) if len(segments) >= 2 else ""
        return VirtualAddress(real_path=decoded, kind_label=_kind_label_of(name))


ADDRESS_SHAPES: tuple[AddressShape, ...] = (QueryPathShape(), LegacySegmentShape())


def decode_address(address: str, shapes: tuple[AddressShape, ...] = ADDRESS_SHAPES) -> VirtualAddress:
    """Decode ``address``, trying each shape in priority order.

    Raises :class:`DecodeError` when no shape yields a real path.
    """
    if not isinstance(address, str) or not address:
        raise DecodeError(f"not an address: {address!r}")
    parts = _split(address)
    for shape in shapes:
        decoded = shape.extract(parts)
        if decoded is not None:
            return decoded
    raise DecodeError(f"address does not carry a real path: {address!r}")


def real_path_of(address: str) -> str:
    """Return the real filesystem path an address stands for."""
    return decode_address(address).real_path


def address_label(address: str) -> str | None:
    """Return the ``label`` query parameter of ``address`` if present."""
    try:
        values = _query_values(_split(address)).get(LABEL_PARAMETER)
    except DecodeError:
        return None
    return values[0] if values and values[0] else None


def last_segment(address: str) -> str:
    """Return the unquoted last raw path segment of ``address``."""
    try:
        path = _split(address).path
    except DecodeError:
        return ""
    return unquote(path.rsplit("/", 1)[-1])


__all__ = [
    "ADDRESS_SCHEME",
    "ADDRESS_SHAPES",
    "AddressShape",
    "LegacySegmentShape",
    "QueryPathShape",
    "VirtualAddress",
    "address_label",
    "decode_address",
    "display_label",
    "encode_address",
    "encode_virtual_address",
    "is_address",
    "last_segment",
    "real_path_of",
    "sanitize_segment",
]
