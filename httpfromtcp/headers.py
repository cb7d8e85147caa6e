"""Parsing of HTTP/1.1 field lines into a lower-cased header map."""

from __future__ import annotations

import string

_CRLF = b"\r\n"
_ALLOWED_NAME_CHARS = frozenset(string.ascii_letters + string.digits + "!#$%&'*+-.^_`|~")


class HeaderError(ValueError):
    """Raised when a header field line is malformed."""


def validate_field_name(field_name: str) -> None:
    """Raise HeaderError unless ``field_name`` is a non-empty token."""
    for char in field_name:
        if char not in _ALLOWED_NAME_CHARS:
            raise HeaderError(
                f"header field name {field_name!r} contains invalid character {char!r}"
            )
    if not field_name:
        raise HeaderError("header field name cannot be empty")


class Headers(dict):
    """Header fields keyed by their lower-cased names."""

    def parse(self, data: bytes) -> tuple[int, bool]:
        """Parse one field line from ``data``.

        Returns the number of bytes consumed and whether the blank line that
        ends the header section was reached. Nothing is consumed while no
        complete line is available.
        """
        data = bytes(data)
        end = data.find(_CRLF)
        if end == -1:
            return 0, False
        if end == 0:
            return len(_CRLF), True

        line = data[:end].decode("utf-8", errors="surrogateescape")
        name, separator, value = line.partition(":")
        if not separator:
            raise HeaderError("invalid header: missing ':' separator")

        name = name.lstrip(" ")
        value = value.strip()
        try:
            validate_field_name(name)
        except HeaderError as exc:
            raise HeaderError(f"invalid field name: {exc}") from exc

        key = name.lower()
        if key in self:
            self[key] = f"{self[key]}, {value}"
        else:
            self[key] = value
        return end + len(_CRLF), False

    def get(self, field_name: str, default: str | None = None) -> str | None:
        """Return the value of ``field_name`` in any case, or ``default``."""
        return super().get(field_name.lower(), default)

    def set(self, field_name: str, field_value: str) -> None:
        """Store ``field_value`` under the lower-cased ``field_name``."""
        self[field_name.lower()] = field_value