"""Binary-capable form payloads: building and encoding.

``FormPayload`` is what ``Form.get_form_data()`` returns: an ordered
list of ``(name, value)`` entries where a value is a string or a file
handle. File fields appear once per file, under ``name[]``. Encode it
for transmission with ``await payload.encode()``::

    payload = await form.get_form_data()
    body, content_type = await payload.encode()
"""

from __future__ import annotations

import secrets
from collections.abc import Iterator
from typing import Any

from wren.forms.files import FileHandle


class FormPayload:
    """Ordered multi-value form payload.

    Mirrors what a browser sends: repeated names are allowed and
    insertion order is kept.
    """

    __slots__ = ("_entries",)

    def __init__(self) -> None:
        self._entries: list[tuple[str, str | FileHandle]] = []

    def append(self, name: str, value: str | FileHandle) -> None:
        """Add an entry. Non-file values are stored as strings."""
        if not isinstance(value, (str, FileHandle)):
            value = _stringify(value)
        self._entries.append((name, value))

    def get(self, name: str, default: str | FileHandle | None = None) -> str | FileHandle | None:
        """Return the first value for *name*, or *default*."""
        for key, value in self._entries:
            if key == name:
                return value
        return default

    def get_list(self, name: str) -> list[str | FileHandle]:
        """Return every value for *name* in order."""
        return [value for key, value in self._entries if key == name]

    def keys(self) -> list[str]:
        """Distinct entry names in first-seen order."""
        return list(dict.fromkeys(key for key, _ in self._entries))

    def __iter__(self) -> Iterator[tuple[str, str | FileHandle]]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, name: object) -> bool:
        return any(key == name for key, _ in self._entries)

    def __repr__(self) -> str:
        return f"FormPayload({self._entries!r})"

    async def encode(self, boundary: str | None = None) -> tuple[bytes, str]:
        """Encode as ``multipart/form-data``.

        Returns:
            ``(body, content_type)``; the content type carries the boundary.
        """
        boundary = boundary or f"wren-{secrets.token_hex(16)}"
        delimiter = f"--{boundary}\r\n".encode("latin-1")
        body = bytearray()

        for name, value in self._entries:
            body += delimiter
            if isinstance(value, str):
                body += _disposition(name).encode("utf-8") + b"\r\n\r\n"
                body += value.encode("utf-8")
            else:
                content = await value.read()
                body += _disposition(name, value.filename).encode("utf-8") + b"\r\n"
                body += f"Content-Type: {value.content_type}\r\n\r\n".encode("latin-1")
                body += content
            body += b"\r\n"

        body += f"--{boundary}--\r\n".encode("latin-1")
        return bytes(body), f"multipart/form-data; boundary={boundary}"


def _stringify(value: Any) -> str:
    if isinstance(value, (list, tuple)):
        return ",".join(_stringify(item) for item in value)
    return str(value)


def _quote(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"').replace("\r", "%0D").replace("\n", "%0A")


def _disposition(name: str, filename: str | None = None) -> str:
    header = f'Content-Disposition: form-data; name="{_quote(name)}"'
    if filename is not None:
        header += f'; filename="{_quote(filename)}"'
    return header

