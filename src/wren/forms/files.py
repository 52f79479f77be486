"""File handles attached to file-input fields.

Anything with a ``filename``, a ``content_type`` and an async ``read()``
works as a file handle. Two implementations ship with wren:

- ``UploadFile``: content already in memory.
- ``LocalFile``: content read lazily from disk through ``anyio.Path``.
"""

from __future__ import annotations

import mimetypes
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, runtime_checkable

import anyio


@runtime_checkable
class FileHandle(Protocol):
    """A file selected in a file input."""

    @property
    def filename(self) -> str: ...

    @property
    def content_type(self) -> str: ...

    async def read(self) -> bytes: ...


@dataclass(frozen=True, slots=True)
class UploadFile:
    """An in-memory file.

    Immutable metadata with the content held as bytes.
    """

    filename: str
    content_type: str
    size: int
    _content: bytes

    @classmethod
    def from_bytes(
        cls,
        filename: str,
        content: bytes,
        content_type: str | None = None,
    ) -> UploadFile:
        return cls(
            filename=filename,
            content_type=content_type or _guess_type(filename),
            size=len(content),
            _content=content,
        )

    async def read(self) -> bytes:
        """Return the file content as bytes."""
        return self._content

    def __repr__(self) -> str:
        return f"UploadFile({self.filename!r}, {self.content_type!r}, {self.size} bytes)"


@dataclass(frozen=True, slots=True)
class LocalFile:
    """A file on disk, read when the form is serialized."""

    path: Path
    content_type: str

    @classmethod
    def from_path(cls, path: str | Path, content_type: str | None = None) -> LocalFile:
        path = Path(path)
        return cls(path=path, content_type=content_type or _guess_type(path.name))

    @property
    def filename(self) -> str:
        return self.path.name

    async def read(self) -> bytes:
        """Read the file content without blocking the event loop."""
        return await anyio.Path(self.path).read_bytes()


def _guess_type(filename: str) -> str:
    content_type, _ = mimetypes.guess_type(filename)
    return content_type or "application/octet-stream"
