"""Serialize form state for transmission.

Two shapes:

- ``serialize_payload()``: a ``FormPayload`` for multipart uploads. File
  handles are appended as-is, one entry per file under ``name[]``.
- ``serialize_structured()``: a plain dict ready for JSON. Each file is
  read and encoded as a base64 data URL, which is why this is async.

File reads for one call run concurrently in an anyio task group; results
keep file order regardless of which read finishes first. The first read
that fails cancels the rest and surfaces as ``SerializationError``::

    data = await serialize_structured(form.state, blacklist=["password"])

Both functions only read the state they are given.
"""

import base64
import logging
from collections.abc import Iterable
from typing import Any

import anyio

from wren.config import FormConfig
from wren.errors import SerializationError
from wren.forms.files import FileHandle
from wren.forms.payload import FormPayload
from wren.forms.state import FieldState, FormState

logger = logging.getLogger("wren.serialize")


def filter_fields(
    state: FormState,
    blacklist: Iterable[str] | None = None,
) -> list[tuple[str, FieldState]]:
    """State entries in order, minus the blacklisted names."""
    excluded = frozenset(blacklist or ())
    return [(name, field) for name, field in state.items() if name not in excluded]


def to_data_url(content: bytes, content_type: str) -> str:
    """Encode file content as a ``data:`` URL."""
    encoded = base64.b64encode(content).decode("ascii")
    return f"data:{content_type or 'application/octet-stream'};base64,{encoded}"


def plain_value(value: Any) -> Any:
    """JSON-friendly copy of a field value (tuples become lists)."""
    if isinstance(value, tuple):
        return list(value)
    return value


# ---------------------------------------------------------------------------
# Payload
# ---------------------------------------------------------------------------


async def serialize_payload(
    state: FormState,
    blacklist: Iterable[str] | None = None,
    *,
    config: FormConfig | None = None,
) -> FormPayload:
    """Build a multipart-ready payload from *state*.

    Async for symmetry with ``serialize_structured()``; no I/O happens
    until the payload is encoded.
    """
    config = config or FormConfig()
    payload = FormPayload()

    for name, field in filter_fields(state, blacklist):
        if field.files is not None:
            key = f"{name}{config.file_key_suffix}"
            for handle in field.files:
                payload.append(key, handle)
        else:
            payload.append(name, field.value)

    return payload


# ---------------------------------------------------------------------------
# Structured (JSON)
# ---------------------------------------------------------------------------


async def serialize_structured(
    state: FormState,
    blacklist: Iterable[str] | None = None,
    *,
    config: FormConfig | None = None,
) -> dict[str, Any]:
    """Build a plain dict from *state*, reading every attached file.

    Raises:
        SerializationError: If a file read fails or the whole batch
            exceeds ``config.read_timeout``.
    """
    config = config or FormConfig()
    data: dict[str, Any] = {}
    reads: list[tuple[str, int, FileHandle]] = []
    slots: dict[str, list[str | None]] = {}

    for name, field in filter_fields(state, blacklist):
        if field.files is not None:
            slots[name] = [None] * len(field.files)
            reads.extend((name, index, handle) for index, handle in enumerate(field.files))
        else:
            data[name] = plain_value(field.value)

    if reads:
        await _read_all(reads, slots, config.read_timeout)

    for name, encoded in slots.items():
        data[name] = encoded

    return data


async def _read_all(
    reads: list[tuple[str, int, FileHandle]],
    slots: dict[str, list[str | None]],
    timeout: float | None,
) -> None:
    failure: tuple[str, str, Exception] | None = None

    async def read_one(name: str, index: int, handle: FileHandle) -> None:
        nonlocal failure
        try:
            content = await handle.read()
        except Exception as e:
            if failure is None:
                failure = (name, handle.filename, e)
            tg.cancel_scope.cancel()
            return
        slots[name][index] = to_data_url(content, handle.content_type)

    logger.debug("Reading %d file(s) for serialization", len(reads))
    try:
        with anyio.fail_after(timeout):
            async with anyio.create_task_group() as tg:
                for name, index, handle in reads:
                    tg.start_soon(read_one, name, index, handle)
    except TimeoutError as e:
        fields = ", ".join(sorted({name for name, _, _ in reads}))
        raise SerializationError(fields, "", f"timed out after {timeout}s") from e

    if failure is not None:
        name, filename, error = failure
        raise SerializationError(name, filename, str(error) or type(error).__name__) from error
