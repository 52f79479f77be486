"""Tests for wren.forms.serialize and Form serialization methods."""

import base64
import json
from dataclasses import dataclass

import anyio
import pytest

from wren import Form, FormConfig, SerializationError
from wren.forms.events import FileChange, SelectMultipleChange
from wren.forms.files import LocalFile, UploadFile
from wren.forms.serialize import serialize_payload, serialize_structured, to_data_url


@dataclass(frozen=True)
class SlowFile:
    filename: str
    content_type: str
    content: bytes
    delay: float

    async def read(self) -> bytes:
        await anyio.sleep(self.delay)
        return self.content


@dataclass(frozen=True)
class BrokenFile:
    filename: str = "broken.bin"
    content_type: str = "application/octet-stream"

    async def read(self) -> bytes:
        msg = "disk on fire"
        raise OSError(msg)


def _data_url(content: bytes, content_type: str) -> str:
    return f"data:{content_type};base64,{base64.b64encode(content).decode()}"


class TestDataUrl:
    def test_encodes(self) -> None:
        assert to_data_url(b"hi", "text/plain") == "data:text/plain;base64,aGk="

    def test_missing_type(self) -> None:
        assert to_data_url(b"", "").startswith("data:application/octet-stream;base64,")


class TestJson:
    @pytest.mark.asyncio
    async def test_blacklist(self) -> None:
        form = Form({"foo": {"value": "FOO"}, "bar": {"value": "BAR"}, "baz": {"value": "BAZ"}})
        data = json.loads(await form.get_form_data_as_json(["baz"]))
        assert data == {"foo": "FOO", "bar": "BAR"}

    @pytest.mark.asyncio
    async def test_no_blacklist(self) -> None:
        form = Form({"foo": {"value": "FOO"}})
        assert json.loads(await form.get_form_data_as_json()) == {"foo": "FOO"}

    @pytest.mark.asyncio
    async def test_list_values(self) -> None:
        form = Form({"tags": {}})
        form.on_change(SelectMultipleChange("tags", ("a", "b")))
        assert json.loads(await form.get_form_data_as_json()) == {"tags": ["a", "b"]}

    @pytest.mark.asyncio
    async def test_files_become_data_urls_in_order(self) -> None:
        files = (
            SlowFile("a.txt", "text/plain", b"first", delay=0.05),
            SlowFile("b.txt", "text/plain", b"second", delay=0.0),
        )
        form = Form({"docs": {}, "title": {"value": "T"}})
        form.on_change(FileChange("docs", "a.txt", files))

        data = json.loads(await form.get_form_data_as_json())

        assert data["title"] == "T"
        assert data["docs"] == [
            _data_url(b"first", "text/plain"),
            _data_url(b"second", "text/plain"),
        ]

    @pytest.mark.asyncio
    async def test_separators(self) -> None:
        form = Form({"a": {"value": "1"}}, config=FormConfig(json_separators=(",", ":")))
        assert await form.get_form_data_as_json() == '{"a":"1"}'

    @pytest.mark.asyncio
    async def test_blacklisted_files_not_read(self) -> None:
        form = Form({"doc": {}})
        form.on_change(FileChange("doc", "broken.bin", (BrokenFile(),)))
        assert json.loads(await form.get_form_data_as_json(["doc"])) == {}


class TestReadFailures:
    @pytest.mark.asyncio
    async def test_failed_read_raises(self) -> None:
        form = Form({"doc": {}})
        form.on_change(
            FileChange("doc", "ok.txt", (UploadFile.from_bytes("ok.txt", b"ok"), BrokenFile()))
        )
        with pytest.raises(SerializationError, match="disk on fire") as exc_info:
            await form.get_form_data_as_json()
        assert exc_info.value.field == "doc"
        assert exc_info.value.filename == "broken.bin"
        assert isinstance(exc_info.value.__cause__, OSError)

    @pytest.mark.asyncio
    async def test_timeout(self) -> None:
        form = Form({"doc": {}}, config=FormConfig(read_timeout=0.05))
        form.on_change(FileChange("doc", "slow", (SlowFile("slow", "text/plain", b"", 5.0),)))
        with pytest.raises(SerializationError, match="timed out"):
            await form.get_form_data_as_json()

    @pytest.mark.asyncio
    async def test_missing_local_file(self, tmp_path) -> None:
        form = Form({"doc": {}})
        missing = LocalFile.from_path(tmp_path / "missing.txt")
        form.on_change(FileChange("doc", "missing.txt", (missing,)))
        with pytest.raises(SerializationError):
            await form.get_form_data_as_json()


class TestLocalFile:
    @pytest.mark.asyncio
    async def test_reads_from_disk(self, tmp_path) -> None:
        path = tmp_path / "notes.txt"
        path.write_bytes(b"hello")
        handle = LocalFile.from_path(path)
        assert handle.filename == "notes.txt"
        assert handle.content_type == "text/plain"

        form = Form({"doc": {}})
        form.on_change(FileChange("doc", "notes.txt", (handle,)))
        data = await serialize_structured(form.state)
        assert data == {"doc": [_data_url(b"hello", "text/plain")]}


class TestPayload:
    @pytest.mark.asyncio
    async def test_values_and_files(self) -> None:
        first = UploadFile.from_bytes("a.png", b"\x89PNG")
        second = UploadFile.from_bytes("b.png", b"\x89PNG2")
        form = Form({"name": {"value": "Ada"}, "photos": {}, "secret": {"value": "x"}})
        form.on_change(FileChange("photos", "a.png", (first, second)))

        payload = await form.get_form_data(["secret"])

        assert list(payload) == [("name", "Ada"), ("photos[]", first), ("photos[]", second)]
        assert "secret" not in payload

    @pytest.mark.asyncio
    async def test_custom_file_suffix(self) -> None:
        upload = UploadFile.from_bytes("a.txt", b"a")
        form = Form({"doc": {}})
        form.on_change(FileChange("doc", "a.txt", (upload,)))
        payload = await serialize_payload(form.state, config=FormConfig(file_key_suffix=""))
        assert payload.get_list("doc") == [upload]

    @pytest.mark.asyncio
    async def test_list_values_joined(self) -> None:
        form = Form({"tags": {"value": ["a", "b"]}})
        payload = await form.get_form_data()
        assert payload.get("tags") == "a,b"
