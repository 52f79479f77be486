"""Change events: what the rendering layer sends when an input changes.

Each input kind is its own frozen dataclass carrying only what applies
to it. ``ChangeEvent`` is their union::

    form.on_change(TextChange("email", "a@example.com"))
    form.on_change(SelectMultipleChange("tags", ("python", "web")))
    form.on_change(CheckboxChange("terms", "yes", checked=False))
    form.on_change(FileChange("avatar", "me.png", (UploadFile.from_bytes("me.png", data),)))

Hosts that deliver plain dictionaries (``{"name", "type", "value", ...}``)
can convert them with ``event_from_mapping()``.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, TypeAlias

from wren.forms.files import FileHandle


@dataclass(frozen=True, slots=True)
class TextChange:
    """Text, textarea, select-one and every other single-value input."""

    name: str
    value: str


@dataclass(frozen=True, slots=True)
class SelectMultipleChange:
    """A multi-select; ``selected`` holds the selected option values in order."""

    name: str
    selected: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class CheckboxChange:
    """A checkbox; its value only counts while it is checked."""

    name: str
    value: str
    checked: bool


@dataclass(frozen=True, slots=True)
class FileChange:
    """A file input; ``value`` is the display descriptor, ``files`` the handles."""

    name: str
    value: str
    files: tuple[FileHandle, ...]


ChangeEvent: TypeAlias = TextChange | SelectMultipleChange | CheckboxChange | FileChange


def event_from_mapping(data: Mapping[str, Any]) -> ChangeEvent:
    """Build a typed event from the canonical dictionary shape.

    Recognized keys: ``name``, ``type``, ``value``, plus
    ``selectedOptions`` (list of ``{"value": ...}`` or strings) for
    ``select-multiple``, ``checked`` for ``checkbox`` and ``files`` for
    ``file``. Any other ``type`` is treated as a text change.

    Raises:
        KeyError: If ``name`` is missing.
    """
    name = data["name"]
    value = data.get("value", "")
    match data.get("type", "text"):
        case "select-multiple":
            options = data.get("selectedOptions") or ()
            selected = tuple(
                option["value"] if isinstance(option, Mapping) else str(option)
                for option in options
            )
            return SelectMultipleChange(name, selected)
        case "checkbox":
            return CheckboxChange(name, value, bool(data.get("checked", False)))
        case "file":
            return FileChange(name, value, tuple(data.get("files") or ()))
        case _:
            return TextChange(name, value)
