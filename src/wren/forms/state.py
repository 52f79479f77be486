"""Form state and its transitions.

``FormState`` is an immutable, versioned mapping of field name to
``FieldState``. Transitions are plain functions that take a state and
return a new one; a transition that changes nothing returns the state
it was given, so callers can compare identities to detect no-ops::

    state = initial_state({"email": {"label": "Email", "rules": [required()()]}})
    state = update(state, {"email": "a@example.com"})
    state.version  # 1

The field set is fixed by ``initial_state()``. Later transitions ignore
names that are not in it.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping, Sized
from dataclasses import dataclass, replace
from typing import Any

from wren.config import FormConfig
from wren.errors import ConfigurationError
from wren.forms.events import (
    ChangeEvent,
    CheckboxChange,
    FileChange,
    SelectMultipleChange,
    TextChange,
)
from wren.forms.files import FileHandle
from wren.validation.rules import BoundRule, Rule, RuleFactory

logger = logging.getLogger("wren.forms")

_DEFINITION_KEYS = frozenset({"value", "label", "rules"})


@dataclass(frozen=True, slots=True)
class FieldDefinition:
    """How a field starts out. Read once when the form is created."""

    value: Any = ""
    label: str | None = None
    rules: tuple[Rule, ...] = ()


@dataclass(frozen=True, slots=True)
class FieldState:
    """One field's current state.

    ``clean`` is True while nobody has interacted with the field; a
    clean field is never validated. ``files`` holds the handles from the
    last file change, or ``None`` for fields that never received files.
    """

    value: Any
    label: str
    rules: tuple[Rule, ...]
    clean: bool
    files: tuple[FileHandle, ...] | None = None


class FormState(Mapping[str, FieldState]):
    """Immutable mapping of field name to ``FieldState``.

    Iteration order is definition order. ``version`` increases by one
    with every transition that produced a change.
    """

    __slots__ = ("_fields", "_version")

    def __init__(self, fields: Mapping[str, FieldState], version: int = 0) -> None:
        object.__setattr__(self, "_fields", dict(fields))
        object.__setattr__(self, "_version", version)

    def __setattr__(self, name: str, value: object) -> None:
        msg = "FormState is immutable"
        raise AttributeError(msg)

    @property
    def version(self) -> int:
        return self._version

    def __getitem__(self, name: str) -> FieldState:
        return self._fields[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __repr__(self) -> str:
        names = ", ".join(self._fields)
        return f"FormState(v{self._version}: {names})"

    def evolve(self, changes: Mapping[str, FieldState]) -> FormState:
        """Return a new state with *changes* applied, or ``self`` if empty.

        Names missing from this state are dropped.
        """
        changes = {name: field for name, field in changes.items() if name in self._fields}
        if not changes:
            return self
        return FormState({**self._fields, **changes}, self._version + 1)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def is_empty(value: Any) -> bool:
    """True for ``""``, empty lists and anything else of length zero."""
    return isinstance(value, Sized) and len(value) == 0


def freeze_value(value: Any) -> Any:
    """Copy list values into tuples so state never shares them with callers."""
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return tuple(value)
    return value


def _as_definition(name: str, entry: Any) -> FieldDefinition:
    if isinstance(entry, FieldDefinition):
        return entry
    if entry is None:
        return FieldDefinition()
    if not isinstance(entry, Mapping):
        msg = f"Field {name!r} must be defined by a mapping or FieldDefinition, got {entry!r}"
        raise ConfigurationError(msg)
    unknown = set(entry) - _DEFINITION_KEYS
    if unknown:
        keys = ", ".join(sorted(unknown))
        msg = f"Field {name!r} has unknown definition keys: {keys}"
        raise ConfigurationError(msg)
    return FieldDefinition(
        value=entry.get("value", ""),
        label=entry.get("label"),
        rules=tuple(entry.get("rules") or ()),
    )


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------


def initial_state(
    definitions: Mapping[str, FieldDefinition | Mapping[str, Any] | None],
    config: FormConfig | None = None,
) -> FormState:
    """Create the starting state from field definitions.

    A field starts clean when its initial value is empty. A missing or
    empty label becomes ``config.default_label``. A list of file
    handles as the initial value attaches those files; the field's value
    becomes the first file's name.

    Raises:
        ConfigurationError: For malformed definitions or rules that are
            not callable (for example ``required()`` without its
            template stage).
    """
    config = config or FormConfig()
    fields: dict[str, FieldState] = {}

    for name, entry in definitions.items():
        definition = _as_definition(name, entry)
        rules = tuple(definition.rules)
        for rule in rules:
            if not callable(rule) or isinstance(rule, (BoundRule, RuleFactory)):
                msg = f"Field {name!r} has an incomplete rule {rule!r}; bind its error template"
                raise ConfigurationError(msg)

        value = freeze_value(definition.value)
        files: tuple[FileHandle, ...] | None = None
        if isinstance(value, tuple) and value and all(isinstance(v, FileHandle) for v in value):
            files = value
            value = files[0].filename

        fields[name] = FieldState(
            value=value,
            label=definition.label or config.default_label,
            rules=rules,
            clean=is_empty(value),
            files=files,
        )

    return FormState(fields)


# ---------------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------------


def update(state: FormState, values: Mapping[str, Any]) -> FormState:
    """Replace the values of the named fields.

    A clean field that receives an empty value stays clean; any other
    assignment marks the field as interacted with. Unknown names are
    ignored.
    """
    changes: dict[str, FieldState] = {}
    for name, raw in values.items():
        field = state.get(name)
        if field is None:
            logger.debug("update: ignoring unknown field %r", name)
            continue
        value = freeze_value(raw)
        changes[name] = replace(field, value=value, clean=field.clean and is_empty(value))
    return state.evolve(changes)


def apply_change(state: FormState, event: ChangeEvent) -> FormState:
    """Apply one input change. The changed field is never clean afterwards."""
    field = state.get(event.name)
    if field is None:
        logger.debug("change: ignoring unknown field %r", event.name)
        return state

    match event:
        case SelectMultipleChange(selected=selected):
            changed = replace(field, value=tuple(selected), clean=False)
        case CheckboxChange(value=value, checked=checked):
            changed = replace(field, value=value if checked else "", clean=False)
        case FileChange(value=value, files=files):
            changed = replace(field, value=value, files=tuple(files), clean=False)
        case TextChange(value=value):
            changed = replace(field, value=value, clean=False)
        case _:
            msg = f"Unsupported change event: {event!r}"
            raise TypeError(msg)

    return state.evolve({event.name: changed})


def pending_fields(state: FormState) -> list[str]:
    """Names of fields that have rules but are still clean."""
    return [name for name, field in state.items() if field.rules and field.clean]


def mark_dirty(state: FormState) -> FormState:
    """Make every pending field eligible for validation.

    Returns *state* unchanged when nothing is pending, so repeating the
    transition is a no-op.
    """
    pending = pending_fields(state)
    if not pending:
        return state
    logger.debug("validate: marking %d pending field(s) dirty", len(pending))
    return state.evolve({name: replace(state[name], clean=False) for name in pending})
