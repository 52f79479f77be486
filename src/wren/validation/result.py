"""Validation view: the UI-facing result of validating a form.

Recomputed from form state after every transition and never stored on
its own. A field without rules carries no ``errors`` at all, which is
how the view tells "nothing to validate" apart from "currently valid".
"""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class FieldView:
    """One field's value and, when it has rules, its current errors."""

    value: Any
    errors: tuple[str, ...] | None = None

    @property
    def validates(self) -> bool:
        """True if the field has rules."""
        return self.errors is not None

    @property
    def error(self) -> str | None:
        """The first error, ``""`` when valid, ``None`` without rules."""
        if self.errors is None:
            return None
        return self.errors[0] if self.errors else ""

    def to_dict(self) -> dict[str, Any]:
        if self.errors is None:
            return {"value": self.value}
        return {"value": self.value, "errors": list(self.errors), "error": self.error}


@dataclass(frozen=True, slots=True)
class FormView:
    """Every field's view plus the form-level aggregate.

    ``errors`` holds one tuple of messages per invalid field, in field
    order. ``will_submit`` is False while any field with rules is invalid
    or still pending. The view is falsy when the form cannot submit::

        view = form.view
        if not view:
            show(view.errors)
    """

    fields: Mapping[str, FieldView]
    errors: tuple[tuple[str, ...], ...] = ()
    will_submit: bool = True

    def __getitem__(self, name: str) -> FieldView:
        return self.fields[name]

    def __contains__(self, name: object) -> bool:
        return name in self.fields

    def __iter__(self) -> Iterator[str]:
        return iter(self.fields)

    def __len__(self) -> int:
        return len(self.fields)

    def __bool__(self) -> bool:
        """Falsy when the form cannot submit."""
        return self.will_submit

    def to_dict(self) -> dict[str, Any]:
        """Plain-data form of the view, keyed the way UI templates expect."""
        data: dict[str, Any] = {name: view.to_dict() for name, view in self.fields.items()}
        data["willSubmit"] = self.will_submit
        data["errors"] = [list(errors) for errors in self.errors]
        return data
