"""Wren exception hierarchy.

Validation messages are data and never raised. The exceptions here cover
the failures a caller must handle explicitly: a misconfigured rule, a form
that is not yet submittable, and a file that could not be read while
serializing.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from wren.validation.result import FormView


class WrenError(Exception):
    """Base for all wren-specific errors."""


class ConfigurationError(WrenError):
    """Raised when a rule or field definition is invalid.

    Rules check their arguments when they are bound, so a missing
    ``min()`` length fails here instead of producing a broken message
    at validation time.
    """


class FormInvalid(WrenError):  # noqa: N818: reads as a state, like NotFound
    """Raised by ``Form.validate()`` when the form cannot be submitted.

    ``view`` is the recomputed validation view after every pending field
    has been made eligible for validation.
    """

    def __init__(self, view: FormView) -> None:
        self.view = view
        count = len(view.errors)
        super().__init__(f"Form is not submittable ({count} field(s) with errors)")


class SerializationError(WrenError):
    """Raised when a file attached to a field cannot be read.

    Attributes:
        field: Name of the field the file belongs to.
        filename: Name of the file that failed, or ``""`` for a timeout
            covering the whole batch.
    """

    def __init__(self, field: str, filename: str, detail: str) -> None:
        self.field = field
        self.filename = filename
        target = f"{field}/{filename}" if filename else field
        super().__init__(f"Could not read file for {target}: {detail}")
