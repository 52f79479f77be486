"""Field and form validation.

``validate_field`` runs one field's rules; ``validate_form`` builds the
``FormView`` for a whole form state, honouring the clean flag so fields
nobody has touched yet show no errors.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from wren.validation.result import FieldView, FormView

if TYPE_CHECKING:
    from wren.forms.state import FieldState


def coerce_value(value: Any) -> str:
    """String form of a field value as rules see it, trimmed.

    Lists join with ``","`` and everything else goes through ``str()``,
    so list- and file-valued fields are trimmed the same way as text.
    """
    return _to_text(value).strip()


def _to_text(value: Any) -> str:
    if isinstance(value, (list, tuple)):
        return ",".join(_to_text(item) for item in value)
    return str(value)


def field_values(state: Mapping[str, FieldState]) -> dict[str, Any]:
    """Map every field name to its current value, for cross-field rules."""
    return {name: field.value for name, field in state.items()}


def validate_field(field: FieldState, fields: Mapping[str, Any]) -> list[str]:
    """Run every rule of *field* in order and collect the messages.

    Does not stop at the first failure.
    """
    value = coerce_value(field.value)
    errors: list[str] = []
    for rule in field.rules:
        error = rule(value, field.label, fields)
        if error:
            errors.append(error)
    return errors


def validate_form(state: Mapping[str, FieldState]) -> FormView:
    """Build the validation view for *state*.

    A field with rules that is still clean is pending: it reports no
    errors but counts as not valid, so ``will_submit`` stays False until
    it is touched or ``validate()`` forces it.
    """
    fields = field_values(state)
    views: dict[str, FieldView] = {}
    all_errors: list[tuple[str, ...]] = []
    will_submit = True

    for name, field in state.items():
        if not field.rules:
            views[name] = FieldView(field.value)
            continue

        if field.clean:
            views[name] = FieldView(field.value, ())
            will_submit = False
            continue

        errors = tuple(validate_field(field, fields))
        views[name] = FieldView(field.value, errors)
        if errors:
            all_errors.append(errors)
            will_submit = False

    return FormView(views, tuple(all_errors), will_submit)
