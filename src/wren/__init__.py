"""Wren: declarative form validation and form state for any input surface.

Tracks per-field values with an untouched/interacted distinction,
validates them with composable, parameterized rules, and serializes the
result as JSON or a multipart payload.

Basic usage::

    from wren import Form
    from wren.validation import required, max_length

    form = Form({
        "title": {"label": "Title", "rules": [required()(), max_length(80)()]},
    })
    form.on_change({"name": "title", "type": "text", "value": "Hello"})
    await form.validate()
    body = await form.get_form_data_as_json()
"""

__version__ = "0.1.0"
__all__ = [
    "ConfigurationError",
    "Form",
    "FormConfig",
    "FormInvalid",
    "FormView",
    "SerializationError",
    "WrenError",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import wren`` fast while providing a clean top-level API.
    """
    if name == "Form":
        from wren.forms.form import Form

        return Form

    if name == "FormConfig":
        from wren.config import FormConfig

        return FormConfig

    if name == "FormView":
        from wren.validation.result import FormView

        return FormView

    if name in ("WrenError", "ConfigurationError", "FormInvalid", "SerializationError"):
        from wren import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
