"""Form state, change events and serialization."""

from wren.forms.compare import compare_arrays
from wren.forms.events import (
    ChangeEvent,
    CheckboxChange,
    FileChange,
    SelectMultipleChange,
    TextChange,
    event_from_mapping,
)
from wren.forms.files import FileHandle, LocalFile, UploadFile
from wren.forms.form import Form, FormBinding
from wren.forms.payload import FormPayload
from wren.forms.state import FieldDefinition, FieldState, FormState

__all__ = [
    "ChangeEvent",
    "CheckboxChange",
    "FieldDefinition",
    "FieldState",
    "FileChange",
    "FileHandle",
    "Form",
    "FormBinding",
    "FormPayload",
    "FormState",
    "LocalFile",
    "SelectMultipleChange",
    "TextChange",
    "UploadFile",
    "compare_arrays",
    "event_from_mapping",
]
