"""Form configuration.

FormConfig is a frozen dataclass: immutable after creation, shared
safely between forms.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class FormConfig:
    """Form configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = FormConfig(read_timeout=10.0, file_key_suffix="")
    """

    # Field definitions
    default_label: str = "Field"

    # Serialization
    file_key_suffix: str = "[]"  # Appended to file field names in payloads
    read_timeout: float | None = None  # Seconds for a whole batch of file reads
    json_separators: tuple[str, str] | None = None  # Passed to json.dumps
