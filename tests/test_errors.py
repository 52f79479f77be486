"""Tests for wren.errors: exception hierarchy."""

import wren
from wren.errors import ConfigurationError, FormInvalid, SerializationError, WrenError
from wren.validation import FieldView, FormView


class TestHierarchy:
    def test_all_derive_from_base(self) -> None:
        for exc in (ConfigurationError, FormInvalid, SerializationError):
            assert issubclass(exc, WrenError)

    def test_top_level_exports(self) -> None:
        assert wren.WrenError is WrenError
        assert wren.FormInvalid is FormInvalid


class TestFormInvalid:
    def test_carries_view(self) -> None:
        view = FormView({"a": FieldView("", ("bad",))}, (("bad",),), False)
        error = FormInvalid(view)
        assert error.view is view
        assert "1 field(s)" in str(error)


class TestSerializationError:
    def test_message(self) -> None:
        error = SerializationError("doc", "a.txt", "boom")
        assert error.field == "doc"
        assert error.filename == "a.txt"
        assert str(error) == "Could not read file for doc/a.txt: boom"

    def test_message_without_filename(self) -> None:
        assert str(SerializationError("doc", "", "timed out")) == "Could not read file for doc: timed out"
