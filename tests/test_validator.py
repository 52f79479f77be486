"""Tests for wren.validation.validator: field and form validation."""

from wren.forms.state import FieldState, initial_state
from wren.validation import (
    custom,
    max_length,
    min_length,
    number,
    required,
    validate_field,
    validate_form,
)
from wren.validation.validator import coerce_value, field_values


def _field(value, rules=(), clean=False, label="Field") -> FieldState:
    return FieldState(value=value, label=label, rules=tuple(rules), clean=clean)


class TestCoerceValue:
    def test_trims_text(self) -> None:
        assert coerce_value("  hi \n") == "hi"

    def test_joins_lists_then_trims(self) -> None:
        assert coerce_value((" a ", " b ")) == "a , b"

    def test_non_strings(self) -> None:
        assert coerce_value(42) == "42"


class TestValidateField:
    def test_collects_every_error_in_order(self) -> None:
        field = _field("", [required()("first"), number()("second"), max_length(5)("third")])
        assert validate_field(field, {}) == ["first", "second"]

    def test_valid(self) -> None:
        field = _field("12", [required()(), number()()])
        assert validate_field(field, {}) == []

    def test_value_is_trimmed_before_rules(self) -> None:
        field = _field("  abc  ", [max_length(3)()])
        assert validate_field(field, {}) == []

    def test_list_value_is_joined(self) -> None:
        field = _field(("a", "b"), [min_length(3)()])
        assert validate_field(field, {}) == []

    def test_label_reaches_message(self) -> None:
        field = _field("", [required()()], label="Email")
        assert validate_field(field, {}) == ["Email is required."]

    def test_fields_reach_rules(self) -> None:
        rule = custom(lambda value, fields: "" if value == fields["a"] else "mismatch")
        assert validate_field(_field("x", [rule]), {"a": "x"}) == []
        assert validate_field(_field("x", [rule]), {"a": "y"}) == ["mismatch"]


class TestValidateForm:
    def test_no_rules_always_submits(self) -> None:
        state = initial_state({"a": {}, "b": {"value": "x"}, "c": {"value": ["1", "2"]}})
        view = validate_form(state)
        assert view.will_submit is True
        assert view.errors == ()
        for name in ("a", "b", "c"):
            assert view[name].errors is None
            assert view[name].error is None
            assert "errors" not in view[name].to_dict()

    def test_pending_field_blocks_submit_without_errors(self) -> None:
        state = {"name": _field("", [required()()], clean=True)}
        view = validate_form(state)
        assert view.will_submit is False
        assert view.errors == ()
        assert view["name"].errors == ()
        assert view["name"].error == ""

    def test_dirty_invalid_field(self) -> None:
        state = {"name": _field("", [required()()], label="Name")}
        view = validate_form(state)
        assert view.will_submit is False
        assert view["name"].errors == ("Name is required.",)
        assert view["name"].error == "Name is required."
        assert view.errors == (("Name is required.",),)

    def test_dirty_valid_field(self) -> None:
        view = validate_form({"name": _field("Ada", [required()()])})
        assert view.will_submit is True
        assert view["name"].errors == ()
        assert view["name"].error == ""

    def test_errors_in_field_order(self) -> None:
        state = {
            "b": _field("", [required()("b1")]),
            "ok": _field("x", [required()("never")]),
            "a": _field("", [required()("a1"), min_length(2)("a2")]),
        }
        assert validate_form(state).errors == (("b1",), ("a1", "a2"))

    def test_view_is_falsy_when_blocked(self) -> None:
        assert not validate_form({"n": _field("", [required()()])})
        assert validate_form({"n": _field("x", [required()()])})

    def test_to_dict_shape(self) -> None:
        state = {
            "name": _field("", [required()()], label="Name"),
            "note": _field("hi"),
        }
        assert validate_form(state).to_dict() == {
            "name": {"value": "", "errors": ["Name is required."], "error": "Name is required."},
            "note": {"value": "hi"},
            "willSubmit": False,
            "errors": [["Name is required."]],
        }

    def test_field_values(self) -> None:
        state = {"a": _field("1"), "b": _field(("x", "y"))}
        assert field_values(state) == {"a": "1", "b": ("x", "y")}
