"""Form validation: composable rules with templated messages.

Usage::

    from wren.validation import required, min_length, equals, custom

    rules = [
        required()(),
        min_length(8)("$label needs $1 character{|s} or more."),
        equals(["admin", "editor"])(),
        custom(lambda value, fields: "" if value != fields.get("username") else "Too obvious."),
    ]

Every rule maps ``(value, label, fields)`` to a message; ``""`` means
the value passed.
"""

from wren.validation.result import FieldView, FormView
from wren.validation.rules import (
    BoundRule,
    CustomRule,
    Predicate,
    Rule,
    RuleFactory,
    RuleInstance,
    between,
    contains,
    create_rule,
    custom,
    ends,
    equals,
    in_range,
    length,
    matches,
    max_length,
    min_length,
    number,
    required,
    starts,
)
from wren.validation.templating import render_message
from wren.validation.validator import validate_field, validate_form

__all__ = [
    "BoundRule",
    "CustomRule",
    "FieldView",
    "FormView",
    "Predicate",
    "Rule",
    "RuleFactory",
    "RuleInstance",
    "between",
    "contains",
    "create_rule",
    "custom",
    "ends",
    "equals",
    "in_range",
    "length",
    "matches",
    "max_length",
    "min_length",
    "number",
    "render_message",
    "required",
    "starts",
    "validate_field",
    "validate_form",
]
