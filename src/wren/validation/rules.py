"""Built-in validation rules for wren forms.

Rules are built in three stages::

    rule = min_length(3)("$label must be at least $1 character{|s}.")
    rule("ab", "Name", {})   # 'Name must be at least 3 characters.'
    rule("abc", "Name", {})  # ''

1. Calling a factory binds the rule arguments (checked immediately).
2. Calling the bound rule binds an error template (or the default one).
3. The resulting ``RuleInstance`` maps ``(value, label, fields)`` to an
   error message, where ``""`` means valid.

New rules come from ``create_rule()``::

    even = create_rule(lambda value, args, fields: len(value) % 2 == 0, name="even")
    rule = even()("$label needs an even number of characters.")

``fields`` is a mapping of every field name to its current value, so a
rule can compare fields with each other (see ``custom``).
"""

import re
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, TypeAlias

from wren.errors import ConfigurationError
from wren.validation.messages import MESSAGES
from wren.validation.templating import render_message

# Type aliases
Predicate: TypeAlias = Callable[[str, tuple[Any, ...], Mapping[str, Any]], bool]
Prepare: TypeAlias = Callable[[str, tuple[Any, ...]], tuple[Any, ...]]
Rule: TypeAlias = Callable[[str, str, Mapping[str, Any]], str]

_NO_FIELDS: Mapping[str, Any] = {}


# ---------------------------------------------------------------------------
# Rule stages
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class RuleInstance:
    """A bound, ready-to-run rule: predicate, arguments and template."""

    name: str
    predicate: Predicate
    args: tuple[Any, ...]
    template: str

    def __call__(
        self,
        value: str,
        label: str = "",
        fields: Mapping[str, Any] | None = None,
    ) -> str:
        if self.predicate(value, self.args, _NO_FIELDS if fields is None else fields):
            return ""
        return render_message(self.template, self.args, label, value)

    def __repr__(self) -> str:
        args = ", ".join(repr(a) for a in self.args)
        return f"{self.name}({args})({self.template!r})"


@dataclass(frozen=True, slots=True)
class BoundRule:
    """A rule with its arguments bound, waiting for an error template."""

    name: str
    predicate: Predicate
    args: tuple[Any, ...]
    default_template: str = ""

    def __call__(self, template: str | None = None) -> RuleInstance:
        if template is None:
            template = self.default_template
        if not isinstance(template, str):
            msg = f"{self.name}() error template must be a string, got {type(template).__name__}"
            raise ConfigurationError(msg)
        return RuleInstance(self.name, self.predicate, self.args, template)


@dataclass(frozen=True, slots=True)
class RuleFactory:
    """Binds and checks rule arguments. Created by ``create_rule()``."""

    name: str
    predicate: Predicate
    arity: int = 0
    default_template: str = ""
    prepare: Prepare | None = None

    def __call__(self, *args: Any) -> BoundRule:
        if len(args) != self.arity:
            msg = f"{self.name}() takes {self.arity} argument(s), got {len(args)}"
            raise ConfigurationError(msg)
        if self.prepare is not None:
            args = self.prepare(self.name, args)
        return BoundRule(self.name, self.predicate, args, self.default_template)


def create_rule(
    predicate: Predicate,
    *,
    arity: int = 0,
    name: str | None = None,
    template: str | None = None,
    prepare: Prepare | None = None,
) -> RuleFactory:
    """Create a rule factory from a predicate.

    Args:
        predicate: ``(trimmed_value, args, fields) -> bool``; ``True``
            means the value passes.
        arity: Exact number of arguments the rule must be bound with.
        name: Rule name, used in configuration errors and to look up a
            default template. Defaults to the predicate's ``__name__``.
        template: Default error template. Falls back to the built-in
            message table, then to the empty template (which renders
            as ``"Validation failed."``).
        prepare: Optional ``(name, args) -> args`` hook that checks and
            normalizes arguments at bind time, raising
            ``ConfigurationError`` for bad input.
    """
    rule_name = name or getattr(predicate, "__name__", "rule")
    if template is None:
        template = MESSAGES.get(rule_name, "")
    return RuleFactory(rule_name, predicate, arity, template, prepare)


# ---------------------------------------------------------------------------
# Argument checks
# ---------------------------------------------------------------------------


def _is_number(arg: Any) -> bool:
    return isinstance(arg, (int, float)) and not isinstance(arg, bool)


def _size_arg(name: str, args: tuple[Any, ...]) -> tuple[Any, ...]:
    (size,) = args
    if not isinstance(size, int) or isinstance(size, bool) or size < 0:
        msg = f"{name}() expects a non-negative integer, got {size!r}"
        raise ConfigurationError(msg)
    return args


def _pattern_arg(name: str, args: tuple[Any, ...]) -> tuple[Any, ...]:
    (pattern,) = args
    if isinstance(pattern, re.Pattern):
        return args
    if not isinstance(pattern, str):
        msg = f"{name}() expects a pattern string or compiled pattern, got {pattern!r}"
        raise ConfigurationError(msg)
    try:
        return (re.compile(pattern),)
    except re.error as e:
        msg = f"{name}() got an invalid pattern {pattern!r}: {e}"
        raise ConfigurationError(msg) from e


def _bounds_args(name: str, args: tuple[Any, ...]) -> tuple[Any, ...]:
    if not all(_is_number(arg) for arg in args):
        msg = f"{name}() expects two numbers, got {args!r}"
        raise ConfigurationError(msg)
    return args


def _members_arg(name: str, args: tuple[Any, ...]) -> tuple[Any, ...]:
    (members,) = args
    if isinstance(members, str):
        members = (members,)
    elif isinstance(members, Sequence):
        members = tuple(members)
    else:
        msg = f"{name}() expects a string or a list of strings, got {members!r}"
        raise ConfigurationError(msg)
    if not members or not all(isinstance(m, str) for m in members):
        msg = f"{name}() expects a string or a non-empty list of strings, got {args[0]!r}"
        raise ConfigurationError(msg)
    return (members,)


# Plain ASCII decimals only: no underscores, inf/nan or non-ASCII digits
_DECIMAL_RE = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


def _to_number(value: str) -> float | None:
    if _DECIMAL_RE.fullmatch(value) is None:
        return None
    return float(value)


# ---------------------------------------------------------------------------
# Presence and length
# ---------------------------------------------------------------------------


required = create_rule(lambda value, args, fields: len(value) > 0, name="required")

length = create_rule(
    lambda value, args, fields: len(value) == args[0],
    arity=1,
    name="length",
    prepare=_size_arg,
)

min_length = create_rule(
    lambda value, args, fields: len(value) >= args[0],
    arity=1,
    name="min_length",
    prepare=_size_arg,
)

max_length = create_rule(
    lambda value, args, fields: len(value) <= args[0],
    arity=1,
    name="max_length",
    prepare=_size_arg,
)


# ---------------------------------------------------------------------------
# Format
# ---------------------------------------------------------------------------

_DIGITS_RE = re.compile(r"[0-9]+")

matches = create_rule(
    lambda value, args, fields: args[0].search(value) is not None,
    arity=1,
    name="matches",
    prepare=_pattern_arg,
)

number = create_rule(
    lambda value, args, fields: _DIGITS_RE.fullmatch(value) is not None,
    name="number",
)


# ---------------------------------------------------------------------------
# Numeric bounds
# ---------------------------------------------------------------------------


def _in_range(value: str, args: tuple[Any, ...], fields: Mapping[str, Any]) -> bool:
    n = _to_number(value)
    return n is not None and args[0] <= n <= args[1]


def _between(value: str, args: tuple[Any, ...], fields: Mapping[str, Any]) -> bool:
    n = _to_number(value)
    return n is not None and args[0] < n < args[1]


in_range = create_rule(_in_range, arity=2, name="in_range", prepare=_bounds_args)
between = create_rule(_between, arity=2, name="between", prepare=_bounds_args)


# ---------------------------------------------------------------------------
# Membership (a single string or any of a list)
# ---------------------------------------------------------------------------

equals = create_rule(
    lambda value, args, fields: any(value == m for m in args[0]),
    arity=1,
    name="equals",
    prepare=_members_arg,
)

starts = create_rule(
    lambda value, args, fields: any(value.startswith(m) for m in args[0]),
    arity=1,
    name="starts",
    prepare=_members_arg,
)

ends = create_rule(
    lambda value, args, fields: any(value.endswith(m) for m in args[0]),
    arity=1,
    name="ends",
    prepare=_members_arg,
)

contains = create_rule(
    lambda value, args, fields: any(m in value for m in args[0]),
    arity=1,
    name="contains",
    prepare=_members_arg,
)


# ---------------------------------------------------------------------------
# Custom
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class CustomRule:
    """A rule whose check returns its own error message.

    The check returns a non-empty string to fail. Anything else (``""``,
    ``None``, ``True``) passes. The returned message is a template, so
    ``$label`` and ``$value`` work in it.
    """

    check: Callable[[str, Mapping[str, Any]], Any]

    def __call__(
        self,
        value: str,
        label: str = "",
        fields: Mapping[str, Any] | None = None,
    ) -> str:
        error = self.check(value, _NO_FIELDS if fields is None else fields)
        if not isinstance(error, str) or not error:
            return ""
        return render_message(error, (), label, value)


def custom(check: Callable[[str, Mapping[str, Any]], Any]) -> CustomRule:
    """Wrap ``check(value, fields) -> message`` as a rule.

    Example::

        confirm = custom(
            lambda value, fields: "" if value == fields["password"] else "Passwords must match."
        )
    """
    if not callable(check):
        msg = f"custom() expects a callable, got {check!r}"
        raise ConfigurationError(msg)
    return CustomRule(check)
