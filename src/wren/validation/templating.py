"""Error message templating: a closed, single-pass formatter.

Templates understand exactly four kinds of token::

    $1 .. $N        the rule's bound arguments, in order
    $label          the field label ("Field" when the label is empty)
    $value          the trimmed value that failed
    {one|other}     "one" when argument 1 equals 1, otherwise "other"

Example::

    render_message("$label must be at least $1 character{|s}.", (1,), "Name", "")
    # 'Name must be at least 1 character.'

The template is scanned once. Substituted text is never scanned again,
so a label or value that happens to contain ``$1`` or ``{a|b}`` is
rendered literally. Nothing is ever evaluated.

A position token takes every digit that follows the ``$``, so with one
bound argument ``$10`` refers to argument 10 and stays as written. It
is never read as ``$1`` followed by ``0``.
"""

import re
from collections.abc import Sequence
from typing import Any

DEFAULT_LABEL = "Field"
FALLBACK_MESSAGE = "Validation failed."

_TOKEN_RE = re.compile(
    r"\$(?P<index>\d+)"
    r"|\$(?P<name>label|value)"
    r"|\{(?P<one>[^{}|]*)\|(?P<other>[^{}|]*)\}"
)


def format_argument(arg: Any) -> str:
    """Stringify a bound rule argument for display.

    Lists with more than one member render as ``one of: a, b, c``; a
    one-element list renders as its only member.
    """
    if isinstance(arg, (list, tuple, frozenset, set)):
        items = list(arg)
        if len(items) == 1:
            return format_argument(items[0])
        return "one of: " + ", ".join(format_argument(item) for item in items)
    if isinstance(arg, re.Pattern):
        return arg.pattern
    if isinstance(arg, float) and arg.is_integer():
        return str(int(arg))
    return str(arg)


def is_singular(arg: Any) -> bool:
    """True if *arg* is numerically equal to 1."""
    if isinstance(arg, bool):
        return False
    if isinstance(arg, (int, float)):
        return arg == 1
    if isinstance(arg, str):
        try:
            return float(arg) == 1
        except ValueError:
            return False
    return False


def render_message(
    template: str,
    args: Sequence[Any] = (),
    label: str = "",
    value: str = "",
) -> str:
    """Render an error template.

    Args:
        template: The error template.
        args: Bound rule arguments; ``$1`` is ``args[0]``.
        label: The field label.
        value: The value that failed validation.

    Returns:
        The rendered message, or ``"Validation failed."`` when the
        template renders to an empty string.
    """
    if not template:
        return FALLBACK_MESSAGE

    singular = bool(args) and is_singular(args[0])

    def substitute(match: re.Match[str]) -> str:
        index = match.group("index")
        if index is not None:
            position = int(index) - 1
            if 0 <= position < len(args):
                return format_argument(args[position])
            # Unbound positions stay as written
            return match.group(0)
        name = match.group("name")
        if name == "label":
            return label or DEFAULT_LABEL
        if name == "value":
            return value
        return match.group("one") if singular else match.group("other")

    message = _TOKEN_RE.sub(substitute, template)
    return message or FALLBACK_MESSAGE
