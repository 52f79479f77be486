"""Default error templates for the built-in rules.

Used when a rule's template stage is called without a template::

    min_length(3)()          # "$label must be at least $1 character{|s}."
    min_length(3)("Too short")

See ``wren.validation.templating`` for the template syntax.
"""

MESSAGES: dict[str, str] = {
    "required": "$label is required.",
    "matches": "$label must match the pattern $1.",
    "min_length": "$label must be at least $1 character{|s}.",
    "max_length": "$label must be at most $1 character{|s}.",
    "length": "$label must be $1 character{|s}.",
    "equals": "$label must be equal to $1.",
    "starts": "$label must start with $1.",
    "ends": "$label must end with $1.",
    "contains": "$label must contain $1.",
    "number": "$label must be a number.",
    "in_range": "$label must be a number from $1 to $2.",
    "between": "$label must be a number between $1 and $2.",
}
