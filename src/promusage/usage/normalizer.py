"""
Rewrite templated dashboard queries into plain PromQL.

Grafana queries reference template variables in several syntaxes
(``$var``, ``${var}``, ``${var:value}``, ``[[var]]``) and use vendor
functions such as ``xrate``. Before a query can be handed to a PromQL
parser every reference has to be replaced by a concrete value.

The order of the steps matters:

1. Dashboard variables, in declaration order. ``by ($var)`` clauses are
   rewritten first with the unquoted value, then every remaining reference
   is replaced either with the bare number or with the escaped value.
2. Built-in variables (``$__rate_interval`` and friends), verbatim.
3. ``xrate(``/``xincrease(`` aliases.

Replacement is plain text replacement: a variable whose name is a prefix of
another reference (``$ns`` inside ``$ns_extra``) is replaced as well.
"""

from __future__ import annotations

import json
import re
from typing import Iterable, List, Sequence

from promusage.usage.variables import GLOBAL_VARIABLES, Variable

# A double quote not already preceded by a backslash
_UNESCAPED_QUOTE = re.compile(r'([^\\])"')

FUNCTION_ALIASES = (
    ("xrate(", "rate("),
    ("xincrease(", "increase("),
)


def reference_forms(name: str) -> List[str]:
    """All the syntaxes a query can use to reference ``name``."""
    return [
        f"${name}",
        f"${{{name}}}",
        f"${{{name}:value}}",
        f"[[{name}]]",
    ]


def unquote(value: str) -> str:
    """Strip one layer of string-literal quoting, if the value is a literal.

    Values that are not a valid quoted literal are returned verbatim.
    """
    if len(value) >= 2 and value[0] == value[-1] == '"':
        try:
            decoded = json.loads(value)
        except ValueError:
            return value
        return decoded if isinstance(decoded, str) else value
    if len(value) >= 2 and value[0] == value[-1] == "`" and "`" not in value[1:-1]:
        return value[1:-1]
    return value


def escape_quotes(value: str) -> str:
    """Prefix every unescaped double quote with a backslash.

    A quote is unescaped when the character before it is not a backslash;
    a quote in first position has no preceding character and is kept as is.
    """
    return _UNESCAPED_QUOTE.sub(r'\1\\"', value)


def is_numeric(value: str) -> bool:
    """True when ``value`` is a base-10 floating point literal."""
    if not value or value != value.strip() or "_" in value:
        return False
    try:
        float(value)
    except ValueError:
        return False
    return True


def _replace_all(text: str, patterns: Iterable[str], replacement: str) -> str:
    for pattern in patterns:
        text = text.replace(pattern, replacement)
    return text


def substitute_variable(expression: str, variable: Variable) -> str:
    """Apply a single dashboard variable to ``expression``."""
    forms = reference_forms(variable.name)
    unquoted = unquote(variable.value)

    # by ($var) must stay a label list, so it never receives the quoted value
    for form in forms:
        expression = expression.replace(f"by ({form})", f"by ({unquoted})")

    if is_numeric(unquoted):
        return _replace_all(expression, forms, unquoted)
    return _replace_all(expression, forms, escape_quotes(variable.value))


def substitute_globals(
    expression: str, global_variables: Sequence[Variable] = GLOBAL_VARIABLES
) -> str:
    """Apply the built-in variables. Their values are safe scalar tokens."""
    for variable in global_variables:
        expression = expression.replace(f"${variable.name}", variable.value)
        expression = expression.replace(f"${{{variable.name}}}", variable.value)
    return expression


def replace_function_aliases(expression: str) -> str:
    for alias, function in FUNCTION_ALIASES:
        expression = expression.replace(alias, function)
    return expression


def normalize_expression(
    expression: str,
    variables: Sequence[Variable] = (),
    global_variables: Sequence[Variable] = GLOBAL_VARIABLES,
) -> str:
    """
    Normalize a templated query into plain PromQL.

    Args:
        expression: Raw query text as stored in the dashboard or monitor
        variables: Document variables in declaration order
        global_variables: Built-in variables applied after document variables

    Returns:
        The normalized query text
    """
    normalized = expression
    for variable in variables:
        normalized = substitute_variable(normalized, variable)
    normalized = substitute_globals(normalized, global_variables)
    return replace_function_aliases(normalized)
