"""Template variables used to normalize dashboard queries.

Each dashboard declares its own variables (``templating.list``). They are
resolved to a single representative value and applied in declaration order,
followed by a fixed table of Grafana built-in variables.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence

# Value of ``current`` when a dashboard was saved with "All" selected
ALL_SENTINEL = "?"


@dataclass(frozen=True)
class Variable:
    """A named substitution value.

    ``value`` may still carry a layer of ``"..."`` quoting; the normalizer
    decides how to unquote or escape it.
    """

    name: str
    value: str


@dataclass
class Template:
    """A dashboard template variable declaration."""

    name: str
    current_values: List[str] = field(default_factory=list)
    query: str = ""
    all_value: str = ""


GLOBAL_VARIABLES: tuple[Variable, ...] = (
    Variable("__rate_interval", "1m"),
    Variable("__interval_ms", "60000"),
    Variable("__interval", "1m"),
    Variable("interval", "1m"),
    Variable("__range", "1m"),
    Variable("__auto_interval_interval", "1m"),
    Variable("__all", "ALL"),
    # Commonly used as refId for combining series
    Variable("A", "A"),
    Variable("B", "B"),
    Variable("C", "C"),
    Variable("D", "D"),
)


def as_value_list(raw: Any) -> List[str]:
    """Coerce ``current.value`` into a list of strings.

    Grafana stores a single selection as a scalar and a multi-selection as a
    list; anything that is not a string counts as empty.
    """
    if raw is None:
        return []
    if isinstance(raw, str):
        return [raw]
    if isinstance(raw, list):
        return [item if isinstance(item, str) else "" for item in raw]
    return []


def first_non_empty(*values: Optional[str]) -> str:
    for value in values:
        if value:
            return value
    return ""


def resolve_template(template: Template) -> Variable:
    """Pick the representative value of one template.

    Only the first current value is consulted, falling back to the template
    query. The "All" sentinel is replaced by the declared all-value.
    """
    first = template.current_values[0] if template.current_values else ""
    value = first_non_empty(first, template.query)
    if value == ALL_SENTINEL:
        value = template.all_value
    return Variable(name=template.name, value=value)


def build_variable_table(templates: Sequence[Template]) -> List[Variable]:
    """Resolve a dashboard's templates into variables, keeping declaration order."""
    return [resolve_template(template) for template in templates]
