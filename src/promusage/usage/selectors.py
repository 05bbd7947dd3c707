"""
Extract vector selectors from a PromQL expression.

The expression is parsed with a lark Earley grammar; every vector selector
in the tree becomes one selector group, a list of label matchers. A metric
name written in front of the braces (``foo{job="api"}``) is reported as a
``__name__`` matcher, the same way Prometheus represents it. A metric name
given both before the braces and as a ``__name__`` matcher is rejected.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Iterable, List, Sequence, Tuple

from lark import Lark, Token, Tree
from lark.exceptions import LarkError, UnexpectedCharacters, UnexpectedEOF, UnexpectedToken

from promusage.core.errors import QueryParseError
from promusage.usage.grammar import PROMQL_GRAMMAR

METRIC_NAME_LABEL = "__name__"

# Bare words the grammar may read as selectors although PromQL treats them as numbers
_NUMBER_WORDS = {"inf", "nan"}


@dataclass(frozen=True)
class Matcher:
    """A single label matcher, e.g. ``job=~"api.*"``."""

    name: str
    op: str
    value: str


SelectorGroup = List[Matcher]


@lru_cache(maxsize=1)
def get_parser() -> Lark:
    """Build the PromQL parser once per process."""
    return Lark(PROMQL_GRAMMAR, start="start", parser="earley")


def _unquote_string(token: str) -> str:
    if token.startswith("`"):
        return token[1:-1]
    if token.startswith("'"):
        return token[1:-1].replace("\\'", "'")
    try:
        return json.loads(token)
    except ValueError:
        return token[1:-1]


def _expected(names: Iterable[Any]) -> str:
    return ", ".join(sorted({str(name) for name in names or ()}))


def _describe(exc: LarkError) -> str:
    """Turn a lark error into one line naming what the parser wanted next."""
    if isinstance(exc, UnexpectedEOF):
        message = "Unexpected end of input"
        expected = _expected(exc.expected)
    elif isinstance(exc, UnexpectedCharacters):
        message = f"Unexpected character {exc.char!r} at line {exc.line}, column {exc.column}"
        expected = _expected(exc.allowed)
    elif isinstance(exc, UnexpectedToken):
        message = f"Unexpected token {str(exc.token)!r} at line {exc.line}, column {exc.column}"
        expected = _expected(exc.accepts or exc.expected)
    else:
        lines = [line for line in str(exc).strip().splitlines() if line.strip()]
        return lines[0] if lines else type(exc).__name__

    if expected:
        return f"{message}, expected one of: {expected}"
    return message


def _selector_group(selector: Tree, expression: str) -> SelectorGroup:
    metric_name = None
    matchers: SelectorGroup = []
    for child in selector.children:
        if isinstance(child, Token) and child.type == "METRIC_NAME":
            metric_name = str(child)
        elif isinstance(child, Tree) and child.data == "label_matchers":
            for matcher in child.children:
                if not isinstance(matcher, Tree):
                    continue
                name, op, value = matcher.children
                matchers.append(Matcher(str(name), str(op), _unquote_string(str(value))))

    if metric_name is None:
        return matchers

    for matcher in matchers:
        if matcher.name == METRIC_NAME_LABEL:
            raise QueryParseError(
                f"metric name must not be set twice: {metric_name!r} or {matcher.value!r}",
                details={"expression": expression},
            )
    return [Matcher(METRIC_NAME_LABEL, "=", metric_name), *matchers]


def _is_number_word(selector: Tree) -> bool:
    children = selector.children
    return (
        len(children) == 1
        and isinstance(children[0], Token)
        and children[0].lower() in _NUMBER_WORDS
    )


def extract_selectors(expression: str) -> List[SelectorGroup]:
    """
    Parse ``expression`` and return its selector groups in source order.

    Raises:
        QueryParseError: If the expression is not valid PromQL
    """
    try:
        tree = get_parser().parse(expression)
    except LarkError as exc:
        raise QueryParseError(_describe(exc), details={"expression": expression}) from exc

    if not isinstance(tree, Tree):
        return []

    return [
        _selector_group(subtree, expression)
        for subtree in tree.iter_subtrees_topdown()
        if subtree.data == "vector_selector" and not _is_number_word(subtree)
    ]


def metric_and_labels(group: Sequence[Matcher]) -> Tuple[str, List[str]]:
    """Split a selector group into its metric name and the other label names.

    A group without a ``__name__`` matcher yields an empty metric name.
    """
    name = ""
    labels: List[str] = []
    for matcher in group:
        if matcher.name == METRIC_NAME_LABEL:
            name = matcher.value
        else:
            labels.append(matcher.name)
    return name, labels
