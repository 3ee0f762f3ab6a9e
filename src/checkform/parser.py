"""Parse check strings into check forms.

The shape of the check string alone selects the form::

    "has len >= 2"      -> ComparisonCheck
    "is_empty"          -> PredicateCheck
    "contains 2, 3"     -> ArgsPredicateCheck

Nothing about the subject is inspected here, so a malformed check is reported
before any method on the subject is looked up.
"""

from __future__ import annotations

import ast
import io
import keyword
import logging
import re
import tokenize
from functools import lru_cache

from checkform.errors import MalformedCheckError
from checkform.forms import (
    ArgsPredicateCheck,
    CheckForm,
    ComparisonCheck,
    Expression,
    PredicateCheck,
)
from checkform.naming import HAS_MARKER

logger = logging.getLogger(__name__)

_HEAD = re.compile(r"\s*([^\W\d]\w*)(.*)\Z", re.DOTALL)

_AST_OPERATORS: dict[type[ast.cmpop], str] = {
    ast.Eq: "==",
    ast.NotEq: "!=",
    ast.Lt: "<",
    ast.LtE: "<=",
    ast.Gt: ">",
    ast.GtE: ">=",
}

_OPENERS = frozenset("([{")
_CLOSERS = frozenset(")]}")

# Wrapping the argument list in a call lets Python's own parser split it.
_CALL_WRAPPER = "_"


@lru_cache(maxsize=512)
def parse_check(text: str) -> CheckForm:
    """Parse a check string.

    Raises:
    ------
    MalformedCheckError
        If the text matches none of the three check forms
    """
    match = _HEAD.match(text)
    if match is None:
        raise MalformedCheckError(text, "expected a method name or 'has'")
    head, rest = match.group(1), match.group(2).strip()

    if head == HAS_MARKER:
        form = _parse_comparison(text, rest)
    elif keyword.iskeyword(head):
        raise MalformedCheckError(text, f"{head!r} is a Python keyword, not a method name")
    elif not rest:
        form = PredicateCheck(check=text, predicate=head)
    else:
        form = ArgsPredicateCheck(check=text, predicate=head, arguments=_parse_arguments(text, rest))

    logger.debug("Parsed check %r as %s", text, type(form).__name__)
    return form


def _parse_comparison(text: str, rest: str) -> ComparisonCheck:
    reason = f"'{HAS_MARKER}' must be followed by '<accessor> <op> <expected>'"
    try:
        tree = ast.parse(rest, mode="eval")
    except SyntaxError as e:
        raise MalformedCheckError(text, reason) from e

    node = tree.body
    if not isinstance(node, ast.Compare) or not isinstance(node.left, ast.Name):
        raise MalformedCheckError(text, reason)
    if len(node.ops) != 1:
        raise MalformedCheckError(text, "chained comparisons are not supported")
    op = _AST_OPERATORS.get(type(node.ops[0]))
    if op is None:
        raise MalformedCheckError(
            text, f"operator must be one of {', '.join(_AST_OPERATORS.values())}"
        )

    return ComparisonCheck(
        check=text,
        accessor=node.left.id,
        operator=op,
        expected=_expression(rest, node.comparators[0], _text_after_operator(rest, op)),
    )


def _text_after_operator(rest: str, op: str) -> str | None:
    """Return everything after the top-level ``op`` token, parentheses included."""
    lines = rest.splitlines(keepends=True)
    depth = 0
    for token in tokenize.generate_tokens(io.StringIO(rest).readline):
        if token.type != tokenize.OP:
            continue
        if token.string in _OPENERS:
            depth += 1
        elif token.string in _CLOSERS:
            depth -= 1
        elif depth == 0 and token.string == op:
            row, col = token.end
            offset = sum(len(line) for line in lines[: row - 1]) + col
            return rest[offset:].strip()
    return None


def _parse_arguments(text: str, rest: str) -> tuple[Expression, ...]:
    if rest == "()":
        raise MalformedCheckError(text, "write a zero-argument predicate without parentheses")

    wrapped = f"{_CALL_WRAPPER}({rest})"
    try:
        tree = ast.parse(wrapped, mode="eval")
    except SyntaxError as e:
        raise MalformedCheckError(text, "arguments must be comma-separated expressions") from e

    call = tree.body
    if not (
        isinstance(call, ast.Call)
        and isinstance(call.func, ast.Name)
        and call.func.id == _CALL_WRAPPER
    ):
        raise MalformedCheckError(text, "arguments must be comma-separated expressions")
    if call.keywords:
        raise MalformedCheckError(text, "keyword arguments are not supported")
    if any(isinstance(arg, ast.Starred) for arg in call.args):
        raise MalformedCheckError(text, "argument unpacking is not supported")

    return tuple(_expression(wrapped, arg) for arg in call.args)


def _expression(source: str, node: ast.expr, text: str | None = None) -> Expression:
    segment = text or ast.get_source_segment(source, node) or ast.unparse(node)
    return Expression(
        source=segment,
        node=node,
        code=compile(ast.Expression(body=node), "<check>", "eval"),
    )
