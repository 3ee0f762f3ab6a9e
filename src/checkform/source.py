"""Recover the source text of a call site's subject argument."""

from __future__ import annotations

import ast
import itertools
import linecache
import logging
from functools import lru_cache
from types import FrameType

logger = logging.getLogger(__name__)

UNKNOWN_SOURCE = "<subject>"


def subject_source(frame: FrameType) -> str | None:
    """Return the source of the first argument of the call ``frame`` is executing.

    Returns None when the frame's source is not available, e.g. for code run
    from the REPL or from ``exec`` of a string.
    """
    filename = frame.f_code.co_filename
    lines = linecache.getlines(filename, frame.f_globals)
    if not lines:
        return None

    source = "".join(lines)
    tree = _parse(filename, source)
    if tree is None:
        return None

    call = _find_call(tree, _call_position(frame), frame.f_lineno)
    if call is None:
        return None
    return ast.get_source_segment(source, call.args[0])


@lru_cache(maxsize=64)
def _parse(filename: str, source: str) -> ast.Module | None:
    try:
        return ast.parse(source, filename=filename)
    except SyntaxError:
        logger.warning("Could not parse %s to locate check subject", filename)
        return None


def _call_position(frame: FrameType) -> tuple[int | None, int | None, int | None, int | None]:
    positions = frame.f_code.co_positions()
    return next(itertools.islice(positions, frame.f_lasti // 2, None), (None, None, None, None))


def _find_call(
    tree: ast.Module,
    position: tuple[int | None, int | None, int | None, int | None],
    lineno: int | None,
) -> ast.Call | None:
    calls = [node for node in ast.walk(tree) if isinstance(node, ast.Call) and node.args]

    if None not in position:
        for call in calls:
            if (call.lineno, call.end_lineno, call.col_offset, call.end_col_offset) == position:
                return call

    # Without column info, settle for the left-most call on the line.
    on_line = [call for call in calls if call.lineno == lineno]
    if not on_line:
        return None
    return min(on_line, key=lambda call: call.col_offset)
