"""Entry points for evaluating a check against a subject."""

from __future__ import annotations

import inspect
import logging
from collections.abc import Sequence
from typing import Any

from checkform.parser import parse_check
from checkform.source import UNKNOWN_SOURCE, subject_source

logger = logging.getLogger(__name__)


def assert_that(subject: Any, check: str) -> None:
    """Assert that ``subject`` satisfies ``check``.

    Three shapes of check are recognised::

        assert_that(v, "has len >= 2")    # compare a derived property
        assert_that(v, "is_empty")        # zero-argument predicate
        assert_that(s, "contains 2, 3")   # predicate with arguments

    Expressions inside the check are evaluated once each, in the caller's
    scope. On failure a CheckFailedError is raised whose message names the
    subject's source text and repr, e.g.
    ``Expected `v`=[1] to have len >= 2, but len = 1.``

    Raises:
    ------
    MalformedCheckError
        If ``check`` matches none of the shapes. Nothing on the subject is
        called in that case.
    CheckFailedError
        If the check does not hold
    """
    form = parse_check(check)

    frame = inspect.currentframe()
    caller = frame.f_back if frame is not None else None
    try:
        if caller is None:
            logger.warning("No caller frame found for check %r", check)
            source = None
            values = []
        else:
            source = subject_source(caller)
            namespace = {**caller.f_globals, **caller.f_locals}
            values = [expr.evaluate(namespace) for expr in form.expressions]
    finally:
        del frame, caller

    if source is None:
        logger.warning("Source of the subject of check %r is unavailable", check)
        source = UNKNOWN_SOURCE

    form(subject, source, values)


def run_check(subject: Any, check: str, subject_source: str, values: Sequence[Any] = ()) -> None:
    """Evaluate an already expanded ``assert_that`` call.

    Modules loaded through ``checkform.loader`` have their ``assert_that``
    calls rewritten to this function, with the subject source and the values
    of the check's expressions computed at the call site.
    """
    parse_check(check)(subject, subject_source, values)
