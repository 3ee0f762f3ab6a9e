"""The three check forms and their diagnostic messages."""

from __future__ import annotations

import ast
import copy
import logging
import operator
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from types import CodeType
from typing import Any

from checkform.errors import CheckFailedError
from checkform.naming import property_name, verb_name
from checkform.result import CheckResult, FormName

logger = logging.getLogger(__name__)

OPERATORS: dict[str, Callable[[Any, Any], Any]] = {
    "==": operator.eq,
    "!=": operator.ne,
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
}

_MISSING = object()


@dataclass(frozen=True, slots=True)
class Expression:
    """An expression written inside a check string.

    Attributes
    ----------
    source
        Verbatim source text, used for display.
    node
        Parsed expression, copied into rewritten call sites.
    code
        Compiled ``eval`` code object, used on the runtime path.
    """

    source: str
    node: ast.expr = field(compare=False, repr=False)
    code: CodeType = field(compare=False, repr=False)

    def evaluate(self, namespace: Mapping[str, Any]) -> Any:
        # One namespace, so lambdas and comprehensions see the caller's locals
        return eval(self.code, dict(namespace))

    def copy_node(self) -> ast.expr:
        return copy.deepcopy(self.node)


def resolve_method(subject: Any, name: str) -> Any:
    """Look up ``name`` on the subject, falling back to ``__name__``.

    The fallback lets ``has len`` and ``contains`` work on builtin containers
    through ``__len__`` and ``__contains__``.
    """
    member = getattr(subject, name, _MISSING)
    if member is _MISSING:
        member = getattr(subject, f"__{name}__", _MISSING)
    if member is _MISSING:
        raise AttributeError(
            f"{type(subject).__name__!r} object has no method {name!r} or '__{name}__'"
        )
    return member


def _read(member: Any) -> Any:
    # properties are read, methods are called
    if callable(member):
        return member()
    return member


class CheckForm(ABC):
    """Base class for a parsed check.

    Subclasses implement `evaluate()` which returns a CheckResult.
    Calling the form raises CheckFailedError if the result fails.
    """

    __slots__ = ()

    form: FormName
    check: str

    @property
    @abstractmethod
    def expressions(self) -> tuple[Expression, ...]:
        """Expressions whose values must be passed to `evaluate()`, in order."""

    def __call__(self, subject: Any, subject_source: str, values: Sequence[Any] = ()) -> CheckResult:
        """Evaluate the check and raise on failure.

        Raises:
        ------
        CheckFailedError
            If the check fails (passed=False)
        """
        result = self.evaluate(subject, subject_source, values)
        if not result.passed:
            logger.debug("Check %r failed: %s", self.check, result.message)
            raise CheckFailedError(result)
        return result

    @abstractmethod
    def evaluate(self, subject: Any, subject_source: str, values: Sequence[Any]) -> CheckResult:
        """Evaluate the check against the subject.

        Parameters
        ----------
        subject : Any
            The value under test
        subject_source : str
            Source text of the subject expression, for display
        values : Sequence[Any]
            Evaluated values of `expressions`, in the same order

        Returns:
        -------
        CheckResult
            Result of the check, with a message only when it failed
        """

    def _result(self, subject_source: str, message: str | None = None) -> CheckResult:
        return CheckResult(
            check=self.check,
            form=self.form,
            subject_source=subject_source,
            passed=message is None,
            message=message,
        )

    def _unpack(self, values: Sequence[Any]) -> tuple[Any, ...]:
        values = tuple(values)
        if len(values) != len(self.expressions):
            raise TypeError(
                f"Check {self.check!r} takes {len(self.expressions)} value(s), got {len(values)}"
            )
        return values


@dataclass(frozen=True, slots=True)
class ComparisonCheck(CheckForm):
    """``has <accessor> <op> <expected>``"""

    check: str
    accessor: str
    operator: str
    expected: Expression
    form: FormName = field(default="comparison", init=False)

    @property
    def expressions(self) -> tuple[Expression, ...]:
        return (self.expected,)

    def evaluate(self, subject: Any, subject_source: str, values: Sequence[Any]) -> CheckResult:
        (expected,) = self._unpack(values)
        actual = _read(resolve_method(subject, self.accessor))
        if OPERATORS[self.operator](actual, expected):
            return self._result(subject_source)
        return self._result(
            subject_source,
            f"Expected `{subject_source}`={subject!r} to have {self.accessor} {self.operator} "
            f"{self.expected.source}, but {self.accessor} = {actual}.",
        )


@dataclass(frozen=True, slots=True)
class PredicateCheck(CheckForm):
    """``<predicate>`` taking no arguments, usually named ``is_<property>``."""

    check: str
    predicate: str
    form: FormName = field(default="predicate", init=False)

    @property
    def expressions(self) -> tuple[Expression, ...]:
        return ()

    def evaluate(self, subject: Any, subject_source: str, values: Sequence[Any]) -> CheckResult:
        self._unpack(values)
        if _read(resolve_method(subject, self.predicate)):
            return self._result(subject_source)
        return self._result(
            subject_source,
            f"Expected `{subject_source}`={subject!r} to be {property_name(self.predicate)}.",
        )


@dataclass(frozen=True, slots=True)
class ArgsPredicateCheck(CheckForm):
    """``<predicate> <arg1>, <arg2>, ...``, usually named ``<verb>s``."""

    check: str
    predicate: str
    arguments: tuple[Expression, ...]
    form: FormName = field(default="args_predicate", init=False)

    @property
    def expressions(self) -> tuple[Expression, ...]:
        return self.arguments

    def evaluate(self, subject: Any, subject_source: str, values: Sequence[Any]) -> CheckResult:
        args = self._unpack(values)
        if resolve_method(subject, self.predicate)(*args):
            return self._result(subject_source)
        shown = ",".join(str(arg) for arg in args)
        return self._result(
            subject_source,
            f"Expected `{subject_source}`={subject!r} to {verb_name(self.predicate)} {shown}.",
        )
