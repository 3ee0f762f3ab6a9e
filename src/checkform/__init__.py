"""Checkform - readable single-line assertions for tests."""

from .dispatch import assert_that, run_check
from .errors import CheckFailedError, MalformedCheckError
from .forms import ArgsPredicateCheck, CheckForm, ComparisonCheck, PredicateCheck
from .loader import load_module
from .naming import property_name, verb_name
from .parser import parse_check
from .result import CheckResult
from .transformers import AssertThatTransformer, rewrite_source

__version__ = "0.1.0"

__all__ = [
    # Checking
    "assert_that",
    "run_check",
    "parse_check",
    # Forms and results
    "CheckForm",
    "ComparisonCheck",
    "PredicateCheck",
    "ArgsPredicateCheck",
    "CheckResult",
    # Errors
    "CheckFailedError",
    "MalformedCheckError",
    # Naming conventions
    "property_name",
    "verb_name",
    # Call-site rewriting
    "AssertThatTransformer",
    "rewrite_source",
    "load_module",
]
