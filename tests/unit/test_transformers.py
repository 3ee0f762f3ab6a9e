"""Tests for ahead-of-time expansion of ``assert_that`` calls."""

import ast
import textwrap

import pytest

from checkform import CheckFailedError, rewrite_source
from subjects import Pair, Tally, Vec


def run(source: str, **namespace):
    """Rewrite, compile and execute ``source``; return its namespace."""
    source = textwrap.dedent(source)
    code = compile(rewrite_source(source, "sample.py"), "sample.py", "exec")
    namespace.setdefault("Vec", Vec)
    exec(code, namespace)
    return namespace


class TestRewriting:
    def test_call_is_expanded(self) -> None:
        tree = rewrite_source('assert_that(v, "has len >= n + 1")\n')

        assert ast.unparse(tree).splitlines() == [
            "from checkform.dispatch import run_check as _checkform_run_check",
            "_checkform_run_check(v, 'has len >= n + 1', 'v', (n + 1,))",
        ]

    def test_attribute_call_is_expanded(self) -> None:
        tree = rewrite_source('checkform.assert_that(s, "contains 2, 3")\n')

        assert "_checkform_run_check(s, 'contains 2, 3', 's', (2, 3))" in ast.unparse(tree)

    def test_zero_argument_form_has_empty_values(self) -> None:
        tree = rewrite_source('assert_that(v, "is_empty")\n')

        assert "_checkform_run_check(v, 'is_empty', 'v', ())" in ast.unparse(tree)

    def test_multiline_parenthesised_argument(self) -> None:
        tree = rewrite_source('assert_that(v, """contains (1 +\n 2)""")\n')

        assert "_checkform_run_check(v, 'contains (1 +\\n 2)', 'v', (1 + 2,))" in ast.unparse(tree)

    def test_rewritten_expressions_are_independent_copies(self) -> None:
        first = rewrite_source('assert_that(a, "contains x + 1")\n')
        second = rewrite_source('\n\nassert_that(b, "contains x + 1")\n')

        first_value = first.body[1].value.args[3].elts[0]
        second_value = second.body[1].value.args[3].elts[0]
        assert first_value is not second_value
        assert (first_value.lineno, second_value.lineno) == (1, 3)

    def test_non_literal_check_left_alone(self) -> None:
        source = "assert_that(v, check)\nassert_that(v, 'is_empty', extra=1)\n"

        tree = rewrite_source(source)

        assert ast.unparse(tree) == ast.unparse(ast.parse(source))

    def test_import_injected_after_docstring_and_future_imports(self) -> None:
        source = textwrap.dedent(
            '''
            """Module docstring."""
            from __future__ import annotations
            import os
            assert_that(v, "is_empty")
            '''
        )

        body = rewrite_source(source).body

        assert isinstance(body[0], ast.Expr)
        assert isinstance(body[1], ast.ImportFrom) and body[1].module == "__future__"
        assert isinstance(body[2], ast.ImportFrom) and body[2].module == "checkform.dispatch"
        assert isinstance(body[3], ast.Import)

    def test_no_import_without_calls(self) -> None:
        tree = rewrite_source("x = 1\n")

        assert ast.unparse(tree) == "x = 1"

    def test_malformed_check_is_a_syntax_error(self) -> None:
        source = 'x = 1\n\nassert_that(x, "has len")\n'

        with pytest.raises(SyntaxError) as exc_info:
            rewrite_source(source, "sample.py")

        assert exc_info.value.filename == "sample.py"
        assert exc_info.value.lineno == 3
        assert "has len" in exc_info.value.msg


class TestRewrittenExecution:
    def test_failure_message_matches_runtime_path(self) -> None:
        with pytest.raises(CheckFailedError) as exc_info:
            run(
                """
                v = Vec([1])
                assert_that(v, "has len >= 2")
                """
            )

        assert str(exc_info.value) == "Expected `v`=[1] to have len >= 2, but len = 1."

    def test_expressions_see_enclosing_scope(self) -> None:
        with pytest.raises(CheckFailedError) as exc_info:
            run(
                """
                def outer():
                    wanted = 3
                    def inner(s):
                        assert_that(s, "contains wanted, wanted + 1")
                    return inner

                outer()(Pair(1, 2))
                """,
                Pair=Pair,
            )

        assert str(exc_info.value) == "Expected `s`=Pair(1, 2) to contain 3,4."

    def test_calls_inside_class_bodies(self) -> None:
        with pytest.raises(CheckFailedError) as exc_info:
            run(
                """
                class Checks:
                    def check(self):
                        assert_that(Vec([5]), "is_empty")

                Checks().check()
                """
            )

        assert str(exc_info.value) == "Expected `Vec([5])`=[5] to be empty."

    def test_arguments_evaluated_once(self) -> None:
        namespace = run(
            """
            produced = []

            def next_value():
                produced.append(1)
                return 1

            assert_that(t, "holds next_value()")
            """,
            t=Tally(1),
        )

        assert namespace["produced"] == [1]
        assert namespace["t"].calls == {"holds": 1}

    def test_multiline_parenthesised_argument_runs(self) -> None:
        with pytest.raises(CheckFailedError) as exc_info:
            run(
                '''
                assert_that(Vec([1]), """contains (1 +
                    2)""")
                '''
            )

        assert str(exc_info.value) == "Expected `Vec([1])`=[1] to contain 3."
