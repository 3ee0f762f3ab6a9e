"""Tests for locating the subject source of a call."""

import ast

from checkform.source import _find_call

SOURCE = 'x = 1\nwrap(assert_that(a, "is_empty"), other(b))\nassert_that(\n    c,\n    "is_empty",\n)\n'


def call_source(call: ast.Call | None) -> str | None:
    return None if call is None else ast.get_source_segment(SOURCE, call.args[0])


class TestFindCall:
    def test_exact_position_wins(self) -> None:
        tree = ast.parse(SOURCE)

        assert call_source(_find_call(tree, (2, 2, 5, 31), 2)) == "a"

    def test_left_most_call_on_line_without_position(self) -> None:
        tree = ast.parse(SOURCE)

        call = _find_call(tree, (None, None, None, None), 2)

        assert call is not None and call.func.id == "wrap"
        assert call_source(call) == 'assert_that(a, "is_empty")'

    def test_call_starting_on_line_without_position(self) -> None:
        tree = ast.parse(SOURCE)

        assert call_source(_find_call(tree, (None, None, None, None), 3)) == "c"

    def test_partial_position_falls_back_to_line(self) -> None:
        tree = ast.parse(SOURCE)

        assert call_source(_find_call(tree, (3, None, 0, None), 3)) == "c"

    def test_no_call_on_line(self) -> None:
        tree = ast.parse(SOURCE)

        assert _find_call(tree, (None, None, None, None), 1) is None
