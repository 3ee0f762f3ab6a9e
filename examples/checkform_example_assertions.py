"""Demonstrates the three check forms of assert_that.

Run directly to see each failure message, or load it through
``checkform.load_module`` to have the calls expanded ahead of time.
"""

from checkform import CheckFailedError, assert_that


class Stack:
    def __init__(self, *items):
        self.items = list(items)

    def is_empty(self):
        return not self.items

    def __repr__(self):
        return f"Stack({', '.join(map(repr, self.items))})"


class Pair:
    def __init__(self, first, second):
        self.first = first
        self.second = second

    def contains(self, i, j):
        return {i, j} == {self.first, self.second}

    def __repr__(self):
        return f"Pair({self.first}, {self.second})"


# Comparison on a derived property - `len` resolves to list.__len__
def example_comparison_passes():
    v = [1]
    assert_that(v, "has len <= 2")


def example_comparison_fails():
    """Fails with: Expected `v`=[1] to have len >= 2, but len = 1."""
    v = [1]
    assert_that(v, "has len >= 2")


# Zero-argument predicate - `is_` is dropped from the message
def example_predicate_fails():
    """Fails with: Expected `stack`=Stack(1) to be empty."""
    stack = Stack(1)
    assert_that(stack, "is_empty")


# Predicate with arguments - a trailing `s` is dropped from the message
def example_predicate_with_arguments_fails():
    """Fails with: Expected `s`=Pair(1, 2) to contain 2,3."""
    s = Pair(1, 2)
    assert_that(s, "contains 2, 3")


if __name__ == "__main__":
    for name, example in list(globals().items()):
        if name.startswith("example_"):
            try:
                example()
            except CheckFailedError as e:
                print(f"{name}: {e}")
            else:
                print(f"{name}: passed")
