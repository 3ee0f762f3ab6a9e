"""Shared fixtures for unit tests."""

import pytest

from subjects import Pair, Tally, Vec


@pytest.fixture
def vec() -> Vec:
    return Vec([1])


@pytest.fixture
def pair() -> Pair:
    return Pair(1, 2)


@pytest.fixture
def tally() -> Tally:
    return Tally(1, 2)
