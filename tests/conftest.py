"""Pytest configuration and fixtures."""

import numpy as np
import pytest

from blobtrace.diagnostics import set_error_hook


@pytest.fixture(autouse=True)
def default_error_hook():
    """Restore the default error hook after each test."""
    yield
    set_error_hook(None)


@pytest.fixture
def messages():
    """Capture diagnostic messages sent to the error hook."""
    captured = []
    set_error_hook(captured.append)
    return captured


@pytest.fixture
def full_square():
    """5x5 mask, all foreground."""
    return np.ones((5, 5), dtype=np.uint8)


@pytest.fixture
def holed_square():
    """7x7 foreground square with a single background pixel at (3, 3)."""
    mask = np.ones((7, 7), dtype=np.uint8)
    mask[3, 3] = 0
    return mask


@pytest.fixture
def two_squares():
    """Two disjoint 3x3 squares side by side on a 10x12 background."""
    mask = np.zeros((10, 12), dtype=np.uint8)
    mask[2:5, 1:4] = 1
    mask[2:5, 7:10] = 1
    return mask
