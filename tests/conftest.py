"""
Shared fixtures

The output sink is process-wide, so every test that inspects directive
output routes it to its own buffer and resets it afterwards.
"""

import io

import pytest

from printexpr.lib.runtime import handle_reset, handle_set


@pytest.fixture
def sink():
    """Capture directive output in a StringIO"""
    stream = io.StringIO()
    handle_set(stream)
    yield stream
    handle_reset()
