"""
Pytest configuration and fixtures.
"""

import shutil
import tempfile
from pathlib import Path

import pytest

from manila_csi.context import CancellableContext


class RecordingContext(CancellableContext):
    """Context whose sleeps return immediately and are recorded."""

    def __init__(self, timeout=None, cancel_after_sleeps=None):
        super().__init__(timeout=timeout)
        self.sleeps = []
        self._cancel_after_sleeps = cancel_after_sleeps

    def sleep(self, seconds):
        self.check()
        self.sleeps.append(seconds)
        if self._cancel_after_sleeps is not None and len(self.sleeps) >= self._cancel_after_sleeps:
            self.cancel()
        self.check()


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    temp_path = tempfile.mkdtemp()
    yield Path(temp_path)
    shutil.rmtree(temp_path)


@pytest.fixture
def ctx():
    """Execution context that does not really sleep."""
    return RecordingContext()


@pytest.fixture
def make_ctx():
    """Factory for non-sleeping contexts (e.g., make_ctx(cancel_after_sleeps=2))."""
    return RecordingContext
