from __future__ import annotations

import sys
from pathlib import Path

import pytest


def pytest_configure() -> None:
    """
    Ensure the local package is importable regardless of pytest rootdir selection.

    - `import brainstorm...` expects `/apps/backend` on sys.path
    """
    backend_root = Path(__file__).resolve().parent
    if str(backend_root) not in sys.path:
        sys.path.insert(0, str(backend_root))


@pytest.fixture(autouse=True)
def _fresh_sessions():
    from brainstorm.storage.memory import clear_sessions

    clear_sessions()
    yield
    clear_sessions()
