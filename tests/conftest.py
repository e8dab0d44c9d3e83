import os
import threading

# let goclone.git_utils import GitPython on machines without a git binary
os.environ.setdefault("GIT_PYTHON_REFRESH", "quiet")

import pytest
import structlog


@pytest.fixture(autouse=True)
def reset_structlog():
    yield
    structlog.reset_defaults()


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    """Run the test from an empty working directory."""
    work = tmp_path / "work"
    work.mkdir()
    monkeypatch.chdir(work)
    return work


@pytest.fixture
def blocked_clone():
    release = threading.Event()
    yield release
    release.set()
