"""Pytest configuration.

Adds the repo root to sys.path so `import sensorctl` works without an
editable install, and provides the shared fixtures.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Dict

import pytest
import requests

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from sensorctl.config import SensorConfig  # noqa: E402

from fakes import (  # noqa: E402
    AMD64_URL,
    HEALTH_URL,
    FakeResponse,
    FakeServiceManager,
    FakeSession,
    build_release_tarball,
    sensor_environ,
)


@pytest.fixture
def environ(tmp_path) -> Dict[str, str]:
    return sensor_environ(tmp_path)


@pytest.fixture
def config(environ) -> SensorConfig:
    return SensorConfig.from_environ(environ)


@pytest.fixture
def manager() -> FakeServiceManager:
    return FakeServiceManager()


@pytest.fixture
def release_session() -> FakeSession:
    """Healthy backend plus an amd64 release."""
    return FakeSession({
        HEALTH_URL: FakeResponse(200),
        AMD64_URL: FakeResponse(200, build_release_tarball()),
    })


@pytest.fixture(autouse=True)
def _no_real_http(monkeypatch):
    def refuse(self, *args, **kwargs):
        raise AssertionError("tests must not open real HTTP connections")

    monkeypatch.setattr(requests.Session, "request", refuse)


@pytest.fixture(autouse=True)
def _restore_root_logging():
    """main() reconfigures the root logger; undo it after each test."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
