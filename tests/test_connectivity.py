import pytest
import requests

from fakes import HEALTH_URL, FakeResponse, FakeSession
from sensorctl.errors import BackendUnreachable
from sensorctl.modules.connectivity import check_backend, health_check_url


@pytest.mark.parametrize("domain, url", [
    ("backend.example.com", "https://backend.example.com/health/live"),
    ("https://backend.example.com/", "https://backend.example.com/health/live"),
    ("http://localhost:8080", "http://localhost:8080/health/live"),
])
def test_health_check_url(domain, url):
    assert health_check_url(domain) == url


def test_healthy_backend_sends_api_key(config):
    session = FakeSession({HEALTH_URL: FakeResponse(200)})

    check_backend(config, session)

    assert session.urls == [HEALTH_URL]
    assert session.calls[0]["headers"] == {"apikey": "secret-key"}


@pytest.mark.parametrize("status", [401, 500, 503])
def test_non_200_is_unreachable(config, status):
    session = FakeSession({HEALTH_URL: FakeResponse(status)})

    with pytest.raises(BackendUnreachable) as excinfo:
        check_backend(config, session)

    assert excinfo.value.status == status
    assert len(session.calls) == 1


def test_transport_error_is_unreachable(config):
    session = FakeSession({HEALTH_URL: requests.Timeout("slow")})

    with pytest.raises(BackendUnreachable) as excinfo:
        check_backend(config, session)

    assert excinfo.value.status is None
    assert excinfo.value.exit_code == 4
