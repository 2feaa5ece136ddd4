import errno

import pytest
import requests

from fakes import AMD64_URL, FakeResponse, FakeSession, FailingSession
from sensorctl.errors import DownloadFailed, UnsupportedPlatform
from sensorctl.modules.release import download_release, release_url, resolve_arch_tag


@pytest.mark.parametrize("machine, tag", [("x86_64", "amd64"), ("aarch64", "arm64")])
def test_resolve_arch_tag(machine, tag):
    assert resolve_arch_tag(machine) == tag


@pytest.mark.parametrize("machine", ["armv7l", "i686", "riscv64", ""])
def test_resolve_arch_tag_unsupported(machine):
    with pytest.raises(UnsupportedPlatform) as excinfo:
        resolve_arch_tag(machine)
    assert excinfo.value.machine == machine


def test_resolve_arch_tag_queries_platform(monkeypatch):
    monkeypatch.setattr("platform.machine", lambda: "aarch64")
    assert resolve_arch_tag() == "arm64"


def test_release_url():
    assert release_url("https://example.com/sensor", "arm64") == "https://example.com/sensor-arm64"


def test_download_writes_tarball(config):
    session = FakeSession({AMD64_URL: FakeResponse(200, b"tarball-bytes")})

    path = download_release(config, "x86_64", session)

    assert path == config.tarball_path
    assert path.read_bytes() == b"tarball-bytes"
    assert session.calls[0]["stream"] is True
    assert session.calls[0]["allow_redirects"] is True


def test_unsupported_platform_makes_no_request(config):
    with pytest.raises(UnsupportedPlatform):
        download_release(config, "mips", FailingSession())
    assert not config.tarball_path.exists()


def test_non_200_removes_partial_file(config):
    config.tarball_path.write_bytes(b"stale")
    session = FakeSession({AMD64_URL: FakeResponse(404)})

    with pytest.raises(DownloadFailed) as excinfo:
        download_release(config, "x86_64", session)

    assert excinfo.value.status == 404
    assert not config.tarball_path.exists()


def test_transport_error_is_download_failure(config):
    session = FakeSession({AMD64_URL: requests.ConnectionError("reset")})

    with pytest.raises(DownloadFailed) as excinfo:
        download_release(config, "x86_64", session)

    assert excinfo.value.status is None
    assert isinstance(excinfo.value.__cause__, requests.ConnectionError)
    assert not config.tarball_path.exists()


class DiskFullResponse(FakeResponse):
    def iter_content(self, chunk_size=1):
        yield b"partial"
        raise OSError(errno.ENOSPC, "No space left on device")


def test_write_error_removes_partial_file(config):
    session = FakeSession({AMD64_URL: DiskFullResponse(200)})

    with pytest.raises(DownloadFailed) as excinfo:
        download_release(config, "x86_64", session)

    assert isinstance(excinfo.value.__cause__, OSError)
    assert not config.tarball_path.exists()


def test_interrupted_download_removes_partial_file(config):
    class InterruptedResponse(FakeResponse):
        def iter_content(self, chunk_size=1):
            yield b"partial"
            raise KeyboardInterrupt

    session = FakeSession({AMD64_URL: InterruptedResponse(200)})

    with pytest.raises(KeyboardInterrupt):
        download_release(config, "x86_64", session)

    assert not config.tarball_path.exists()
