"""
Sensor Install Management System
Copyright (C) 2024 HOMESERVER LLC

This program is free software: you can redistribute it and/or modify
it under the terms of the GNU General Public License as published by
the Free Software Foundation, either version 3 of the License, or
(at your option) any later version.

This program is distributed in the hope that it will be useful,
but WITHOUT ANY WARRANTY; without even the implied warranty of
MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
GNU General Public License for more details.

You should have received a copy of the GNU General Public License
along with this program.  If not, see <https://www.gnu.org/licenses/>.
"""

import platform
from pathlib import Path
from typing import Optional

import requests

from ...config import SensorConfig
from ...errors import DownloadFailed, UnsupportedPlatform
from ...utils.index import log_message

# uname -m -> release artifact suffix
ARCH_TAGS = {
    "x86_64": "amd64",
    "aarch64": "arm64",
}

CHUNK_SIZE = 1024 * 1024


def resolve_arch_tag(machine: Optional[str] = None) -> str:
    """
    Map a machine architecture to its release tag.

    Args:
        machine: Architecture as reported by uname -m; queried when None

    Returns:
        str: The release tag (amd64 or arm64)

    Raises:
        UnsupportedPlatform: For any other architecture
    """
    if machine is None:
        machine = platform.machine()
    try:
        return ARCH_TAGS[machine]
    except KeyError:
        raise UnsupportedPlatform(machine) from None


def release_url(prefix: str, arch_tag: str) -> str:
    return f"{prefix}-{arch_tag}"


def download_release(config: SensorConfig, machine: Optional[str] = None, session=None) -> Path:
    """
    Download the release tarball for this host to config.tarball_path.

    The architecture is resolved before any request is made. A failed
    download removes whatever was written.

    Returns:
        Path: Location of the downloaded tarball

    Raises:
        UnsupportedPlatform: Host architecture has no release
        DownloadFailed: Non-200 response, transport error or failed write
    """
    log_message("Detecting system architecture")
    arch_tag = resolve_arch_tag(machine)
    url = release_url(config.release_url_prefix, arch_tag)
    destination = config.tarball_path
    log_message(f"Downloading release from: {url}")

    http = session if session is not None else requests.Session()
    try:
        with http.get(url, stream=True, allow_redirects=True) as response:
            if response.status_code != 200:
                raise DownloadFailed(url, response.status_code)
            with open(destination, "wb") as f:
                for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                    if chunk:
                        f.write(chunk)
    except DownloadFailed:
        destination.unlink(missing_ok=True)
        raise
    except (requests.RequestException, OSError) as e:
        destination.unlink(missing_ok=True)
        raise DownloadFailed(url) from e
    except BaseException:
        destination.unlink(missing_ok=True)
        raise

    log_message("Successfully downloaded release package", "SUCCESS")
    return destination
