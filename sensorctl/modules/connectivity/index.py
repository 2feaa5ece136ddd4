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

import requests

from ...config import SensorConfig
from ...errors import BackendUnreachable
from ...utils.index import log_message

HEALTH_PATH = "/health/live"


def health_check_url(domain: str) -> str:
    """Build the liveness URL for a backend domain, defaulting to https."""
    base = domain.strip().rstrip("/")
    if "://" not in base:
        base = f"https://{base}"
    return f"{base}{HEALTH_PATH}"


def check_backend(config: SensorConfig, session=None) -> None:
    """
    Probe the backend once before anything is downloaded.

    Args:
        config: Installer configuration (domain and API key)
        session: Optional requests.Session to reuse

    Raises:
        BackendUnreachable: On any status other than 200 or a transport error
    """
    url = health_check_url(config.domain)
    log_message(f"Checking connectivity to {url}")

    http = session if session is not None else requests.Session()
    try:
        response = http.get(url, headers={"apikey": config.api_key})
    except requests.RequestException as e:
        log_message(f"Health check request failed: {e}", "DEBUG")
        raise BackendUnreachable(url) from e

    if response.status_code != 200:
        raise BackendUnreachable(url, response.status_code)

    log_message("Backend is reachable", "SUCCESS")
