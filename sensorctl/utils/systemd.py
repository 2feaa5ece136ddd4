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

"""
Service manager interface and its systemd adapter.

The lifecycle controller only talks to a ServiceManager; the systemctl
adapter below is the production implementation and tests substitute a
recording fake.
"""

import subprocess
from abc import ABC, abstractmethod
from typing import List

from ..errors import ServiceManagerError
from .index import log_message

JOURNAL_LINES = 50


class ServiceManager(ABC):
    """The init-system operations the installer needs."""

    @abstractmethod
    def reload(self) -> None:
        """Reload unit files."""

    @abstractmethod
    def enable(self, service: str) -> None:
        ...

    @abstractmethod
    def disable(self, service: str) -> None:
        ...

    @abstractmethod
    def stop(self, service: str) -> None:
        ...

    @abstractmethod
    def start(self, service: str) -> bool:
        """Start the service. Returns False if the init system rejected it."""

    @abstractmethod
    def is_active(self, service: str) -> bool:
        ...

    @abstractmethod
    def is_enabled(self, service: str) -> bool:
        ...

    @abstractmethod
    def recent_logs(self, service: str, lines: int = JOURNAL_LINES) -> str:
        """Return the last `lines` journal lines of the service."""


class SystemctlServiceManager(ServiceManager):
    """ServiceManager backed by systemctl and journalctl."""

    def _run(self, command: List[str]) -> subprocess.CompletedProcess:
        log_message(f"Running: {' '.join(command)}", "DEBUG")
        return subprocess.run(command, capture_output=True, text=True)

    def _systemctl(self, *args: str) -> None:
        command = ["systemctl", *args]
        try:
            result = self._run(command)
        except OSError as e:
            raise ServiceManagerError(command, str(e)) from e
        if result.returncode != 0:
            raise ServiceManagerError(command, result.stderr)

    def _query(self, verb: str, service: str) -> bool:
        try:
            result = self._run(["systemctl", verb, "--quiet", service])
        except OSError as e:
            log_message(f"systemctl {verb} {service} error: {e}", "WARNING")
            return False
        return result.returncode == 0

    def reload(self) -> None:
        self._systemctl("daemon-reload")

    def enable(self, service: str) -> None:
        self._systemctl("enable", service)

    def disable(self, service: str) -> None:
        self._systemctl("disable", service)

    def stop(self, service: str) -> None:
        self._systemctl("stop", service)

    def start(self, service: str) -> bool:
        try:
            result = self._run(["systemctl", "start", service])
        except OSError as e:
            log_message(f"systemctl start {service} error: {e}", "ERROR")
            return False
        if result.returncode != 0:
            log_message(f"systemctl start {service} failed: {result.stderr.strip()}", "ERROR")
            return False
        return True

    def is_active(self, service: str) -> bool:
        return self._query("is-active", service)

    def is_enabled(self, service: str) -> bool:
        return self._query("is-enabled", service)

    def recent_logs(self, service: str, lines: int = JOURNAL_LINES) -> str:
        try:
            result = self._run(["journalctl", "-u", service, "--no-pager", "-n", str(lines)])
        except OSError as e:
            return f"journalctl unavailable: {e}"
        return result.stdout or result.stderr
