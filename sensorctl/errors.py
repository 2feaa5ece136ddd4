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
Installer error taxonomy.

Every failure raised by a sensorctl module is a SensorInstallError subclass.
All of them are fatal: the CLI entry point logs the message and exits with the
class' exit_code. Nothing is retried or rolled back.
"""

from typing import Optional


class SensorInstallError(Exception):
    """Base class for all installer failures."""
    exit_code = 1


class InvocationError(SensorInstallError):
    """Bad command line or missing root privileges."""
    exit_code = 1


class MissingConfiguration(SensorInstallError):
    exit_code = 3

    def __init__(self, variable: str):
        self.variable = variable
        super().__init__(f"Environment variable {variable} must be set")


class BackendUnreachable(SensorInstallError):
    exit_code = 4

    def __init__(self, url: str, status: Optional[int] = None):
        self.url = url
        self.status = status
        if status is None:
            message = f"Backend health check failed: could not reach {url}"
        else:
            message = f"Backend health check failed: {url} returned HTTP {status}"
        super().__init__(message)


class UnsupportedPlatform(SensorInstallError):
    exit_code = 5

    def __init__(self, machine: str):
        self.machine = machine
        super().__init__(f"Unsupported architecture: {machine}")


class DownloadFailed(SensorInstallError):
    exit_code = 6

    def __init__(self, url: str, status: Optional[int] = None):
        self.url = url
        self.status = status
        detail = f"HTTP {status}" if status is not None else "transport error"
        super().__init__(f"Failed to download release package from {url} ({detail})")


class ArtifactMissing(SensorInstallError):
    exit_code = 7

    def __init__(self, path):
        self.path = path
        super().__init__(f"Tarball {path} not found")


class ExecutableMissing(SensorInstallError):
    exit_code = 8

    def __init__(self, path):
        self.path = path
        super().__init__(f"Executable binary {path} not found")


class ConfigNotFound(SensorInstallError):
    exit_code = 9

    def __init__(self, path):
        self.path = path
        super().__init__(f"Configuration file '{path}' not found")


class UnresolvedPlaceholder(SensorInstallError):
    exit_code = 10

    def __init__(self, variable: str, placeholder: str, path=None):
        self.variable = variable
        self.placeholder = placeholder
        self.path = path
        where = f" in '{path}'" if path is not None else ""
        super().__init__(f"Environment variable '{variable}' not set (needed by {placeholder}{where})")


class ServiceStartFailed(SensorInstallError):
    exit_code = 11

    def __init__(self, service: str, detail: str = ""):
        self.service = service
        self.detail = detail
        message = f"Service {service} failed to start"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class ServiceManagerError(SensorInstallError):
    """A systemctl verb other than start returned non-zero."""
    exit_code = 12

    def __init__(self, command, stderr: str = ""):
        self.command = list(command)
        self.stderr = stderr
        message = f"Command failed: {' '.join(self.command)}"
        if stderr:
            message = f"{message}: {stderr.strip()}"
        super().__init__(message)
