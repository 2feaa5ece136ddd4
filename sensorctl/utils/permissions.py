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
Permission Management Utilities

Applies file modes to the artifacts the installer writes: the sensor
binary (executable bits added) and the secret-bearing env and override
files (owner read/write only). Failures raise OSError; a file the
installer cannot protect is fatal.
"""

import os
import stat
from dataclasses import dataclass
from typing import List, Union

from .index import log_message

OWNER_READ_WRITE = 0o600
EXECUTABLE_BITS = stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH


@dataclass
class PermissionTarget:
    """A path and the mode it should end up with."""
    path: Union[str, os.PathLike]
    mode: int
    additive: bool = False  # OR the mode into the current one instead of replacing it


class PermissionManager:
    """Applies PermissionTargets with consistent logging."""

    def __init__(self, component: str = "sensorctl"):
        self.component = component

    def set_permissions(self, targets: List[PermissionTarget]) -> None:
        for target in targets:
            self._set_single_permission(target)

    def _set_single_permission(self, target: PermissionTarget) -> None:
        path = os.fspath(target.path)
        mode = target.mode
        if target.additive:
            mode = stat.S_IMODE(os.stat(path).st_mode) | mode
        os.chmod(path, mode)
        log_message(f"[{self.component}] Set mode {oct(mode)} on {path}", "DEBUG")


def make_executable(path) -> None:
    """Add the executable bits to path (chmod +x)."""
    PermissionManager("package").set_permissions([
        PermissionTarget(path=path, mode=EXECUTABLE_BITS, additive=True)
    ])


def restrict_to_owner(path) -> None:
    """Set path to owner read/write only (chmod 600)."""
    PermissionManager("service").set_permissions([
        PermissionTarget(path=path, mode=OWNER_READ_WRITE)
    ])
