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
Utilities shared by the installer modules.
"""

from .index import (
    SUCCESS,
    ConsoleFormatter,
    log_message,
    load_package_index,
    get_module_version
)
from .permissions import (
    PermissionManager,
    PermissionTarget,
    make_executable,
    restrict_to_owner
)
from .systemd import ServiceManager, SystemctlServiceManager, JOURNAL_LINES

__all__ = [
    'SUCCESS',
    'ConsoleFormatter',
    'log_message',
    'load_package_index',
    'get_module_version',
    'PermissionManager',
    'PermissionTarget',
    'make_executable',
    'restrict_to_owner',
    'ServiceManager',
    'SystemctlServiceManager',
    'JOURNAL_LINES'
]
