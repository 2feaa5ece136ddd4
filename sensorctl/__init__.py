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
sensorctl: installs, configures and removes the groundcover sensor as a
systemd service.

Modules (see sensorctl/modules/):
- environment: required variable checks
- connectivity: backend health probe
- release: architecture mapping and tarball download
- package: extraction and binary check
- templater: <GC_PLACEHOLDER_*> substitution in config files
- service: systemd unit, env file and override file
- lifecycle: start/enable and stop/disable/remove through a ServiceManager
"""

from .utils.index import get_module_version
from .config import REQUIRED_VARS, SensorConfig
from .errors import SensorInstallError

__version__ = get_module_version()

__all__ = [
    'REQUIRED_VARS',
    'SensorConfig',
    'SensorInstallError',
    '__version__'
]
