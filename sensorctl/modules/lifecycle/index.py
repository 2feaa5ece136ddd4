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

import shutil

from ...config import SensorConfig
from ...errors import ServiceStartFailed
from ...utils.index import log_message
from ...utils.systemd import JOURNAL_LINES, ServiceManager


def start_service(config: SensorConfig, manager: ServiceManager) -> bool:
    """
    Enable and (re)start the sensor service.

    The active-state check after a successful start is informational only.

    Returns:
        bool: Whether the service reported active after starting

    Raises:
        ServiceStartFailed: The service manager rejected the start
        ServiceManagerError: reload, enable or stop failed
    """
    service = config.service_name
    log_message("Starting sensor service")
    manager.reload()
    manager.enable(service)

    if manager.is_active(service):
        log_message("Stopping existing service")
        manager.stop(service)

    if not manager.start(service):
        log_message("Service failed to start. Recent logs:", "ERROR")
        for line in manager.recent_logs(service, JOURNAL_LINES).splitlines():
            log_message(f"  {line}", "ERROR")
        raise ServiceStartFailed(service)

    log_message("Sensor service installation complete!", "SUCCESS")

    active = manager.is_active(service)
    if active:
        log_message("Sensor is up and running", "SUCCESS")
    else:
        log_message("Sensor failed to start", "ERROR")

    log_message(f"To check sensor status: systemctl status {service}")
    log_message(f"To view sensor logs: journalctl -u {service}")
    return active


def uninstall_service(config: SensorConfig, manager: ServiceManager) -> None:
    """
    Stop and remove the sensor service and its install directory.

    Each step only runs if there is something to undo, so this is safe on
    a host where the sensor was never installed. The env directory and the
    override file are left in place.
    """
    service = config.service_name
    log_message("Starting uninstallation process")

    if manager.is_active(service):
        log_message("Stopping sensor service")
        manager.stop(service)

    if manager.is_enabled(service):
        log_message("Disabling sensor service")
        manager.disable(service)

    unit_path = config.unit_path
    if unit_path.is_file():
        log_message(f"Removing service file {unit_path}")
        unit_path.unlink()
        manager.reload()

    install_dir = config.install_dir
    if install_dir.is_symlink():
        log_message(f"Removing installation directory link {install_dir}")
        install_dir.unlink()
    elif install_dir.is_dir():
        log_message(f"Removing installation directory {install_dir}")
        shutil.rmtree(install_dir)

    log_message("Uninstallation completed successfully", "SUCCESS")
