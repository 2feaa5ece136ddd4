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
Service provisioning: the systemd unit, the env file it loads and the user
override file.

The unit and env file are regenerated on every install. The override file
belongs to the operator and is only created when it is missing.
"""

import os
from pathlib import Path
from typing import Dict

from ...config import SensorConfig
from ...utils.index import log_message
from ...utils.permissions import OWNER_READ_WRITE, restrict_to_owner

OVERRIDE_FILE_HEADER = "# Overrides Configuration File\n"

# Values the sensor always runs with on a systemd host
FEATURE_TOGGLES = {
    "FLORA_PROMETHEUSSERVER_ENABLED": "false",
    "FLORA_CONTAINERREPOSITORY_TRACKEDCONTAINERTYPE": "docker",
}

UNIT_TEMPLATE = """\
[Unit]
Description={sensor_name} Sensor Service
After=network.target

[Service]
Type=simple
User=root
WorkingDirectory={install_dir}
EnvironmentFile={env_path}
ExecStart={binary_path}
Restart=on-failure
MemoryMax={memory_hard_limit}

[Install]
WantedBy=multi-user.target
"""


def render_unit(config: SensorConfig) -> str:
    return UNIT_TEMPLATE.format(
        sensor_name=config.sensor_name,
        install_dir=config.install_dir,
        env_path=config.env_path,
        binary_path=config.binary_path,
        memory_hard_limit=config.memory_hard_limit,
    )


def env_file_entries(config: SensorConfig) -> Dict[str, str]:
    entries = {
        "API_KEY": config.api_key,
        "OVERRIDES_CONFIG_PATH": str(config.user_config_path),
    }
    entries.update(FEATURE_TOGGLES)
    entries.update({
        "GOMAXPROCS": config.max_procs,
        "GOMEMLIMIT": config.memory_soft_limit,
        "MEMORY_HARD_LIMIT": config.memory_hard_limit,
    })
    return entries


def render_env_file(config: SensorConfig) -> str:
    return "".join(f"{key}={value}\n" for key, value in env_file_entries(config).items())


def _write_private(path: Path, content: str) -> None:
    """Truncate and write path, which is locked to mode 600 before any content lands."""
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, OWNER_READ_WRITE)
    # Pre-existing files keep their old mode through O_CREAT
    try:
        restrict_to_owner(path)
    except OSError:
        os.close(fd)
        raise
    with os.fdopen(fd, "w") as f:
        f.write(content)


def write_unit_file(config: SensorConfig) -> Path:
    log_message("Creating systemd service file")
    unit_path = config.unit_path
    unit_path.parent.mkdir(parents=True, exist_ok=True)
    unit_path.write_text(render_unit(config))
    log_message(f"Wrote {unit_path}", "DEBUG")
    return unit_path


def write_env_file(config: SensorConfig) -> Path:
    log_message("Creating environment configuration file")
    config.env_path.parent.mkdir(parents=True, exist_ok=True)
    _write_private(config.env_path, render_env_file(config))
    return config.env_path


def ensure_override_file(config: SensorConfig) -> bool:
    """
    Create the user override file if it does not exist yet.

    Returns:
        bool: True if the file was created, False if an existing one was kept
    """
    path = config.user_config_path
    if path.exists():
        log_message(f"Keeping existing override file {path}")
        return False
    log_message(f"Creating override file {path}")
    path.parent.mkdir(parents=True, exist_ok=True)
    _write_private(path, OVERRIDE_FILE_HEADER)
    return True


def provision_service(config: SensorConfig) -> None:
    """Write the unit file, then set up the service environment."""
    write_unit_file(config)

    log_message("Setting up service environment")
    log_message(f"Creating environment directory: {config.env_dir}")
    config.env_dir.mkdir(parents=True, exist_ok=True)
    write_env_file(config)
    ensure_override_file(config)

    log_message("Sensor service configuration completed", "SUCCESS")
