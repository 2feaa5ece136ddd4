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

import json
import logging
from pathlib import Path
from typing import Any, Dict

SUCCESS = 25
logging.addLevelName(SUCCESS, "SUCCESS")

logger = logging.getLogger("sensorctl")

PACKAGE_INDEX = Path(__file__).resolve().parent.parent / "index.json"

# Used when index.json is missing or unreadable
DEFAULT_PACKAGE_INDEX: Dict[str, Any] = {
    "metadata": {
        "schema_version": "0.0.0",
        "package_name": "sensorctl"
    },
    "config": {
        "install_dir": "/opt/groundcover",
        "env_dir": "/etc/opt/groundcover",
        "sensor_name": "groundcover-sensor",
        "release_url_prefix": "https://groundcover.com/artifacts/latest/groundcover-sensor",
        "systemd_unit_dir": "/etc/systemd/system",
        "max_procs": "2",
        "memory_soft_limit": "900MiB",
        "memory_hard_limit": "1G",
        "config_files": [
            "config/config.yaml",
            "scrape-config/config.yaml"
        ]
    }
}


def log_message(message, level="INFO"):
    """
    Log a message through the sensorctl logger.
    Args:
        message (str): The message to log.
        level (str): DEBUG, INFO, SUCCESS, WARNING or ERROR.
    """
    if level == "ERROR":
        logger.error(message)
    elif level == "WARNING":
        logger.warning(message)
    elif level == "SUCCESS":
        logger.log(SUCCESS, message)
    elif level == "DEBUG":
        logger.debug(message)
    else:
        logger.info(message)


class ConsoleFormatter(logging.Formatter):
    """Prefixes each record with a status marker, coloured on a TTY."""

    BOLD = "\033[1m"
    GREY = "\033[30m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    RESET = "\033[0m"

    def __init__(self, use_color: bool = False):
        super().__init__("%(message)s")
        self.use_color = use_color

    def _paint(self, text: str, *codes: str) -> str:
        if not self.use_color:
            return text
        return "".join(codes) + text + self.RESET

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        if record.levelno >= logging.ERROR:
            return self._paint(f"✕ {message}", self.RED)
        if record.levelno >= logging.WARNING:
            return f"{self._paint('!', self.YELLOW)} {message}"
        if record.levelno >= SUCCESS:
            return f"{self._paint('✔', self.GREEN)} {message}"
        if record.levelno >= logging.INFO:
            return f"{self._paint('>', self.BOLD, self.GREY)} {message}"
        return f"{self._paint('·', self.GREY)} {message}"


def load_package_index(index_path=None) -> Dict[str, Any]:
    """
    Load the package index.json holding metadata and configuration defaults.

    Args:
        index_path: Override for the index location (tests)

    Returns:
        dict: The parsed index, or DEFAULT_PACKAGE_INDEX if it cannot be read
    """
    path = Path(index_path) if index_path is not None else PACKAGE_INDEX
    try:
        with open(path, 'r') as f:
            return json.load(f)
    except (OSError, ValueError) as e:
        log_message(f"Failed to load package index from {path}: {e}", "DEBUG")
        return DEFAULT_PACKAGE_INDEX


def get_module_version(index_path=None) -> str:
    """
    Get the schema version recorded in index.json.

    Returns:
        str: The schema version, or "unknown" if not present
    """
    index = load_package_index(index_path)
    return index.get("metadata", {}).get("schema_version", "unknown")
