#!/usr/bin/env python3
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

import argparse
import logging
import os
import sys
import traceback
from enum import Enum
from typing import List, Optional

import requests

from .config import SensorConfig
from .errors import InvocationError, SensorInstallError
from .modules.connectivity import check_backend
from .modules.environment import validate_environment
from .modules.lifecycle import start_service, uninstall_service
from .modules.package import prepare_configs, unpack_release
from .modules.release import download_release
from .modules.service import provision_service
from .utils.index import ConsoleFormatter, get_module_version, log_message
from .utils.systemd import ServiceManager, SystemctlServiceManager

BANNER = r"""
                                   _
    __ _ _ __ ___  _   _ _ __   __| | ___ _____   _____ _ __
   / _` | '__/ _ \| | | | '_ \ / _` |/ __/ _ \ \ / / _ \ '__|
  | (_| | | | (_) | |_| | | | | (_| | (_| (_) \ V /  __/ |
   \__, |_|  \___/ \__,_|_| |_|\__,_|\___\___/ \_/ \___|_|
   |___/
         #NO TRADE-OFFS
"""


class InstallStage(Enum):
    UNVALIDATED = "unvalidated"
    VALIDATED = "validated"
    CONNECTIVITY_CONFIRMED = "connectivity_confirmed"
    DOWNLOADED = "downloaded"
    EXTRACTED = "extracted"
    CONFIGURED = "configured"
    PROVISIONED = "provisioned"
    STARTED = "started"
    VERIFIED = "verified"
    ABORTED = "aborted"


class _MaxLevelFilter(logging.Filter):
    def __init__(self, max_level: int):
        super().__init__()
        self.max_level = max_level

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < self.max_level


def setup_logging(level: str = "INFO") -> None:
    """
    Send errors to stderr and everything else to stdout.

    Idempotent: existing root handlers are replaced.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    for h in list(root_logger.handlers):
        root_logger.removeHandler(h)

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.addFilter(_MaxLevelFilter(logging.ERROR))
    stdout_handler.setFormatter(ConsoleFormatter(use_color=sys.stdout.isatty()))

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(logging.ERROR)
    stderr_handler.setFormatter(ConsoleFormatter(use_color=sys.stderr.isatty()))

    root_logger.addHandler(stdout_handler)
    root_logger.addHandler(stderr_handler)

    # urllib3 connection chatter only matters with --verbose
    logging.getLogger("urllib3").setLevel(max(root_logger.level, logging.INFO))


def print_banner() -> None:
    print(BANNER)


def check_root_privileges() -> None:
    if os.geteuid() != 0:
        raise InvocationError("This script must be run with sudo or as root")
    log_message("Running with root privileges")


class SensorInstaller:
    """Runs the install and uninstall flows against one SensorConfig."""

    def __init__(self, config: SensorConfig, manager: Optional[ServiceManager] = None,
                 session: Optional[requests.Session] = None, machine: Optional[str] = None):
        self.config = config
        self.manager = manager if manager is not None else SystemctlServiceManager()
        self.session = session if session is not None else requests.Session()
        self.machine = machine
        self.stage = InstallStage.UNVALIDATED

    def _advance(self, stage: InstallStage) -> None:
        log_message(f"Install stage: {self.stage.value} -> {stage.value}", "DEBUG")
        self.stage = stage

    def install(self) -> InstallStage:
        """
        Install or update the sensor.

        Returns:
            InstallStage: VERIFIED if the service reported active, STARTED otherwise

        Raises:
            SensorInstallError: Any failed step; the stage is left at ABORTED
        """
        try:
            self._run_install()
        except BaseException:
            log_message(f"Installation aborted after stage '{self.stage.value}'", "DEBUG")
            self.stage = InstallStage.ABORTED
            raise
        return self.stage

    def _run_install(self) -> None:
        validate_environment(self.config.environ)
        self._advance(InstallStage.VALIDATED)
        print_banner()

        check_backend(self.config, self.session)
        self._advance(InstallStage.CONNECTIVITY_CONFIRMED)

        download_release(self.config, self.machine, self.session)
        self._advance(InstallStage.DOWNLOADED)

        unpack_release(self.config)
        self._advance(InstallStage.EXTRACTED)

        prepare_configs(self.config)
        self._advance(InstallStage.CONFIGURED)

        provision_service(self.config)
        self._advance(InstallStage.PROVISIONED)

        # start_service raises before returning if the start is rejected
        active = start_service(self.config, self.manager)
        self._advance(InstallStage.STARTED)
        if active:
            self._advance(InstallStage.VERIFIED)

    def uninstall(self) -> None:
        print_banner()
        uninstall_service(self.config, self.manager)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sensorctl",
        description="Install or remove the sensor systemd service",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "commands:\n"
            "  install     Install or update the sensor\n"
            "  uninstall   Remove the sensor and all its configurations"
        ),
    )
    parser.add_argument("command", choices=["install", "uninstall"], help="Action to perform")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {get_module_version()}")
    return parser


def main(argv: Optional[List[str]] = None, manager: Optional[ServiceManager] = None,
         session: Optional[requests.Session] = None) -> int:
    """
    Command line entry point.

    Returns:
        int: Process exit code
    """
    args = build_parser().parse_args(argv)
    level = "DEBUG" if args.verbose else os.environ.get("SENSORCTL_LOG_LEVEL", "INFO")
    setup_logging(level)

    try:
        check_root_privileges()
        config = SensorConfig.from_environ(os.environ)
        installer = SensorInstaller(config, manager=manager, session=session)
        if args.command == "install":
            installer.install()
        else:
            installer.uninstall()
        return 0

    except SensorInstallError as e:
        log_message(str(e), "ERROR")
        return e.exit_code
    except KeyboardInterrupt:
        log_message("Interrupted; files may be partially written", "WARNING")
        return 130
    except OSError as e:
        log_message(f"Filesystem error: {e}", "ERROR")
        return 1
    except Exception as e:
        log_message(f"Unhandled error: {e}", "ERROR")
        traceback.print_exc()
        return 1


def cli() -> None:
    sys.exit(main())


if __name__ == "__main__":
    cli()
