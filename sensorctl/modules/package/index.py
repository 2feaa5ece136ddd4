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

import os
import tarfile
from pathlib import Path
from typing import List

from ...config import SensorConfig
from ...errors import ArtifactMissing, ExecutableMissing
from ...utils.index import log_message
from ...utils.permissions import make_executable
from ..templater import prepare_config_file


def extract_tarball(tarball, target) -> None:
    """Extract a gzip tarball into target, creating target if needed."""
    target = Path(target)
    log_message(f"Creating installation directory: {target}")
    target.mkdir(parents=True, exist_ok=True)

    log_message("Extracting sensor package")
    with tarfile.open(tarball, "r:gz") as tar:
        tar.extractall(target, filter="data")


def verify_executable(path) -> Path:
    """
    Check that the sensor binary was shipped and make it executable.

    Raises:
        ExecutableMissing: No regular file at path
    """
    path = Path(path)
    if not path.is_file():
        raise ExecutableMissing(path)
    log_message("Setting executable permission on sensor binary")
    make_executable(path)
    if not os.access(path, os.X_OK):
        raise ExecutableMissing(path)
    return path


def unpack_release(config: SensorConfig) -> Path:
    """
    Extract the downloaded release into the install directory.

    Returns:
        Path: The sensor binary

    Raises:
        ArtifactMissing: The tarball is not where the fetcher put it
        ExecutableMissing: The tarball did not contain the sensor binary
    """
    log_message("Starting sensor package setup")

    tarball = config.tarball_path
    if not tarball.is_file():
        raise ArtifactMissing(tarball)

    extract_tarball(tarball, config.install_dir)
    return verify_executable(config.binary_path)


def prepare_configs(config: SensorConfig) -> List[Path]:
    """
    Template every config file listed in the package index, in order.

    The first failure aborts; files after it are not looked at and the
    install directory is left as is.

    Raises:
        ConfigNotFound, UnresolvedPlaceholder: From the templater
    """
    prepared = []
    for config_path in config.config_paths:
        prepare_config_file(config_path, config.environ)
        prepared.append(config_path)
    return prepared


def install_package(config: SensorConfig) -> List[Path]:
    """Unpack the release and template its configuration."""
    unpack_release(config)
    return prepare_configs(config)
