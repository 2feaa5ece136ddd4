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
Installer configuration.

Defaults come from the package index.json; environment variables override
them. The resulting SensorConfig is built once at start-up and handed to
every module, so nothing below the CLI reads os.environ directly.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

from .utils.index import load_package_index

REQUIRED_VARS = ("API_KEY", "GC_ENV_NAME", "GC_DOMAIN")


@dataclass(frozen=True)
class SensorConfig:
    """Everything the install and uninstall flows need to know."""
    api_key: str = field(repr=False)
    env_name: str
    domain: str
    install_dir: Path
    env_dir: Path
    sensor_name: str
    tarball_name: str
    service_name: str
    env_path: Path
    user_config_path: Path
    release_url_prefix: str
    max_procs: str
    memory_soft_limit: str
    memory_hard_limit: str
    systemd_unit_dir: Path
    config_files: Tuple[str, ...] = ()
    # Snapshot used to resolve config placeholders
    environ: Mapping[str, str] = field(default_factory=dict, repr=False, compare=False)

    @property
    def binary_path(self) -> Path:
        return self.install_dir / self.sensor_name

    @property
    def unit_path(self) -> Path:
        return self.systemd_unit_dir / self.service_name

    @property
    def tarball_path(self) -> Path:
        return Path(self.tarball_name)

    @property
    def config_paths(self) -> Tuple[Path, ...]:
        return tuple(self.install_dir / relative for relative in self.config_files)

    @classmethod
    def from_environ(cls, environ: Optional[Mapping[str, str]] = None,
                     index: Optional[Dict[str, Any]] = None) -> "SensorConfig":
        """
        Build the configuration from environment variables over index.json defaults.

        Required variables are not checked here; run the environment validator
        first when installing. Uninstall only needs the path settings.
        """
        if environ is None:
            environ = os.environ
        env = dict(environ)
        defaults = (index if index is not None else load_package_index()).get("config", {})

        def pick(name: str, default: str) -> str:
            return env.get(name) or default

        install_dir = Path(pick("INSTALL_DIR", defaults.get("install_dir", "/opt/groundcover")))
        env_dir = Path(pick("ENV_DIR", defaults.get("env_dir", "/etc/opt/groundcover")))
        sensor_name = pick("SENSOR_NAME", defaults.get("sensor_name", "groundcover-sensor"))

        return cls(
            api_key=env.get("API_KEY", ""),
            env_name=env.get("GC_ENV_NAME", ""),
            domain=env.get("GC_DOMAIN", ""),
            install_dir=install_dir,
            env_dir=env_dir,
            sensor_name=sensor_name,
            tarball_name=pick("TARBALL_NAME", f"{sensor_name}-latest.tar.gz"),
            service_name=pick("SERVICE_NAME", f"{sensor_name}.service"),
            env_path=Path(pick("ENV_PATH", str(env_dir / "env.conf"))),
            user_config_path=Path(pick("USER_CONFIG_PATH", str(env_dir / "overrides.yaml"))),
            release_url_prefix=pick("RELEASE_URL_PREFIX", defaults.get(
                "release_url_prefix", "https://groundcover.com/artifacts/latest/groundcover-sensor")),
            max_procs=pick("MAX_PROCS", str(defaults.get("max_procs", "2"))),
            memory_soft_limit=pick("MEMORY_SOFT_LIMIT", defaults.get("memory_soft_limit", "900MiB")),
            memory_hard_limit=pick("MEMORY_HARD_LIMIT", defaults.get("memory_hard_limit", "1G")),
            systemd_unit_dir=Path(pick("SYSTEMD_UNIT_DIR", defaults.get("systemd_unit_dir", "/etc/systemd/system"))),
            config_files=tuple(defaults.get("config_files", ("config/config.yaml", "scrape-config/config.yaml"))),
            environ=env,
        )
