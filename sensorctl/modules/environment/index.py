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

from typing import Iterable, Mapping

from ...config import REQUIRED_VARS
from ...errors import MissingConfiguration
from ...utils.index import log_message


def validate_environment(environ: Mapping[str, str], required: Iterable[str] = REQUIRED_VARS) -> None:
    """
    Check that every required variable is set and non-empty.

    Args:
        environ: The environment to check
        required: Variable names that must be present

    Raises:
        MissingConfiguration: For the first variable that is unset or empty
    """
    log_message("Validating required environment variables")
    for name in required:
        if not environ.get(name):
            raise MissingConfiguration(name)
    log_message("All required environment variables are set", "SUCCESS")
