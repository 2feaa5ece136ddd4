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
Config Templater

Resolves <GC_PLACEHOLDER_*> tokens in sensor config files from the environment.
"""

from .index import (
    PLACEHOLDER_PATTERN,
    find_placeholders,
    placeholder_to_env_var,
    render_placeholders,
    prepare_config_file
)
