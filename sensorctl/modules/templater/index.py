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
Placeholder substitution for sensor config files.

A placeholder looks like <GC_PLACEHOLDER_ENV_NAME> and is filled from the
variable GC_ENV_NAME. Files are rewritten in one pass: every placeholder is
resolved first, so a missing variable leaves the file untouched.
"""

import re
from pathlib import Path
from typing import Dict, List, Mapping

from ...errors import ConfigNotFound, UnresolvedPlaceholder
from ...utils.index import log_message

PLACEHOLDER_PREFIX = "GC_PLACEHOLDER_"
ENV_VAR_PREFIX = "GC_"
PLACEHOLDER_PATTERN = re.compile(r"<" + PLACEHOLDER_PREFIX + r"([A-Z0-9_]+)>")

# Bytes outside UTF-8 and CRLF line endings survive a rewrite unchanged
CONFIG_ENCODING = "utf-8"
CONFIG_ERRORS = "surrogateescape"


def find_placeholders(text: str) -> List[str]:
    """Return the distinct placeholder tokens in text, sorted."""
    return sorted({match.group(0) for match in PLACEHOLDER_PATTERN.finditer(text)})


def placeholder_to_env_var(placeholder: str) -> str:
    """<GC_PLACEHOLDER_FOO> -> GC_FOO"""
    match = PLACEHOLDER_PATTERN.fullmatch(placeholder)
    if match is None:
        raise ValueError(f"Not a placeholder token: {placeholder!r}")
    return f"{ENV_VAR_PREFIX}{match.group(1)}"


def resolve_placeholders(placeholders: List[str], values: Mapping[str, str], path=None) -> Dict[str, str]:
    """
    Map each placeholder to its variable value.

    Raises:
        UnresolvedPlaceholder: For the first placeholder whose variable is unset or empty
    """
    substitutions = {}
    for placeholder in placeholders:
        variable = placeholder_to_env_var(placeholder)
        value = values.get(variable)
        if not value:
            raise UnresolvedPlaceholder(variable, placeholder, path)
        substitutions[placeholder] = value
    return substitutions


def render_placeholders(text: str, values: Mapping[str, str], path=None) -> str:
    """Return text with every placeholder replaced by its literal value."""
    substitutions = resolve_placeholders(find_placeholders(text), values, path)
    if not substitutions:
        return text
    return PLACEHOLDER_PATTERN.sub(lambda match: substitutions[match.group(0)], text)


def prepare_config_file(path, values: Mapping[str, str]) -> bool:
    """
    Fill in the placeholders of a config file in place.

    Args:
        path: Config file to rewrite
        values: Variables available for substitution

    Returns:
        bool: True if the file was rewritten, False if it had no placeholders

    Raises:
        ConfigNotFound: The file does not exist
        UnresolvedPlaceholder: A placeholder has no value; the file is not modified
    """
    path = Path(path)
    log_message(f"Preparing sensor configuration {path}")

    if not path.is_file():
        raise ConfigNotFound(path)

    with open(path, encoding=CONFIG_ENCODING, errors=CONFIG_ERRORS, newline="") as f:
        text = f.read()
    placeholders = find_placeholders(text)
    if not placeholders:
        log_message("No placeholders found in configuration")
        return False

    log_message(f"Found {len(placeholders)} placeholders", "DEBUG")
    rendered = render_placeholders(text, values, path)
    with open(path, "w", encoding=CONFIG_ENCODING, errors=CONFIG_ERRORS, newline="") as f:
        f.write(rendered)

    log_message(f"Configuration {path.name} prepared successfully", "SUCCESS")
    return True
