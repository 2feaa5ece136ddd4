import itertools

import pytest

from sensorctl.config import REQUIRED_VARS
from sensorctl.errors import MissingConfiguration
from sensorctl.modules.environment import validate_environment

FULL = {"API_KEY": "k", "GC_ENV_NAME": "prod", "GC_DOMAIN": "example.com"}


def test_all_present_passes():
    validate_environment(FULL)


@pytest.mark.parametrize("missing", [
    combo
    for size in range(1, len(REQUIRED_VARS) + 1)
    for combo in itertools.combinations(REQUIRED_VARS, size)
])
def test_any_missing_subset_fails(missing):
    environ = {k: v for k, v in FULL.items() if k not in missing}

    with pytest.raises(MissingConfiguration) as excinfo:
        validate_environment(environ)

    assert excinfo.value.variable in missing


def test_empty_value_counts_as_missing():
    with pytest.raises(MissingConfiguration) as excinfo:
        validate_environment({**FULL, "GC_DOMAIN": ""})
    assert excinfo.value.variable == "GC_DOMAIN"


def test_custom_required_list():
    validate_environment({"ONLY": "x"}, required=["ONLY"])
    with pytest.raises(MissingConfiguration):
        validate_environment({}, required=["ONLY"])
