import os

import pytest

from fakes import GENERAL_CONFIG, SCRAPE_CONFIG, build_release_tarball
from sensorctl.errors import ArtifactMissing, ConfigNotFound, ExecutableMissing, UnresolvedPlaceholder
from sensorctl.modules.package import install_package, unpack_release


def write_tarball(config, **kwargs):
    config.tarball_path.write_bytes(build_release_tarball(**kwargs))


def test_install_package_extracts_and_templates(config):
    write_tarball(config)

    prepared = install_package(config)

    assert os.access(config.binary_path, os.X_OK)
    assert prepared == list(config.config_paths)
    general = (config.install_dir / "config" / "config.yaml").read_text()
    assert general == (
        "env: production\n"
        "backend: backend.example.com\n"
        "labels:\n"
        "  env: production\n"
    )
    assert (config.install_dir / "scrape-config" / "config.yaml").read_text() == SCRAPE_CONFIG


def test_existing_install_dir_is_reused(config):
    config.install_dir.mkdir(parents=True)
    (config.install_dir / "leftover").write_text("kept")
    write_tarball(config)

    unpack_release(config)

    assert (config.install_dir / "leftover").read_text() == "kept"


def test_missing_tarball(config):
    with pytest.raises(ArtifactMissing):
        unpack_release(config)
    assert not config.install_dir.exists()


def test_missing_binary(config):
    write_tarball(config, include_binary=False)

    with pytest.raises(ExecutableMissing):
        unpack_release(config)
    # No rollback: the extracted tree stays for inspection
    assert (config.install_dir / "config" / "config.yaml").exists()


def test_missing_scrape_config_aborts(config):
    write_tarball(config, files={"config/config.yaml": GENERAL_CONFIG})

    with pytest.raises(ConfigNotFound) as excinfo:
        install_package(config)
    assert excinfo.value.path == config.install_dir / "scrape-config" / "config.yaml"


def test_unresolved_placeholder_aborts(config):
    write_tarball(config, files={
        "config/config.yaml": "token: <GC_PLACEHOLDER_MISSING>\n",
        "scrape-config/config.yaml": "x: <GC_PLACEHOLDER_ENV_NAME>\n",
    })

    with pytest.raises(UnresolvedPlaceholder):
        install_package(config)
    # Later files are not touched once one fails
    assert (config.install_dir / "scrape-config" / "config.yaml").read_text() == "x: <GC_PLACEHOLDER_ENV_NAME>\n"
