import pytest

from fakes import FakeServiceManager
from sensorctl.errors import ServiceStartFailed
from sensorctl.modules.lifecycle import start_service, uninstall_service

SERVICE = "groundcover-sensor.service"


def test_start_fresh_service(config, manager):
    assert start_service(config, manager) is True

    assert manager.calls[:4] == [
        ("reload",),
        ("enable", SERVICE),
        ("is_active", SERVICE),
        ("start", SERVICE),
    ]
    assert "stop" not in manager.verbs


def test_start_restarts_running_service(config):
    manager = FakeServiceManager(active=True)

    start_service(config, manager)

    verbs = manager.verbs
    assert verbs.index("stop") < verbs.index("start")


def test_start_failure_dumps_logs(config):
    manager = FakeServiceManager(start_ok=False)

    with pytest.raises(ServiceStartFailed) as excinfo:
        start_service(config, manager)

    assert excinfo.value.exit_code == 11
    assert ("recent_logs", SERVICE, 50) in manager.calls


def test_inactive_after_start_is_reported_not_raised(config):
    manager = FakeServiceManager(active_after_start=False)

    assert start_service(config, manager) is False


def test_uninstall_on_clean_host(config, manager):
    uninstall_service(config, manager)

    assert manager.verbs == ["is_active", "is_enabled"]


def test_uninstall_removes_everything(config):
    manager = FakeServiceManager(active=True, enabled=True)
    config.unit_path.parent.mkdir(parents=True)
    config.unit_path.write_text("[Unit]\n")
    (config.install_dir / "config").mkdir(parents=True)
    (config.install_dir / "groundcover-sensor").write_text("bin")
    config.env_dir.mkdir(parents=True)
    config.user_config_path.write_text("# keep\n")

    uninstall_service(config, manager)

    assert manager.verbs == ["is_active", "stop", "is_enabled", "disable", "reload"]
    assert not config.unit_path.exists()
    assert not config.install_dir.exists()
    assert config.user_config_path.read_text() == "# keep\n"


def test_uninstall_is_repeatable(config):
    manager = FakeServiceManager(active=True, enabled=True)
    config.install_dir.mkdir(parents=True)

    uninstall_service(config, manager)
    uninstall_service(config, manager)

    assert manager.verbs.count("stop") == 1
    assert manager.verbs.count("disable") == 1


def test_uninstall_removes_symlinked_install_dir(config, manager, tmp_path):
    real_dir = tmp_path / "real-install"
    real_dir.mkdir()
    (real_dir / "groundcover-sensor").write_text("bin")
    config.install_dir.parent.mkdir(parents=True, exist_ok=True)
    config.install_dir.symlink_to(real_dir, target_is_directory=True)

    uninstall_service(config, manager)

    assert not config.install_dir.is_symlink()
    assert not config.install_dir.exists()
    assert (real_dir / "groundcover-sensor").read_text() == "bin"
