# tests/core/test_config_management.py
import json
import logging

import pytest

from docaudit.core.managers.config_manager import ConfigManager
from docaudit.core.utils.configure_logging import LogWithTqdm, configure_logger
from docaudit.core.utils.path_utils import PathUtils
from docaudit.model import AuditSettings
from linkcheck.exceptions import ConfigurationError
from linkcheck.model import DocumentKind, FilterSettings, ProbeSettings, ScanSettings

# A small, predictable configuration for the tests
MOCK_SETTINGS_CONTENT = {
    "debug": {
        "level": "WARNING"
    },
    "probe": {
        "timeout": 2.5,
        "concurrency": 10,
        "http_errors_are_broken": True
    },
    "filter": {
        "excluded_patterns": ["http://office.microsoft.com", "intranet.local"]
    },
    "user_agent": {
        "chrome_version": "99.0.0.0"
    }
}


@pytest.fixture
def config_manager(tmp_path):
    """
    Points the singleton ConfigManager at a temporary settings file and
    restores the packaged settings afterwards.
    """
    settings_file = tmp_path / "settings.json"
    settings_file.write_text(json.dumps(MOCK_SETTINGS_CONTENT))

    manager = ConfigManager()
    manager.reset(settings_file)
    yield manager
    manager.reset(PathUtils.get_default_settings_file())


# --- ConfigManager ---

def test_config_manager_is_singleton(config_manager):
    assert ConfigManager() is config_manager


def test_config_manager_load(config_manager):
    config = config_manager.get_all()
    assert config["debug"]["level"] == "WARNING"
    assert config["probe"]["concurrency"] == 10


def test_config_manager_get_nested(config_manager):
    assert config_manager.get_nested("probe.timeout") == 2.5
    assert config_manager.get_nested("non.existent.key", "default") == "default"
    assert config_manager.get_nested("debug.level.deeper", "x") == "x"


def test_config_manager_set_nested_casts_types(config_manager):
    config_manager.set_nested("probe.concurrency", "20")
    assert config_manager.get_nested("probe.concurrency") == 20

    config_manager.set_nested("probe.http_errors_are_broken", "false")
    assert config_manager.get_nested("probe.http_errors_are_broken") is False

    config_manager.set_nested("report.open", False)
    assert config_manager.get_nested("report.open") is False


def test_config_manager_reset(config_manager):
    config_manager.set_nested("debug.level", "DEBUG")
    config_manager.reset()
    assert config_manager.get_nested("debug.level") == "WARNING"


def test_missing_settings_file_gives_empty_config(config_manager, tmp_path):
    config_manager.reset(tmp_path / "absent.json")
    assert config_manager.get_all() == {}


def test_invalid_json_gives_empty_config(config_manager, tmp_path):
    bad = tmp_path / "bad.json"
    bad.write_text("{not json")
    config_manager.reset(bad)
    assert config_manager.get_all() == {}


# --- AuditSettings ---

def test_settings_from_config(config_manager):
    settings = AuditSettings.from_config(config_manager.get_all())
    assert settings.probe.timeout == 2.5
    assert settings.probe.concurrency == 10
    assert settings.probe.chrome_version == "99.0.0.0"
    assert settings.filter.excluded_patterns == ("http://office.microsoft.com", "intranet.local")
    assert settings.filter.exclude_mailto is True


def test_overrides_win_and_none_is_ignored(config_manager):
    settings = AuditSettings.from_config(
        config_manager.get_all(),
        {"probe": {"timeout": 9.0, "concurrency": None}, "report": {"open": False}},
    )
    assert settings.probe.timeout == 9.0
    assert settings.probe.concurrency == 10
    assert settings.report.open is False


def test_settings_are_immutable():
    settings = AuditSettings()
    with pytest.raises(Exception):
        settings.probe.timeout = 1.0


@pytest.mark.parametrize("overrides", [
    {"probe": {"concurrency": 0}},
    {"probe": {"timeout": -1}},
    {"probe": {"timeout": "soon"}},
])
def test_invalid_settings_raise_configuration_error(overrides):
    with pytest.raises(ConfigurationError):
        AuditSettings.from_config({}, overrides)


def test_packaged_settings_match_defaults():
    manager = ConfigManager()
    manager.reset(PathUtils.get_default_settings_file())
    settings = AuditSettings.from_config(manager.get_all())

    assert settings.scan.manifest_patterns == ScanSettings().manifest_patterns
    assert set(settings.scan.manifest_patterns) == {DocumentKind.DOCX, DocumentKind.PPTX}
    assert settings.filter == FilterSettings()
    assert settings.probe == ProbeSettings()
    assert settings.report.name == "report.html"


# --- Logging setup ---

@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    saved = (root.level, list(root.handlers))
    module = logging.getLogger("linkcheck.services")
    module_level = module.level
    yield
    root.setLevel(saved[0])
    root.handlers[:] = saved[1]
    module.setLevel(module_level)


def test_configure_logger_applies_module_levels(restore_logging):
    configure_logger("WARNING", module_specific_levels={"linkcheck.services": "debug"})

    root = logging.getLogger()
    assert root.level == logging.WARNING
    assert [type(h) for h in root.handlers] == [LogWithTqdm]
    assert logging.getLogger("linkcheck.services").level == logging.DEBUG
    assert logging.getLogger("aiohttp").level == logging.WARNING
