import pytest

from snapverify.config.config_loader import ConfigLoader
from snapverify.config.configs import (
    DEFAULT_ROOT_MARKERS,
    DEFAULT_TIMEOUT_S,
    DirectoryNames,
    SnapshotConfig,
    VerifierSettings,
)
from snapverify.errors.errors import ConfigurationError


def test_defaults():
    settings = VerifierSettings()
    assert settings.timeout == DEFAULT_TIMEOUT_S == 5.0
    assert settings.root_markers == DEFAULT_ROOT_MARKERS
    assert settings.directories.references == "References"

    config = SnapshotConfig()
    assert config.diff_tool is None
    assert config.is_recording is False


def test_loader_reads_tool_table(tmp_path):
    (tmp_path / "pyproject.toml").write_text(
        "[tool.snapverify]\n"
        "timeout = 12.5\n"
        'root_markers = ["setup.cfg"]\n'
        "[tool.snapverify.directories]\n"
        'references = "__snapshots__"\n'
    )

    settings = ConfigLoader(base_dir=str(tmp_path)).load_settings()

    assert settings.timeout == 12.5
    assert settings.root_markers == ("setup.cfg",)
    assert settings.directories.references == "__snapshots__"
    assert settings.directories.additions == "Additions"


def test_loader_without_tool_table_uses_defaults(tmp_path):
    (tmp_path / "pyproject.toml").write_text('[project]\nname = "x"\n')
    assert ConfigLoader(base_dir=str(tmp_path)).load_settings() == VerifierSettings()


def test_loader_accepts_path_base_dir_and_absolute_file(tmp_path):
    settings_file = tmp_path / "snap.toml"
    settings_file.write_text("[tool.snapverify]\ntimeout = 2.0\n")

    assert ConfigLoader(base_dir=tmp_path).load_settings("snap.toml").timeout == 2.0
    assert ConfigLoader().load_settings(settings_file).timeout == 2.0


def test_loader_rejects_non_table_tool_entry(tmp_path):
    (tmp_path / "pyproject.toml").write_text('[tool]\nsnapverify = "on"\n')

    with pytest.raises(ConfigurationError) as exc_info:
        ConfigLoader(base_dir=tmp_path).load_table()
    assert exc_info.value.field == "tool.snapverify"


def test_loader_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        ConfigLoader(base_dir=str(tmp_path)).load_settings("nope.toml")


@pytest.mark.parametrize(
    "raw,field",
    [
        ({"timeout": 0}, "timeout"),
        ({"timeout": -1.0}, "timeout"),
        ({"root_markers": []}, "root_markers"),
        ({"directories": {"changes": "References"}}, "directories"),
        ({"directories": {"targets": "a/b"}}, "directories"),
    ],
)
def test_invalid_settings_raise_configuration_error(raw, field):
    with pytest.raises(ConfigurationError) as exc_info:
        ConfigLoader().validate(raw)
    assert exc_info.value.field.startswith(field)
    assert exc_info.value.details["issues"]


def test_directory_names_must_be_distinct():
    with pytest.raises(ValueError):
        DirectoryNames(targets="Same", additions="Same")
