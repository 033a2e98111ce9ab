"""設定読み込みのテストケース."""

from pathlib import Path
import tempfile

import pytest
import yaml

from tempstage.config import ENV_REMOTE, ENV_ROOT, ENV_VERBOSE, load_settings
from tempstage.models.schemas import TempSettings


@pytest.fixture(autouse=True)
def _clear_env(monkeypatch):
    for name in (ENV_ROOT, ENV_REMOTE, ENV_VERBOSE):
        monkeypatch.delenv(name, raising=False)


def test_defaults_without_config():
    """設定ファイルなしではデフォルト値."""
    settings = load_settings()
    
    assert settings.root_directory == Path(tempfile.gettempdir()) / "tempstage"
    assert settings.remote_identifier == ""
    assert settings.verbose is False


def test_missing_config_file_uses_defaults(tmp_path):
    settings = load_settings(tmp_path / "nonexistent.yaml")
    assert settings == TempSettings()


def test_load_from_yaml(tmp_path):
    """設定ファイルのtempセクションを読み込む."""
    config_file = tmp_path / "tempstage.yaml"
    config = {
        "temp": {
            "root_directory": str(tmp_path / "staging"),
            "remote_identifier": "https://dist.example.com",
            "verbose": True,
        }
    }
    with open(config_file, "w") as f:
        yaml.dump(config, f)
    
    settings = load_settings(config_file)
    
    assert settings.root_directory == tmp_path / "staging"
    assert settings.remote_identifier == "https://dist.example.com"
    assert settings.verbose is True


@pytest.mark.parametrize("content", [
    "temp: [unclosed",
    "- just\n- a list\n",
    "other: {}\n",
    "temp:\n  verbose: not-a-bool\n",
])
def test_invalid_config_falls_back_to_defaults(tmp_path, content):
    """不正な設定ファイルは警告の上デフォルト値を使う."""
    config_file = tmp_path / "tempstage.yaml"
    config_file.write_text(content)
    
    settings = load_settings(config_file)
    assert settings == TempSettings()


def test_non_utf8_config_falls_back_to_defaults(tmp_path, caplog):
    """UTF-8として読めない設定ファイルも警告の上デフォルト値を使う."""
    config_file = tmp_path / "tempstage.yaml"
    config_file.write_bytes(b"temp:\n  remote_identifier: \xff\xfe\n")

    with caplog.at_level("WARNING", logger="tempstage.config"):
        settings = load_settings(config_file)

    assert settings == TempSettings()
    assert "Failed to read temp settings" in caplog.text


def test_environment_overrides_file(tmp_path, monkeypatch):
    """環境変数は設定ファイルより優先される."""
    config_file = tmp_path / "tempstage.yaml"
    config_file.write_text(yaml.dump({"temp": {"root_directory": str(tmp_path / "file_root")}}))
    monkeypatch.setenv(ENV_ROOT, str(tmp_path / "env_root"))
    monkeypatch.setenv(ENV_REMOTE, "env-remote")
    monkeypatch.setenv(ENV_VERBOSE, "yes")
    
    settings = load_settings(config_file)
    
    assert settings.root_directory == tmp_path / "env_root"
    assert settings.remote_identifier == "env-remote"
    assert settings.verbose is True


@pytest.mark.parametrize("value,expected", [
    ("1", True),
    ("TRUE", True),
    ("off", False),
    ("0", False),
    ("maybe", False),
])
def test_verbose_environment_values(monkeypatch, value, expected):
    """不正な値は無視される."""
    monkeypatch.setenv(ENV_VERBOSE, value)
    assert load_settings().verbose is expected


def test_invalid_config_logs_warning(tmp_path, caplog):
    config_file = tmp_path / "tempstage.yaml"
    config_file.write_text("temp: [unclosed")
    
    with caplog.at_level("WARNING", logger="tempstage.config"):
        load_settings(config_file)
    
    assert "Failed to read temp settings" in caplog.text


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
