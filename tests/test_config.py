"""Tests for dynaconf-backed settings."""

import pytest

from cwlogs.core.config import default_config_path, load_config
from cwlogs.core.errors import ConfigError


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text(
        '[defaults]\n'
        'region = "eu-west-1"\n'
        'output = "plain"\n'
        'max_events = 250\n'
        '\n'
        '[profiles.prod]\n'
        'region = "ap-southeast-2"\n'
        'assume_role = "arn:aws:iam::123456789012:role/Reader"\n'
        '\n'
        '[aliases]\n'
        'api = "/aws/lambda/api-handler"\n'
    )
    return path


def test_missing_file_uses_defaults(tmp_path):
    settings = load_config(tmp_path / "absent.toml")

    assert settings.region == "us-east-1"
    assert settings.output == "colored"
    assert settings.max_events == 1000
    assert settings.log_level == "WARNING"
    assert settings.record.aliases == {}

def test_reads_file(config_file):
    settings = load_config(config_file)

    assert settings.region == "eu-west-1"
    assert settings.output == "plain"
    assert settings.max_events == 250
    assert settings.profile("prod").assume_role.endswith("role/Reader")

def test_alias_resolution(config_file):
    settings = load_config(config_file)

    assert settings.resolve_group("api") == "/aws/lambda/api-handler"
    assert settings.resolve_group("/aws/other") == "/aws/other"

def test_effective_region_precedence(config_file):
    settings = load_config(config_file)

    assert settings.effective_region("prod", "us-west-2") == "us-west-2"
    assert settings.effective_region("prod") == "ap-southeast-2"
    assert settings.effective_region("unknown") == "eu-west-1"
    assert settings.effective_region() == "eu-west-1"

def test_environment_overrides_file(config_file, monkeypatch):
    monkeypatch.setenv("CWL_DEFAULTS__REGION", "sa-east-1")

    settings = load_config(config_file)

    assert settings.region == "sa-east-1"
    assert settings.output == "plain"

def test_invalid_output_rejected(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text('[defaults]\noutput = "fancy"\n')

    with pytest.raises(ConfigError) as excinfo:
        load_config(path)

    assert excinfo.value.details["path"] == str(path)

def test_negative_max_events_rejected(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text('[defaults]\nmax_events = -5\n')

    with pytest.raises(ConfigError):
        load_config(path)

def test_save_and_reload(tmp_path):
    path = tmp_path / "nested" / "config.toml"
    settings = load_config(path)

    settings.add_alias("worker", "/ecs/worker")
    settings.save()

    reloaded = load_config(path)
    assert path.exists()
    assert reloaded.resolve_group("worker") == "/ecs/worker"
    assert reloaded.region == "us-east-1"

def test_save_keeps_existing_sections(config_file):
    settings = load_config(config_file)
    settings.add_alias("db", "/aws/rds/main")
    settings.save()

    reloaded = load_config(config_file)
    assert reloaded.record.aliases == {
        "api": "/aws/lambda/api-handler",
        "db": "/aws/rds/main",
    }
    assert reloaded.profile_region("prod") == "ap-southeast-2"
    assert reloaded.max_events == 250

def test_default_path_env_override(monkeypatch, tmp_path):
    target = tmp_path / "custom.toml"
    monkeypatch.setenv("CWL_CONFIG", str(target))

    assert default_config_path() == target

def test_default_path_under_home(monkeypatch, tmp_path):
    monkeypatch.setenv("HOME", str(tmp_path))

    assert default_config_path() == tmp_path / ".config" / "cwl" / "config.toml"
