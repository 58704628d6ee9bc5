import pytest

from dynaval.bootstrap.config.loader import CONFIG_ENV, get_configfile
from dynaval.bootstrap.config.settings import CodecSettings
from dynaval.bootstrap.deps import get_codec, get_settings
from dynaval.core.errors import ConfigurationError


@pytest.mark.ut
def test_defaults_without_any_source(clean_env):
    settings = get_settings()

    assert get_configfile() is None
    assert settings.max_depth is None
    assert settings.log_level == "WARNING"


@pytest.mark.ut
def test_environment_variables(clean_env, monkeypatch):
    monkeypatch.setenv("DYNAVAL_MAX_DEPTH", "5")
    monkeypatch.setenv("DYNAVAL_LOG_LEVEL", "DEBUG")

    settings = get_settings()

    assert settings.max_depth == 5
    assert settings.log_level == "DEBUG"


@pytest.mark.ut
def test_yaml_file_in_working_directory(clean_env, config_file):
    file = config_file({"max_depth": 3, "log_level": "INFO"})

    assert get_configfile() == file.resolve()
    assert get_settings().max_depth == 3
    assert get_settings().log_level == "INFO"


@pytest.mark.ut
def test_yaml_file_named_by_environment(clean_env, monkeypatch, config_file):
    file = config_file({"max_depth": 7}, name="codec.yaml")
    monkeypatch.setenv(CONFIG_ENV, str(file))

    assert get_configfile() == file
    assert get_settings().max_depth == 7


@pytest.mark.ut
def test_environment_overrides_yaml(clean_env, monkeypatch, config_file):
    config_file({"max_depth": 3})
    monkeypatch.setenv("DYNAVAL_MAX_DEPTH", "9")

    assert get_settings().max_depth == 9


@pytest.mark.ut
def test_init_arguments_override_environment(clean_env, monkeypatch):
    monkeypatch.setenv("DYNAVAL_MAX_DEPTH", "9")

    assert CodecSettings(max_depth=1).max_depth == 1


@pytest.mark.ut
def test_missing_file_named_by_environment(clean_env, monkeypatch, tmp_path):
    monkeypatch.setenv(CONFIG_ENV, str(tmp_path / "missing.yaml"))

    with pytest.raises(FileNotFoundError):
        get_configfile()

    with pytest.raises(ConfigurationError) as exc:
        get_settings()

    assert "Configuration file not found" in str(exc.value)


@pytest.mark.ut
def test_negative_max_depth_is_rejected(clean_env, monkeypatch):
    monkeypatch.setenv("DYNAVAL_MAX_DEPTH", "-1")

    with pytest.raises(ConfigurationError) as exc:
        get_settings()

    message = str(exc.value)
    assert message.startswith("Configuration validation failed:")
    assert "max_depth: " in message
    assert "zero or positive" in message


@pytest.mark.ut
def test_unknown_log_level_is_rejected(clean_env, config_file):
    config_file({"log_level": "VERBOSE"})

    with pytest.raises(ConfigurationError) as exc:
        get_settings()

    assert "log_level: " in str(exc.value)


@pytest.mark.ut
def test_zero_max_depth_is_accepted(clean_env):
    assert CodecSettings(max_depth=0).max_depth == 0


@pytest.mark.ut
def test_codec_is_built_from_settings(clean_env, monkeypatch):
    monkeypatch.setenv("DYNAVAL_MAX_DEPTH", "4")

    codec = get_codec()

    assert codec.max_depth == 4
    assert get_codec() is codec
