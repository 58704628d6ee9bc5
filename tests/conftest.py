import pytest
import yaml
from typing import Generator

from tests.fake.fake_serializer import JsonSerializer

from dynaval.bootstrap.config.loader import CONFIG_ENV
from dynaval.bootstrap.deps import get_codec, get_settings
from dynaval.core.facade import WireCodec
from dynaval.core.ser.serializer import ValueSerializer


@pytest.fixture
def encoder() -> ValueSerializer:
    return ValueSerializer()


@pytest.fixture
def codec() -> WireCodec:
    return WireCodec()


@pytest.fixture
def json_serializer() -> JsonSerializer:
    return JsonSerializer()


@pytest.fixture
def clean_env(monkeypatch, tmp_path) -> Generator[None, None, None]:
    """
    Isolated settings environment: no DYNAVAL_* variables, no config
    file, an empty working directory and fresh dependency caches.
    """
    monkeypatch.delenv(CONFIG_ENV, raising=False)
    monkeypatch.delenv("DYNAVAL_MAX_DEPTH", raising=False)
    monkeypatch.delenv("DYNAVAL_LOG_LEVEL", raising=False)
    monkeypatch.chdir(tmp_path)

    get_settings.cache_clear()
    get_codec.cache_clear()
    try:
        yield
    finally:
        get_settings.cache_clear()
        get_codec.cache_clear()


@pytest.fixture
def config_file(tmp_path):
    def write(data: dict, name: str = "dynaval.yaml"):
        file = tmp_path / name
        file.write_text(yaml.dump(data))
        return file

    return write
