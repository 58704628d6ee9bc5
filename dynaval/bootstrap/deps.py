import json
from functools import lru_cache

from pydantic import ValidationError

from dynaval.bootstrap.config.settings import CodecSettings
from dynaval.core.errors import ConfigurationError
from dynaval.core.facade import WireCodec
from dynaval.core.helpers.utils import setup_logging
from dynaval.infra.msgpack_serializer import MsgPackSerializer


@lru_cache
def get_codec() -> WireCodec:
    settings = get_settings()
    setup_logging(settings.log_level)

    return WireCodec(
        max_depth=settings.max_depth,
        serializer=MsgPackSerializer()
    )


@lru_cache
def get_settings() -> CodecSettings:
    try:
        return CodecSettings()
    except FileNotFoundError as ex:
        raise ConfigurationError(f"Provide a correct configuration file path: {ex}") from ex
    except ValidationError as ex:
        msg = ["Configuration validation failed:"]
        errs = json.loads(ex.json())
        for err in errs:
            msg.append(f"  {'.'.join(str(part) for part in err['loc'])}: {err['msg']}")
        raise ConfigurationError("\n".join(msg)) from ex
