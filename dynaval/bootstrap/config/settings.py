from typing import Annotated, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict, PydanticBaseSettingsSource, YamlConfigSettingsSource

from dynaval.bootstrap.config.loader import get_configfile


LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class CodecSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="DYNAVAL_",
        extra="ignore"
    )

    max_depth: Annotated[
        int | None,
        Field(
            description=(
                "Maximum nesting depth accepted by the serializer and the deserializer.\n"
                "The top-level value is depth 0; every list, map, record or variant\n"
                "payload adds one level. Exceeding the limit fails the call with\n"
                "'Maximum Depth Exceeded'.\n\n"
                "Leave unset to walk values of any depth, bounded only by the\n"
                "interpreter's recursion limit."
            ),
            default=None
        )
    ]

    log_level: Annotated[
        LogLevel,
        Field(
            description=(
                "Logging verbosity applied when a codec is built from settings.\n"
                "Failed encodes and decodes are logged at DEBUG."
            ),
            default="WARNING"
        )
    ]

    @field_validator("max_depth")
    @classmethod
    def validate_max_depth(cls, v: int | None) -> int | None:
        if v is not None and v < 0:
            raise ValueError("max_depth must be zero or positive")
        return v

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Priority: init arguments > environment > YAML file
        sources: tuple[PydanticBaseSettingsSource, ...] = (init_settings, env_settings)

        configfile = get_configfile()
        if configfile is not None:
            sources += (YamlConfigSettingsSource(settings_cls, yaml_file=configfile),)

        return sources
