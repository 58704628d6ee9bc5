import os
from pathlib import Path


CONFIG_ENV = "DYNAVALCONFIG"
DEFAULT_CONFIG_NAME = "dynaval.yaml"


def get_configfile() -> Path | None:
    """
    Locate the optional YAML settings file.

    Priority: DYNAVALCONFIG > dynaval.yaml in the current working
    directory. The file is optional: None means no file source, but a
    path named by the environment must exist.
    """
    raw = os.getenv(CONFIG_ENV)

    if raw is None:
        file = Path.cwd() / DEFAULT_CONFIG_NAME
        return file if file.is_file() else None

    file = Path(raw)
    if not file.is_file():
        raise FileNotFoundError(
            f"[config] Configuration file not found: '{file}'.\n"
            f"  - Point the {CONFIG_ENV} environment variable at an existing file\n"
            f"  - Or unset it and place a '{DEFAULT_CONFIG_NAME}' file in the current working directory."
        )

    return file
