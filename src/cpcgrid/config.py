from functools import lru_cache

from pydantic_settings import (
    BaseSettings,
    SettingsConfigDict,
)

WGRIB2_EXEC_DEFAULT: str = "wgrib2"
"Executable used for regridding."

NCGEN_EXEC_DEFAULT: str = "ncgen"
"Executable used to compile CDL text into netCDF."

LOG_LEVEL_DEFAULT: str = "WARNING"
"Log level used by the command-line interface when no `-v` is given."


class Settings(BaseSettings):
    """
    Process-wide settings, read once from the environment.

    Every field can be overridden with an environment variable prefixed
    with `CPCGRID_`, e.g. `CPCGRID_WGRIB2_EXEC=/opt/wgrib2/bin/wgrib2`.

    """

    model_config = SettingsConfigDict(
        env_prefix="CPCGRID_",
        env_file=".env",
        extra="ignore",
        frozen=True,
    )

    wgrib2_exec: str = WGRIB2_EXEC_DEFAULT
    ncgen_exec: str = NCGEN_EXEC_DEFAULT
    log_level: str = LOG_LEVEL_DEFAULT


@lru_cache(maxsize=None)
def get_settings() -> Settings:
    return Settings()
