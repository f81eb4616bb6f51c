from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = Field(default="Control Crosswalk", alias="APP_NAME")
    app_env: str = Field(default="local", alias="APP_ENV")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    source_config_dir: str = Field(default="config/sources", alias="SOURCE_CONFIG_DIR")
    data_dir: str = Field(default=".", alias="DATA_DIR")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
