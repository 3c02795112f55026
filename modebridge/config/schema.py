"""Configuration schema using Pydantic.

Single data model and defaults for the bridge, persisted to ~/.modebridge/config.json.
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, ConfigDict
from pydantic_settings import BaseSettings


class StorageConfig(BaseModel):
    """Where settings documents are persisted."""
    backend: Literal["json", "sqlite", "memory"] = "json"
    directory: str = "~/.modebridge/storage"

    @property
    def directory_path(self) -> Path:
        return Path(self.directory).expanduser()


class I18nConfig(BaseModel):
    """Translation defaults."""
    fallback_language: str = "en-US"
    default_language: str | None = None  # Used when no language has been stored yet


class CncServerConfig(BaseModel):
    """cncserver API location. The port may be overridden by the app's `httpport` setting."""
    protocol: str = "http"
    domain: str = "localhost"
    port: int = 4242
    version: str = "1"
    timeout_seconds: float = 10.0


class LoggingConfig(BaseModel):
    """Log sinks."""
    level: str = "INFO"
    file_enabled: bool = True


class Config(BaseSettings):
    """Root configuration for modebridge."""
    app_path: str = "."  # Application root; shared resources live under resources/_i18n
    storage: StorageConfig = Field(default_factory=StorageConfig)
    i18n: I18nConfig = Field(default_factory=I18nConfig)
    cncserver: CncServerConfig = Field(default_factory=CncServerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @property
    def app_root(self) -> Path:
        """Get expanded, absolute application root."""
        return Path(self.app_path).expanduser().resolve()

    @property
    def shared_i18n_dir(self) -> Path:
        """Directory holding the application's common translation files."""
        return self.app_root / "resources" / "_i18n"

    model_config = ConfigDict(
        env_prefix="MODEBRIDGE_",
        env_nested_delimiter="__"
    )
