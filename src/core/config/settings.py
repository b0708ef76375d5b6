"""Application settings using Pydantic Settings."""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.core.config.loader import DEFAULT_CONFIG_PATH, ConfigLoader
from src.core.exceptions.errors import ConfigurationError


class CabalSettings(BaseSettings):
    """Build tool configuration settings."""

    model_config = SettingsConfigDict(
        env_prefix="CABAL_BUILDER_CABAL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    path: str = Field(
        default="cabal",
        description="Path to the cabal executable",
    )
    configure_args: list[str] = Field(
        default_factory=list,
        description="Extra arguments passed to 'cabal configure'",
    )
    build_args: list[str] = Field(
        default_factory=list,
        description="Extra arguments passed to 'cabal build'",
    )
    wait_timeout: int | None = Field(
        default=None,
        ge=1,
        description="Seconds to wait for a phase to exit once its output closes (None = forever)",
    )
    env_vars: dict[str, str] = Field(
        default_factory=dict,
        description="Environment variables added to the build tool environment",
    )

    @field_validator("path", mode="before")
    @classmethod
    def validate_path(cls, v: str | Path | None) -> str:
        """Fall back to the executable on PATH when unset."""
        if v is None or str(v).strip() == "":
            return "cabal"
        return str(v)


class LoggingSettings(BaseSettings):
    """Logging configuration settings."""

    model_config = SettingsConfigDict(
        env_prefix="CABAL_BUILDER_LOGGING_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    level: str = Field(
        default="INFO",
        description="Log level",
    )
    format: str = Field(
        default="[%(name)s] %(message)s",
        description="Log format string",
    )
    file: Path | None = Field(
        default=None,
        description="Log file path",
    )
    use_rich: bool = Field(
        default=True,
        description="Use Rich console for output",
    )

    @field_validator("level", mode="before")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v_upper

    @field_validator("file", mode="before")
    @classmethod
    def validate_file(cls, v: str | None) -> Path | None:
        """Validate and convert file to Path."""
        if v is None or v == "":
            return None
        return Path(v)


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="CABAL_BUILDER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    cabal: CabalSettings = Field(default_factory=CabalSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @classmethod
    def from_yaml(cls, path: Path) -> "Settings":
        """Load settings from YAML file.

        Args:
            path: Path to YAML configuration file.

        Returns:
            Settings instance with values from YAML.

        Raises:
            ConfigurationError: If the file cannot be loaded or holds invalid values.
        """
        loader = ConfigLoader(path)
        loader.load()

        try:
            return cls(
                cabal=CabalSettings(**loader.get_section("cabal")),
                logging=LoggingSettings(**loader.get_section("logging")),
            )
        except ValidationError as e:
            raise ConfigurationError(
                f"Invalid configuration values in {path}",
                config_key=str(path),
                details={"errors": _describe_errors(e)},
            ) from e

    @classmethod
    def load(cls) -> "Settings":
        """Load settings from default locations.

        Priority: config/default.yaml > environment variables > .env > defaults

        Returns:
            Settings instance.
        """
        if DEFAULT_CONFIG_PATH.exists():
            return cls.from_yaml(DEFAULT_CONFIG_PATH)

        try:
            return cls()
        except ValidationError as e:
            raise ConfigurationError(
                "Invalid configuration values in the environment",
                details={"errors": _describe_errors(e)},
            ) from e


def _describe_errors(error: ValidationError) -> list[str]:
    return [
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
        for err in error.errors()
    ]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings singleton.
    """
    return Settings.load()
