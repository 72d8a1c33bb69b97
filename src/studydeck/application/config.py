from pathlib import Path
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from studydeck.domain.constants import DEFAULT_DECKS_FOLDER, STORAGE_KEY


class AppConfig(BaseSettings):
    """
    Configuration model for studydeck.
    Supports loading from:
    1. Environment variables (STUDYDECK_*)
    2. Config file (~/.config/studydeck/config.toml)
    3. Manual overrides (CLI)
    """

    model_config = SettingsConfigDict(
        env_prefix="STUDYDECK_",
        extra="ignore",
    )

    # Paths
    decks_root: Path = Field(default_factory=Path.cwd)
    decks_folder: str = DEFAULT_DECKS_FOLDER
    stats_file: Path = Field(default_factory=lambda: Path.home() / ".config/studydeck/card-stats.json")

    # Persistence
    storage_key: str = STORAGE_KEY

    # Server
    host: str = "127.0.0.1"
    port: int = 8778

    verbose: int = 1

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        from pydantic_settings import TomlConfigSettingsSource

        toml_file = Path.home() / ".config/studydeck/config.toml"

        # Later sources have lower priority: CLI > env > TOML
        if toml_file.exists():
            return (
                init_settings,
                env_settings,
                TomlConfigSettingsSource(settings_cls, toml_file=toml_file),
            )
        return (
            init_settings,
            env_settings,
        )

    @field_validator("decks_root", "stats_file", mode="before")
    @classmethod
    def resolve_path(cls, v: Any) -> Path:
        return Path(v).expanduser().resolve()

    @field_validator("decks_folder", mode="before")
    @classmethod
    def strip_folder(cls, v: Any) -> str:
        return str(v or "").strip("/")


def resolve_config(cli_overrides: dict[str, Any] | None = None) -> AppConfig:
    """
    Multi-layered configuration resolution.
    1. Defaults in AppConfig
    2. ~/.config/studydeck/config.toml (if exists)
    3. Environment variables (STUDYDECK_*)
    4. cli_overrides (passed from Typer), None values ignored
    """
    overrides = {k: v for k, v in (cli_overrides or {}).items() if v is not None}
    return AppConfig(**overrides)
