from pathlib import Path
from typing import Any

from pydantic import field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from cardquest.domain.constants import DEFAULT_TIMEZONE


def config_files() -> list[Path]:
    return [
        Path.home() / ".config/cardquest/config.toml",
        Path.home() / ".cardquest.toml",
    ]


class EngineConfig(BaseSettings):
    """
    Configuration model for cardquest.
    Supports loading from:
    1. Environment variables (CARDQUEST_*)
    2. Config file (~/.config/cardquest/config.toml)
    3. Manual overrides (CLI)
    """

    model_config = SettingsConfigDict(
        env_prefix="CARDQUEST_",
        extra="ignore",
    )

    # Scheduling
    default_timezone: str = DEFAULT_TIMEZONE

    # Relative deck paths given to `study` are looked up here
    deck_dir: Path | None = None

    # Reproducible shuffles (None = fresh randomness every run)
    seed: int | None = None

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

        # First existing file wins
        toml_file = next((f for f in config_files() if f.exists()), None)

        # Init (CLI) > env > file
        if toml_file:
            return (
                init_settings,
                env_settings,
                TomlConfigSettingsSource(settings_cls, toml_file=toml_file),
            )
        return (init_settings, env_settings)

    @field_validator("default_timezone")
    @classmethod
    def check_timezone(cls, v: str) -> str:
        from cardquest.application.scheduler import resolve_zone

        resolve_zone(v)
        return v

    @field_validator("deck_dir", mode="before")
    @classmethod
    def resolve_deck_dir(cls, v: Any) -> Path | None:
        if v is None:
            return None
        return Path(v).expanduser().resolve()

    def deck_path(self, path: Path) -> Path:
        """Look a relative deck path up under `deck_dir` when the file exists there."""
        if self.deck_dir is not None and not path.is_absolute():
            candidate = self.deck_dir / path
            if candidate.exists():
                return candidate
        return path


def resolve_config(cli_overrides: dict[str, Any] | None = None) -> EngineConfig:
    """
    Multi-layered configuration resolution.
    1. Defaults in EngineConfig
    2. ~/.config/cardquest/config.toml (if exists)
    3. Environment variables (CARDQUEST_*)
    4. cli_overrides (non-None values passed from Typer)
    """
    overrides = {k: v for k, v in (cli_overrides or {}).items() if v is not None}
    return EngineConfig(**overrides)
