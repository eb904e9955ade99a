from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import ClassVar

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic_settings.sources import PydanticBaseSettingsSource, YamlConfigSettingsSource

from domain.services.command_table import SessionOptions
from domain.services.shift_rectangle import FAST_STEP

DEFAULT_CONFIG_PATH = Path("config/rectcalc.yaml")
CONFIG_PATH_ENV = "RECTCALC_CONFIG_PATH"


class EditingSettings(BaseModel):
    fast_step: int = Field(default=FAST_STEP, gt=0)
    fill_column: int = Field(default=70, gt=0)
    resume_after_command: bool = True
    clipboard_capacity: int = Field(default=16, gt=0)


class CalcSettings(BaseModel):
    precision: int | None = Field(default=None, ge=0)
    bracket_normalization: bool = True


class StateSettings(BaseModel):
    path: Path = Path(".rectcalc/state.json")
    persist: bool = True


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="RECTCALC_", env_nested_delimiter="__")

    editing: EditingSettings = EditingSettings()
    calc: CalcSettings = CalcSettings()
    state: StateSettings = StateSettings()
    log_level: str = "WARNING"

    _yaml_path: ClassVar[Path | None] = None

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: object) -> str:
        level = str(value or "WARNING").strip().upper()
        if level not in logging.getLevelNamesMapping():
            msg = f"Unknown log level: {value}"
            raise ValueError(msg)
        return level

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        sources: list[PydanticBaseSettingsSource] = [
            init_settings,
            env_settings,
            dotenv_settings,
            file_secret_settings,
        ]
        if cls._yaml_path:
            sources.append(YamlConfigSettingsSource(settings_cls, yaml_file=cls._yaml_path))
        return tuple(sources)

    def to_session_options(self) -> SessionOptions:
        return SessionOptions(
            fast_step=self.editing.fast_step,
            fill_column=self.editing.fill_column,
            calc_precision=self.calc.precision,
            normalize_brackets=self.calc.bracket_normalization,
            resume_after_command=self.editing.resume_after_command,
        )


def resolve_config_path(config_path: Path | None = None) -> Path | None:
    """Explicit path, then $RECTCALC_CONFIG_PATH, then the default file if present."""
    if config_path is None:
        env_path = os.getenv(CONFIG_PATH_ENV)
        if not env_path:
            return DEFAULT_CONFIG_PATH if DEFAULT_CONFIG_PATH.exists() else None
        config_path = Path(env_path)
    if not config_path.exists():
        msg = f"Config file not found: {config_path}"
        raise FileNotFoundError(msg)
    return config_path


def load_settings(config_path: Path | None = None) -> AppSettings:
    previous = AppSettings._yaml_path
    AppSettings._yaml_path = resolve_config_path(config_path)
    try:
        return AppSettings()
    finally:
        AppSettings._yaml_path = previous
