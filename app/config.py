from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, ClassVar

from pydantic import BaseModel, field_validator
from pydantic.fields import FieldInfo
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic_settings.sources import PydanticBaseSettingsSource, YamlConfigSettingsSource

from adapters.layout.baseline import LayoutConfig
from domain.models import SpacingOptions
from domain.option_keys import normalize_option_overrides

DEFAULT_CONFIG_PATH = Path("config/rankspace.yaml")


def _normalize_spacing_keys(data: dict[str, Any]) -> dict[str, Any]:
    layout = data.get("layout")
    if not isinstance(layout, dict):
        return data
    spacing = layout.get("spacing")
    if not isinstance(spacing, dict):
        return data
    overrides = normalize_option_overrides(spacing)
    normalized = {key.field_name: value for key, value in overrides.items()}
    return {**data, "layout": {**layout, "spacing": normalized}}


class SpacingKeysSource(PydanticBaseSettingsSource):
    """Expands spacing shorthands inside one source, before sources are merged."""

    def __init__(
        self, settings_cls: type[BaseSettings], source: PydanticBaseSettingsSource
    ) -> None:
        super().__init__(settings_cls)
        self.source = source

    def get_field_value(self, field: FieldInfo, field_name: str) -> tuple[Any, str, bool]:
        return self.source.get_field_value(field, field_name)

    def __call__(self) -> dict[str, Any]:
        return _normalize_spacing_keys(self.source())


class LayoutSettings(BaseModel):
    spacing: SpacingOptions = SpacingOptions()
    log_level: str = "WARNING"

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: object) -> str:
        level = str(value or "WARNING").strip().upper()
        if level not in logging.getLevelNamesMapping():
            msg = f"Unknown log level: {value}"
            raise ValueError(msg)
        return level

    def to_engine_config(self) -> LayoutConfig:
        return LayoutConfig(spacing=self.spacing)


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="RANKSPACE_", env_nested_delimiter="__")

    layout: LayoutSettings = LayoutSettings()

    _yaml_path: ClassVar[Path | None] = None

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
        return tuple(SpacingKeysSource(settings_cls, source) for source in sources)


def load_settings(config_path: Path | None = None) -> AppSettings:
    env_path = os.getenv("RANKSPACE_CONFIG_PATH")
    resolved_path: Path | None = None

    if config_path is not None:
        resolved_path = config_path
    elif env_path:
        resolved_path = Path(env_path)
    elif DEFAULT_CONFIG_PATH.exists():
        resolved_path = DEFAULT_CONFIG_PATH

    previous = AppSettings._yaml_path
    try:
        if resolved_path is not None:
            if not resolved_path.exists():
                msg = f"Config file not found: {resolved_path}"
                raise FileNotFoundError(msg)
            AppSettings._yaml_path = resolved_path
        return AppSettings()
    finally:
        AppSettings._yaml_path = previous
