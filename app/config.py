from __future__ import annotations

import os
from pathlib import Path
from typing import Annotated, ClassVar

from pydantic import AfterValidator, BaseModel, Field, HttpUrl, TypeAdapter, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict
from pydantic_settings.sources import PydanticBaseSettingsSource, YamlConfigSettingsSource

from domain.element_defaults import DEFAULT_IMAGE_SRC
from domain.models import DEFAULT_BREAKPOINTS, Breakpoint
from domain.services.repair_rules import RepairLimits
from domain.services.scene_graph_store import DEFAULT_HISTORY_LIMIT

DEFAULT_CONFIG_PATH = Path("config/canvas/app.yaml")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

_HTTP_URL_ADAPTER = TypeAdapter(HttpUrl)


def _split_string_list_value(raw_value: str) -> list[str]:
    raw = raw_value.strip()
    if not raw:
        return []
    if (
        (raw.startswith('"') and raw.endswith('"')) or (raw.startswith("'") and raw.endswith("'"))
    ) and len(raw) >= 2:
        raw = raw[1:-1].strip()
    if raw.startswith("[") and raw.endswith("]"):
        raw = raw[1:-1].strip()
    if not raw:
        return []
    return [
        token for token in (part.strip().strip("'").strip('"') for part in raw.split(",")) if token
    ]


def _validate_image_url(value: str) -> str:
    normalized = str(value or "").strip()
    if not normalized:
        msg = "default_image_src must not be empty"
        raise ValueError(msg)
    _HTTP_URL_ADAPTER.validate_python(normalized)
    return normalized


ImageUrl = Annotated[str, AfterValidator(_validate_image_url)]


class BreakpointSettings(BaseModel):
    id: str
    name: str = ""
    width: float
    height: float = 0.0
    min_width: float | None = None
    max_width: float | None = None

    def to_breakpoint(self) -> Breakpoint:
        return Breakpoint(
            id=self.id,
            name=self.name or self.id.title(),
            width=self.width,
            height=self.height,
            min_width=self.min_width,
            max_width=self.max_width,
        )


def _default_breakpoint_settings() -> list[BreakpointSettings]:
    return [
        BreakpointSettings(
            id=bp.id,
            name=bp.name,
            width=bp.width,
            height=bp.height,
            min_width=bp.min_width,
            max_width=bp.max_width,
        )
        for bp in DEFAULT_BREAKPOINTS
    ]


class RepairSettings(BaseModel):
    header_max_height: float = Field(default=96.0, gt=0)
    button_min_height: float = Field(default=32.0, ge=0)
    button_max_height: float = Field(default=64.0, gt=0)
    button_max_padding_y: float = Field(default=20.0, ge=0)
    button_max_padding_x: float = Field(default=48.0, ge=0)
    button_min_font_size: float = Field(default=12.0, gt=0)
    button_max_font_size: float = Field(default=24.0, gt=0)
    section_max_padding: float = Field(default=120.0, ge=0)

    def to_limits(self, default_image_src: str) -> RepairLimits:
        return RepairLimits(
            header_max_height=self.header_max_height,
            button_min_height=self.button_min_height,
            button_max_height=self.button_max_height,
            button_max_padding_y=self.button_max_padding_y,
            button_max_padding_x=self.button_max_padding_x,
            button_min_font_size=self.button_min_font_size,
            button_max_font_size=self.button_max_font_size,
            section_max_padding=self.section_max_padding,
            default_image_src=default_image_src,
        )


class CompilerSettings(BaseModel):
    project_title: str = "Canvas Preview"
    package_name: str = "canvas-preview"
    history_limit: int = Field(default=DEFAULT_HISTORY_LIMIT, ge=1)
    breakpoints: list[BreakpointSettings] = Field(default_factory=_default_breakpoint_settings)
    enabled_breakpoints: Annotated[list[str], NoDecode] = Field(default_factory=list)
    responsive: bool = True
    default_image_src: ImageUrl = DEFAULT_IMAGE_SRC
    document_path: Path = Path("data/canvas/document.json")
    output_dir: Path = Path("data/canvas/generated")
    log_level: str = "INFO"
    repair: RepairSettings = RepairSettings()

    @field_validator("enabled_breakpoints", mode="before")
    @classmethod
    def normalize_lists(cls, value: object) -> list[str]:
        if value is None:
            return []
        if isinstance(value, list):
            normalized: list[str] = []
            for item in value:
                normalized.extend(_split_string_list_value(str(item)))
            return normalized
        return _split_string_list_value(str(value))

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: object) -> str:
        level = str(value or "INFO").strip().upper()
        if level not in LOG_LEVELS:
            msg = f"log_level must be one of {', '.join(LOG_LEVELS)}"
            raise ValueError(msg)
        return level

    def resolved_breakpoints(self) -> list[Breakpoint]:
        configured = [item.to_breakpoint() for item in self.breakpoints]
        if self.enabled_breakpoints:
            enabled = set(self.enabled_breakpoints)
            configured = [bp for bp in configured if bp.id in enabled]
        if not configured:
            msg = "At least one breakpoint must be enabled"
            raise ValueError(msg)
        return configured

    def repair_limits(self) -> RepairLimits:
        return self.repair.to_limits(self.default_image_src)


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="CANVAS_", env_nested_delimiter="__")

    compiler: CompilerSettings = CompilerSettings()

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
        return tuple(sources)


def load_settings(config_path: Path | None = None) -> AppSettings:
    env_path = os.getenv("CANVAS_CONFIG_PATH")
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
