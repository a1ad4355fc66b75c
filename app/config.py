"""Application configuration loaded from config.yaml + environment variables."""

from __future__ import annotations

import yaml
from pathlib import Path
from pydantic import Field
from pydantic_settings import BaseSettings

_CONFIG_PATH = Path(__file__).resolve().parent.parent / "config.yaml"


def _load_yaml() -> dict:
    if _CONFIG_PATH.exists():
        with open(_CONFIG_PATH) as f:
            return yaml.safe_load(f) or {}
    return {}


_yaml = _load_yaml()


class SheetApiConfig(BaseSettings):
    url: str = ""
    secret_key: str = ""
    timeout_seconds: float = 15.0

    model_config = {"env_prefix": "SHEET_API_"}


class UIConfig(BaseSettings):
    message_ttl_seconds: float = 3.0
    workspace_cookie: str = "repair_workspace"
    workspace_idle_seconds: float = 3600.0
    max_workspaces: int = 1000

    model_config = {"env_prefix": "UI_"}


class Settings(BaseSettings):
    log_level: str = "INFO"
    sheet_api: SheetApiConfig = Field(default_factory=SheetApiConfig)
    ui: UIConfig = Field(default_factory=UIConfig)

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


def get_settings() -> Settings:
    """Build Settings by merging YAML defaults with env overrides."""
    y = _yaml
    api = SheetApiConfig(**y.get("sheet_api", {}))
    ui = UIConfig(**y.get("ui", {}))
    if "log_level" in y:
        return Settings(log_level=y["log_level"], sheet_api=api, ui=ui)
    return Settings(sheet_api=api, ui=ui)
