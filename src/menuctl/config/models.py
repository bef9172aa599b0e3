"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, menuctl.toml only contains
overrides. A fresh project needs no config file at all.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

# --- menuctl.toml sections ---


class StorageConfig(BaseModel):
    """[storage] section."""

    model_config = {"frozen": True}

    backend: Literal["sqlite", "memory"] = "sqlite"
    path: str = ".menuctl/menus.db"


class EditorConfig(BaseModel):
    """[editor] section."""

    model_config = {"frozen": True}

    autosave: Literal["immediate", "debounce"] = "immediate"
    debounce_seconds: float = Field(default=2.0, ge=0)
    user_id: str | None = None


class PublishConfig(BaseModel):
    """[publish] section."""

    model_config = {"frozen": True}

    base_url: str = "https://www.mymobilemenu.com/menu"
    default_title: str = "Our Menu"
    default_subtitle: str = "Crafted with care and passion"
    require_sections: bool = True


class PluginsConfig(BaseModel):
    """[plugins] section."""

    model_config = {"frozen": True}

    enabled: bool = True
    console_preview: bool = False


class MenuConfig(BaseModel):
    """Root configuration composing all sections."""

    model_config = {"frozen": True}

    storage: StorageConfig = Field(default_factory=StorageConfig)
    editor: EditorConfig = Field(default_factory=EditorConfig)
    publish: PublishConfig = Field(default_factory=PublishConfig)
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)
