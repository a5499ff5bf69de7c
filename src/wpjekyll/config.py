"""Application configuration: settings schema and config.yaml loader"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field


CONFIG_FILE = "config.yaml"


class Settings(BaseModel):
    app_name:         str = "wpjekyll"
    source:           str = Field(default="wordpress.xml", description="WordPress export (WXR) file")
    output_dir:       str = Field(default=".", description="Site root receiving _posts, _drafts, ... and assets")
    no_fetch_images:  bool = Field(default=False, description="Rewrite image refs but skip downloads")
    assets_folder:    str = Field(default="assets", min_length=1, description="Asset cache dir and URL path segment")
    asset_url_prefix: str = Field(default="{{ site.baseurl }}", description="Prefix for rewritten image srcs")
    include_meta:     bool = Field(default=False, description="Embed raw post meta in the front matter")
    strip_hero_image: bool = Field(default=True, description="Drop the first image of each body")
    revert_failed_assets: bool = Field(default=False, description="Restore the original src when a fetch fails")
    fetch_timeout:    float = Field(default=30.0, gt=0, description="Per-request timeout in seconds")
    max_redirects:    int = Field(default=5, ge=0, description="Max redirect hops per asset")
    log_level:        str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")

    @property
    def fetch_images(self) -> bool:
        return not self.no_fetch_images

    @property
    def assets_dir(self) -> Path:
        return Path(self.output_dir) / self.assets_folder


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from config.yaml, then WPJEKYLL_<FIELD> env vars, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Invalid {CONFIG_FILE}: expected a mapping, got {type(data).__name__}")

    for name in Settings.model_fields:
        if val := os.getenv(f"WPJEKYLL_{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**data)
