"""Build settings, overridable via PICTUREBUILD_* environment variables.

Examples::

    export PICTUREBUILD_DIST_DIR=public
    export PICTUREBUILD_LOG_LEVEL=DEBUG
"""

import logging
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class BuildSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="PICTUREBUILD_",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Source tree, relative to root
    root: Path = Path(".")
    template: str = "index.html"
    images_dir: str = "assets/images"
    css_dir: str = "assets/css"
    fonts_dir: str = "assets/fonts"
    resize_config: str = "images.json"

    # Output tree, relative to root
    dist_dir: str = "dist"
    manifest_name: str = "image-manifest.json"

    # Encoders
    avif_quality: int = 65
    webp_quality: int = 80
    png_compress_level: int = 9
    hash_length: int = 10

    log_level: str = "INFO"

    @property
    def source_images_path(self) -> Path:
        return self.root / self.images_dir

    @property
    def template_path(self) -> Path:
        return self.root / self.template

    @property
    def resize_config_path(self) -> Path:
        return self.root / self.resize_config

    @property
    def dist_path(self) -> Path:
        return self.root / self.dist_dir

    @property
    def output_images_path(self) -> Path:
        return self.dist_path / self.images_dir

    @property
    def output_template_path(self) -> Path:
        return self.dist_path / Path(self.template).name

    @property
    def manifest_path(self) -> Path:
        return self.dist_path / self.manifest_name

    @property
    def images_url(self) -> str:
        return Path(self.images_dir).as_posix().strip("/")


def configure_logging(level: str = "INFO"):
    logging.basicConfig(level=level.upper(), format="%(message)s", force=True)
