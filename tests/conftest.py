"""Shared fixtures: a small site source tree in a temp directory."""

import json
from io import BytesIO
from pathlib import Path

import pytest
from PIL import Image, ImageCms, ImageDraw, features

from picturebuild.core.config import BuildSettings
from picturebuild.models.data_models import ResizeConfig, ResizeSpec

requires_avif = pytest.mark.skipif(
    not features.check("avif"), reason="Pillow built without AVIF support"
)

TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
  <link rel="stylesheet" href="assets/css/main.css">
</head>
<body>
  <main>
    <img class="card" alt="Column" src="assets/images/column.png" />
    <img
      class="seed"
      src="assets/images/seed_top.png"
      alt=""
    />
    <img src="assets/images/extra.png" alt="raw" />
    <img src="assets/images/logo.svg" alt="logo" />
  </main>
</body>
</html>
"""

LOGO_SVG = b'<svg xmlns="http://www.w3.org/2000/svg" width="10" height="10"/>'
ICON_SVG = b'<svg xmlns="http://www.w3.org/2000/svg" width="4" height="4"/>'


def make_png(path: Path, size=(160, 100), mode="RGBA"):
    image = Image.new(mode, size, (200, 80, 40, 255)[: len(mode)])
    draw = ImageDraw.Draw(image)
    draw.ellipse((10, 10, size[0] - 10, size[1] - 10), fill=(20, 120, 220))
    draw.rectangle((0, 0, size[0] // 4, size[1] // 4), fill=(250, 250, 250))
    image.save(path, format="PNG")


def make_jpeg_with_metadata(size=(16, 12)):
    """JPEG bytes carrying an sRGB ICC profile and an EXIF DateTime."""
    icc = ImageCms.ImageCmsProfile(ImageCms.createProfile("sRGB")).tobytes()
    exif = Image.Exif()
    exif[0x0132] = "2024:01:01 12:00:00"
    buffer = BytesIO()
    Image.new("RGB", size, (10, 200, 30)).save(
        buffer, format="JPEG", icc_profile=icc, exif=exif.tobytes()
    )
    return buffer.getvalue()


@pytest.fixture
def resize_config() -> ResizeConfig:
    return ResizeConfig(
        images={
            "column.png": ResizeSpec(widths=[120, 40, 80]),
            "seed_top.png": ResizeSpec(width=64),
            "seed_bottom.png": ResizeSpec(height=30),
        }
    )


@pytest.fixture
def site_root(tmp_path: Path, resize_config: ResizeConfig) -> Path:
    """Project root with template, images, css, fonts and images.json."""
    images = tmp_path / "assets" / "images"
    images.mkdir(parents=True)
    make_png(images / "column.png")
    make_png(images / "seed_top.png", mode="RGB")
    make_png(images / "seed_bottom.png")
    make_png(images / "extra.png", size=(20, 20))
    (images / "logo.svg").write_bytes(LOGO_SVG)
    (images / "icon.svg").write_bytes(ICON_SVG)

    css = tmp_path / "assets" / "css"
    css.mkdir(parents=True)
    (css / "main.css").write_text("body { margin: 0; }\n", encoding="utf-8")

    fonts = tmp_path / "assets" / "fonts" / "inter"
    fonts.mkdir(parents=True)
    (fonts / "inter.woff2").write_bytes(b"wOF2\x00\x01fontdata")

    (tmp_path / "index.html").write_text(TEMPLATE, encoding="utf-8")
    (tmp_path / "images.json").write_text(
        json.dumps(resize_config.model_dump(exclude_none=True)),
        encoding="utf-8",
    )
    return tmp_path


@pytest.fixture
def settings(site_root: Path) -> BuildSettings:
    return BuildSettings(root=site_root)
