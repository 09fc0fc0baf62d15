"""Tests for image variant generation and the manifest it writes."""

import asyncio
import re

import pytest
from PIL import Image

from picturebuild.core.config import BuildSettings
from picturebuild.core.errors import ImageDecodeError, SourceImageMissingError
from picturebuild.helpers.file_utils import content_hash
from picturebuild.models.data_models import ResizeConfig, ResizeSpec
from picturebuild.services.image_processing_service import build_images
from picturebuild.services.manifest_operations import load_manifest

from .conftest import make_jpeg_with_metadata, requires_avif

pytestmark = requires_avif


def _build(settings, config):
    return asyncio.run(build_images(settings, config))


class TestBuildImages:
    def test_manifest_has_one_entry_per_configured_image(
        self, settings, resize_config
    ):
        manifest = _build(settings, resize_config)
        assert set(manifest.images) == set(resize_config.images)
        assert "extra.png" not in manifest.images
        assert load_manifest(settings.manifest_path) == manifest

    def test_multi_size_srcset_ascending(self, settings, resize_config):
        entry = _build(settings, resize_config).images["column.png"]
        assert [s.width for s in entry.srcset] == [40, 80, 120]
        assert entry.png == entry.srcset[-1].png
        assert (entry.width, entry.height) == (120, 75)
        assert entry.sizes is not None
        for fmt in ("avif", "webp", "png"):
            assert re.fullmatch(
                rf"column\.120x75\.[0-9a-f]{{10}}\.{fmt}", getattr(entry, fmt)
            )

    def test_single_size_by_width(self, settings, resize_config):
        entry = _build(settings, resize_config).images["seed_top.png"]
        assert (entry.width, entry.height) == (64, 40)
        assert entry.srcset is None
        assert entry.sizes is None
        assert re.fullmatch(r"seed_top\.[0-9a-f]{10}\.webp", entry.webp)

    def test_single_size_by_height_keeps_aspect(self, settings, resize_config):
        entry = _build(settings, resize_config).images["seed_bottom.png"]
        assert (entry.width, entry.height) == (48, 30)

    def test_files_written_and_named_by_content(self, settings, resize_config):
        _build(settings, resize_config)
        written = sorted(p.name for p in settings.output_images_path.iterdir())
        # (3 + 1 + 1) sizes x 3 formats
        assert len(written) == 15
        for name in written:
            digest = name.rsplit(".", 2)[-2]
            data = (settings.output_images_path / name).read_bytes()
            assert content_hash(data) == digest

    def test_png_fallback_is_palette(self, settings, resize_config):
        entry = _build(settings, resize_config).images["seed_top.png"]
        with Image.open(settings.output_images_path / entry.png) as image:
            assert image.mode == "P"
            assert image.size == (64, 40)

    def test_deterministic_across_builds(self, site_root, resize_config):
        first = _build(BuildSettings(root=site_root), resize_config)
        second_settings = BuildSettings(root=site_root, dist_dir="dist-again")
        second = _build(second_settings, resize_config)
        assert first.to_json_dict() == second.to_json_dict()

        name = first.images["column.png"].srcset[0].avif
        assert (site_root / "dist" / "assets" / "images" / name).read_bytes() == (
            second_settings.output_images_path / name
        ).read_bytes()

    def test_reads_resize_config_file(self, settings):
        manifest = asyncio.run(build_images(settings))
        assert set(manifest.images) == {
            "column.png",
            "seed_top.png",
            "seed_bottom.png",
        }


class TestBuildImagesFailures:
    def test_missing_source_is_fatal(self, settings):
        config = ResizeConfig(images={"missing.png": ResizeSpec(width=10)})
        with pytest.raises(SourceImageMissingError) as exc_info:
            _build(settings, config)
        assert exc_info.value.filename == "missing.png"

    def test_undecodable_source_is_fatal(self, settings, site_root):
        (site_root / "assets" / "images" / "broken.png").write_bytes(
            b"this is not an image"
        )
        config = ResizeConfig(images={"broken.png": ResizeSpec(width=10)})
        with pytest.raises(ImageDecodeError):
            _build(settings, config)


class TestSourceMetadata:
    def test_variants_carry_no_icc_or_exif(self, settings):
        images = settings.source_images_path
        (images / "photo.jpg").write_bytes(make_jpeg_with_metadata((80, 60)))
        config = ResizeConfig(images={"photo.jpg": ResizeSpec(width=40)})
        entry = _build(settings, config).images["photo.jpg"]

        for fmt in ("avif", "webp", "png"):
            path = settings.output_images_path / getattr(entry, fmt)
            with Image.open(path) as image:
                assert "icc_profile" not in image.info, fmt
                assert "exif" not in image.info, fmt

    def test_log_line_names_source_format(self, settings, caplog):
        (settings.source_images_path / "photo.jpg").write_bytes(
            make_jpeg_with_metadata((80, 60))
        )
        config = ResizeConfig(images={"photo.jpg": ResizeSpec(width=40)})
        with caplog.at_level("INFO"):
            _build(settings, config)
        assert any(
            "photo.jpg" in message and " JPG → AVIF" in message
            for message in caplog.messages
        )
