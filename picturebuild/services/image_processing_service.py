import asyncio
import logging
import os
from pathlib import Path
from typing import Optional
from picturebuild.core.abstract_storage_service import StorageService
from picturebuild.core.config import BuildSettings
from picturebuild.core.errors import ImageDecodeError, SourceImageMissingError
from picturebuild.core.resize_config_loader import load_resize_config
from picturebuild.helpers.file_utils import (
    decode_image,
    detect_extension_from_bytes,
    format_bytes,
)
from picturebuild.models.data_models import ResizeConfig, ResizeSpec
from picturebuild.models.image_metadata import Manifest, VariantEntry
from picturebuild.services.image_variant_service import ImageVariantService
from picturebuild.services.local_filesystem_storage_service import (
    LocalFilesystemStorageService,
)
from picturebuild.services.manifest_operations import save_manifest

logger = logging.getLogger(__name__)

RASTER_EXTENSIONS = (".png", ".jpg", ".jpeg", ".webp", ".gif")


def _decode_source(src_data):
    return detect_extension_from_bytes(src_data), decode_image(src_data)


async def handle_image_processing(
    filename: str,
    spec: ResizeSpec,
    source_storage: StorageService,
    output_storage: StorageService,
    settings: BuildSettings,
) -> VariantEntry:
    try:
        src_data = await source_storage.read(filename)
    except FileNotFoundError as e:
        raise SourceImageMissingError(
            filename, settings.source_images_path
        ) from e

    try:
        src_format, image = await asyncio.to_thread(_decode_source, src_data)
    except (ValueError, OSError) as e:
        raise ImageDecodeError(filename, str(e)) from e

    variant_service = ImageVariantService(
        Path(filename).stem,
        spec,
        image,
        output_storage,
        avif_quality=settings.avif_quality,
        webp_quality=settings.webp_quality,
        png_compress_level=settings.png_compress_level,
        hash_length=settings.hash_length,
    )
    renditions = await variant_service.create_variants()
    entry = VariantEntry.from_renditions(renditions, spec.display_sizes)

    fallback = renditions[-1]
    if spec.is_multi_size:
        widths = ", ".join(f"{w}w" for w in spec.widths)
        logger.info(
            "  %s: %s %s → %d sizes (%s), largest WebP %s",
            filename,
            format_bytes(len(src_data)),
            src_format.upper(),
            len(renditions),
            widths,
            format_bytes(fallback.webp.size),
        )
    else:
        logger.info(
            "  %s: %s %s → AVIF %s, WebP %s, PNG %s",
            filename,
            format_bytes(len(src_data)),
            src_format.upper(),
            format_bytes(fallback.avif.size),
            format_bytes(fallback.webp.size),
            format_bytes(fallback.png.size),
        )
    return entry


def _log_unconfigured(source_storage: StorageService, config: ResizeConfig):
    for name in source_storage.list():
        if name.lower().endswith(RASTER_EXTENSIONS) and (
            name not in config.images
        ):
            logger.debug("  %s: no resize config, skipped", name)


async def build_images(
    settings: BuildSettings, resize_config: Optional[ResizeConfig] = None
) -> Manifest:
    logger.info("Optimizing images...")

    config = resize_config or load_resize_config(settings.resize_config_path)
    source_storage = LocalFilesystemStorageService(settings.source_images_path)
    output_storage = LocalFilesystemStorageService(settings.output_images_path)
    os.makedirs(settings.output_images_path, exist_ok=True)

    if os.path.isdir(settings.source_images_path):
        _log_unconfigured(source_storage, config)

    filenames = list(config.images)
    processing_tasks = [
        handle_image_processing(
            filename,
            config.images[filename],
            source_storage,
            output_storage,
            settings,
        )
        for filename in filenames
    ]
    entries = await asyncio.gather(*processing_tasks)

    manifest = Manifest(images=dict(zip(filenames, entries)))
    save_manifest(settings.manifest_path, manifest)

    logger.info("Manifest written to %s", settings.manifest_path)
    logger.info("Optimized %d images", len(manifest.images))
    return manifest
