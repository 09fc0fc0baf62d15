import asyncio
import logging
import os
import shutil
from pathlib import Path
from typing import Dict
from picturebuild.core.abstract_storage_service import StorageService
from picturebuild.core.config import BuildSettings
from picturebuild.helpers.file_utils import content_hash
from picturebuild.models.image_metadata import Manifest
from picturebuild.services.local_filesystem_storage_service import (
    LocalFilesystemStorageService,
)
from picturebuild.services.manifest_operations import (
    load_manifest,
    save_manifest,
)

logger = logging.getLogger(__name__)


def clean_output(settings: BuildSettings):
    logger.info("Cleaning %s...", settings.dist_path)
    if os.path.exists(settings.dist_path):
        shutil.rmtree(settings.dist_path)
    os.makedirs(settings.dist_path, exist_ok=True)


def copy_dir(src, dest):
    shutil.copytree(src, dest, dirs_exist_ok=True)


async def hash_vector_image(
    filename: str,
    source_storage: StorageService,
    output_storage: StorageService,
    hash_length: int = 10,
) -> str:
    data = await source_storage.read(filename)
    hashed_name = f"{Path(filename).stem}.{content_hash(data, hash_length)}.svg"
    await output_storage.write(hashed_name, data)
    return hashed_name


async def hash_vector_images(settings: BuildSettings) -> Dict[str, str]:
    source_storage = LocalFilesystemStorageService(settings.source_images_path)
    output_storage = LocalFilesystemStorageService(settings.output_images_path)
    os.makedirs(settings.output_images_path, exist_ok=True)

    filenames = source_storage.list(".svg")
    hashed_names = await asyncio.gather(
        *[
            hash_vector_image(
                filename, source_storage, output_storage, settings.hash_length
            )
            for filename in filenames
        ]
    )
    return dict(zip(filenames, hashed_names))


async def copy_static_assets(settings: BuildSettings) -> Manifest:
    logger.info("Copying static assets...")
    manifest = load_manifest(settings.manifest_path)

    for directory in (settings.css_dir, settings.fonts_dir):
        copy_dir(settings.root / directory, settings.dist_path / directory)
        logger.info("  Copied %s/", directory)

    svg_map = await hash_vector_images(settings)

    manifest = manifest.with_vector_map(svg_map)
    save_manifest(settings.manifest_path, manifest)

    logger.info("  Hashed %d SVG images", len(svg_map))
    return manifest
