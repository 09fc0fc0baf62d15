import asyncio
from io import BytesIO
from PIL import Image
from typing import List, Optional
from picturebuild.core.abstract_storage_service import StorageService
from picturebuild.helpers.file_utils import (
    content_hash,
    detect_dims_from_bytes,
)
from picturebuild.models.data_models import ResizeSpec
from picturebuild.models.image_metadata import Asset, RenditionSet


class ImageVariantService:
    """Resizes one decoded source image and encodes every rendition as
    AVIF, WebP and palette PNG.

    Encoders are CPU bound and run in worker threads; the three formats of a
    rendition, and all renditions of the image, are produced concurrently.
    """

    def __init__(
        self,
        base_name: str,
        spec: ResizeSpec,
        image: Image.Image,
        storage: StorageService,
        avif_quality: int = 65,
        webp_quality: int = 80,
        png_compress_level: int = 9,
        hash_length: int = 10,
    ):
        self.base_name = base_name
        self.spec = spec
        self.image = image
        self.storage = storage
        self.avif_quality = avif_quality
        self.webp_quality = webp_quality
        self.png_compress_level = png_compress_level
        self.hash_length = hash_length

    def target_sizes(self) -> List[dict]:
        if self.spec.widths is not None:
            return [{"width": width} for width in self.spec.widths]
        if self.spec.width is not None:
            return [{"width": self.spec.width}]
        return [{"height": self.spec.height}]

    def resize(
        self, width: Optional[int] = None, height: Optional[int] = None
    ) -> Image.Image:
        src_width, src_height = self.image.size
        if width is not None:
            height = max(1, round(src_height * width / src_width))
        else:
            width = max(1, round(src_width * height / src_height))
        return self.image.resize((width, height), Image.Resampling.LANCZOS)

    def encode_avif(self, image: Image.Image) -> bytes:
        buffer = BytesIO()
        image.save(buffer, format="AVIF", quality=self.avif_quality)
        return buffer.getvalue()

    def encode_webp(self, image: Image.Image) -> bytes:
        buffer = BytesIO()
        image.save(buffer, format="WEBP", quality=self.webp_quality)
        return buffer.getvalue()

    def encode_png(self, image: Image.Image) -> bytes:
        if image.mode == "RGBA":
            palette = image.quantize(
                colors=256, method=Image.Quantize.FASTOCTREE
            )
        else:
            palette = image.quantize(colors=256)
        buffer = BytesIO()
        palette.save(
            buffer, format="PNG", compress_level=self.png_compress_level
        )
        return buffer.getvalue()

    def variant_filename(self, data: bytes, extension: str, size_tag=None):
        digest = content_hash(data, self.hash_length)
        if size_tag:
            return f"{self.base_name}.{size_tag}.{digest}.{extension}"
        return f"{self.base_name}.{digest}.{extension}"

    async def create_variant(self, **target) -> RenditionSet:
        resized = await asyncio.to_thread(self.resize, **target)

        avif_data, webp_data, png_data = await asyncio.gather(
            asyncio.to_thread(self.encode_avif, resized.copy()),
            asyncio.to_thread(self.encode_webp, resized.copy()),
            asyncio.to_thread(self.encode_png, resized.copy()),
        )

        # dimensions come from the encoded fallback, not the resize request
        width, height = detect_dims_from_bytes(png_data)
        size_tag = f"{width}x{height}" if self.spec.is_multi_size else None

        assets = {}
        for extension, data in (
            ("avif", avif_data),
            ("webp", webp_data),
            ("png", png_data),
        ):
            assets[extension] = Asset(
                filename=self.variant_filename(data, extension, size_tag),
                width=width,
                height=height,
                size=len(data),
                format=extension,
            )

        await asyncio.gather(
            self.storage.write(assets["avif"].filename, avif_data),
            self.storage.write(assets["webp"].filename, webp_data),
            self.storage.write(assets["png"].filename, png_data),
        )
        return RenditionSet(**assets)

    async def create_variants(self) -> List[RenditionSet]:
        variant_tasks = [
            self.create_variant(**target) for target in self.target_sizes()
        ]
        return await asyncio.gather(*variant_tasks)
