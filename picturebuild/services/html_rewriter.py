"""Rewrites the page template against the image manifest.

Raster ``<img>`` tags pointing at a configured PNG become ``<picture>``
blocks with AVIF and WebP sources; SVG references get their hashed names.
Tags are matched with a regex, so an attribute containing a literal ``>``
ends the match early and the tag is left as it is.
"""

import logging
import re
from pydantic import BaseModel
from picturebuild.core.config import BuildSettings
from picturebuild.helpers.file_utils import content_type_from_extension
from picturebuild.models.image_metadata import Manifest, VariantEntry
from picturebuild.services.manifest_operations import load_manifest

logger = logging.getLogger(__name__)


class RewriteResult(BaseModel):
    html: str
    picture_count: int
    svg_count: int


def img_tag_pattern(images_url: str) -> re.Pattern:
    # [^>] keeps the match inside one tag but still spans newlines
    prefix = re.escape(images_url)
    return re.compile(
        rf'^([ \t]*)<img\b([^>]*?\bsrc="{prefix}/([^"]+\.png)"[^>]*?)/>',
        re.MULTILINE,
    )


def svg_src_pattern(images_url: str) -> re.Pattern:
    return re.compile(rf'src="{re.escape(images_url)}/([^"]+\.svg)"')


def build_srcset(entry: VariantEntry, fmt: str, images_url: str) -> str:
    if entry.srcset:
        return ", ".join(
            f"{images_url}/{getattr(v, fmt)} {v.width}w" for v in entry.srcset
        )
    return f"{images_url}/{getattr(entry, fmt)}"


def build_picture(
    entry: VariantEntry, indent: str, other_attrs: str, images_url: str
) -> str:
    sizes_attr = f' sizes="{entry.sizes}"' if entry.sizes else ""

    lines = [f"{indent}<picture>"]
    for fmt in ("avif", "webp"):
        lines.append(
            f'{indent}  <source srcset="{build_srcset(entry, fmt, images_url)}"'
            f'{sizes_attr} type="{content_type_from_extension(fmt)}" />'
        )

    img_attrs = []
    if entry.srcset:
        # multi-size: the fallback <img> gets its own PNG srcset
        img_attrs.append(
            f'srcset="{build_srcset(entry, "png", images_url)}"{sizes_attr}'
        )
    img_attrs.append(f'src="{images_url}/{entry.png}"')
    if other_attrs:
        img_attrs.append(other_attrs)
    img_attrs.append(f'width="{entry.width}" height="{entry.height}"')

    lines.append(f"{indent}  <img {' '.join(img_attrs)} />")
    lines.append(f"{indent}</picture>")
    return "\n".join(lines)


def rewrite_html(
    html: str, manifest: Manifest, images_url: str = "assets/images"
) -> RewriteResult:
    src_attr = re.compile(rf'\bsrc="{re.escape(images_url)}/[^"]+\.png"')
    picture_count = 0

    def replace_img(match):
        nonlocal picture_count
        indent, inner_attrs, filename = match.groups()
        entry = manifest.images.get(filename)
        if entry is None:
            return match.group(0)

        other_attrs = " ".join(src_attr.sub("", inner_attrs).split())
        picture_count += 1
        return build_picture(entry, indent, other_attrs, images_url)

    html = img_tag_pattern(images_url).sub(replace_img, html)

    svg_map = manifest.svg or {}
    svg_count = 0

    def replace_svg(match):
        nonlocal svg_count
        hashed = svg_map.get(match.group(1))
        if not hashed:
            return match.group(0)
        svg_count += 1
        return f'src="{images_url}/{hashed}"'

    html = svg_src_pattern(images_url).sub(replace_svg, html)

    return RewriteResult(
        html=html, picture_count=picture_count, svg_count=svg_count
    )


def build_html(settings: BuildSettings) -> RewriteResult:
    logger.info("Building HTML...")

    manifest = load_manifest(settings.manifest_path)
    html = settings.template_path.read_text(encoding="utf-8")

    result = rewrite_html(html, manifest, settings.images_url)

    settings.output_template_path.parent.mkdir(parents=True, exist_ok=True)
    settings.output_template_path.write_text(result.html, encoding="utf-8")

    logger.info("  Written %s", settings.output_template_path)
    logger.info(
        "  Replaced %d <img> tags with <picture> elements",
        result.picture_count,
    )
    logger.info("  Hashed %d SVG references", result.svg_count)
    return result
