import asyncio
import logging
from typing import Optional
from picturebuild.core.config import BuildSettings, configure_logging
from picturebuild.services.asset_service import clean_output, copy_static_assets
from picturebuild.services.html_rewriter import build_html
from picturebuild.services.image_processing_service import build_images

logger = logging.getLogger(__name__)


# Clean, then run every stage in order; each stage hands off through the
# manifest file in the output tree.
async def main(settings: Optional[BuildSettings] = None):
    settings = settings or BuildSettings()

    clean_output(settings)
    await build_images(settings)
    await copy_static_assets(settings)
    result = build_html(settings)

    logger.info("Build complete")
    return result


if __name__ == "__main__":
    build_settings = BuildSettings()
    configure_logging(build_settings.log_level)
    asyncio.run(main(build_settings))
