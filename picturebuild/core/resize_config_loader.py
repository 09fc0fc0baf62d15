import json
import logging
import os
from pydantic import ValidationError
from picturebuild.core.errors import ResizeConfigError
from picturebuild.models.data_models import DEFAULT_RESIZE_CONFIG, ResizeConfig

logger = logging.getLogger(__name__)


def load_resize_config(path) -> ResizeConfig:
    if not os.path.exists(path):
        logger.debug("No resize config at %s, using defaults", path)
        return DEFAULT_RESIZE_CONFIG

    with open(path, "r", encoding="utf-8") as file:
        try:
            config_data = json.load(file)
        except json.JSONDecodeError as e:
            raise ResizeConfigError(f"{path} is not valid JSON: {e}") from e

    try:
        return ResizeConfig(**config_data)
    except (TypeError, ValidationError) as e:
        raise ResizeConfigError(f"Invalid resize config {path}: {e}") from e
