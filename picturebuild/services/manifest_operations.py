import json
import os
from picturebuild.core.errors import ManifestNotFoundError
from picturebuild.models.image_metadata import Manifest


def save_manifest(path, manifest: Manifest):
    os.makedirs(os.path.dirname(os.fspath(path)) or ".", exist_ok=True)
    with open(path, "w", encoding="utf-8") as file:
        json.dump(manifest.to_json_dict(), file, indent=2, ensure_ascii=False)


def load_manifest(path) -> Manifest:
    if not os.path.exists(path):
        raise ManifestNotFoundError(path)
    with open(path, "r", encoding="utf-8") as file:
        return Manifest.from_json_dict(json.load(file))
