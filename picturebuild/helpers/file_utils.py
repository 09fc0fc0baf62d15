import hashlib
import filetype
from PIL import Image
from io import BytesIO


def detect_extension_from_bytes(byte_data):
    fileinfo = filetype.guess(byte_data)
    if fileinfo is None:
        raise ValueError("Cannot determine file type")

    return fileinfo.extension


def detect_dims_from_bytes(byte_data):
    with Image.open(BytesIO(byte_data)) as image:
        return image.size


def decode_image(byte_data) -> Image.Image:
    image = Image.open(BytesIO(byte_data))
    image.load()
    if image.mode not in ("RGB", "RGBA"):
        has_alpha = "A" in image.mode or "transparency" in image.info
        image = image.convert("RGBA" if has_alpha else "RGB")
    # encoders copy ICC/EXIF from info; variants carry pixels only
    image.info = {}
    return image


def content_hash(byte_data, length=10):
    return hashlib.sha256(byte_data).hexdigest()[:length]


def content_type_from_extension(extension):
    if extension == "svg":
        return "image/svg+xml"
    return f"image/{extension}"


def format_bytes(size):
    if size < 1024:
        return f"{size} B"
    return f"{size / 1024:.1f} KB"
