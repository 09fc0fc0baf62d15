class BuildError(Exception):
    pass


class SourceImageMissingError(BuildError):
    def __init__(self, filename: str, directory):
        super().__init__(f"Source image not found: {filename} in {directory}")
        self.filename = filename
        self.directory = directory


class ImageDecodeError(BuildError):
    def __init__(self, filename: str, reason: str):
        super().__init__(f"Cannot decode {filename}: {reason}")
        self.filename = filename


class ManifestNotFoundError(BuildError):
    def __init__(self, path):
        super().__init__(
            f"Manifest not found at {path}; run the image stage first"
        )
        self.path = path


class ResizeConfigError(BuildError):
    pass
