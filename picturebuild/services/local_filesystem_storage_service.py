import os
import aiofiles
from picturebuild.core.abstract_storage_service import StorageService


class LocalFilesystemStorageService(StorageService):
    def __init__(self, base_path):
        self.base_path = os.fspath(base_path)

    async def write(self, key: str, data: bytes):
        local_path = os.path.join(self.base_path, key)
        os.makedirs(os.path.dirname(local_path), exist_ok=True)
        async with aiofiles.open(local_path, "wb") as f:
            await f.write(data)

    async def read(self, key: str) -> bytes:
        local_path = os.path.join(self.base_path, key)
        async with aiofiles.open(local_path, "rb") as f:
            return await f.read()

    def list(self, suffix: str = "") -> list:
        return sorted(
            name
            for name in os.listdir(self.base_path)
            if name.endswith(suffix)
            and os.path.isfile(os.path.join(self.base_path, name))
        )
