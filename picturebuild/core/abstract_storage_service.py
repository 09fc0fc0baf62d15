from abc import ABC, abstractmethod


class StorageService(ABC):
    @abstractmethod
    async def write(self, key: str, data: bytes):
        pass

    @abstractmethod
    async def read(self, key: str) -> bytes:
        pass

    @abstractmethod
    def list(self, suffix: str = "") -> list:
        pass
