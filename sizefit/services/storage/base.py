from typing import List, Protocol


class StorageBackend(Protocol):
    async def get_item(self, key: str) -> str | None:
        ...

    async def set_item(self, key: str, value: str) -> None:
        ...

    async def remove_item(self, key: str) -> None:
        ...

    async def keys(self) -> List[str]:
        ...
