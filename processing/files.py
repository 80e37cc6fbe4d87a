"""Local filesystem access for source documents and rendered artifacts."""
import asyncio
from pathlib import Path


class LocalFileStorage:
    """File storage backed by the local disk; blocking I/O runs in a thread."""

    async def read_file(self, path: str) -> bytes:
        return await asyncio.to_thread(Path(path).read_bytes)

    async def write_file(self, path: str, data: bytes) -> None:
        await asyncio.to_thread(Path(path).write_bytes, data)

    async def ensure_directory(self, path: str) -> None:
        await asyncio.to_thread(Path(path).mkdir, parents=True, exist_ok=True)
