from typing import Protocol


class FileStorePort(Protocol):
    def save(self, bucket: str, path: str, data: bytes) -> str:
        """Save bytes and return the key relative to the bucket."""
        ...

    def get(self, bucket: str, path: str) -> bytes:
        """Retrieve bytes by key. Raises FileNotFoundError."""
        ...

    def delete(self, bucket: str, path: str) -> None: ...

    def public_url(self, bucket: str, path: str) -> str: ...
