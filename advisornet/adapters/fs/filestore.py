import os
from pathlib import Path


class FileSystemStore:
    """
    Bucketed object storage on the local filesystem.

    Buckets are subdirectories of base_path; keys are relative paths inside
    a bucket. Public URLs point at the /files route.
    """

    def __init__(self, base_path: str, public_base_url: str = ""):
        self.base_path = Path(base_path).resolve()
        self.public_base_url = public_base_url.rstrip("/")
        if not self.base_path.exists():
            os.makedirs(self.base_path, exist_ok=True)

    def _safe_path(self, bucket: str, path: str) -> Path:
        root = (self.base_path / bucket).resolve()
        target = (root / path).resolve()
        if root.parent != self.base_path or not target.is_relative_to(root) or target == root:
            raise ValueError(f"Path traversal attempt detected: {bucket}/{path}")
        return target

    def save(self, bucket: str, path: str, data: bytes) -> str:
        """Save bytes and return the key relative to the bucket."""
        target = self._safe_path(bucket, path)
        target.parent.mkdir(parents=True, exist_ok=True)
        with open(target, "wb") as f:
            f.write(data)
        return str(target.relative_to(self.base_path / bucket).as_posix())

    def get(self, bucket: str, path: str) -> bytes:
        """Retrieve bytes by key. Raises FileNotFoundError."""
        target = self._safe_path(bucket, path)
        if not target.is_file():
            raise FileNotFoundError(f"File not found: {bucket}/{path}")
        with open(target, "rb") as f:
            return f.read()

    def delete(self, bucket: str, path: str) -> None:
        target = self._safe_path(bucket, path)
        if target.exists():
            os.remove(target)

    def public_url(self, bucket: str, path: str) -> str:
        return f"{self.public_base_url}/files/{bucket}/{path}"
