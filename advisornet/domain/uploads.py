from dataclasses import dataclass
from pathlib import PurePosixPath

from advisornet.rules.models import UploadsRules

AVATARS_BUCKET = "avatars"
PUBLICATIONS_BUCKET = "publications"


@dataclass
class UploadedFile:
    filename: str
    content_type: str
    data: bytes

    @property
    def extension(self) -> str:
        suffix = PurePosixPath(self.filename or "").suffix.lstrip(".").lower()
        return suffix or "bin"


def check_upload(file: UploadedFile, bucket: str, rules: UploadsRules) -> str | None:
    """Return an error message when the upload breaks the bucket rules."""
    if not file.data:
        return "File is empty"
    if len(file.data) > rules.max_upload_bytes:
        return f"File exceeds the {rules.max_upload_bytes} byte limit"
    bucket_rules = rules.buckets.get(bucket)
    if bucket_rules is None:
        return f"Unknown bucket: {bucket}"
    if file.content_type not in bucket_rules.allowlist_mime_types:
        return f"File type {file.content_type} is not allowed"
    return None
