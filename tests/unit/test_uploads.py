import pytest

from advisornet.domain.uploads import (
    AVATARS_BUCKET,
    PUBLICATIONS_BUCKET,
    UploadedFile,
    check_upload,
)


@pytest.mark.parametrize(
    "filename,expected",
    [("face.PNG", "png"), ("paper.final.pdf", "pdf"), ("noext", "bin"), ("", "bin")],
)
def test_extension(filename, expected):
    assert UploadedFile(filename, "image/png", b"x").extension == expected


def test_allowed_upload(rules):
    file = UploadedFile("face.png", "image/png", b"png")
    assert check_upload(file, AVATARS_BUCKET, rules.uploads) is None


def test_mime_allowlist_is_per_bucket(rules):
    pdf = UploadedFile("paper.pdf", "application/pdf", b"%PDF")
    assert check_upload(pdf, PUBLICATIONS_BUCKET, rules.uploads) is None
    assert "not allowed" in (check_upload(pdf, AVATARS_BUCKET, rules.uploads) or "")


def test_empty_file(rules):
    assert check_upload(UploadedFile("a.png", "image/png", b""), AVATARS_BUCKET, rules.uploads)


def test_size_limit(rules):
    limits = rules.uploads.model_copy(update={"max_upload_bytes": 4})
    big = UploadedFile("a.png", "image/png", b"12345")
    assert "limit" in (check_upload(big, AVATARS_BUCKET, limits) or "")


def test_unknown_bucket(rules):
    file = UploadedFile("a.png", "image/png", b"x")
    assert check_upload(file, "secrets", rules.uploads) == "Unknown bucket: secrets"
