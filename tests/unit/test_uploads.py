from __future__ import annotations

import io
from pathlib import Path

import pytest

from src.app.domain.errors import InvalidUploadError
from src.app.services.uploads import spool_upload


class TestSpoolUpload:
    def test_writes_temp_file(self, tmp_path: Path) -> None:
        upload = spool_upload(io.BytesIO(b"png-bytes"), "my photo.png", "image/png", tmp_path, 1024)

        assert upload.path.parent == tmp_path
        assert upload.path.read_bytes() == b"png-bytes"
        assert upload.filename == "my_photo.png"
        assert upload.content_type == "image/png"
        assert upload.size_bytes == 9

    def test_strips_directories(self, tmp_path: Path) -> None:
        upload = spool_upload(io.BytesIO(b"x"), "../../etc/passwd.png", "image/png", tmp_path, 1024)
        assert upload.filename == "passwd.png"
        assert upload.path.parent == tmp_path

    def test_rejects_non_image(self, tmp_path: Path) -> None:
        with pytest.raises(InvalidUploadError):
            spool_upload(io.BytesIO(b"%PDF"), "doc.pdf", "application/pdf", tmp_path, 1024)
        assert list(tmp_path.iterdir()) == []

    def test_too_large_leaves_nothing(self, tmp_path: Path) -> None:
        with pytest.raises(InvalidUploadError):
            spool_upload(io.BytesIO(b"x" * 2048), "big.jpg", "image/jpeg", tmp_path, 1024)
        assert list(tmp_path.iterdir()) == []

    def test_empty_file(self, tmp_path: Path) -> None:
        with pytest.raises(InvalidUploadError):
            spool_upload(io.BytesIO(b""), "empty.png", "image/png", tmp_path, 1024)
        assert list(tmp_path.iterdir()) == []
