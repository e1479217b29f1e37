from __future__ import annotations

from pathlib import Path

import pytest

from modkeeper.exceptions import FileOperationError
from modkeeper.utils.filesystem import safe_read_file, validate_file


@pytest.mark.unit
class TestValidateFile:
    """Tests for validate_file."""

    def test_existing_file_is_resolved(self, tmp_path: Path) -> None:
        path = tmp_path / "go.mod"
        path.write_text("module m\n", encoding="utf-8")

        assert validate_file(path) == path.resolve()

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileOperationError, match="File not found") as exc_info:
            validate_file(tmp_path / "missing.mod")

        assert exc_info.value.operation == "read"

    def test_directory_is_rejected(self, tmp_path: Path) -> None:
        with pytest.raises(FileOperationError, match="Not a file"):
            validate_file(tmp_path)


@pytest.mark.unit
class TestSafeReadFile:
    """Tests for safe_read_file."""

    def test_reads_content(self, tmp_path: Path) -> None:
        path = tmp_path / "go.mod"
        path.write_text("module example.com/ü\n", encoding="utf-8")

        assert safe_read_file(path) == "module example.com/ü\n"

    def test_accepts_string_path(self, tmp_path: Path) -> None:
        path = tmp_path / "go.mod"
        path.write_text("module m\n", encoding="utf-8")

        assert safe_read_file(str(path)) == "module m\n"

    def test_rejects_large_file(self, tmp_path: Path) -> None:
        path = tmp_path / "go.mod"
        path.write_text("x" * 100, encoding="utf-8")

        with pytest.raises(FileOperationError, match="File too large"):
            safe_read_file(path, max_size=10)

    def test_size_limit_can_be_disabled(self, tmp_path: Path) -> None:
        path = tmp_path / "go.mod"
        path.write_text("x" * 100, encoding="utf-8")

        assert len(safe_read_file(path, max_size=None)) == 100

    def test_decode_error_is_wrapped(self, tmp_path: Path) -> None:
        path = tmp_path / "go.mod"
        path.write_bytes(b"\xff\xfe\x00broken")

        with pytest.raises(FileOperationError, match="Failed to read file") as exc_info:
            safe_read_file(path)

        assert isinstance(exc_info.value.original_error, UnicodeDecodeError)
