"""
Filesystem helpers for modkeeper.

Manifests are only ever read, never written. All filesystem errors are
normalized to :class:`FileOperationError`.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

from modkeeper.constants import MAX_FILE_SIZE
from modkeeper.exceptions import FileOperationError
from modkeeper.utils.logger import get_logger

logger = get_logger("filesystem")

PathLike = Union[str, Path]


def validate_file(path: PathLike) -> Path:
    """Ensure ``path`` names an existing regular file and resolve it.

    Raises:
        FileOperationError: The path is missing or is not a file.
    """
    candidate = Path(path)
    if not candidate.exists():
        raise FileOperationError(
            f"File not found: {candidate}",
            file_path=str(candidate),
            operation="read",
        )
    if not candidate.is_file():
        raise FileOperationError(
            f"Not a file: {candidate}",
            file_path=str(candidate),
            operation="read",
        )
    return candidate.resolve()


def safe_read_file(
    file_path: PathLike,
    *,
    max_size: Optional[int] = MAX_FILE_SIZE,
    encoding: str = "utf-8",
) -> str:
    """Read a text file, refusing files larger than ``max_size`` bytes.

    Args:
        file_path: Path to the file.
        max_size: Maximum allowed size in bytes (``None`` disables the limit).
        encoding: Text encoding.

    Returns:
        File contents as a string.

    Raises:
        FileOperationError: The file is missing, too large, or unreadable.
    """
    path = validate_file(file_path)
    size = path.stat().st_size

    if max_size is not None and size > max_size:
        raise FileOperationError(
            f"File too large: {size} bytes (max {max_size})",
            file_path=str(path),
            operation="read",
        )

    try:
        content = path.read_text(encoding=encoding)
    except (OSError, UnicodeDecodeError) as exc:
        raise FileOperationError(
            f"Failed to read file: {exc}",
            file_path=str(path),
            operation="read",
            original_error=exc,
        ) from exc

    logger.debug("Read %d byte(s) from %s", size, path)
    return content
