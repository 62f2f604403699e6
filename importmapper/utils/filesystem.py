"""
Filesystem utilities for importmapper.

Safe helpers for reading, atomically writing and deleting the files
importmapper owns: the persisted entry list, pre-rendered import map
artifacts and vendored package files. All filesystem errors are normalized
to ``FileOperationError``.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Optional, Union

from importmapper.utils.logger import get_logger
from importmapper.exceptions import FileOperationError


logger = get_logger("filesystem")

PathLike = Union[str, Path]

#: Refuse to load text files larger than this (entry lists, JSON artifacts).
MAX_FILE_SIZE = 10 * 1024 * 1024  # 10 MB


def _atomic_write(target: Path, content: bytes) -> None:
    """Atomically write bytes to a file using a temporary file + replace."""
    temp_path: Optional[Path] = None

    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            mode="wb",
            dir=str(target.parent),
            delete=False,
            prefix=f".{target.name}.",
            suffix=".tmp",
        ) as tmp:
            temp_path = Path(tmp.name)
            tmp.write(content)
            tmp.flush()
            os.fsync(tmp.fileno())

        temp_path.replace(target)

    except Exception as exc:
        if temp_path and temp_path.exists():
            try:
                temp_path.unlink()
                logger.debug("Cleaned up temporary file: %s", temp_path)
            except OSError as cleanup_exc:
                logger.warning(
                    "Failed to clean up temporary file %s: %s",
                    temp_path,
                    cleanup_exc,
                )

        raise FileOperationError(
            f"Atomic write failed: {exc}",
            file_path=str(target),
            operation="write",
            original_error=exc,
        ) from exc


def safe_read_file(
    file_path: PathLike,
    *,
    max_size: Optional[int] = MAX_FILE_SIZE,
    encoding: str = "utf-8",
) -> str:
    """Read a text file with an optional size limit.

    Args:
        file_path: Path to the file.
        max_size: Maximum allowed file size in bytes (None disables limit).
        encoding: Text encoding.

    Returns:
        File contents as a string.
    """
    path = Path(file_path)
    if not path.is_file():
        raise FileOperationError(
            f"File not found: {path}",
            file_path=str(path),
            operation="read",
        )

    try:
        size = path.stat().st_size
        if max_size is not None and size > max_size:
            raise FileOperationError(
                f"File too large: {size} bytes (max {max_size})",
                file_path=str(path),
                operation="read",
            )
        return path.read_text(encoding=encoding)
    except FileOperationError:
        raise
    except (OSError, UnicodeDecodeError) as exc:
        raise FileOperationError(
            f"Failed to read file: {exc}",
            file_path=str(path),
            operation="read",
            original_error=exc,
        ) from exc


def safe_write_file(file_path: PathLike, content: str) -> Path:
    """Atomically replace a text file, creating parent directories.

    Returns:
        The written path.
    """
    path = Path(file_path)
    _atomic_write(path, content.encode("utf-8"))
    return path


def write_bytes(file_path: PathLike, content: bytes) -> Path:
    """Atomically replace a binary file, creating parent directories."""
    path = Path(file_path)
    _atomic_write(path, content)
    logger.debug("Wrote %d bytes to %s", len(content), path)
    return path


def read_bytes_if_exists(file_path: PathLike) -> Optional[bytes]:
    """Return a file's bytes, or ``None`` when it does not exist."""
    path = Path(file_path)
    if not path.is_file():
        return None
    try:
        return path.read_bytes()
    except OSError as exc:
        raise FileOperationError(
            f"Failed to read file: {exc}",
            file_path=str(path),
            operation="read",
            original_error=exc,
        ) from exc


def remove_file(file_path: PathLike) -> bool:
    """Delete a file if it exists.

    Returns:
        ``True`` when a file was deleted, ``False`` when nothing was there.
    """
    path = Path(file_path)
    if not path.is_file():
        return False
    try:
        path.unlink()
    except OSError as exc:
        raise FileOperationError(
            f"Failed to delete file: {exc}",
            file_path=str(path),
            operation="delete",
            original_error=exc,
        ) from exc
    logger.debug("Deleted %s", path)
    return True


def validate_path(
    path: PathLike,
    *,
    base_dir: Optional[PathLike] = None,
) -> Path:
    """Resolve and validate a filesystem path.

    If ``base_dir`` is provided, the resolved path must be within it.
    """
    resolved = Path(path).expanduser().resolve(strict=False)

    if base_dir:
        base = Path(base_dir).resolve(strict=False)
        try:
            resolved.relative_to(base)
        except ValueError:
            raise FileOperationError(
                f"Path outside allowed base directory: {resolved}",
                file_path=str(path),
                operation="validate",
            )

    return resolved


def relative_to_root(path: PathLike, root: PathLike) -> str:
    """Express ``path`` relative to ``root`` as ``./sub/file``.

    Paths outside ``root`` are returned absolute, in POSIX form.
    """
    absolute = Path(os.path.normpath(os.path.join(str(root), str(path))))
    try:
        relative = absolute.relative_to(Path(os.path.normpath(str(root))))
    except ValueError:
        return absolute.as_posix()
    return "./" + relative.as_posix()
