"""
Filesystem primitives used by the application and configuration contexts.

Kept deliberately small: directory creation, durable file copy, existence check.
Errors are the built-in OSError subclasses and propagate to the caller.
"""

import os
import shutil
from pathlib import Path
from typing import Union

PathLike = Union[str, Path]

# Chunk size for streamed copies
COPY_BUFFER_SIZE = 64 * 1024


def create_dir(path: PathLike, perm: int = 0o755) -> None:
    """
    Create a directory including any missing parents.

    Succeeds silently if the directory already exists.

    Raises:
        FileExistsError: If path exists but is not a directory
        OSError: On any other failure (e.g. permission denied)
    """
    Path(path).mkdir(mode=perm, parents=True, exist_ok=True)


def copy_file(src: PathLike, dst: PathLike) -> None:
    """
    Stream bytes from src to dst and flush them to disk before returning.

    Args:
        src: Source file (must exist)
        dst: Destination file (parent directory must exist, file is overwritten)

    Raises:
        FileNotFoundError: If src or the parent directory of dst does not exist
    """
    with open(src, "rb") as src_file, open(dst, "wb") as dst_file:
        shutil.copyfileobj(src_file, dst_file, COPY_BUFFER_SIZE)
        dst_file.flush()
        os.fsync(dst_file.fileno())


def exists(path: PathLike) -> bool:
    """Check whether a file or directory exists. Never raises for a missing path."""
    try:
        return Path(path).exists()
    except OSError:
        return False
