"""
Versioning for optimized CV revisions.

Each optimization pass writes a new revision into the application folder named
optimized-cv-N.md, where N is a positive integer. Only filenames are inspected;
file contents are never read here.

Every query re-reads the directory, so results always reflect what is on disk.
"""

import re
from pathlib import Path
from typing import Iterator, Tuple, Union

from m2cv.exceptions import NoVersionsError

OPTIMIZED_CV_PREFIX = "optimized-cv-"
OPTIMIZED_CV_SUFFIX = ".md"

VERSION_PATTERN = re.compile(
    rf"^{re.escape(OPTIMIZED_CV_PREFIX)}(\d+){re.escape(OPTIMIZED_CV_SUFFIX)}$"
)

PathLike = Union[str, Path]


def version_path(app_dir: PathLike, version: int) -> Path:
    """Build the revision path for a given version number."""
    return Path(app_dir) / f"{OPTIMIZED_CV_PREFIX}{version}{OPTIMIZED_CV_SUFFIX}"


def parse_version(filename: str) -> int:
    """
    Extract the version number from a revision filename.

    Returns:
        Positive version number, or 0 if the filename does not follow the convention
    """
    match = VERSION_PATTERN.match(filename)
    if not match:
        return 0
    return int(match.group(1))


def list_versions(app_dir: PathLike) -> Iterator[Tuple[int, Path]]:
    """
    Yield (version, path) for every revision in app_dir, lowest version first.

    Files that don't match optimized-cv-N.md (e.g. optimized-cv-abc.md,
    optimized-cv-0.md, job.txt) are skipped. Each call re-reads the directory.

    Raises:
        OSError: If app_dir cannot be read (raised when iteration starts)
    """
    app_dir = Path(app_dir)
    versions = []
    for entry in app_dir.iterdir():
        version = parse_version(entry.name)
        if version > 0 and entry.is_file():
            versions.append((version, entry))

    versions.sort(key=lambda item: item[0])
    yield from versions


def latest_version_path(app_dir: PathLike) -> Path:
    """
    Path of the highest-numbered revision.

    Raises:
        NoVersionsError: If the folder has no revisions yet
        OSError: If app_dir cannot be read
    """
    versions = list(list_versions(app_dir))
    if not versions:
        raise NoVersionsError(Path(app_dir))
    return versions[-1][1]


def next_version_path(app_dir: PathLike) -> Path:
    """
    Path for the next revision: highest existing version + 1, or 1 if none exist.

    Gaps are not filled ({1, 2, 4} -> 5). The returned path is not checked for
    existence; the single writer per application folder owns the write.

    Raises:
        OSError: If app_dir cannot be read
    """
    next_version = 1
    for version, _ in list_versions(app_dir):
        next_version = version + 1
    return version_path(app_dir, next_version)
