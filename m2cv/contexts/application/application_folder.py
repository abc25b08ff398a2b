"""
Application folders.

One folder per job application under the applications directory:

    applications/
        acme-corp-sre/
            job-posting.txt         # copied verbatim on creation
            optimized-cv-1.md       # revisions, see versioning.py
            optimized-cv-2.md
            resume.json             # optional exported document
            resume.pdf              # optional rendered output

Folders are created once and never deleted here.
"""

import os
import re
import tempfile
import unicodedata
from dataclasses import dataclass
from pathlib import Path
from typing import List, Tuple, Union

from dotenv import load_dotenv

from m2cv.contexts.application.logger import (
    _log_debug,
    log_application_created,
    log_revision_written,
)
from m2cv.contexts.application.versioning import (
    latest_version_path,
    list_versions,
    next_version_path,
)
from m2cv.exceptions import ApplicationExistsError, NotFoundError
from m2cv.utils.filesystem import copy_file, create_dir, exists

load_dotenv()
APPLICATIONS_DIR = Path(os.getenv("APPLICATIONS_DIR", "applications"))

MAX_FOLDER_NAME_LENGTH = 50
FALLBACK_FOLDER_NAME = "application"
JOB_DESCRIPTION_GLOB = "*.txt"
EXPORTED_DOCUMENT_NAME = "resume.json"
RENDERED_OUTPUT_NAME = "resume.pdf"

PathLike = Union[str, Path]


def _truncate_at_boundary(name: str, max_length: int) -> str:
    """Truncate to max_length, breaking at a hyphen if one falls in the last third."""
    if len(name) <= max_length:
        return name

    truncated = name[:max_length]
    last_hyphen = truncated.rfind("-")
    if last_hyphen > max_length * 2 // 3:
        return truncated[:last_hyphen]
    return truncated.rstrip("-")


def sanitize_folder_name(name: str) -> str:
    """
    Convert arbitrary text (e.g. "Google / Software Engineer") into a single path segment.

    - Lowercases
    - Replaces spaces, slashes, and backslashes with hyphens
    - Keeps only letters, digits, hyphens, and underscores (so "." and ".." cannot survive)
    - Collapses hyphen runs and trims leading/trailing hyphens
    - Truncates to MAX_FOLDER_NAME_LENGTH, preferring a hyphen boundary

    May return an empty string; see safe_folder_name().

    Examples:
        >>> sanitize_folder_name("Google/Software Engineer")
        'google-software-engineer'
        >>> sanitize_folder_name("Special $#@! chars")
        'special-chars'
    """
    name = name.lower()
    name = re.sub(r"[ /\\]", "-", name)
    name = "".join(
        ch
        for ch in name
        if ch in "-_" or unicodedata.category(ch)[0] in ("L", "N")
    )
    name = re.sub(r"-+", "-", name).strip("-")
    return _truncate_at_boundary(name, MAX_FOLDER_NAME_LENGTH)


def safe_folder_name(name: str) -> str:
    """Sanitize name, falling back to a placeholder if nothing usable remains."""
    return sanitize_folder_name(name) or FALLBACK_FOLDER_NAME


def find_job_description(app_dir: PathLike) -> Path:
    """
    Locate the job description in an application folder (first *.txt, sorted by name).

    Raises:
        NotFoundError: If the folder has no .txt file
    """
    app_dir = Path(app_dir)
    candidates = sorted(app_dir.glob(JOB_DESCRIPTION_GLOB))
    if not candidates:
        raise NotFoundError(
            f"No .txt file found in {app_dir}. Job description required", path=app_dir
        )
    return candidates[0]


def write_revision_atomically(path: PathLike, content: str) -> Path:
    """
    Write content to path so that either the complete file appears or nothing does.

    Content goes to a hidden temp file in the same directory first (never matching the
    revision naming convention), is flushed to disk, then renamed into place.

    Raises:
        OSError: If the directory is not writable or the rename fails
    """
    path = Path(path)
    temp_fd, temp_path = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(temp_fd, "w", encoding="utf-8", newline="") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        os.chmod(temp_path, 0o644)
        os.replace(temp_path, path)
    except BaseException:
        if os.path.exists(temp_path):
            os.unlink(temp_path)
        raise

    return path


@dataclass(frozen=True)
class Application:
    """
    A job application folder.

    Attributes:
        path: Folder path (e.g. applications/acme-corp-sre)
        name: Folder name (single path segment)
    """

    path: Path
    name: str

    @property
    def exported_document_path(self) -> Path:
        return self.path / EXPORTED_DOCUMENT_NAME

    @property
    def rendered_output_path(self) -> Path:
        return self.path / RENDERED_OUTPUT_NAME

    def job_description_path(self) -> Path:
        return find_job_description(self.path)

    def read_job_description(self) -> str:
        return self.job_description_path().read_text(encoding="utf-8")

    def versions(self) -> List[Tuple[int, Path]]:
        return list(list_versions(self.path))

    def latest_version_path(self) -> Path:
        return latest_version_path(self.path)

    def next_version_path(self) -> Path:
        return next_version_path(self.path)

    def write_revision(self, content: str) -> Path:
        """Write content as the next revision and return its path."""
        revision_path = write_revision_atomically(self.next_version_path(), content)
        log_revision_written(revision_path, len(content))
        return revision_path


def create_application(
    job_file: PathLike,
    name: str,
    applications_dir: PathLike = APPLICATIONS_DIR,
) -> Application:
    """
    Create a new application folder seeded with a copy of the job description.

    Args:
        job_file: Job description text file
        name: Desired folder name (company + role, or user supplied); sanitized here
        applications_dir: Root folder for all applications

    Returns:
        The new Application

    Raises:
        NotFoundError: If job_file does not exist
        ApplicationExistsError: If the folder already exists
        OSError: If the folder cannot be created or the copy fails
    """
    job_file = Path(job_file)
    if not job_file.is_file():
        raise NotFoundError(f"Job description file not found: {job_file}", path=job_file)

    folder_name = safe_folder_name(name)
    app_path = Path(applications_dir) / folder_name

    if exists(app_path):
        raise ApplicationExistsError(
            f"Application folder already exists: {app_path}. Use --name to specify a different name"
        )

    create_dir(app_path, 0o755)
    dest_file = app_path / job_file.name
    copy_file(job_file, dest_file)

    log_application_created(app_path, dest_file)
    return Application(path=app_path, name=folder_name)


def open_application(name: str, applications_dir: PathLike = APPLICATIONS_DIR) -> Application:
    """
    Look up an existing application folder by name.

    Raises:
        NotFoundError: If the folder does not exist or name is not a single path segment
    """
    if not name or name in (".", "..") or Path(name).name != name:
        raise NotFoundError(f"Invalid application name: {name!r}")

    app_path = Path(applications_dir) / name
    if not app_path.is_dir():
        raise NotFoundError(
            f"Application folder not found: {app_path}. Run 'apply' first", path=app_path
        )
    _log_debug(f"Opened application {app_path}")
    return Application(path=app_path, name=name)
