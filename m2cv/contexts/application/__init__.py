"""
Application Context

Responsibilities:
- Creates one folder per job application and copies the job description into it
- Sanitizes folder names into a single safe path segment
- Tracks numbered revisions of the optimized CV (optimized-cv-N.md)

Owns: Application folder layout, revision naming and numbering
Never: Deletes application folders or revisions
"""

from m2cv.contexts.application.application_folder import (
    Application,
    create_application,
    find_job_description,
    open_application,
    safe_folder_name,
    sanitize_folder_name,
    write_revision_atomically,
)
from m2cv.contexts.application.versioning import (
    OPTIMIZED_CV_PREFIX,
    OPTIMIZED_CV_SUFFIX,
    latest_version_path,
    list_versions,
    next_version_path,
    version_path,
)

__all__ = [
    # Application folders
    "Application",
    "create_application",
    "open_application",
    "find_job_description",
    "sanitize_folder_name",
    "safe_folder_name",
    "write_revision_atomically",
    # Revision versioning
    "OPTIMIZED_CV_PREFIX",
    "OPTIMIZED_CV_SUFFIX",
    "list_versions",
    "latest_version_path",
    "next_version_path",
    "version_path",
]
