"""Exception taxonomy shared by all m2cv contexts."""

from pathlib import Path
from typing import Optional


class M2CVError(Exception):
    """Base class for all m2cv errors."""


class NotFoundError(M2CVError, FileNotFoundError):
    """
    Exception raised when a config file, application folder, or expected file is absent.

    Attributes:
        message: Error description
        path: The path that was looked up (None if not applicable)
    """

    def __init__(self, message: str, path: Optional[Path] = None):
        self.message = message
        self.path = path
        super().__init__(message)

    def __str__(self) -> str:
        return self.message


class ParseError(M2CVError, ValueError):
    """
    Exception raised when a structured file (e.g. m2cv.yml) cannot be parsed.

    Attributes:
        message: Error description
        path: File that failed to parse
        original_error: The underlying parser error, if any
    """

    def __init__(
        self,
        message: str,
        path: Optional[Path] = None,
        original_error: Optional[Exception] = None,
    ):
        self.message = message
        self.path = path
        self.original_error = original_error

        parts = [message]
        if path:
            parts.append(f"File: {path}")
        if original_error:
            parts.append(f"Original error: {original_error}")

        super().__init__("\n".join(parts))


class DecodeError(M2CVError, ValueError):
    """Transport encoding of a session context is malformed (bad base64 or bytes)."""


class FormatError(M2CVError, ValueError):
    """Session context decoded cleanly but its inner structure is invalid."""


class InvalidArgumentError(M2CVError, ValueError):
    """Tool invocation from the remote session carried a missing or malformed argument."""


class NoVersionsError(M2CVError, LookupError):
    """Version query on an application folder with zero revisions."""

    def __init__(self, app_dir: Path):
        self.app_dir = app_dir
        super().__init__(f"No optimized CV versions found in {app_dir}")


class ApplicationExistsError(M2CVError, FileExistsError):
    """Application folder already exists and will not be overwritten."""


class AlreadyInitializedError(M2CVError, FileExistsError):
    """Project directory already contains an m2cv.yml."""
