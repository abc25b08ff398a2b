"""
Interactive session context.

Everything the session server subprocess needs, packed into one immutable value
that crosses the process boundary as a single command-line argument:

    JSON (sorted keys) -> UTF-8 -> standard base64

The base64 alphabet has no whitespace, quotes, or shell metacharacters, so the
encoded string can be embedded in argv or inside another JSON document as-is.

Round-trip law: InteractiveContext.decode(ctx.encode()) == ctx
"""

import base64
import binascii
import json
import sys
import tempfile
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from m2cv.contexts.application.application_folder import Application
from m2cv.exceptions import DecodeError, FormatError

# Name the external agent knows this server by
SERVER_NAME = "m2cv"

REQUIRED_FIELDS = {
    "application_dir": str,
    "base_cv": str,
    "job_description": str,
    "ats_mode": bool,
}
OPTIONAL_FIELDS = {"model": str}

PathLike = Union[str, Path]


@dataclass(frozen=True)
class InteractiveContext:
    """
    Inputs for one interactive optimization session.

    Attributes:
        application_dir: Application folder the session writes revisions into
        base_cv: Full text of the base CV
        job_description: Full text of the job description
        ats_mode: Whether to optimize for Applicant Tracking Systems
        model: Model override ("" means the agent's default)
    """

    application_dir: str
    base_cv: str
    job_description: str
    ats_mode: bool = False
    model: str = ""

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        if not data["model"]:
            del data["model"]
        return data

    def encode(self) -> str:
        """Serialize to a transport-safe string. Deterministic for equal contexts."""
        payload = json.dumps(
            self.to_dict(), sort_keys=True, ensure_ascii=False, separators=(",", ":")
        )
        return base64.b64encode(payload.encode("utf-8")).decode("ascii")

    @classmethod
    def decode(cls, encoded: str) -> "InteractiveContext":
        """
        Inverse of encode().

        Raises:
            DecodeError: If encoded is not valid base64 or does not decode to UTF-8 text
            FormatError: If the decoded text is not a JSON object with the expected fields
        """
        if not isinstance(encoded, str):
            raise DecodeError(f"Encoded context must be a string, got {type(encoded).__name__}")

        try:
            raw = base64.b64decode(encoded.encode("ascii"), validate=True)
            text = raw.decode("utf-8")
        except (binascii.Error, UnicodeError) as e:
            raise DecodeError(f"Failed to decode base64 context: {e}") from e

        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise FormatError(f"Failed to parse context JSON: {e}") from e

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: Any) -> "InteractiveContext":
        """Build a context from decoded JSON, checking field names and types."""
        if not isinstance(data, dict):
            raise FormatError(f"Context must be a JSON object, got {type(data).__name__}")

        allowed = {**REQUIRED_FIELDS, **OPTIONAL_FIELDS}
        unknown = sorted(set(data) - set(allowed))
        if unknown:
            raise FormatError(f"Unknown context fields: {unknown}")

        missing = sorted(set(REQUIRED_FIELDS) - set(data))
        if missing:
            raise FormatError(f"Missing context fields: {missing}")

        for key, value in data.items():
            if not isinstance(value, allowed[key]):
                raise FormatError(
                    f"Context field '{key}' must be {allowed[key].__name__}, "
                    f"got {type(value).__name__}"
                )

        return cls(**data)


def build_interactive_context(
    application: Application,
    base_cv_path: PathLike,
    ats_mode: bool = False,
    model: str = "",
) -> InteractiveContext:
    """
    Read the base CV and job description for an application into a context.

    Raises:
        FileNotFoundError: If the base CV is missing (NotFoundError for the job description)
    """
    base_cv = Path(base_cv_path).read_text(encoding="utf-8")
    return InteractiveContext(
        application_dir=str(application.path),
        base_cv=base_cv,
        job_description=application.read_job_description(),
        ats_mode=ats_mode,
        model=model or "",
    )


def default_server_command() -> List[str]:
    """Command that launches the session server with the current interpreter."""
    return [sys.executable, "-m", "m2cv.contexts.session"]


def build_session_config(
    context: InteractiveContext, command: Optional[List[str]] = None
) -> Dict[str, Any]:
    """
    MCP client config telling the external agent how to start the session server.

    Args:
        context: Context to hand to the server
        command: Executable and leading args (defaults to default_server_command())

    Returns:
        {"mcpServers": {"m2cv": {"command": ..., "args": [..., "--context", <encoded>]}}}
    """
    command = command or default_server_command()
    return {
        "mcpServers": {
            SERVER_NAME: {
                "command": command[0],
                "args": [*command[1:], "--context", context.encode()],
            }
        }
    }


def write_session_config(
    context: InteractiveContext,
    command: Optional[List[str]] = None,
    directory: Optional[PathLike] = None,
) -> Path:
    """
    Write the session config to a temporary JSON file.

    The caller passes the path to the agent and removes the file once the session ends.
    """
    config = build_session_config(context, command)
    with tempfile.NamedTemporaryFile(
        "w", prefix="m2cv-mcp-", suffix=".json", dir=directory, delete=False, encoding="utf-8"
    ) as f:
        json.dump(config, f)
    return Path(f.name)
