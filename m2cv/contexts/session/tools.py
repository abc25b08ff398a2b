"""
Tools exposed to the remote interactive session.

Requests are dispatched by name through TOOL_REGISTRY. Handlers raise
InvalidArgumentError or OSError; dispatch() turns those into error-flagged
results so a bad invocation never takes down the session.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Union

from m2cv.contexts.application.application_folder import write_revision_atomically
from m2cv.contexts.application.versioning import next_version_path
from m2cv.contexts.session.logger import _log_debug, _log_warning, log_tool_result
from m2cv.exceptions import InvalidArgumentError

WRITE_OPTIMIZED_RESUME = "write_optimized_resume"

PathLike = Union[str, Path]


@dataclass(frozen=True)
class ToolRequest:
    """A tool invocation from the remote session: operation name plus argument map."""

    name: str
    arguments: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ToolResult:
    """
    Response sent back over the session channel.

    Attributes:
        text: Human-readable payload (output path on success, reason on failure)
        is_error: Whether the invocation failed
    """

    text: str
    is_error: bool = False


@dataclass(frozen=True)
class ToolSpec:
    """Registry entry: tool metadata plus the handler that implements it."""

    name: str
    description: str
    input_schema: Dict[str, Any]
    handler: Callable[[Path, Dict[str, Any]], str]


def write_optimized_resume(app_dir: PathLike, arguments: Dict[str, Any]) -> str:
    """
    Write the "content" argument verbatim as the next revision in app_dir.

    Returns:
        Success message containing the revision path

    Raises:
        InvalidArgumentError: If content is missing, not a string, or not encodable as UTF-8
        OSError: If the folder cannot be read or the file cannot be written
    """
    if "content" not in arguments:
        raise InvalidArgumentError("missing required parameter: content")

    content = arguments["content"]
    if not isinstance(content, str):
        raise InvalidArgumentError("content parameter must be a string")

    # JSON can carry lone surrogates that no file encoding accepts
    try:
        content.encode("utf-8")
    except UnicodeEncodeError as e:
        raise InvalidArgumentError("content is not valid UTF-8 text") from e

    try:
        output_path = next_version_path(app_dir)
    except OSError as e:
        raise OSError(f"failed to determine output path: {e}") from e

    try:
        write_revision_atomically(output_path, content)
    except OSError as e:
        raise OSError(f"failed to write file: {e}") from e

    return f"Optimized resume written to: {output_path}"


TOOL_REGISTRY: Dict[str, ToolSpec] = {
    WRITE_OPTIMIZED_RESUME: ToolSpec(
        name=WRITE_OPTIMIZED_RESUME,
        description=(
            "Write the optimized resume to a versioned file. "
            "Call this when the user is satisfied with the optimized resume."
        ),
        input_schema={
            "type": "object",
            "properties": {
                "content": {
                    "type": "string",
                    "description": "The optimized resume content in markdown format",
                },
            },
            "required": ["content"],
        },
        handler=write_optimized_resume,
    ),
}


def dispatch(app_dir: PathLike, request: ToolRequest) -> ToolResult:
    """
    Run a tool request against an application folder.

    Never raises for unknown tools, bad arguments, or filesystem failures; those
    come back as ToolResult(is_error=True).
    """
    spec = TOOL_REGISTRY.get(request.name)
    if spec is None:
        _log_warning(f"Unknown tool requested: {request.name}")
        return ToolResult(text=f"unknown tool: {request.name}", is_error=True)

    arguments = request.arguments if isinstance(request.arguments, dict) else {}
    _log_debug(f"Invoking {spec.name} with arguments: {sorted(arguments)}")

    try:
        result = ToolResult(text=spec.handler(Path(app_dir), arguments))
    except (InvalidArgumentError, OSError) as e:
        result = ToolResult(text=str(e), is_error=True)

    log_tool_result(spec.name, result.text, result.is_error)
    return result
