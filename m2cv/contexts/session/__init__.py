"""
Session Context

Responsibilities:
- Packs everything an interactive session needs into a transport-safe context
- Serves the write_optimized_resume tool to the external agent over MCP (stdio)
- Writes each accepted draft as the next revision of the application folder
- Builds the MCP client config and system prompt handed to the agent

Owns: Context encoding, tool registry, session server lifecycle
Never: Launches or talks to the agent itself
"""

from m2cv.contexts.session.interactive_context import (
    InteractiveContext,
    build_interactive_context,
    build_session_config,
    write_session_config,
)
from m2cv.contexts.session.prompt import render_session_prompt
from m2cv.contexts.session.server import SessionServer, SessionState
from m2cv.contexts.session.tools import (
    TOOL_REGISTRY,
    WRITE_OPTIMIZED_RESUME,
    ToolRequest,
    ToolResult,
    dispatch,
)

__all__ = [
    # Context
    "InteractiveContext",
    "build_interactive_context",
    "build_session_config",
    "write_session_config",
    "render_session_prompt",
    # Server and tools
    "SessionServer",
    "SessionState",
    "TOOL_REGISTRY",
    "WRITE_OPTIMIZED_RESUME",
    "ToolRequest",
    "ToolResult",
    "dispatch",
]
