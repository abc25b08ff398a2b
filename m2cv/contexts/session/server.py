"""
Session server for interactive optimization.

Binds one decoded InteractiveContext to the tool registry and serves it to the
external agent over MCP on stdio until the agent closes the channel.

Lifecycle:
    IDLE -> SERVING -> CLOSED

The server holds nothing but the immutable context; construct a fresh one per session.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

import anyio
import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from m2cv import __version__
from m2cv.contexts.session.interactive_context import SERVER_NAME, InteractiveContext
from m2cv.contexts.session.logger import _log_info, log_state_change
from m2cv.contexts.session.tools import TOOL_REGISTRY, ToolRequest, ToolResult, dispatch


class SessionState(Enum):
    IDLE = "idle"
    SERVING = "serving"
    CLOSED = "closed"


class SessionServer:
    """
    Serves the write_optimized_resume tool for a single application folder.

    Example:
        context = InteractiveContext.decode(encoded)
        SessionServer(context).serve()  # blocks until the agent disconnects
    """

    def __init__(self, context: InteractiveContext):
        self.context = context
        self.state = SessionState.IDLE

    def _transition(self, new_state: SessionState) -> None:
        log_state_change(self.state.value, new_state.value)
        self.state = new_state

    def start(self) -> None:
        """Begin accepting tool invocations."""
        if self.state is not SessionState.IDLE:
            raise RuntimeError(f"Cannot start session in state '{self.state.value}'")
        self._transition(SessionState.SERVING)

    def close(self) -> None:
        """Stop accepting tool invocations. Idempotent."""
        if self.state is not SessionState.CLOSED:
            self._transition(SessionState.CLOSED)

    def list_tools(self) -> List[types.Tool]:
        """MCP definitions for every registered tool."""
        return [
            types.Tool(
                name=spec.name,
                description=spec.description,
                inputSchema=spec.input_schema,
            )
            for spec in TOOL_REGISTRY.values()
        ]

    def handle(self, request: ToolRequest) -> ToolResult:
        """
        Handle one tool invocation to completion.

        Failures are returned as error results; only programming errors propagate.
        """
        if self.state is not SessionState.SERVING:
            return ToolResult(
                text=f"session is not accepting requests (state: {self.state.value})",
                is_error=True,
            )
        return dispatch(self.context.application_dir, request)

    def call_tool(self, name: str, arguments: Optional[Dict[str, Any]]) -> types.CallToolResult:
        """Adapt an MCP tools/call request to handle() and back."""
        result = self.handle(ToolRequest(name=name, arguments=arguments or {}))
        return types.CallToolResult(
            content=[types.TextContent(type="text", text=result.text)],
            isError=result.is_error,
        )

    def build_mcp_server(self) -> Server:
        """Low-level MCP server with list_tools/call_tool bound to this session."""
        mcp_server = Server(SERVER_NAME, version=__version__)

        @mcp_server.list_tools()
        async def handle_list_tools() -> List[types.Tool]:
            return self.list_tools()

        # Arguments are checked by the tool handlers so bad input becomes an error result.
        # call_tool() does no awaiting, so invocations never interleave.
        @mcp_server.call_tool(validate_input=False)
        async def handle_call_tool(name: str, arguments: Dict[str, Any]) -> types.CallToolResult:
            return self.call_tool(name, arguments)

        return mcp_server

    async def _serve_stdio(self) -> None:
        mcp_server = self.build_mcp_server()
        async with stdio_server() as (read_stream, write_stream):
            await mcp_server.run(
                read_stream, write_stream, mcp_server.create_initialization_options()
            )

    def serve(self) -> None:
        """Serve over stdio, blocking until the remote session closes the channel."""
        self.start()
        _log_info(f"Serving session for {self.context.application_dir}")
        try:
            anyio.run(self._serve_stdio)
        finally:
            self.close()
            _log_info("Session channel closed")
