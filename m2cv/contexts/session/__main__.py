"""
Session server entry point (internal use).

Started by the external agent from the MCP client config built by
build_session_config():

    python -m m2cv.contexts.session --context <base64 context>
"""

import os
from pathlib import Path

import typer
from dotenv import load_dotenv
from typing_extensions import Annotated

from m2cv.contexts.session.interactive_context import InteractiveContext
from m2cv.contexts.session.logger import setup_session_logger
from m2cv.contexts.session.server import SessionServer
from m2cv.exceptions import DecodeError, FormatError
from m2cv.utils.timestamp import now

load_dotenv()
LOGS_PATH = Path(os.getenv("LOGS_PATH", "outs/logs"))

app = typer.Typer(
    help="Run the interactive session server over stdio (internal use)",
    add_completion=False,
)


@app.command()
def serve(
    context: Annotated[
        str,
        typer.Option(
            "--context",
            help="base64-encoded session context",
        ),
    ],
):
    """Decode the session context and serve until the agent disconnects."""
    try:
        session_context = InteractiveContext.decode(context)
    except (DecodeError, FormatError) as e:
        typer.echo(f"failed to decode context: {e}", err=True)
        raise typer.Exit(code=1)

    setup_session_logger(LOGS_PATH / f"session_{now()}", session_context.application_dir)
    SessionServer(session_context).serve()


if __name__ == "__main__":
    app()
