#!/usr/bin/env python3
"""
Command-line interface for m2cv projects and application folders.

Commands:
    init           - Create m2cv.yml for a new project
    add-theme      - Record an installed theme in m2cv.yml
    apply          - Create an application folder from a job description
    versions       - List optimized CV revisions of an application
    latest         - Print the path of the latest revision
    write          - Save a file as the next revision of an application
    session-config - Build the MCP config and prompt for an interactive session

Examples:\n

    manage_applications.py init --base-cv cv.md --theme even

    manage_applications.py apply job-posting.txt --name "Acme Corp SRE"

    manage_applications.py versions acme-corp-sre

    manage_applications.py session-config acme-corp-sre --ats
"""

import os
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from typing_extensions import Annotated

from m2cv.contexts.application import create_application, open_application
from m2cv.contexts.application.logger import setup_application_logger
from m2cv.contexts.configuration import (
    find_config_with_overrides,
    init_project,
    load_config,
    resolve_base_cv_path,
    save_config,
)
from m2cv.contexts.session import (
    build_interactive_context,
    render_session_prompt,
    write_session_config,
)
from m2cv.exceptions import M2CVError, NoVersionsError
from m2cv.utils.timestamp import now

load_dotenv()
LOGS_PATH = Path(os.getenv("LOGS_PATH", "outs/logs"))
APPLICATIONS_DIR = os.getenv("APPLICATIONS_DIR", "applications")

app = typer.Typer(
    add_completion=False,
    help="Manage m2cv projects and job application folders",
    invoke_without_command=True,
)

ConfigOption = Annotated[
    Optional[str],
    typer.Option("--config", "-c", help="Path to m2cv.yml (default: search upward)"),
]
DirOption = Annotated[
    str,
    typer.Option("--dir", "-d", help="Applications directory"),
]


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def _fail(message: str) -> None:
    typer.secho(f"✗ {message}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


@app.command("init")
def init_command(
    base_cv: Annotated[str, typer.Option("--base-cv", help="Path to your base CV markdown")],
    theme: Annotated[str, typer.Option("--theme", "-t", help="JSON Resume theme")] = "even",
    model: Annotated[str, typer.Option("--model", "-m", help="Default model")] = "",
    project_dir: Annotated[Path, typer.Option("--project-dir", help="Project root")] = Path("."),
):
    """Create m2cv.yml in the project directory."""
    try:
        config_path = init_project(project_dir, base_cv, theme, model)
    except (M2CVError, OSError) as e:
        _fail(str(e))
    typer.secho(f"✓ Created {config_path}", fg=typer.colors.GREEN)


@app.command("add-theme")
def add_theme_command(
    theme: Annotated[str, typer.Argument(help="Theme identifier")],
    config: ConfigOption = None,
    set_default: Annotated[
        bool, typer.Option("--default", help="Also make this the default theme")
    ] = False,
):
    """Record a theme as installed (and optionally make it the default)."""
    try:
        config_path = find_config_with_overrides(config, ".")
        cfg = load_config(config_path)
        added = cfg.add_theme(theme)
        if set_default:
            cfg.default_theme = theme
        save_config(config_path, cfg)
    except (M2CVError, OSError) as e:
        _fail(str(e))

    if added:
        typer.secho(f"✓ Added theme '{theme}'", fg=typer.colors.GREEN)
    else:
        typer.echo(f"⊘ Theme '{theme}' already installed")


@app.command("apply")
def apply_command(
    job_file: Annotated[Path, typer.Argument(help="Job description text file")],
    name: Annotated[
        str, typer.Option("--name", "-n", help="Folder name (company + role)")
    ],
    applications_dir: DirOption = APPLICATIONS_DIR,
):
    """
    Create an application folder and copy the job description into it.

    Examples:\n

        $ manage_applications.py apply job.txt --name "Acme Corp SRE"

        $ manage_applications.py apply job.txt --name acme --dir my-apps
    """
    setup_application_logger(LOGS_PATH / f"apply_{now()}", command="apply")
    try:
        application = create_application(job_file, name, applications_dir)
    except (M2CVError, OSError) as e:
        _fail(str(e))
    typer.echo(f"Created application folder: {application.path}")


@app.command("versions")
def versions_command(
    application_name: Annotated[str, typer.Argument(help="Application folder name")],
    applications_dir: DirOption = APPLICATIONS_DIR,
):
    """List optimized CV revisions, oldest first."""
    try:
        application = open_application(application_name, applications_dir)
        versions = application.versions()
    except (M2CVError, OSError) as e:
        _fail(str(e))

    if not versions:
        typer.echo(f"No optimized CV versions in {application.path}")
        return
    for version, path in versions:
        typer.echo(f"{version:>3}  {path}")


@app.command("latest")
def latest_command(
    application_name: Annotated[str, typer.Argument(help="Application folder name")],
    applications_dir: DirOption = APPLICATIONS_DIR,
):
    """Print the path of the latest optimized CV."""
    try:
        application = open_application(application_name, applications_dir)
        typer.echo(str(application.latest_version_path()))
    except NoVersionsError as e:
        _fail(f"{e}. Run optimize first")
    except (M2CVError, OSError) as e:
        _fail(str(e))


@app.command("write")
def write_command(
    application_name: Annotated[str, typer.Argument(help="Application folder name")],
    source: Annotated[Path, typer.Argument(help="File holding the optimized CV text")],
    applications_dir: DirOption = APPLICATIONS_DIR,
):
    """Save a generated CV as the next revision of an application."""
    setup_application_logger(LOGS_PATH / f"write_{now()}", command="write")
    try:
        application = open_application(application_name, applications_dir)
        revision_path = application.write_revision(source.read_text(encoding="utf-8"))
    except (M2CVError, OSError) as e:
        _fail(str(e))
    typer.echo(f"Optimized CV written to: {revision_path}")


@app.command("session-config")
def session_config_command(
    application_name: Annotated[str, typer.Argument(help="Application folder name")],
    config: ConfigOption = None,
    base_cv: Annotated[
        Optional[str], typer.Option("--base-cv", help="Override base CV path from config")
    ] = None,
    model: Annotated[
        Optional[str], typer.Option("--model", "-m", help="Override default model")
    ] = None,
    ats: Annotated[bool, typer.Option("--ats", help="Optimize for ATS")] = False,
    prompt_file: Annotated[
        Optional[Path], typer.Option("--prompt-file", help="Also write the system prompt here")
    ] = None,
    applications_dir: DirOption = APPLICATIONS_DIR,
):
    """
    Prepare an interactive session: write a temporary MCP config and print its path.

    The agent is started by the caller with this config; it launches the session
    server, which writes each accepted draft as the next revision.
    """
    try:
        application = open_application(application_name, applications_dir)
        config_path = find_config_with_overrides(config, ".")
        cfg = load_config(config_path)
        cv_path = resolve_base_cv_path(config_path, cfg, base_cv)
        context = build_interactive_context(
            application, cv_path, ats_mode=ats, model=model or cfg.default_model
        )
        session_config_path = write_session_config(context)
        if prompt_file:
            prompt_file.write_text(
                render_session_prompt(application.name, context), encoding="utf-8"
            )
    except (M2CVError, OSError) as e:
        _fail(str(e))

    typer.echo(str(session_config_path))


if __name__ == "__main__":
    app()
