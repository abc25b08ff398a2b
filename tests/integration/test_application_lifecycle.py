"""
Integration tests for the full application lifecycle:
config discovery -> application folder -> session context handoff -> session server writes.
"""

import anyio
import pytest
from typer.testing import CliRunner

from m2cv.contexts.application import create_application, open_application
from m2cv.contexts.configuration import (
    CONFIG_ENV_VAR,
    find_config_with_overrides,
    init_project,
    load_config,
    resolve_base_cv_path,
)
from m2cv.contexts.session import (
    WRITE_OPTIMIZED_RESUME,
    InteractiveContext,
    SessionServer,
    build_interactive_context,
    build_session_config,
)
from m2cv.contexts.session.__main__ import app as session_app


@pytest.fixture
def project(tmp_path, monkeypatch):
    """Project root with m2cv.yml, a base CV, and one job description."""
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    (tmp_path / "cv.md").write_text("# Jane Doe\n\nEngineer\n")
    (tmp_path / "job.txt").write_text("Acme is hiring an SRE.\n")
    init_project(tmp_path, "cv.md", "even", "model-default")
    return tmp_path


def _prepare_context(project_root, work_dir):
    config_path = find_config_with_overrides("", work_dir)
    cfg = load_config(config_path)
    application = create_application(
        project_root / "job.txt", "Acme / SRE", project_root / "applications"
    )
    cv_path = resolve_base_cv_path(config_path, cfg)
    return build_interactive_context(application, cv_path, ats_mode=True, model=cfg.default_model)


@pytest.mark.integration
def test_context_survives_handoff(project):
    work_dir = project / "applications"
    work_dir.mkdir()

    context = _prepare_context(project, work_dir)
    args = build_session_config(context, command=["m2cv", "mcp"])["mcpServers"]["m2cv"]["args"]
    received = InteractiveContext.decode(args[-1])

    assert received == context
    assert received.base_cv == "# Jane Doe\n\nEngineer\n"
    assert received.job_description == "Acme is hiring an SRE.\n"
    assert received.model == "model-default"


@pytest.mark.integration
def test_session_writes_are_visible_to_application(project):
    context = _prepare_context(project, project)
    server = SessionServer(InteractiveContext.decode(context.encode()))
    server.start()

    server.call_tool(WRITE_OPTIMIZED_RESUME, {"content": "# Draft 1"})
    server.call_tool(WRITE_OPTIMIZED_RESUME, {"content": "# Draft 2"})
    server.close()

    application = open_application("acme-sre", project / "applications")
    assert [v for v, _ in application.versions()] == [1, 2]
    assert application.latest_version_path().read_text() == "# Draft 2"
    assert application.job_description_path().name == "job.txt"


@pytest.mark.integration
def test_mcp_client_round_trip(project):
    """Drive the server through a real MCP client session (in-memory transport)."""
    from mcp.shared.memory import create_connected_server_and_client_session

    context = _prepare_context(project, project)
    server = SessionServer(context)
    server.start()
    results = {}

    async def run_client():
        async with create_connected_server_and_client_session(
            server.build_mcp_server()
        ) as client:
            results["tools"] = await client.list_tools()
            results["ok"] = await client.call_tool(WRITE_OPTIMIZED_RESUME, {"content": "final"})
            results["bad"] = await client.call_tool(WRITE_OPTIMIZED_RESUME, {"content": 7})
            results["unknown"] = await client.call_tool("rm_rf", {})

    anyio.run(run_client)
    server.close()

    assert [tool.name for tool in results["tools"].tools] == [WRITE_OPTIMIZED_RESUME]
    assert results["ok"].isError is False
    assert "optimized-cv-1.md" in results["ok"].content[0].text
    assert results["bad"].isError is True
    assert results["unknown"].isError is True

    application = open_application("acme-sre", project / "applications")
    assert [v for v, _ in application.versions()] == [1]
    assert application.latest_version_path().read_text() == "final"


@pytest.mark.integration
@pytest.mark.parametrize("encoded", ["not-valid-base64!!!", "bm90LWpzb24="])
def test_session_entry_point_rejects_bad_context(encoded):
    result = CliRunner().invoke(session_app, ["--context", encoded])

    assert result.exit_code == 1
    assert "failed to decode context" in result.output
