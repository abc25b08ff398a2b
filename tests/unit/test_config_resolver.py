"""Unit tests for m2cv.yml loading, saving, and discovery."""

from pathlib import Path

import pytest

from m2cv.contexts.configuration import (
    CONFIG_ENV_VAR,
    CONFIG_FILENAME,
    Config,
    find_config,
    find_config_with_overrides,
    init_project,
    load_config,
    resolve_base_cv_path,
    save_config,
)
from m2cv.exceptions import AlreadyInitializedError, NotFoundError, ParseError


@pytest.fixture
def no_env_override(monkeypatch):
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)


@pytest.mark.unit
def test_load_valid_yaml(tmp_path):
    """Test loading a complete config file."""
    config_file = tmp_path / CONFIG_FILENAME
    config_file.write_text(
        "base_cv_path: cv.md\n"
        "default_theme: even\n"
        "themes:\n"
        "  - even\n"
        "  - elegant\n"
        "default_model: claude-sonnet-4-20250514\n"
    )

    cfg = load_config(config_file)

    assert cfg.base_cv_path == "cv.md"
    assert cfg.default_theme == "even"
    assert cfg.themes == ["even", "elegant"]
    assert cfg.default_model == "claude-sonnet-4-20250514"


@pytest.mark.unit
def test_load_without_optional_model(tmp_path):
    config_file = tmp_path / CONFIG_FILENAME
    config_file.write_text("base_cv_path: cv.md\ndefault_theme: even\nthemes: [even]\n")

    cfg = load_config(config_file)

    assert cfg.default_model == ""


@pytest.mark.unit
def test_load_invalid_yaml(tmp_path):
    config_file = tmp_path / CONFIG_FILENAME
    config_file.write_text("base_cv_path: [unclosed\n  themes: {")

    with pytest.raises(ParseError):
        load_config(config_file)


@pytest.mark.unit
@pytest.mark.parametrize(
    "content",
    [
        "- just\n- a list\n",
        "themes: even\n",
        "themes: [even, 3]\n",
        "base_cv_path: [cv.md]\n",
        "unexpected_field: value\n",
        "themes: [even, even]\n",
        "42\n",
        "just a string\n",
    ],
)
def test_load_structurally_invalid(tmp_path, content):
    """Well-formed YAML that doesn't match the config schema is a ParseError."""
    config_file = tmp_path / CONFIG_FILENAME
    config_file.write_text(content)

    with pytest.raises(ParseError):
        load_config(config_file)


@pytest.mark.unit
def test_load_file_not_found(tmp_path):
    with pytest.raises(NotFoundError):
        load_config(tmp_path / "missing.yml")


@pytest.mark.unit
def test_save_writes_loadable_yaml(tmp_path):
    config_file = tmp_path / CONFIG_FILENAME
    cfg = Config(
        base_cv_path="cv.md",
        default_theme="elegant",
        themes=["elegant", "flat"],
        default_model="model-x",
    )

    save_config(config_file, cfg)

    assert load_config(config_file) == cfg


@pytest.mark.unit
def test_save_and_load_keep_dollar_brace_values_verbatim(tmp_path):
    config_file = tmp_path / CONFIG_FILENAME
    cfg = Config(
        base_cv_path="cvs/${company}.md",
        default_theme="even",
        themes=["even"],
        default_model="${oc.env:HOME}",
    )

    save_config(config_file, cfg)
    loaded = load_config(config_file)

    assert loaded == cfg
    save_config(config_file, loaded)
    assert load_config(config_file).base_cv_path == "cvs/${company}.md"


@pytest.mark.unit
def test_save_is_deterministic_and_overwrites(tmp_path):
    config_file = tmp_path / CONFIG_FILENAME
    cfg = Config(base_cv_path="cv.md", default_theme="even", themes=["even"])

    save_config(config_file, cfg)
    first = config_file.read_text()
    save_config(config_file, cfg)

    assert config_file.read_text() == first
    assert first.index("base_cv_path") < first.index("default_theme") < first.index("themes")


@pytest.mark.unit
def test_save_to_missing_directory_fails(tmp_path):
    with pytest.raises(OSError):
        save_config(tmp_path / "no" / "such" / "dir" / CONFIG_FILENAME, Config())


@pytest.mark.unit
def test_add_theme_skips_duplicates():
    cfg = Config(themes=["even"])

    assert cfg.add_theme("flat") is True
    assert cfg.add_theme("even") is False
    assert cfg.themes == ["even", "flat"]


@pytest.mark.unit
def test_duplicate_themes_rejected():
    with pytest.raises(ValueError):
        Config(themes=["even", "even"])


@pytest.mark.unit
def test_find_walks_up_directory_tree(tmp_path):
    """Config at /a is found from /a/b/c."""
    root = tmp_path / "a"
    nested = root / "b" / "c"
    nested.mkdir(parents=True)
    (root / CONFIG_FILENAME).write_text("base_cv_path: cv.md\n")

    assert find_config(nested) == root / CONFIG_FILENAME


@pytest.mark.unit
def test_find_prefers_nearest_config(tmp_path):
    nested = tmp_path / "b"
    nested.mkdir()
    (tmp_path / CONFIG_FILENAME).write_text("")
    (nested / CONFIG_FILENAME).write_text("")

    assert find_config(nested) == nested / CONFIG_FILENAME


@pytest.mark.unit
def test_find_accepts_relative_start(tmp_path, monkeypatch):
    (tmp_path / CONFIG_FILENAME).write_text("")
    (tmp_path / "sub").mkdir()
    monkeypatch.chdir(tmp_path / "sub")

    assert find_config(".").resolve() == (tmp_path / CONFIG_FILENAME).resolve()


@pytest.mark.unit
def test_find_returns_error_when_no_config_found(tmp_path):
    nested = tmp_path / "x" / "y"
    nested.mkdir(parents=True)

    # Guard against a stray m2cv.yml somewhere above tmp_path on the host
    if any((parent / CONFIG_FILENAME).exists() for parent in tmp_path.parents):
        pytest.skip("m2cv.yml exists above the temporary directory")

    with pytest.raises(NotFoundError):
        find_config(nested)


@pytest.mark.unit
def test_find_with_overrides_precedence(tmp_path, monkeypatch):
    """Flag beats env var, env var beats walk-up, with all three present."""
    (tmp_path / CONFIG_FILENAME).write_text("")
    flag_path = str(tmp_path / "flag.yml")
    env_path = str(tmp_path / "env.yml")
    monkeypatch.setenv(CONFIG_ENV_VAR, env_path)

    assert find_config_with_overrides(flag_path, tmp_path) == Path(flag_path)
    assert find_config_with_overrides("", tmp_path) == Path(env_path)
    assert find_config_with_overrides(None, tmp_path) == Path(env_path)

    monkeypatch.delenv(CONFIG_ENV_VAR)
    assert find_config_with_overrides("", tmp_path) == tmp_path / CONFIG_FILENAME


@pytest.mark.unit
def test_find_with_overrides_does_not_check_existence(tmp_path, no_env_override):
    missing = tmp_path / "does-not-exist.yml"

    assert find_config_with_overrides(str(missing), tmp_path) == missing


@pytest.mark.unit
def test_find_with_overrides_ignores_empty_env(tmp_path, monkeypatch):
    (tmp_path / CONFIG_FILENAME).write_text("")
    monkeypatch.setenv(CONFIG_ENV_VAR, "")

    assert find_config_with_overrides("", tmp_path) == tmp_path / CONFIG_FILENAME


@pytest.mark.unit
def test_resolve_base_cv_path_relative_to_config(tmp_path):
    config_path = tmp_path / "project" / CONFIG_FILENAME
    cfg = Config(base_cv_path="docs/cv.md")

    assert resolve_base_cv_path(config_path, cfg) == tmp_path / "project" / "docs" / "cv.md"


@pytest.mark.unit
def test_resolve_base_cv_path_override_and_absolute(tmp_path):
    config_path = tmp_path / CONFIG_FILENAME
    cfg = Config(base_cv_path="cv.md")
    absolute = tmp_path / "elsewhere" / "cv.md"

    assert resolve_base_cv_path(config_path, cfg, "other.md") == tmp_path / "other.md"
    assert resolve_base_cv_path(config_path, cfg, absolute) == absolute


@pytest.mark.unit
def test_init_project_creates_config(tmp_path):
    config_path = init_project(tmp_path, "cv.md", "even", "model-x")

    cfg = load_config(config_path)
    assert cfg.themes == ["even"]
    assert cfg.default_theme == "even"
    assert cfg.default_model == "model-x"


@pytest.mark.unit
def test_init_project_refuses_existing_config(tmp_path):
    init_project(tmp_path, "cv.md", "even")

    with pytest.raises(AlreadyInitializedError):
        init_project(tmp_path, "cv.md", "flat")
