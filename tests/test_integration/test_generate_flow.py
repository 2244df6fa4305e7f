"""Integration tests for the CLI commands.

Exercises ``generate``, ``verify``, ``inspect`` and ``config`` through the
real root Typer app (including the global-flag callback) and checks side
effects on disk and the stdout/stderr split.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest
from typer.testing import CliRunner

from cmspec import __version__
from cmspec.app import app
from cmspec.config import load_user_config
from cmspec.exit_codes import (
    EXIT_CONTENT_MODEL_ERROR,
    EXIT_GENERATION_ERROR,
    EXIT_INVALID_USAGE,
)


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


# ---------------------------------------------------------------------------
# generate
# ---------------------------------------------------------------------------


class TestGenerate:
    def test_prints_document_to_stdout(
        self, runner: CliRunner, isolated_config: Path, blog_file: Path
    ) -> None:
        result = runner.invoke(app, ["--quiet", "generate", str(blog_file)])
        assert result.exit_code == 0, result.output
        document = json.loads(result.stdout)
        assert document["openapi"] == "3.0.1"
        assert "/api/posts" in document["paths"]

    def test_writes_output_file(
        self, runner: CliRunner, isolated_config: Path, blog_file: Path
    ) -> None:
        out = isolated_config / "openapi.json"
        result = runner.invoke(app, ["generate", str(blog_file), "-o", str(out)])
        assert result.exit_code == 0, result.output
        document = json.loads(out.read_text(encoding="utf-8"))
        assert document["info"]["title"] == "PayloadCMS"
        assert result.stdout == ""

    def test_info_flags(
        self, runner: CliRunner, isolated_config: Path, blog_file: Path
    ) -> None:
        result = runner.invoke(
            app,
            [
                "--quiet",
                "generate",
                str(blog_file),
                "--title",
                "Blog API",
                "--api-version",
                "2.1.0",
                "--info",
                '{"contact": {"email": "docs@example.com"}}',
            ],
        )
        assert result.exit_code == 0, result.output
        info = json.loads(result.stdout)["info"]
        assert info["title"] == "Blog API"
        assert info["version"] == "2.1.0"
        assert info["contact"] == {"email": "docs@example.com"}

    def test_bad_info_json(
        self, runner: CliRunner, isolated_config: Path, blog_file: Path
    ) -> None:
        result = runner.invoke(app, ["generate", str(blog_file), "--info", "[1]"])
        assert result.exit_code == EXIT_INVALID_USAGE

    def test_project_config_output(
        self, runner: CliRunner, isolated_config: Path, blog_file: Path
    ) -> None:
        (isolated_config / "cmspec.json").write_text(
            json.dumps({"output": "from-project.json", "title": "Project"}), encoding="utf-8"
        )
        result = runner.invoke(app, ["generate", str(blog_file)])
        assert result.exit_code == 0, result.output
        document = json.loads((isolated_config / "from-project.json").read_text())
        assert document["info"]["title"] == "Project"

    def test_missing_model(self, runner: CliRunner, isolated_config: Path) -> None:
        result = runner.invoke(app, ["generate", "nope.json"])
        assert result.exit_code == EXIT_CONTENT_MODEL_ERROR

    def test_invalid_model(self, runner: CliRunner, isolated_config: Path) -> None:
        bad = isolated_config / "bad.json"
        bad.write_text(json.dumps({"collections": [{"fields": []}]}), encoding="utf-8")
        result = runner.invoke(app, ["generate", str(bad)])
        assert result.exit_code == EXIT_CONTENT_MODEL_ERROR

    def test_strict_slugs_fails_without_writing(
        self, runner: CliRunner, isolated_config: Path
    ) -> None:
        model = isolated_config / "dupes.json"
        model.write_text(
            json.dumps({"collections": [{"slug": "posts"}, {"slug": "posts"}]}), encoding="utf-8"
        )
        out = isolated_config / "openapi.json"
        result = runner.invoke(
            app, ["generate", str(model), "-o", str(out), "--strict-slugs"]
        )
        assert result.exit_code == EXIT_GENERATION_ERROR
        assert not out.exists()

    def test_collision_warns_by_default(
        self, runner: CliRunner, isolated_config: Path
    ) -> None:
        model = isolated_config / "dupes.json"
        model.write_text(
            json.dumps({"collections": [{"slug": "posts"}, {"slug": "posts"}]}), encoding="utf-8"
        )
        out = isolated_config / "openapi.json"
        result = runner.invoke(app, ["--no-color", "generate", str(model), "-o", str(out)])
        assert result.exit_code == 0, result.output
        assert out.exists()

    def test_reads_stdin(
        self, runner: CliRunner, isolated_config: Path, blog_raw: dict[str, Any]
    ) -> None:
        result = runner.invoke(
            app, ["--quiet", "generate", "-"], input=json.dumps(blog_raw)
        )
        assert result.exit_code == 0, result.output
        assert "/api/globals/settings" in json.loads(result.stdout)["paths"]


# ---------------------------------------------------------------------------
# verify
# ---------------------------------------------------------------------------


class TestVerify:
    def test_generated_document_verifies(
        self, runner: CliRunner, isolated_config: Path, blog_file: Path
    ) -> None:
        out = isolated_config / "openapi.json"
        runner.invoke(app, ["generate", str(blog_file), "-o", str(out)])
        result = runner.invoke(app, ["verify", str(out)])
        assert result.exit_code == 0, result.output

    def test_dangling_reference(self, runner: CliRunner, isolated_config: Path) -> None:
        document = {
            "openapi": "3.0.1",
            "paths": {"/x": {"get": {"responses": {"200": {"$ref": "#/components/responses/x"}}}}},
            "components": {"responses": {}},
        }
        path = isolated_config / "broken.json"
        path.write_text(json.dumps(document), encoding="utf-8")
        result = runner.invoke(app, ["--plain", "verify", str(path)])
        assert result.exit_code == EXIT_GENERATION_ERROR
        assert "#/components/responses/x" in result.stdout

    def test_not_openapi(self, runner: CliRunner, isolated_config: Path) -> None:
        path = isolated_config / "model.json"
        path.write_text(json.dumps({"collections": []}), encoding="utf-8")
        result = runner.invoke(app, ["verify", str(path)])
        assert result.exit_code == EXIT_CONTENT_MODEL_ERROR


# ---------------------------------------------------------------------------
# inspect
# ---------------------------------------------------------------------------


class TestInspect:
    def test_entities_json(
        self, runner: CliRunner, isolated_config: Path, blog_file: Path
    ) -> None:
        result = runner.invoke(app, ["--json", "inspect", "entities", str(blog_file)])
        assert result.exit_code == 0, result.output
        rows = json.loads(result.stdout)
        assert rows[0] == {"Slug": "settings", "Kind": "global", "Fields": "2", "Endpoints": "1"}
        kinds = {row["Slug"]: row["Kind"] for row in rows}
        assert kinds["media"] == "upload"
        assert kinds["posts"] == "collection"

    def test_paths_json(
        self, runner: CliRunner, isolated_config: Path, blog_file: Path
    ) -> None:
        result = runner.invoke(app, ["--json", "inspect", "paths", str(blog_file)])
        assert result.exit_code == 0, result.output
        rows = json.loads(result.stdout)
        assert {"Method": "GET", "Path": "/api/posts", "Operation": "findPosts"} in rows
        assert {"Method": "POST", "Path": "/api/media", "Operation": "uploadMedia"} in rows

    def test_schemas_plain(
        self, runner: CliRunner, isolated_config: Path, blog_file: Path
    ) -> None:
        result = runner.invoke(app, ["--plain", "inspect", "schemas", str(blog_file)])
        assert result.exit_code == 0, result.output
        lines = result.stdout.splitlines()
        assert lines[0] == "Schema\tType\tProperties"
        assert any(line.startswith("globalSettings\tobject\t") for line in lines)

    def test_bad_model(self, runner: CliRunner, isolated_config: Path) -> None:
        result = runner.invoke(app, ["inspect", "paths", "missing.yaml"])
        assert result.exit_code == EXIT_CONTENT_MODEL_ERROR


# ---------------------------------------------------------------------------
# config
# ---------------------------------------------------------------------------


class TestConfigCommands:
    def test_show(self, runner: CliRunner, isolated_config: Path) -> None:
        result = runner.invoke(app, ["--json", "config", "show"])
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)["defaults"]["title"] == "PayloadCMS"

    def test_show_plain_lists_settable_keys(
        self, runner: CliRunner, isolated_config: Path
    ) -> None:
        result = runner.invoke(app, ["--plain", "config", "show"])
        assert result.exit_code == 0, result.output
        lines = result.stdout.splitlines()
        assert "defaults.title\tPayloadCMS" in lines
        assert "defaults.strict_slugs\tfalse" in lines

    def test_set_string(self, runner: CliRunner, isolated_config: Path) -> None:
        result = runner.invoke(app, ["config", "set", "defaults.title", "Blog API"])
        assert result.exit_code == 0, result.output
        assert load_user_config().defaults.title == "Blog API"

    def test_set_bool(self, runner: CliRunner, isolated_config: Path) -> None:
        result = runner.invoke(app, ["config", "set", "defaults.strict_slugs", "true"])
        assert result.exit_code == 0, result.output
        assert load_user_config().defaults.strict_slugs is True

    def test_set_mapping(self, runner: CliRunner, isolated_config: Path) -> None:
        result = runner.invoke(
            app, ["config", "set", "defaults.info", '{"x-logo": "logo.png"}']
        )
        assert result.exit_code == 0, result.output
        assert load_user_config().defaults.info == {"x-logo": "logo.png"}

    def test_set_unknown_key(self, runner: CliRunner, isolated_config: Path) -> None:
        result = runner.invoke(app, ["config", "set", "defaults.colour", "red"])
        assert result.exit_code == 2

    def test_set_invalid_path(self, runner: CliRunner, isolated_config: Path) -> None:
        result = runner.invoke(app, ["config", "set", "nothing.here", "x"])
        assert result.exit_code == 2

    def test_user_title_reaches_document(
        self, runner: CliRunner, isolated_config: Path, blog_file: Path
    ) -> None:
        runner.invoke(app, ["config", "set", "defaults.title", "Configured"])
        result = runner.invoke(app, ["--quiet", "generate", str(blog_file)])
        assert json.loads(result.stdout)["info"]["title"] == "Configured"

    def test_reset_with_force(self, runner: CliRunner, isolated_config: Path) -> None:
        runner.invoke(app, ["config", "set", "defaults.title", "Changed"])
        result = runner.invoke(app, ["--force", "config", "reset"])
        assert result.exit_code == 0, result.output
        assert load_user_config().defaults.title == "PayloadCMS"

    def test_reset_declined(self, runner: CliRunner, isolated_config: Path) -> None:
        runner.invoke(app, ["config", "set", "defaults.title", "Changed"])
        result = runner.invoke(app, ["config", "reset"], input="n\n")
        assert result.exit_code == 0
        assert load_user_config().defaults.title == "Changed"


class TestGlobalFlags:
    def test_version(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.stdout
