"""Tests for hookflow CLI commands."""

import logging
import textwrap

import pytest
from click.testing import CliRunner

from hookflow.cli.main import cli


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture(autouse=True)
def restore_log_level():
    """The CLI sets the package logger level; undo it for later tests."""
    logger = logging.getLogger("hookflow")
    previous = logger.level
    yield
    logger.setLevel(previous)


@pytest.fixture
def definition_file(tmp_path):
    path = tmp_path / "widget.yaml"
    path.write_text(textwrap.dedent("""\
        name: WidgetContext
        actions:
          create:
            with: perform_create
            setup: [assign_defaults]
        authorize:
          default: can_anything
    """))
    return path


class TestDescribe:
    def test_describe_context(self, runner):
        result = runner.invoke(cli, ["describe", "sample_contexts:WidgetContext"])
        assert result.exit_code == 0, result.output
        assert "Definition: WidgetContext" in result.output
        assert "create (primary: perform_create)" in result.output
        assert "setup: 1 hook(s) [assign_defaults]" in result.output
        assert "after_success: 1 hook(s) [recording('notify')]" in result.output
        assert "audit: 0 hook(s)" in result.output
        assert "Authorization: create" in result.output

    def test_describe_definition(self, runner):
        result = runner.invoke(cli, ["describe", "sample_contexts:WidgetContext.definition"])
        assert result.exit_code == 0, result.output
        assert "Definition: WidgetContext" in result.output

    def test_describe_requires_attr(self, runner):
        result = runner.invoke(cli, ["describe", "sample_contexts"])
        assert result.exit_code != 0
        assert "MODULE:ATTR" in result.output

    def test_describe_unknown_module(self, runner):
        result = runner.invoke(cli, ["describe", "no_such_module:Thing"])
        assert result.exit_code != 0
        assert "cannot import" in result.output

    def test_describe_unknown_attribute(self, runner):
        result = runner.invoke(cli, ["describe", "sample_contexts:Missing"])
        assert result.exit_code != 0
        assert "no attribute" in result.output

    def test_describe_wrong_type(self, runner):
        result = runner.invoke(cli, ["describe", "sample_contexts:Recorder"])
        assert result.exit_code != 0
        assert "neither a Definition nor a Context" in result.output


class TestValidate:
    def test_valid_file(self, runner, definition_file):
        result = runner.invoke(cli, ["validate", str(definition_file)])
        assert result.exit_code == 0, result.output
        assert "create (primary: perform_create)" in result.output
        assert "Authorization: default" in result.output
        assert "Definition is valid" in result.output

    def test_invalid_file(self, runner, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("actions:\n  create:\n    setup: [x]\n")
        result = runner.invoke(cli, ["validate", str(path)])
        assert result.exit_code == 1
        assert "Invalid definition" in result.output

    def test_missing_file(self, runner, tmp_path):
        result = runner.invoke(cli, ["validate", str(tmp_path / "missing.yaml")])
        assert result.exit_code != 0

    def test_verbose_flag(self, runner, definition_file):
        result = runner.invoke(cli, ["--verbose", "validate", str(definition_file)])
        assert result.exit_code == 0, result.output
