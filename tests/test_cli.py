"""Tests for ruleforge CLI commands."""

import json

import pytest
from click.testing import CliRunner

from ruleforge.cli.main import cli
from ruleforge.validation.registry import default_registry

USER_YAML = """\
target: User
fields:
  - name: name
    rules: required
  - name: email
    rules: required|email
"""


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("RULEFORGE_LOCALE", "RULEFORGE_TRANSLATIONS_PATH", "RULEFORGE_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    default_registry.clear()
    yield
    default_registry.clear()


@pytest.fixture
def target_dir(tmp_path):
    targets = tmp_path / "targets"
    targets.mkdir()
    (targets / "user.yaml").write_text(USER_YAML)
    return targets


class TestHelp:
    def test_root_help(self, runner):
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        for group in ("rules", "targets", "validate"):
            assert group in result.output


class TestRulesList:
    def test_lists_builtins(self, runner):
        result = runner.invoke(cli, ["rules", "list"])

        assert result.exit_code == 0
        assert "  required" in result.output
        assert "  numberLessThan" in result.output
        assert "rule(s) registered." in result.output


class TestValidateValue:
    def test_success(self, runner):
        result = runner.invoke(cli, ["validate", "value", "5", "--rules", "numberLessThan[10]"])

        assert result.exit_code == 0
        payload = json.loads(result.output)
        assert payload["success"] is True
        assert payload["data"] == 5

    def test_failure_exits_1(self, runner):
        result = runner.invoke(
            cli,
            ["validate", "value", "15", "--rules", "numberLessThan[10]", "--field", "quantity"],
        )

        assert result.exit_code == 1
        payload = json.loads(result.output)
        assert payload["success"] is False
        assert payload["error"]["message"] == "quantity must be less than 10"
        assert payload["error"]["ruleName"] == "numberLessThan"

    def test_non_json_value_is_string(self, runner):
        result = runner.invoke(cli, ["validate", "value", "hello", "--rules", "minLength[3]"])
        assert result.exit_code == 0
        assert json.loads(result.output)["data"] == "hello"

    def test_locale_option(self, runner):
        result = runner.invoke(
            cli,
            ["--locale", "fr", "validate", "value", '""', "--rules", "required", "--field", "nom"],
        )
        assert result.exit_code == 1
        assert json.loads(result.output)["error"]["message"] == "nom est requis"

    def test_bad_context_json(self, runner):
        result = runner.invoke(
            cli, ["validate", "value", "x", "--rules", "required", "--context", "{not json"]
        )
        assert result.exit_code == 2


class TestValidateTarget:
    def test_valid_data(self, runner, target_dir, tmp_path):
        data = tmp_path / "user.json"
        data.write_text(json.dumps({"name": "John", "email": "john@example.com"}))

        result = runner.invoke(
            cli, ["validate", "target", "User", "--schema", str(target_dir), "--data", str(data)]
        )

        assert result.exit_code == 0
        assert json.loads(result.output)["success"] is True

    def test_invalid_data(self, runner, target_dir, tmp_path):
        data = tmp_path / "user.json"
        data.write_text(json.dumps({"email": "bad"}))

        result = runner.invoke(
            cli, ["validate", "target", "User", "--schema", str(target_dir), "--data", str(data)]
        )

        assert result.exit_code == 1
        payload = json.loads(result.output)
        assert payload["failureCount"] == 2
        assert [e["propertyName"] for e in payload["errors"]] == ["name", "email"]

    def test_unknown_target(self, runner, target_dir, tmp_path):
        data = tmp_path / "user.json"
        data.write_text("{}")

        result = runner.invoke(
            cli, ["validate", "target", "Order", "--schema", str(target_dir), "--data", str(data)]
        )

        assert result.exit_code == 2
        assert "not found" in result.output

    def test_non_object_data(self, runner, target_dir, tmp_path):
        data = tmp_path / "user.json"
        data.write_text("[1, 2]")

        result = runner.invoke(
            cli, ["validate", "target", "User", "--schema", str(target_dir), "--data", str(data)]
        )
        assert result.exit_code == 2


class TestTargetsCheck:
    def test_valid_targets(self, runner, target_dir):
        result = runner.invoke(cli, ["targets", "check", str(target_dir)])

        assert result.exit_code == 0
        assert "Loaded 1 target(s)" in result.output
        assert "User (2 fields)" in result.output
        assert "All targets are valid" in result.output

    def test_schema_errors_exit_1(self, runner, tmp_path):
        (tmp_path / "bad.yaml").write_text("fields: []\n")

        result = runner.invoke(cli, ["targets", "check", str(tmp_path)])

        assert result.exit_code == 1
        assert "schema error(s) found" in result.output

    def test_strict_escalates_warnings(self, runner, tmp_path):
        (tmp_path / "open.yaml").write_text("target: Open\nfields: []\n")

        assert runner.invoke(cli, ["targets", "check", str(tmp_path)]).exit_code == 0
        assert runner.invoke(cli, ["targets", "check", str(tmp_path), "--strict"]).exit_code == 1
