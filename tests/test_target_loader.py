"""Tests for YAML target declarations and their schema validation."""

import pytest

from ruleforge.metadata.loader import TargetDefinitionError, TargetLoader
from ruleforge.metadata.schema import validate_target_dir, validate_target_file
from ruleforge.rules import register_builtin_rules
from ruleforge.validation.engine import Validator
from ruleforge.validation.metadata import FieldMetadataStore
from ruleforge.validation.registry import RuleRegistry

USER_YAML = """\
target: User
description: Application user
options:
  errorFormat: "[{field}] : {message}"
fields:
  - name: name
    label: Full name
    rules: required|minLength[2]
  - name: email
    rules:
      - required
      - email
  - name: age
    rules:
      - numberLessThan: [150]
"""

PRODUCT_YAML = """\
target: Product
fields:
  - name: price
    rules: [required, "numberGreaterThan[0]"]
"""


@pytest.fixture
def target_dir(tmp_path):
    (tmp_path / "user.yaml").write_text(USER_YAML)
    (tmp_path / "product.yaml").write_text(PRODUCT_YAML)
    return tmp_path


@pytest.fixture
def store():
    return FieldMetadataStore()


# =============================================================================
# Schema validation
# =============================================================================


class TestSchemaValidation:
    def test_valid_dir_has_no_issues(self, target_dir):
        assert validate_target_dir(target_dir) == []

    def test_missing_target_key(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("fields: []\n")

        issues = validate_target_file(path)

        assert any("'target' is a required property" in i.message for i in issues)

    def test_unknown_field_key_reports_path(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("target: User\nfields:\n  - name: email\n    rulez: [required]\n")

        issues = validate_target_file(path)

        assert len(issues) == 1
        assert issues[0].path == "fields[0]"
        assert issues[0].severity == "error"

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        [issue] = validate_target_file(path)
        assert "empty" in issue.message

    def test_yaml_parse_error(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("target: [unclosed\n")
        [issue] = validate_target_file(path)
        assert "YAML parse error" in issue.message

    def test_no_fields_warns(self, tmp_path):
        path = tmp_path / "open.yaml"
        path.write_text("target: Open\nfields: []\n")

        [issue] = validate_target_file(path)
        assert issue.severity == "warning"

        [strict_issue] = validate_target_dir(tmp_path, strict=True)
        assert strict_issue.severity == "error"

    def test_missing_dir(self, tmp_path):
        [issue] = validate_target_dir(tmp_path / "nope")
        assert "does not exist" in issue.message


# =============================================================================
# Loading
# =============================================================================


class TestTargetLoader:
    def test_load_directory(self, target_dir):
        loader = TargetLoader(target_dir)
        targets = loader.load_all()

        assert sorted(targets) == ["Product", "User"]
        user = loader.get_target("User")
        assert [f.name for f in user.fields] == ["name", "email", "age"]
        assert user.fields[0].label == "Full name"
        assert user.description == "Application user"
        assert user.error_format == "[{field}] : {message}"

    def test_load_single_file(self, target_dir):
        loader = TargetLoader(target_dir / "product.yaml")
        assert loader.load_all().keys() == {"Product"}

    def test_missing_path(self, tmp_path):
        with pytest.raises(TargetDefinitionError):
            TargetLoader(tmp_path / "nope").load_all()

    def test_schema_violation_raises(self, tmp_path):
        (tmp_path / "bad.yaml").write_text("target: 123\nfields: []\n")
        with pytest.raises(TargetDefinitionError):
            TargetLoader(tmp_path).load_all()

    def test_duplicate_targets_rejected(self, target_dir):
        (target_dir / "user_copy.yaml").write_text(USER_YAML)
        with pytest.raises(TargetDefinitionError, match="Duplicate target 'User'"):
            TargetLoader(target_dir).load_all()

    def test_error_message_builder(self, target_dir):
        loader = TargetLoader(target_dir)
        loader.load_all()

        build = loader.get_target("User").error_message_builder()
        assert build("name", "name is required") == "[name] : name is required"
        assert loader.get_target("Product").error_message_builder() is None

    def test_error_format_renders_placeholders_once(self, target_dir):
        loader = TargetLoader(target_dir)
        loader.load_all()

        build = loader.get_target("User").error_message_builder()
        assert build("Total {message}", "is {field}") == "[Total {message}] : is {field}"

    def test_error_format_keeps_unknown_placeholders(self, tmp_path):
        (tmp_path / "t.yaml").write_text(
            'target: T\noptions:\n  errorFormat: "{code} {field}: {message}"\nfields: []\n'
        )
        loader = TargetLoader(tmp_path)
        loader.load_all()

        build = loader.get_target("T").error_message_builder()
        assert build("name", "is required") == "{code} name: is required"


# =============================================================================
# Declaring and validating
# =============================================================================


class TestDeclaredTargets:
    def test_declare_all(self, target_dir, store):
        loader = TargetLoader(target_dir)
        loader.load_all()

        declared = loader.declare_all(store)

        assert sorted(declared) == ["Product", "User"]
        bindings = store.get_bindings("User")
        assert [b.raw_rule_name for b in bindings["name"]] == ["required", "minLength[2]"]
        assert bindings["age"][0].params == (150,)
        assert store.get_property_labels("User") == {"name": "Full name"}

    def test_redeclare_replaces_rules(self, target_dir, store):
        loader = TargetLoader(target_dir)
        loader.load_all()
        loader.declare_all(store)
        loader.declare_all(store)

        assert len(store.get_bindings("User")["name"]) == 2

    @pytest.mark.asyncio
    async def test_validate_loaded_target(self, target_dir, store):
        loader = TargetLoader(target_dir)
        loader.load_all()
        loader.declare_all(store)
        registry = RuleRegistry()
        register_builtin_rules(registry)
        validator = Validator(registry=registry, store=store)

        ok = await validator.validate_target(
            "User", {"name": "John", "email": "john@example.com", "age": 30}
        )
        assert ok.success is True

        failed = await validator.validate_target("User", {"email": "bad", "age": 200})
        assert failed.success is False
        assert failed.errors_by_field() == {
            "name": "[Full name] : Full name is required",
            "email": "[email] : email must be a valid email address",
            "age": "[age] : age must be less than 150",
        }
