"""Tests for manifest and modules mapping loading."""

import pytest
import yaml

from bzldeps_common.errors import ValidationError as BzlDepsValidationError
from bzldeps_schema import load_manifest, load_modules_mapping


def _write_yaml(path, data):
    path.write_text(yaml.safe_dump(data))
    return path


class TestLoadModulesMapping:
    """Tests for load_modules_mapping."""

    def test_rules_python_layout(self, tmp_path):
        path = _write_yaml(
            tmp_path / "gazelle_python.yaml",
            {
                "manifest": {
                    "modules_mapping": {"yaml": "PyYAML", "numpy": "numpy"},
                    "pip_repository": {"name": "pypi"},
                }
            },
        )

        mapping, pip_repository = load_modules_mapping(path)

        assert mapping == {"yaml": "PyYAML", "numpy": "numpy"}
        assert pip_repository == "pypi"

    def test_without_pip_repository(self, tmp_path):
        path = _write_yaml(tmp_path / "m.yaml", {"manifest": {"modules_mapping": {"six": "six"}}})

        assert load_modules_mapping(path) == ({"six": "six"}, None)

    def test_empty_file(self, tmp_path):
        path = tmp_path / "m.yaml"
        path.write_text("")

        assert load_modules_mapping(path) == ({}, None)

    def test_missing_file(self, tmp_path):
        with pytest.raises(BzlDepsValidationError) as exc_info:
            load_modules_mapping(tmp_path / "missing.yaml")

        assert "File not found" in str(exc_info.value)

    def test_mapping_not_a_dict(self, tmp_path):
        path = _write_yaml(tmp_path / "m.yaml", {"manifest": {"modules_mapping": ["yaml"]}})

        with pytest.raises(BzlDepsValidationError):
            load_modules_mapping(path)


class TestLoadManifest:
    """Tests for load_manifest."""

    def test_load(self, tmp_path):
        path = _write_yaml(
            tmp_path / "bzldeps.yaml",
            {
                "configs": {"": {"modules_mapping": {"requests": "requests"}}},
                "resolve": [{"package": "app", "import": "yaml", "label": "//third_party:yaml"}],
                "rules": [
                    {
                        "package": "app",
                        "name": "app",
                        "srcs": 'glob(["*.py"])',
                        "modules": [{"name": "requests", "filepath": "app/main.py", "line_number": 1}],
                    }
                ],
            },
        )

        manifest = load_manifest(path)

        assert manifest.rules[0].address == "//app:app"
        assert manifest.resolve[0].import_ == "yaml"
        assert manifest.config_for("app").modules_mapping == {"requests": "requests"}

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "bzldeps.yaml"
        path.write_text("rules: [unclosed\n")

        with pytest.raises(BzlDepsValidationError) as exc_info:
            load_manifest(path)

        assert "YAML parsing error" in str(exc_info.value)

    def test_top_level_list(self, tmp_path):
        path = tmp_path / "bzldeps.yaml"
        path.write_text("- a\n- b\n")

        with pytest.raises(BzlDepsValidationError) as exc_info:
            load_manifest(path)

        assert "expected a mapping" in str(exc_info.value)

    def test_structural_errors_wrapped(self, tmp_path):
        """Type errors reported by pydantic surface as our ValidationError."""
        path = _write_yaml(tmp_path / "bzldeps.yaml", {"rules": [{"package": "app"}]})

        with pytest.raises(BzlDepsValidationError) as exc_info:
            load_manifest(path)

        assert "Invalid manifest" in str(exc_info.value)

    def test_unknown_key(self, tmp_path):
        path = _write_yaml(tmp_path / "bzldeps.yaml", {"rulez": []})

        with pytest.raises(BzlDepsValidationError):
            load_manifest(path)

    def test_modules_mapping_file_merged(self, tmp_path):
        _write_yaml(
            tmp_path / "gazelle_python.yaml",
            {
                "manifest": {
                    "modules_mapping": {"yaml": "PyYAML", "six": "six"},
                    "pip_repository": {"name": "pypi"},
                }
            },
        )
        path = _write_yaml(
            tmp_path / "bzldeps.yaml",
            {
                "configs": {
                    "": {
                        "modules_mapping_file": "gazelle_python.yaml",
                        "modules_mapping": {"six": "six-fork"},
                    }
                }
            },
        )

        config = load_manifest(path).config_for("")

        assert config.modules_mapping == {"yaml": "PyYAML", "six": "six-fork"}
        assert config.pip_repository == "pypi"

    def test_explicit_pip_repository_wins(self, tmp_path):
        _write_yaml(
            tmp_path / "gazelle_python.yaml",
            {"manifest": {"modules_mapping": {}, "pip_repository": {"name": "pypi"}}},
        )
        path = _write_yaml(
            tmp_path / "bzldeps.yaml",
            {
                "configs": {
                    "": {"modules_mapping_file": "gazelle_python.yaml", "pip_repository": "deps"}
                }
            },
        )

        assert load_manifest(path).config_for("").pip_repository == "deps"

    def test_missing_mapping_file(self, tmp_path):
        path = _write_yaml(
            tmp_path / "bzldeps.yaml",
            {"configs": {"": {"modules_mapping_file": "nope.yaml"}}},
        )

        with pytest.raises(BzlDepsValidationError):
            load_manifest(path)
