"""
Tests for the bzldeps CLI.

Tests cover:
- resolve command (success, failures, --keep-going, --output, build file directives)
- srcs command
- provides command
"""

import pytest
import yaml
from typer.testing import CliRunner

from bzldeps_cli.main import app

runner = CliRunner()


def _touch(root, *paths):
    for rel in paths:
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("")


@pytest.fixture
def workspace(tmp_path):
    """Repository with an app and a util library, plus a manifest describing them."""
    _touch(
        tmp_path,
        "app/BUILD.bazel",
        "app/main.py",
        "libs/util/BUILD.bazel",
        "libs/util/__init__.py",
        "libs/util/strings.py",
    )
    manifest = tmp_path / "bzldeps.yaml"
    manifest.write_text(
        yaml.dump(
            {
                "configs": {"": {"modules_mapping": {"requests": "requests"}}},
                "rules": [
                    {
                        "package": "app",
                        "name": "app",
                        "srcs": ["main.py"],
                        "modules": [
                            {"name": "requests", "filepath": "app/main.py", "line_number": 1},
                            {"name": "libs.util.strings", "filepath": "app/main.py", "line_number": 2},
                        ],
                    },
                    {"package": "libs/util", "name": "util", "srcs": 'glob(["*.py"])'},
                ],
            }
        )
    )
    return manifest


def _add_rule(manifest, rule, first=False):
    data = yaml.safe_load(manifest.read_text())
    if first:
        data["rules"].insert(0, rule)
    else:
        data["rules"].append(rule)
    manifest.write_text(yaml.dump(data))


BROKEN = {
    "package": "broken",
    "name": "broken",
    "srcs": [],
    "modules": [{"name": "nosuchmod", "filepath": "broken/b.py", "line_number": 4}],
}


class TestResolveCommand:
    """Test resolve command."""

    def test_resolve(self, workspace):
        """Should print the resolved deps of every rule."""
        result = runner.invoke(app, ["resolve", str(workspace)])

        assert result.exit_code == 0
        assert "//libs/util:util" in result.stdout
        assert "@pip//:pypi__requests" in result.stdout
        assert "Resolved 2 rule(s)" in result.stdout

    def test_resolve_writes_output(self, workspace, tmp_path):
        """Should write the deps of every rule as YAML."""
        output = tmp_path / "resolved.yaml"

        result = runner.invoke(app, ["resolve", str(workspace), "--output", str(output)])

        assert result.exit_code == 0
        assert yaml.safe_load(output.read_text()) == {
            "//app:app": ["//libs/util:util", "@pip//:pypi__requests"],
        }

    def test_resolve_failure_exits_nonzero(self, workspace, tmp_path):
        """Should stop at the failing rule and not write output."""
        _add_rule(workspace, BROKEN, first=True)
        output = tmp_path / "resolved.yaml"

        result = runner.invoke(app, ["resolve", str(workspace), "-o", str(output)])

        assert result.exit_code == 1
        assert "invalid_import" in result.stdout
        assert "Stopped after the first failing rule" in result.stdout
        assert "//app:app" not in result.stdout
        assert not output.exists()

    def test_resolve_keep_going(self, workspace):
        """Should resolve every rule and still fail."""
        _add_rule(workspace, BROKEN, first=True)

        result = runner.invoke(app, ["resolve", str(workspace), "--keep-going"])

        assert result.exit_code == 1
        assert "@pip//:pypi__requests" in result.stdout
        assert "1 rule(s) failed to resolve" in result.output

    def test_resolve_with_build_file_directives(self, workspace):
        """Should honor resolve directives found in build files."""
        _add_rule(workspace, BROKEN)
        (workspace.parent / "BUILD.bazel").write_text(
            "# gazelle:resolve py nosuchmod //vendor:nosuchmod\n"
        )

        without = runner.invoke(app, ["resolve", str(workspace)])
        with_scan = runner.invoke(app, ["resolve", str(workspace), "--scan-build-files"])

        assert without.exit_code == 1
        assert with_scan.exit_code == 0
        assert "//vendor:nosuchmod" in with_scan.stdout

    def test_resolve_explains_dependency_at_default_level(self, tmp_path):
        """EXPLAIN_DEPENDENCY alone is enough to see why a dependency was added."""
        manifest = tmp_path / "bzldeps.yaml"
        manifest.write_text(
            yaml.dump(
                {
                    "configs": {"": {"modules_mapping": {"numpy": "Numpy"}}},
                    "rules": [
                        {
                            "package": "app",
                            "name": "app",
                            "srcs": ["main.py"],
                            "modules": [
                                {"name": "numpy", "filepath": "app/main.py", "line_number": 3}
                            ],
                        }
                    ],
                }
            )
        )

        result = runner.invoke(
            app, ["resolve", str(manifest)], env={"EXPLAIN_DEPENDENCY": "@pip//:pypi__numpy"}
        )

        assert result.exit_code == 0
        assert "explaining dependency" in result.output
        assert "app/main.py" in result.output

    def test_resolve_missing_manifest(self, tmp_path):
        """Should fail on a missing manifest."""
        result = runner.invoke(app, ["resolve", str(tmp_path / "missing.yaml")])

        assert result.exit_code == 1
        assert "File not found" in result.output

    def test_resolve_syntax_error(self, workspace):
        """Should fail when a srcs expression does not parse."""
        _add_rule(workspace, {"package": "bad", "name": "bad", "srcs": "glob(["})

        result = runner.invoke(app, ["resolve", str(workspace)])

        assert result.exit_code == 1

    def test_resolve_invalid_log_level(self, workspace):
        """Should reject unknown log levels."""
        result = runner.invoke(app, ["resolve", str(workspace), "--log-level", "LOUD"])

        assert result.exit_code == 1
        assert "Invalid log level" in result.output


class TestSrcsCommand:
    """Test srcs command."""

    def test_srcs(self, tmp_path):
        """Should print matching files, skipping sub-packages."""
        _touch(tmp_path, "app/main.py", "app/main_test.py", "app/sub/BUILD", "app/sub/x.py")

        result = runner.invoke(
            app,
            [
                "srcs",
                'glob(["**/*.py"], exclude = ["*_test.py"])',
                "--package",
                "app",
                "--repo-root",
                str(tmp_path),
            ],
        )

        assert result.exit_code == 0
        assert result.stdout.split() == ["main.py"]

    def test_srcs_prints_names_verbatim(self, tmp_path):
        """Brackets are not markup and long names stay on one line."""
        long_name = "x" * 120 + ".py"
        _touch(tmp_path, "app/a[b].py", "app/" + long_name)

        result = runner.invoke(
            app,
            ["srcs", 'glob(["*.py"])', "--package", "app", "--repo-root", str(tmp_path)],
        )

        assert result.exit_code == 0
        assert result.stdout.splitlines() == ["a[b].py", long_name]

    def test_srcs_syntax_error(self, tmp_path):
        """Should fail on an unparsable expression."""
        result = runner.invoke(app, ["srcs", "glob([", "--repo-root", str(tmp_path)])

        assert result.exit_code == 1


class TestProvidesCommand:
    """Test provides command."""

    def test_provides(self, workspace):
        """Should print the import names each rule publishes."""
        _add_rule(workspace, {"package": "docs", "name": "docs"})

        result = runner.invoke(app, ["provides", str(workspace)])

        assert result.exit_code == 0
        assert "libs.util.strings" in result.stdout
        assert "app.main" in result.stdout
        assert "(not indexed)" in result.stdout
