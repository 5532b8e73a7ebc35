"""Tests for the propcontract check command.

Covers:
- Exit codes (0 clean, 1 on error-severity problems)
- Text and --json output
- Flags overriding config files
- Config errors surfaced as CLI errors
"""

from __future__ import annotations

import json
from pathlib import Path

from click.testing import CliRunner

from propcontract.cli.main import cli

OPTIONAL_WITHOUT_DEFAULT = """\
function Hello({ foo }) {
  return <div>{foo}</div>;
}
Hello.propTypes = {
  foo: PropTypes.string,
};
"""

REQUIRED_WITH_DEFAULT = """\
function Hello({ foo }) {
  return <div>{foo}</div>;
}
Hello.propTypes = {
  foo: PropTypes.string.isRequired,
};
Hello.defaultProps = {
  foo: "foo",
};
"""

WRAPPED = """\
function Hello({ foo }) {
  return <div>{foo}</div>;
}
Hello.propTypes = forbidExtraProps({
  foo: PropTypes.string,
});
"""


class TestCheckCommand:
    """Tests for `propcontract check`."""

    def test_clean_project(self, runner: CliRunner, workspace: Path) -> None:
        (workspace / "Hello.jsx").write_text(REQUIRED_WITH_DEFAULT)

        result = runner.invoke(cli, ["check"])

        assert result.exit_code == 0, result.output
        assert "0 problems in 1 file" in result.output

    def test_reports_and_fails(self, runner: CliRunner, workspace: Path) -> None:
        (workspace / "src").mkdir()
        (workspace / "src" / "Hello.jsx").write_text(OPTIONAL_WITHOUT_DEFAULT)

        result = runner.invoke(cli, ["check", "src"])

        assert result.exit_code == 1
        assert "src/Hello.jsx:5:3" in result.output
        assert 'propType "foo" is not required' in result.output
        assert "1 problem in 1 file" in result.output

    def test_json_output(self, runner: CliRunner, workspace: Path) -> None:
        (workspace / "Hello.jsx").write_text(OPTIONAL_WITHOUT_DEFAULT)

        result = runner.invoke(cli, ["check", "--json"])

        assert result.exit_code == 1
        data = json.loads(result.stdout)
        assert data["status"] == "dirty"
        assert data["total_diagnostics"] == 1
        [file_data] = data["files"]
        assert file_data["path"] == "Hello.jsx"
        assert file_data["diagnostics"][0]["code"] == "shouldHaveDefault"

    def test_json_output_stays_clean_when_verbose(self, runner: CliRunner, workspace: Path) -> None:
        (workspace / "Hello.jsx").write_text(OPTIONAL_WITHOUT_DEFAULT)

        result = runner.invoke(cli, ["-v", "check", "--json"])

        assert result.exit_code == 1
        assert json.loads(result.stdout)["total_diagnostics"] == 1
        assert "component_found" in result.stderr
        assert "component_found" not in result.stdout

    def test_forbid_flag(self, runner: CliRunner, workspace: Path) -> None:
        (workspace / "Hello.jsx").write_text(REQUIRED_WITH_DEFAULT)

        result = runner.invoke(cli, ["check", "--json", "--forbid-default-for-required"])

        assert result.exit_code == 1
        data = json.loads(result.stdout)
        assert data["files"][0]["diagnostics"][0]["code"] == "noDefaultWithRequired"

    def test_ignore_functional_flag(self, runner: CliRunner, workspace: Path) -> None:
        (workspace / "Hello.jsx").write_text(OPTIONAL_WITHOUT_DEFAULT)

        result = runner.invoke(cli, ["check", "--ignore-functional-components"])

        assert result.exit_code == 0, result.output

    def test_wrapper_flag(self, runner: CliRunner, workspace: Path) -> None:
        (workspace / "Hello.jsx").write_text(WRAPPED)

        assert runner.invoke(cli, ["check"]).exit_code == 0
        assert runner.invoke(cli, ["check", "--wrapper", "forbidExtraProps"]).exit_code == 1

    def test_project_config_is_read(self, runner: CliRunner, workspace: Path) -> None:
        (workspace / "Hello.jsx").write_text(REQUIRED_WITH_DEFAULT)
        (workspace / ".propcontract.yaml").write_text("rule:\n  forbid_default_for_required: true\n")

        assert runner.invoke(cli, ["check"]).exit_code == 1

    def test_warning_severity_exits_zero(self, runner: CliRunner, workspace: Path) -> None:
        (workspace / "Hello.jsx").write_text(OPTIONAL_WITHOUT_DEFAULT)
        (workspace / ".propcontract.yaml").write_text("rule:\n  severity: warning\n")

        result = runner.invoke(cli, ["check"])

        assert result.exit_code == 0
        assert "warning" in result.output

    def test_skipped_files_are_counted(self, runner: CliRunner, workspace: Path) -> None:
        (workspace / "Broken.jsx").write_text("function (\n")

        result = runner.invoke(cli, ["check"])

        assert result.exit_code == 0
        assert "(1 skipped)" in result.output

    def test_invalid_config(self, runner: CliRunner, workspace: Path) -> None:
        (workspace / ".propcontract.yaml").write_text("rule:\n  severity: fatal\n")

        result = runner.invoke(cli, ["check"])

        assert result.exit_code == 1
        assert "CONFIG_INVALID_VALUE" in result.output

    def test_missing_explicit_config(self, runner: CliRunner, workspace: Path) -> None:
        result = runner.invoke(cli, ["check", "--config", str(workspace / "nope.yaml")])

        assert result.exit_code == 1
        assert "CONFIG_FILE_NOT_FOUND" in result.output

    def test_bad_jobs_value(self, runner: CliRunner, workspace: Path) -> None:  # noqa: ARG002
        result = runner.invoke(cli, ["check", "--jobs", "0"])

        assert result.exit_code == 2

    def test_parallel_jobs(self, runner: CliRunner, workspace: Path) -> None:
        for i in range(4):
            (workspace / f"C{i}.jsx").write_text(OPTIONAL_WITHOUT_DEFAULT)

        result = runner.invoke(cli, ["check", "--json", "-j", "3"])

        data = json.loads(result.stdout)
        assert [f["path"] for f in data["files"]] == ["C0.jsx", "C1.jsx", "C2.jsx", "C3.jsx"]
        assert data["total_diagnostics"] == 4


class TestCliGroup:
    """Tests for the top-level group."""

    def test_version(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert "propcontract" in result.output
        assert "0.1.0" in result.output
