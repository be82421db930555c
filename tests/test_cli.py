"""
Tests for the command-line interface.
"""

import io
import json

import pytest

from linesentry.cli import create_parser, exit_code_for, main
from linesentry.core.findings import Category, Issue, Severity
from linesentry.core.ignore import IGNORE_FILENAME


def make_issue(severity):
    return Issue(
        code="X001",
        message="Example",
        suggestion="",
        severity=severity,
        category=Category.API_SECURITY,
        line=0,
        column=0,
        matched_pattern="x",
    )


@pytest.fixture
def workspace(tmp_path, monkeypatch):
    """An isolated working directory with no configuration file."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("DEBUG", raising=False)
    return tmp_path


class TestExitCodes:
    """Tests for exit code selection."""

    def test_errors(self):
        assert exit_code_for([make_issue(Severity.INFO), make_issue(Severity.ERROR)]) == 2

    def test_warnings(self):
        assert exit_code_for([make_issue(Severity.WARNING), make_issue(Severity.INFO)]) == 1

    def test_clean(self):
        assert exit_code_for([]) == 0
        assert exit_code_for([make_issue(Severity.INFO)]) == 0


class TestParser:
    """Tests for argument parsing."""

    def test_scan_defaults(self):
        args = create_parser().parse_args(["scan"])

        assert args.target == "."
        assert args.format is None
        assert not args.no_ignore_file

    def test_repeatable_options(self):
        args = create_parser().parse_args(
            ["scan", "src", "--disable", "CRED*", "--disable", "FE003", "--rules", "a.yaml"]
        )

        assert args.disable == ["CRED*", "FE003"]
        assert args.rules == ["a.yaml"]

    def test_invalid_severity(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args(["scan", "-s", "critical"])


class TestScanCommand:
    """Tests for the scan command."""

    def test_scan_with_errors(self, workspace, capsys):
        (workspace / "app.js").write_text('const password = "hunter22";\n')

        code = main(["scan", str(workspace), "--no-color"])

        output = capsys.readouterr().out
        assert code == 2
        assert "CRED001" in output

    def test_scan_clean_directory(self, workspace, capsys):
        code = main(["scan", str(workspace), "-f", "json"])

        data = json.loads(capsys.readouterr().out)
        assert code == 0
        assert data["summary"]["total_issues"] == 0

    def test_disable_rule(self, workspace, capsys):
        (workspace / "app.js").write_text('const password = "hunter22";\n')

        main(["scan", str(workspace), "-f", "json", "--disable", "CRED*"])

        data = json.loads(capsys.readouterr().out)
        codes = [issue["code"] for f in data["files"] for issue in f["issues"]]
        assert not any(code.startswith("CRED") for code in codes)

    def test_output_file(self, workspace, capsys):
        (workspace / "app.js").write_text('const password = "hunter22";\n')
        out = workspace / "results.sarif"

        main(["scan", str(workspace / "app.js"), "-f", "sarif", "-o", str(out)])

        assert capsys.readouterr().out == ""
        sarif = json.loads(out.read_text())
        assert "CRED001" in [r["ruleId"] for r in sarif["runs"][0]["results"]]

    def test_stdin(self, workspace, capsys, monkeypatch):
        monkeypatch.setattr("sys.stdin", io.StringIO("webView.settings.setJavaScriptEnabled(true)\n"))

        code = main(["scan", "--stdin-filename", "MainActivity.kt", "-f", "json"])

        data = json.loads(capsys.readouterr().out)
        assert code != 0
        assert data["file_path"] == "MainActivity.kt"
        assert "KT-AUTH001" in [i["code"] for i in data["issues"]]

    def test_stdin_honours_ignore_file(self, workspace, capsys, monkeypatch):
        """Entries in the workspace ignore file apply to stdin input too."""
        (workspace / IGNORE_FILENAME).write_text("KT-AUTH001 app/MainActivity.kt:1 # reviewed\n")
        monkeypatch.setattr("sys.stdin", io.StringIO("webView.settings.setJavaScriptEnabled(true)\n"))

        main(["scan", "--stdin-filename", "app/MainActivity.kt", "-f", "json"])

        data = json.loads(capsys.readouterr().out)
        assert "KT-AUTH001" not in [i["code"] for i in data["issues"]]

    def test_stdin_no_ignore_file(self, workspace, capsys, monkeypatch):
        (workspace / IGNORE_FILENAME).write_text("KT-AUTH001 app/MainActivity.kt\n")
        monkeypatch.setattr("sys.stdin", io.StringIO("webView.settings.setJavaScriptEnabled(true)\n"))

        main(["scan", "--stdin-filename", "app/MainActivity.kt", "-f", "json", "--no-ignore-file"])

        data = json.loads(capsys.readouterr().out)
        assert "KT-AUTH001" in [i["code"] for i in data["issues"]]

    def test_config_file_applied(self, workspace, capsys):
        (workspace / ".linesentry.yaml").write_text("rules:\n  disabled: ['CRED*']\n")
        (workspace / "app.js").write_text('const password = "hunter22";\n')

        main(["scan", str(workspace), "-f", "json"])

        data = json.loads(capsys.readouterr().out)
        codes = [issue["code"] for f in data["files"] for issue in f["issues"]]
        assert "CRED001" not in codes

    def test_missing_target(self, workspace, capsys):
        code = main(["scan", str(workspace / "missing")])

        assert code == 1
        assert "does not exist" in capsys.readouterr().err

    def test_bad_config(self, workspace, capsys):
        """Configuration errors are reported rather than raised."""
        code = main(["scan", str(workspace), "-c", str(workspace / "nope.yaml")])

        assert code == 1
        assert "Error:" in capsys.readouterr().err


class TestOtherCommands:
    """Tests for list-rules, ignore and init."""

    def test_no_command(self, capsys):
        assert main([]) == 0
        assert "usage" in capsys.readouterr().out.lower()

    def test_list_rules_json(self, workspace, capsys):
        code = main(["list-rules", "--category", "csrf-protection", "-f", "json"])

        rules = json.loads(capsys.readouterr().out)
        assert code == 0
        assert rules
        assert all(rule["category"] == "csrf-protection" for rule in rules)

    def test_list_rules_text(self, workspace, capsys):
        code = main(["list-rules", "--no-color"])

        output = capsys.readouterr().out
        assert code == 0
        assert "Total:" in output
        assert "KT-ENC001" in output

    def test_ignore_command(self, workspace, capsys):
        code = main(["ignore", "CRED001", "src/app.ts:4", "-r", "fixture", "--root", str(workspace)])

        assert code == 0
        content = (workspace / IGNORE_FILENAME).read_text()
        assert "CRED001 src/app.ts:4 # fixture" in content

    def test_ignore_whole_file(self, workspace):
        main(["ignore", "FE003", "public/index.html"])

        assert "FE003 public/index.html\n" in (workspace / IGNORE_FILENAME).read_text()

    def test_ignore_rejects_line_zero(self, workspace, capsys):
        code = main(["ignore", "CRED001", "src/app.ts:0"])

        assert code == 1
        assert not (workspace / IGNORE_FILENAME).exists()

    def test_init(self, workspace, capsys):
        assert main(["init"]) == 0
        assert (workspace / ".linesentry.yaml").exists()

        assert main(["init"]) == 1
        assert main(["init", "--force"]) == 0
