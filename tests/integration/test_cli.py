"""Integration tests for the sapwood command line."""

import json
import sys

import pytest

from sapwood.main import _parse_assignments, main


@pytest.fixture
def workflow_file(tmp_path):
    """Provide a configuration file using only built-in actions."""
    path = tmp_path / "workflow.yaml"
    path.write_text("- noop\n- series:\n    - \"null\"\n    - []\n", encoding="utf-8")
    return path


@pytest.fixture
def plugin_module(tmp_path, monkeypatch):
    """Provide an importable module registering a 'value' action."""
    (tmp_path / "sapwood_cli_plugin.py").write_text(
        "from sapwood.actions import Action, register_action\n"
        "\n"
        "@register_action('value')\n"
        "class ValueAction(Action):\n"
        "    def execute(self, context):\n"
        "        return self.evaluate(self.config['value'], context)\n",
        encoding="utf-8",
    )
    monkeypatch.syspath_prepend(str(tmp_path))
    yield "sapwood_cli_plugin"
    sys.modules.pop("sapwood_cli_plugin", None)


class TestParseAssignments:
    """Test --set parsing."""

    def test_yaml_scalars(self):
        """Test that values are typed like YAML scalars."""
        assert _parse_assignments(["a=1", "b=true", "c=text", "d=", "e=[1, 2]"]) == {
            "a": 1,
            "b": True,
            "c": "text",
            "d": "",
            "e": [1, 2],
        }

    def test_value_may_contain_equals(self):
        """Test that only the first '=' separates key and value."""
        assert _parse_assignments(["expr=a=b"]) == {"expr": "a=b"}

    def test_missing_separator(self):
        """Test that malformed assignments are rejected."""
        import argparse

        with pytest.raises(argparse.ArgumentTypeError):
            _parse_assignments(["novalue"])


class TestMain:
    """Test the main entry point."""

    def test_run_prints_json_result(self, workflow_file, capsys):
        """Test running a workflow file."""
        exit_code = main(["--log-format", "plain", "run", str(workflow_file)])

        assert exit_code == 0
        assert json.loads(capsys.readouterr().out) == [None, [None, None]]

    def test_check_prints_root_action(self, workflow_file, capsys):
        """Test compiling without running."""
        exit_code = main(["check", str(workflow_file)])

        assert exit_code == 0
        assert capsys.readouterr().out.strip() == "series"

    def test_run_with_plugin_and_variables(self, tmp_path, plugin_module, capsys):
        """Test plugin actions evaluating --set variables."""
        path = tmp_path / "value.yaml"
        path.write_text("value: count * 2\n", encoding="utf-8")

        exit_code = main(["--plugin", plugin_module, "run", str(path), "--set", "count=21"])

        assert exit_code == 0
        assert json.loads(capsys.readouterr().out) == 42

    def test_plugin_after_subcommand(self, tmp_path, plugin_module, capsys):
        """Test the --plugin option given after the run and check commands."""
        path = tmp_path / "value.yaml"
        path.write_text("value: count * 2\n", encoding="utf-8")

        exit_code = main(["run", str(path), "--plugin", plugin_module, "--set", "count=21"])

        assert exit_code == 0
        assert json.loads(capsys.readouterr().out) == 42
        assert main(["check", str(path), "--plugin", plugin_module]) == 0
        assert capsys.readouterr().out.strip() == "value"

    def test_invalid_log_level_fails(self, workflow_file, capsys):
        """Test that invalid settings exit with status 1."""
        exit_code = main(["--log-level", "bogus", "run", str(workflow_file)])

        assert exit_code == 1
        assert capsys.readouterr().out == ""

    def test_invalid_environment_setting_fails(self, workflow_file, monkeypatch):
        """Test that invalid SAPWOOD_* variables exit with status 1."""
        monkeypatch.setenv("SAPWOOD_METRICS_PORT", "1")

        assert main(["check", str(workflow_file)]) == 1

    def test_missing_file_fails(self, tmp_path, capsys):
        """Test that unreadable files exit with status 1."""
        exit_code = main(["run", str(tmp_path / "missing.yaml")])

        assert exit_code == 1
        assert capsys.readouterr().out == ""

    def test_unknown_action_fails(self, tmp_path):
        """Test that structural errors exit with status 1."""
        path = tmp_path / "bad.yaml"
        path.write_text("bogus: 1\n", encoding="utf-8")

        assert main(["check", str(path)]) == 1

    def test_missing_plugin_fails(self, workflow_file):
        """Test that unimportable plugins exit with status 1."""
        assert main(["--plugin", "sapwood_no_such_plugin", "run", str(workflow_file)]) == 1

    def test_malformed_assignment_exits(self, workflow_file):
        """Test that bad --set values are reported by argparse."""
        with pytest.raises(SystemExit) as exc_info:
            main(["run", str(workflow_file), "--set", "novalue"])

        assert exc_info.value.code == 2
