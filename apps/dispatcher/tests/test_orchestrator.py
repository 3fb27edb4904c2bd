"""End-to-end tests for dispatch(): detect → resolve → execute.

subprocess.run is mocked; manifests are written to tmp_path.
"""

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from dispatcher.bindings.types import Capability, CommandSpec, ConfigurationError
from dispatcher.core.config import DispatchConfig
from dispatcher.detector.types import Ecosystem
from dispatcher.executor.types import DispatchState
from dispatcher.orchestrator import dispatch

RUN = "dispatcher.executor.executor.subprocess.run"


def _build(tmp_path: Path, content: str) -> Path:
    (tmp_path / "BUILD").write_text(content, encoding="utf-8")
    return tmp_path


def _completed(returncode=0, stdout="", stderr=""):
    return MagicMock(returncode=returncode, stdout=stdout, stderr=stderr)


RUST_BUILD = 'rust_binary(name = "app", srcs = ["main.rs"])\n'
PYTHON_BUILD = 'py_library(name = "lib", srcs = ["lib.py"])\n'


class TestDispatchSuccess:
    @patch(RUN)
    def test_rust_static_analysis_runs_three_tools_in_order(self, mock_run, tmp_path):
        mock_run.return_value = _completed()
        outcome = dispatch(_build(tmp_path, RUST_BUILD), Capability.STATIC_ANALYSIS)

        assert outcome.state == DispatchState.EXECUTED
        assert outcome.ecosystem == "rust"
        assert outcome.exit_code == 0
        programs = [call.args[0][:2] for call in mock_run.call_args_list]
        assert programs == [["cargo", "clippy"], ["cargo", "audit"], ["cargo", "vet"]]

    @patch(RUN)
    def test_tool_output_is_kept_verbatim(self, mock_run, tmp_path):
        mock_run.return_value = _completed(0, stdout="\x1b[32mok\x1b[0m\n", stderr="note\n")
        outcome = dispatch(_build(tmp_path, PYTHON_BUILD), Capability.TEST)

        assert outcome.steps[0].stdout == "\x1b[32mok\x1b[0m\n"
        assert outcome.steps[0].stderr == "note\n"

    @patch(RUN)
    def test_commands_run_in_working_directory(self, mock_run, tmp_path):
        mock_run.return_value = _completed()
        dispatch(_build(tmp_path, PYTHON_BUILD), Capability.TEST)
        assert mock_run.call_args.kwargs["cwd"] == str(tmp_path)

    @patch(RUN)
    def test_capability_accepts_string_value(self, mock_run, tmp_path):
        mock_run.return_value = _completed()
        outcome = dispatch(_build(tmp_path, RUST_BUILD), "format-check")
        assert outcome.capability == "format-check"
        assert outcome.resolved_commands == [["cargo", "fmt", "--all", "--", "--check"]]


class TestDispatchFailures:
    @patch(RUN)
    def test_not_detected_exits_1_without_running(self, mock_run, tmp_path):
        outcome = dispatch(_build(tmp_path, 'filegroup(name = "x")\n'), Capability.TEST)

        assert outcome.exit_code == 1
        assert outcome.state == DispatchState.UNRESOLVED
        assert "markers tried" in outcome.diagnostic
        mock_run.assert_not_called()

    @patch(RUN)
    def test_unbound_capability_exits_2_without_running(self, mock_run, tmp_path):
        outcome = dispatch(_build(tmp_path, PYTHON_BUILD), Capability.COPYRIGHT_CHECK)

        assert outcome.exit_code == 2
        assert outcome.state == DispatchState.ECOSYSTEM_KNOWN
        assert outcome.ecosystem == "python"
        assert "copyright-check" in outcome.diagnostic
        mock_run.assert_not_called()

    @patch(RUN)
    def test_tool_failure_propagates_exit_code(self, mock_run, tmp_path):
        mock_run.return_value = _completed(4, stderr="tests failed")
        outcome = dispatch(_build(tmp_path, RUST_BUILD), Capability.TEST)

        assert outcome.state == DispatchState.EXECUTED
        assert outcome.exit_code == 4
        assert outcome.failed_steps[0].stderr == "tests failed"

    @patch(RUN)
    def test_clippy_failure_still_runs_audit_and_vet_by_default(self, mock_run, tmp_path):
        mock_run.side_effect = [_completed(101), _completed(0), _completed(0)]
        outcome = dispatch(_build(tmp_path, RUST_BUILD), Capability.STATIC_ANALYSIS)

        assert mock_run.call_count == 3
        assert outcome.exit_code == 101

    @patch(RUN)
    def test_fail_fast_stops_after_clippy(self, mock_run, tmp_path):
        mock_run.side_effect = [_completed(101)]
        config = DispatchConfig(fail_fast=True)
        outcome = dispatch(_build(tmp_path, RUST_BUILD), Capability.STATIC_ANALYSIS, config)

        assert mock_run.call_count == 1
        assert outcome.exit_code == 101
        assert [s.ran for s in outcome.steps] == [True, False, False]

    def test_malformed_bindings_file_raises(self, tmp_path):
        bad = tmp_path / "bindings.yml"
        bad.write_text("rust:\n  lint: []\n", encoding="utf-8")
        config = DispatchConfig(bindings_file=bad)
        with pytest.raises(ConfigurationError):
            dispatch(_build(tmp_path, RUST_BUILD), Capability.TEST, config)


class TestDispatchOptions:
    @patch(RUN)
    def test_dry_run_resolves_without_executing(self, mock_run, tmp_path):
        config = DispatchConfig(dry_run=True)
        outcome = dispatch(_build(tmp_path, RUST_BUILD), Capability.STATIC_ANALYSIS, config)

        assert outcome.state == DispatchState.COMMAND_RESOLVED
        assert outcome.exit_code == 0
        assert len(outcome.resolved_commands) == 3
        assert outcome.steps == []
        mock_run.assert_not_called()

    @patch(RUN)
    def test_explicit_bindings_table_is_used(self, mock_run, tmp_path):
        mock_run.return_value = _completed()
        table = {(Ecosystem.RUST, Capability.TEST): (CommandSpec("cargo", ("nextest", "run")),)}
        outcome = dispatch(_build(tmp_path, RUST_BUILD), Capability.TEST, bindings=table)

        assert outcome.resolved_commands == [["cargo", "nextest", "run"]]
        assert mock_run.call_args.args[0] == ["cargo", "nextest", "run"]

    @patch(RUN)
    def test_bindings_file_from_config(self, mock_run, tmp_path):
        mock_run.return_value = _completed()
        overrides = tmp_path / "bindings.yml"
        overrides.write_text(
            'python:\n  copyright-check:\n    - [bazel, run, "//:copyright.check"]\n',
            encoding="utf-8",
        )
        config = DispatchConfig(bindings_file=overrides)
        outcome = dispatch(_build(tmp_path, PYTHON_BUILD), Capability.COPYRIGHT_CHECK, config)

        assert outcome.exit_code == 0
        assert outcome.resolved_commands == [["bazel", "run", "//:copyright.check"]]

    @patch(RUN)
    def test_outcome_to_dict(self, mock_run, tmp_path):
        mock_run.return_value = _completed()
        payload = dispatch(_build(tmp_path, RUST_BUILD), Capability.TEST).to_dict()

        assert payload["state"] == "executed"
        assert payload["ecosystem"] == "rust"
        assert payload["steps"][0]["argv"] == ["bazel", "test", "//..."]
