"""
Tests for the cache-dirs entry point.
"""

import io

import pytest

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))

from cache_dirs.app.main import report, run
from cache_dirs.app.models import PathOutcome, RunResult, RunStatus
from cache_dirs.app.workflow import WorkflowCommands
from shared.config import CacheDirsConfig


def read_outputs(path):
    """Parse a GITHUB_OUTPUT file into a dict."""
    outputs = {}
    lines = path.read_text().splitlines()
    i = 0
    while i < len(lines):
        name, delimiter = lines[i].split("<<", 1)
        end = lines.index(delimiter, i + 1)
        outputs[name] = "\n".join(lines[i + 1:end])
        i = end + 1
    return outputs


class TestMain:
    """End-to-end tests against the directory backend."""

    @pytest.fixture
    def workspace(self, tmp_path):
        ws = tmp_path / "ws"
        (ws / "build").mkdir(parents=True)
        (ws / "build" / "artifact").write_text("v1")
        (ws / "deps.lock").write_text("lock-v1")
        return ws

    @pytest.fixture
    def config(self, tmp_path, workspace):
        return CacheDirsConfig(store_dir=tmp_path / "store", workspace=workspace, log_level="warning")

    @pytest.fixture
    def environ(self, tmp_path):
        return {
            "INPUT_CACHE-PATHS": "build",
            "INPUT_KEY-TEMPLATE": "{prefix}{path}",
            "INPUT_CACHE-INVALIDATION-PATTERN": "*.lock",
            "INPUT_KEY-PREFIX": "test-",
            "GITHUB_OUTPUT": str(tmp_path / "output"),
            "GITHUB_RUN_ID": "42",
        }

    def test_first_run_saves_second_run_restores(self, tmp_path, workspace, config, environ):
        stream = io.StringIO()
        assert run(environ, config, WorkflowCommands(stream=stream, environ=environ)) == 0
        assert read_outputs(tmp_path / "output")["cache-hit"] == "false"
        assert len(list((tmp_path / "store").glob("*.tar.gz"))) == 1

        (workspace / "build" / "artifact").unlink()
        (tmp_path / "output").unlink()

        assert run(environ, config, WorkflowCommands(stream=stream, environ=environ)) == 0
        outputs = read_outputs(tmp_path / "output")
        assert outputs["cache-hit"] == "true"
        assert outputs["hash"].startswith("-")
        assert (workspace / "build" / "artifact").read_text() == "v1"
        assert "::error::" not in stream.getvalue()

    def test_missing_paths_exit_zero_with_warning(self, tmp_path, config, environ):
        environ["INPUT_CACHE-PATHS"] = "nothing-here;also-missing"
        stream = io.StringIO()

        assert run(environ, config, WorkflowCommands(stream=stream, environ=environ)) == 0
        assert stream.getvalue().startswith("::warning::None of the cache paths exist")
        assert not (tmp_path / "store").exists()

    def test_missing_input_exits_non_zero(self, config, environ):
        del environ["INPUT_KEY-TEMPLATE"]
        stream = io.StringIO()
        workflow = WorkflowCommands(stream=stream, environ=environ)

        assert run(environ, config, workflow) == 1
        assert workflow.failed
        assert stream.getvalue() == "::error::Input required and not supplied: key-template\n"


class TestReport:
    """Test cases for result reporting."""

    def test_failure_sets_failed(self):
        stream = io.StringIO()
        workflow = WorkflowCommands(stream=stream, environ={})

        code = report(RunResult(status=RunStatus.FAILED, message="boom\nline two"), workflow)

        assert code == 1
        assert stream.getvalue() == "::error::boom%0Aline two\n"

    def test_noop_reports_no_hit(self):
        stream = io.StringIO()
        workflow = WorkflowCommands(stream=stream, environ={})

        assert report(RunResult(status=RunStatus.NOOP), workflow) == 0
        assert "::set-output name=cache-hit::false" in stream.getvalue()
        assert "name=hash" not in stream.getvalue()

    def test_partial_hit_is_not_cache_hit(self):
        result = RunResult(
            status=RunStatus.SUCCESS,
            content_hash="-abc",
            outcomes=[
                PathOutcome(path="a", restore_key="k-a", matched_key="k-a--abc"),
                PathOutcome(path="b", restore_key="k-b", saved_key="k-b--abc"),
            ],
        )
        assert not result.cache_hit


class TestConfig:
    """Test cases for runtime settings."""

    def test_env_prefix(self, monkeypatch, tmp_path):
        monkeypatch.setenv("CACHE_DIRS_STORE_DIR", str(tmp_path / "s"))
        monkeypatch.setenv("CACHE_DIRS_LOG_FORMAT", "JSON")
        config = CacheDirsConfig()

        assert config.resolved_store_dir() == tmp_path / "s"
        assert config.log_format == "json"

    def test_invalid_log_format(self):
        with pytest.raises(ValueError):
            CacheDirsConfig(log_format="xml")

    def test_log_level_normalised(self):
        assert CacheDirsConfig(log_level="WARNING").log_level == "warning"

    def test_invalid_log_level(self):
        with pytest.raises(ValueError, match="unsupported log level"):
            CacheDirsConfig(log_level="verbose")

    def test_workspace_falls_back_to_runner_workspace(self, monkeypatch, tmp_path):
        monkeypatch.delenv("CACHE_DIRS_WORKSPACE", raising=False)
        monkeypatch.setenv("GITHUB_WORKSPACE", str(tmp_path))
        assert CacheDirsConfig().resolved_workspace() == tmp_path
