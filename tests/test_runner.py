import os
from unittest.mock import patch

import pytest
from git import GitCommandError

from gitmanhours.config import Config
from gitmanhours.repository import FetchError, LogError
from gitmanhours.runner import estimate_man_hours, run
from gitmanhours.trace import TraceLog


class TestEstimateManHours:
    """Test the raising entry point."""

    def test_returns_rounded_hours(self, sample_repo):
        assert estimate_man_hours(str(sample_repo)) == 3.35

    def test_junior(self, sample_repo):
        # 2.6 * 1.5 + 0.25 + 0.5 * 1.5
        assert estimate_man_hours(str(sample_repo), experience="junior") == 4.9

    def test_fetch_error_propagates(self, tmp_path):
        with pytest.raises(FetchError):
            estimate_man_hours(str(tmp_path / "missing"))

    def test_log_error_propagates(self, empty_repo):
        with pytest.raises(LogError):
            estimate_man_hours(str(empty_repo))

    def test_clones_under_configured_tmp_dir(self, sample_repo, tmp_path):
        parent = tmp_path / "clones"
        estimate_man_hours(str(sample_repo), config=Config(TMP_DIR=str(parent)))
        assert os.listdir(parent) == []


class TestRun:
    """Test the run wrapper that always produces a trace."""

    def test_success(self, sample_repo):
        outcome = run(str(sample_repo))

        assert outcome.ok
        assert outcome.hours == 3.35
        assert outcome.error is None
        assert len(outcome.result.commits) == 3
        assert outcome.output.splitlines()[0].startswith("Commit Hash")
        assert outcome.output.endswith("Estimated man hours: 3.35\n")

    def test_clone_failure_is_reported_in_trace(self):
        error = GitCommandError(["git", "clone"], 128, stderr="fatal: could not read from remote repository")
        trace = TraceLog()

        with patch("gitmanhours.repository.Repo.clone_from", side_effect=error):
            outcome = run("https://example.invalid/nothing.git", trace=trace)

        assert not outcome.ok
        assert outcome.hours is None
        assert outcome.result is None
        assert isinstance(outcome.error, FetchError)
        assert trace.lines == ["Error: Failed to clone repository: fatal: could not read from remote repository"]
        assert "Estimated man hours" not in outcome.output

    def test_log_failure_is_reported_in_trace(self, empty_repo):
        outcome = run(str(empty_repo))

        assert outcome.hours is None
        assert isinstance(outcome.error, LogError)
        assert outcome.output.startswith("Error: Failed to get git log: ")

    def test_trace_file(self, sample_repo, tmp_path):
        path = tmp_path / "logs" / "sample_repo.log"
        outcome = run(str(sample_repo), trace=TraceLog(path, fresh=True))

        assert path.read_text() == outcome.output
        assert "Total Commits: 3" in path.read_text()

    def test_other_errors_propagate(self, sample_repo):
        with patch("gitmanhours.repository.Repo.clone_from", side_effect=KeyboardInterrupt):
            with pytest.raises(KeyboardInterrupt):
                run(str(sample_repo))
