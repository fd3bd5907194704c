import os
from unittest.mock import patch

import pytest
from git import GitCommandError, GitCommandNotFound

from gitmanhours.repository import EstimationError, FetchError, LogError, Repository
from gitmanhours.trace import TraceLog


class TestClone:
    """Test cloning into a temporary directory."""

    def test_clone_local_repository(self, sample_repo):
        with Repository(sample_repo) as repo:
            assert repo.repo is not None
            assert repo.repo.bare
            assert os.path.isdir(repo.git_dir)
            git_dir = repo.git_dir

        assert not os.path.exists(git_dir)
        assert repo.repo is None

    def test_clone_into_tmp_dir(self, sample_repo, tmp_path):
        parent = tmp_path / "clones"
        with Repository(sample_repo, tmp_dir=str(parent)) as repo:
            assert os.path.dirname(repo.git_dir) == str(parent)
            assert os.path.basename(repo.git_dir).startswith("repo_")

        assert os.listdir(parent) == []

    def test_cleanup_when_block_raises(self, sample_repo):
        with pytest.raises(RuntimeError):
            with Repository(sample_repo) as repo:
                git_dir = repo.git_dir
                raise RuntimeError("boom")

        assert not os.path.exists(git_dir)

    def test_cleanup_is_idempotent(self, sample_repo):
        repo = Repository(sample_repo)
        repo.clone()
        repo.cleanup()
        repo.cleanup()
        assert not os.path.exists(repo.git_dir)

    def test_missing_repository(self, tmp_path):
        repo = Repository(tmp_path / "does_not_exist")

        with pytest.raises(FetchError) as excinfo:
            repo.clone()

        assert str(excinfo.value).startswith("Failed to clone repository: ")
        assert excinfo.value.output
        assert isinstance(excinfo.value, EstimationError)
        assert not os.path.exists(repo.git_dir)

    def test_git_error_output_is_kept(self, tmp_path):
        error = GitCommandError(["git", "clone"], 128, stderr="fatal: repository 'x' not found")
        repo = Repository("https://example.invalid/x.git", tmp_dir=str(tmp_path))

        with patch("gitmanhours.repository.Repo.clone_from", side_effect=error):
            with pytest.raises(FetchError) as excinfo:
                repo.clone()

        assert excinfo.value.output == "fatal: repository 'x' not found"
        assert str(excinfo.value) == "Failed to clone repository: fatal: repository 'x' not found"
        assert os.listdir(tmp_path) == []

    def test_git_not_installed(self, tmp_path):
        error = GitCommandNotFound("git", "No such file or directory")
        repo = Repository("https://example.invalid/x.git", tmp_dir=str(tmp_path))

        with patch("gitmanhours.repository.Repo.clone_from", side_effect=error):
            with pytest.raises(FetchError):
                repo.clone()


class TestLog:
    """Test reading the commit log."""

    def test_log_lines(self, sample_repo):
        with Repository(sample_repo) as repo:
            lines = repo.log_lines()

        headers = [line for line in lines if "|" in line]
        assert [h.split("|", 2)[2] for h in headers] == ["refactor auth module", "fix typo", "initial commit"]
        assert all(len(h.split("|", 2)[0]) == 40 for h in headers)
        assert "120\t0\tauth.js" in lines
        assert "2\t0\tREADME.md" in lines
        assert lines[-1] == "30\t0\tmain.js"

    def test_log_before_clone(self, sample_repo):
        with pytest.raises(LogError):
            Repository(sample_repo).log_lines()

    def test_empty_repository(self, empty_repo):
        with Repository(empty_repo) as repo:
            with pytest.raises(LogError) as excinfo:
                repo.log_lines()

        assert str(excinfo.value).startswith("Failed to get git log: ")


class TestManHoursEstimate:
    """Test estimating a real repository."""

    def test_estimate(self, sample_repo):
        trace = TraceLog()
        with Repository(sample_repo) as repo:
            result = repo.man_hours_estimate(trace=trace)

        assert result.totals.total_commits == 3
        assert [c.message for c in result.commits] == ["refactor auth module", "fix typo", "initial commit"]
        assert [c.hours for c in result.commits] == pytest.approx([2.6, 0.25, 0.5])
        assert result.total_hours == 3.35
        assert trace.lines[-1] == "Estimated man hours: 3.35"

    def test_estimate_skipping_unterminated(self, sample_repo):
        with Repository(sample_repo) as repo:
            result = repo.man_hours_estimate(finalize_unterminated=False)

        # the oldest commit ends the log without a blank line
        assert result.totals.total_commits == 3
        assert len(result.commits) == 2
        assert result.total_hours == 2.85

    def test_estimate_senior(self, sample_repo):
        with Repository(sample_repo) as repo:
            result = repo.man_hours_estimate(experience="senior")

        assert [c.hours for c in result.commits] == pytest.approx([2.08, 0.25, 0.4])

    def test_commit_dates(self, sample_repo):
        with Repository(sample_repo) as repo:
            df = repo.man_hours_estimate().commits_frame()

        assert str(df.index[-1]) == "2024-01-02 10:00:00+00:00"


class TestRepoName:
    """Test deriving the repository name from its location."""

    @pytest.mark.parametrize(
        "location,name",
        [
            ("https://github.com/andyg2/estimate-repo-hours", "estimate-repo-hours"),
            ("https://github.com/someone/log-tools.git", "log-tools"),
            ("git@github.com:user/project.git", "project"),
            ("/srv/repos/my.project/", "my.project"),
            ("C:\\repos\\tool", "tool"),
            ("/", "unknown_repo"),
        ],
    )
    def test_repo_name(self, location, name):
        assert Repository(location).repo_name == name

    def test_str(self):
        assert str(Repository("https://host/a/b.git")) == "git repository: b at: https://host/a/b.git"
