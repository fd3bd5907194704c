"""
Shared pytest fixtures for git-manhours tests.
"""

import os

import git
import pytest

AUTHOR = git.Actor("Test User", "test@example.com")


def commit_files(repo, files, message, timestamp):
    """Writes ``files`` (name -> content) into the work tree and commits them.

    ``timestamp`` is seconds since the epoch; the commit is dated in UTC.
    """
    work_tree = repo.working_tree_dir
    for name, content in files.items():
        with open(os.path.join(work_tree, name), "w") as f:
            f.write(content)
    repo.index.add(list(files))
    date = f"{timestamp} +0000"
    return repo.index.commit(
        message,
        author=AUTHOR,
        committer=AUTHOR,
        author_date=date,
        commit_date=date,
    )


def lines(count, prefix="line"):
    return "".join(f"{prefix} {i}\n" for i in range(count))


@pytest.fixture
def sample_repo(tmp_path):
    """A repository with three commits, oldest first:

    1. "initial commit": main.js with 30 lines (30 weighted lines, 0.5 h at mid level)
    2. "fix typo": README.md with 2 lines (0.6 weighted lines, floored to 0.25 h)
    3. "refactor auth module": auth.js with 120 lines (120 weighted lines, 2.6 h)
    """
    repo_path = tmp_path / "sample_repo"
    repo_path.mkdir()
    repo = git.Repo.init(repo_path)

    commit_files(repo, {"main.js": lines(30)}, "initial commit", 1704189600)
    commit_files(repo, {"README.md": lines(2, "readme")}, "fix typo", 1704193200)
    commit_files(repo, {"auth.js": lines(120, "auth")}, "refactor auth module", 1704196800)

    repo.close()
    return repo_path


@pytest.fixture
def empty_repo(tmp_path):
    """A repository without any commits."""
    repo_path = tmp_path / "empty_repo"
    repo_path.mkdir()
    git.Repo.init(repo_path).close()
    return repo_path


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')")
