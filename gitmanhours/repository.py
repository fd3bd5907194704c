"""
.. module:: repository
   :platform: Unix, Windows
   :synopsis: Cloning a repository and reading its commit log


"""

import os
import re
import shutil
import tempfile

from git import GitCommandError, GitCommandNotFound, Repo

from gitmanhours.estimator import estimate_hours
from gitmanhours.logging import logger

LOG_FORMAT = "--pretty=format:%H|%ad|%s"


class EstimationError(Exception):
    """Base class for failures that abort an estimation run.

    Args:
        message (str): What went wrong.
        output (str, optional): Diagnostic output from git, appended to the message.
    """

    def __init__(self, message, output=""):
        self.output = output
        super().__init__(f"{message}: {output}" if output else message)


class FetchError(EstimationError):
    """Raised when the repository cannot be cloned."""


class LogError(EstimationError):
    """Raised when the commit log of a cloned repository cannot be read."""


def _diagnostic_output(error):
    """Pulls git's own message out of a GitPython command error."""
    for stream in (error.stderr, error.stdout):
        text = (stream or "").strip()
        # GitPython wraps the streams as "stderr: '...'"
        match = re.match(r"^(?:stderr|stdout): '(.*)'$", text, re.DOTALL)
        if match:
            text = match.group(1).strip()
        if text:
            return text
    return str(error)


class Repository:
    """A bare clone of a repository, scoped to a ``with`` block.

    Entering the block clones ``location`` into a fresh temporary directory, and leaving
    it removes that directory again, whether or not the block raised.

    Args:
        location (str): URL or local path of the repository to clone.
        tmp_dir (Optional[str]): Parent directory for the temporary clone. Defaults to the
            system temp directory.

    Attributes:
        git_dir (Optional[str]): Path of the clone, set once cloning has started.
        repo (Optional[git.Repo]): GitPython Repo of the clone while it exists.

    Examples:
        >>> with Repository('https://github.com/user/repo.git') as repo:
        ...     result = repo.man_hours_estimate(experience='senior')
    """

    def __init__(self, location, tmp_dir=None):
        self.location = str(location)
        self.tmp_dir = tmp_dir
        self.git_dir = None
        self.repo = None

    def clone(self):
        """Bare clones the repository into a new temporary directory.

        Returns:
            git.Repo: The cloned repository.

        Raises:
            FetchError: If git is missing or the clone fails.
        """
        if self.tmp_dir is not None:
            os.makedirs(self.tmp_dir, exist_ok=True)
        self.git_dir = tempfile.mkdtemp(prefix="repo_", dir=self.tmp_dir)

        logger.info(f"Cloning repository {self.location} to {self.git_dir}")
        try:
            self.repo = Repo.clone_from(self.location, self.git_dir, bare=True)
        except (GitCommandError, GitCommandNotFound) as e:
            logger.error(f"Failed to clone {self.location}: {e}")
            self.cleanup()
            raise FetchError("Failed to clone repository", output=_diagnostic_output(e)) from e

        return self.repo

    def log_lines(self):
        """Reads the commit log with per-file line counts.

        Returns:
            List[str]: For every commit a ``hash|date|subject`` header, its numstat lines
            and a blank separator line.

        Raises:
            LogError: If git cannot produce the log.
        """
        if self.repo is None:
            raise LogError("Failed to get git log", output=f"{self.location} has not been cloned")

        logger.info(f"Reading commit log of {self.repo_name}")
        try:
            output = self.repo.git.log(LOG_FORMAT, "--date=iso", "--numstat")
        except GitCommandError as e:
            logger.error(f"Failed to read the commit log of {self.location}: {e}")
            raise LogError("Failed to get git log", output=_diagnostic_output(e)) from e
        except UnicodeDecodeError as e:
            raise LogError("Failed to get git log", output=str(e)) from e

        lines = output.split("\n") if output else []
        logger.debug(f"Read {len(lines)} log lines from {self.repo_name}")
        return lines

    def man_hours_estimate(self, experience="mid", trace=None, finalize_unterminated=True, config=None):
        """Estimates the man hours behind the cloned repository's history.

        Args:
            experience (Union[str, Experience], optional): Developer experience level.
                Defaults to 'mid'.
            trace (Optional[TraceLog]): Receives the readable trace.
            finalize_unterminated (bool, optional): See ``HoursEstimator``. Defaults to True.
            config (Optional[Config]): Formula constants.

        Returns:
            EstimationResult: The finalized commits and totals.
        """
        return estimate_hours(
            self.log_lines(),
            experience=experience,
            trace=trace,
            finalize_unterminated=finalize_unterminated,
            config=config,
        )

    def cleanup(self):
        """Removes the temporary clone. Safe to call more than once."""
        if self.repo is not None:
            self.repo.close()
            self.repo = None
        if self.git_dir is not None and os.path.exists(self.git_dir):
            logger.info(f"Removing temporary clone {self.git_dir}")
            shutil.rmtree(self.git_dir, ignore_errors=True)

    @property
    def repo_name(self):
        """Name of the repository, derived from its location ('unknown_repo' if empty)."""
        name = re.split(r"[\\/]", self.location.rstrip("/\\"))[-1]
        if name.endswith(".git"):
            name = name[: -len(".git")]
        if name.strip() == "":
            return "unknown_repo"
        return name

    def __enter__(self):
        try:
            self.clone()
        except BaseException:
            self.cleanup()
            raise
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.cleanup()
        return False

    def __str__(self):
        return f"git repository: {self.repo_name} at: {self.location}"

    def __repr__(self):
        return f"Repository(location={self.location!r}, git_dir={self.git_dir!r})"
