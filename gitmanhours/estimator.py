"""
.. module:: estimator
   :platform: Unix, Windows
   :synopsis: Turns a ``git log --numstat`` stream into an estimate of man hours


"""

import re
from dataclasses import dataclass, field
from enum import Enum

import numpy as np
import pandas as pd
from pandas import DataFrame

from gitmanhours.classifier import commit_multiplier
from gitmanhours.config import Config
from gitmanhours.logging import logger
from gitmanhours.trace import TraceLog
from gitmanhours.weights import DEFAULT_WEIGHT, language_weight

# additions, deletions and the filename, which may contain spaces
STAT_LINE = re.compile(r"^(\d+)\s+(\d+)\s+(.+)$", re.ASCII)

# stands in for commit dates that cannot be parsed
EPOCH = pd.Timestamp(0, tz="UTC")

COMMIT_COLUMNS = {
    "commit_sha": object,
    "message": object,
    "lines_added": np.int64,
    "lines_deleted": np.int64,
    "weighted_changes": np.float64,
    "multiplier": np.float64,
    "experience_factor": np.float64,
    "hours": np.float64,
    "cumulative_hours": np.float64,
}

FILE_COLUMNS = {
    "commit_sha": object,
    "filename": object,
    "additions": np.int64,
    "deletions": np.int64,
    "weight": np.float64,
    "weighted_changes": np.float64,
}


class Experience(Enum):
    """Assumed skill level of the developers behind a repository."""

    JUNIOR = "junior"
    MID = "mid"
    SENIOR = "senior"

    @property
    def factor(self):
        return _EXPERIENCE_FACTORS[self]

    @classmethod
    def parse(cls, value):
        """Coerces a string, None or Experience into an Experience.

        Unknown values are treated as mid level, which applies no adjustment.
        """
        if isinstance(value, cls):
            return value
        if value is None:
            return cls.MID
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            logger.warning(f"Unknown experience level {value!r}, treating it as 'mid'")
            return cls.MID


_EXPERIENCE_FACTORS = {
    Experience.JUNIOR: 1.5,
    Experience.MID: 1.0,
    Experience.SENIOR: 0.8,
}


class ParserState(Enum):
    IDLE = "idle"
    ACCUMULATING = "accumulating"


def parse_commit_date(text):
    """Parses an ISO-8601 style date into a UTC timestamp, falling back to ``EPOCH``."""
    try:
        timestamp = pd.Timestamp(text.strip())
    except (ValueError, TypeError, OverflowError):
        timestamp = pd.NaT
    if pd.isna(timestamp):
        logger.debug(f"Could not parse commit date {text!r}, using the epoch instead")
        return EPOCH
    if timestamp.tzinfo is None:
        return timestamp.tz_localize("UTC")
    return timestamp.tz_convert("UTC")


@dataclass(frozen=True)
class FileChange:
    filename: str
    additions: int
    deletions: int
    weight: float

    @property
    def weighted_changes(self):
        return (self.additions + self.deletions) * self.weight


@dataclass
class CommitRecord:
    """The commit currently being read from the log."""

    hash: str
    timestamp: pd.Timestamp
    message: str
    lines_added: int = 0
    lines_deleted: int = 0
    weighted_changes: float = 0.0
    files: list = field(default_factory=list)
    last_weight: float = DEFAULT_WEIGHT

    def add_file(self, change):
        self.files.append(change)
        self.lines_added += change.additions
        self.lines_deleted += change.deletions
        self.weighted_changes += change.weighted_changes
        self.last_weight = change.weight


@dataclass(frozen=True)
class CommitEstimate:
    """A finalized commit and the hours it was estimated at."""

    hash: str
    timestamp: pd.Timestamp
    message: str
    lines_added: int
    lines_deleted: int
    weighted_changes: float
    last_weight: float
    multiplier: float
    experience_factor: float
    hours: float
    cumulative_hours: float
    files: tuple = ()

    @property
    def short_hash(self):
        return self.hash[:7]


@dataclass
class RunningTotals:
    total_man_hours: float = 0.0
    total_commits: int = 0
    total_lines_added: int = 0
    total_lines_deleted: int = 0
    total_weighted_changes: float = 0.0


@dataclass
class EstimationResult:
    """The outcome of reading one commit log.

    Attributes:
        totals (RunningTotals): Accumulated counts and hours.
        commits (List[CommitEstimate]): Finalized commits in log order.
        experience (Experience): Experience level the hours were scaled for.
    """

    totals: RunningTotals
    commits: list
    experience: Experience = Experience.MID

    @property
    def total_hours(self):
        """Total estimated man hours rounded to three decimals."""
        return round(self.totals.total_man_hours, 3)

    def commits_frame(self):
        """Returns one row per finalized commit.

        Returns:
            pandas.DataFrame: indexed by commit date (UTC) with the columns of
            ``COMMIT_COLUMNS``.
        """
        rows = [
            {
                "date": c.timestamp,
                "commit_sha": c.hash,
                "message": c.message,
                "lines_added": c.lines_added,
                "lines_deleted": c.lines_deleted,
                "weighted_changes": c.weighted_changes,
                "multiplier": c.multiplier,
                "experience_factor": c.experience_factor,
                "hours": c.hours,
                "cumulative_hours": c.cumulative_hours,
            }
            for c in self.commits
        ]
        return _frame(rows, COMMIT_COLUMNS)

    def files_frame(self):
        """Returns one row per file change of every finalized commit, indexed by commit date."""
        rows = [
            {
                "date": c.timestamp,
                "commit_sha": c.hash,
                "filename": f.filename,
                "additions": f.additions,
                "deletions": f.deletions,
                "weight": f.weight,
                "weighted_changes": f.weighted_changes,
            }
            for c in self.commits
            for f in c.files
        ]
        return _frame(rows, FILE_COLUMNS)


def _frame(rows, columns):
    if not rows:
        df = DataFrame({name: pd.Series(dtype=dtype) for name, dtype in columns.items()})
        df.index = pd.DatetimeIndex([], tz="UTC", name="date")
        return df

    df = DataFrame(rows, columns=["date"] + list(columns))
    df["date"] = pd.to_datetime(df["date"], utc=True)
    df = df.set_index("date")
    return df.astype(columns)


class HoursEstimator:
    """Reads a commit log line by line and accumulates an estimate of man hours.

    The log is the output of ``git log --pretty=format:%H|%ad|%s --date=iso --numstat``: a
    header line per commit, followed by its numstat lines, followed by a blank line. The
    parser is either IDLE (between commits) or ACCUMULATING (a commit is open).

    Every finalized commit costs ``weighted_changes / 60`` hours, scaled by the commit
    message multiplier and the experience factor, and never less than
    ``Config.MINIMUM_COMMIT_HOURS``.

    Args:
        experience (Union[str, Experience], optional): Developer experience level. Defaults to mid.
        trace (Optional[TraceLog]): Where the readable trace goes. A new in-memory
            TraceLog is used when None.
        finalize_unterminated (bool, optional): Whether a commit that is not followed by a
            blank line is still finalized, when the next header arrives or the log ends.
            When False such commits are counted but never add hours. Defaults to True.
        config (Optional[Config]): Formula constants. Defaults to ``Config()``.

    Examples:
        >>> estimator = HoursEstimator(experience="senior")
        >>> result = estimator.estimate(["abc|2024-01-01 10:00:00 +0000|add feature", "90\\t30\\tapp.py", ""])
        >>> result.total_hours
        1.76
    """

    def __init__(self, experience=Experience.MID, trace=None, finalize_unterminated=True, config=None):
        self.experience = Experience.parse(experience)
        self.trace = trace if trace is not None else TraceLog()
        self.finalize_unterminated = finalize_unterminated
        self.config = config if config is not None else Config()

        self.totals = RunningTotals()
        self.commits = []
        self.state = ParserState.IDLE
        self._current = None
        self._started = False
        self._closed = False

    def start(self):
        """Writes the table header to the trace. Called on the first fed line if needed."""
        if not self._started:
            self._started = True
            self.trace.write_header()

    def estimate(self, lines):
        """Reads every line and closes the estimator.

        Args:
            lines (Iterable[str]): The commit log, one line per item.

        Returns:
            EstimationResult: The finalized commits and totals.
        """
        logger.info(f"Estimating man hours for a {self.experience.value} developer")
        self.start()
        for line in lines:
            self.feed(line)
        result = self.close()
        logger.info(
            f"Finished estimation. {result.totals.total_commits} commits, "
            f"{len(result.commits)} finalized, {result.total_hours} hours."
        )
        return result

    def feed(self, line):
        """Classifies one log line and updates the open commit and totals."""
        if self._closed:
            raise RuntimeError("Cannot feed lines to a closed HoursEstimator")
        self.start()

        line = line.rstrip("\r\n")
        if "|" in line:
            self._open_commit(line)
            return

        match = STAT_LINE.match(line)
        if match:
            self._add_file(int(match.group(1)), int(match.group(2)), match.group(3))
        elif line == "" and self.state is ParserState.ACCUMULATING:
            self._finalize()
        elif line:
            logger.debug(f"Ignoring log line {line!r}")

    def close(self):
        """Finalizes a trailing commit if configured to, then writes the summary.

        Returns:
            EstimationResult: The finalized commits and totals.
        """
        if not self._closed:
            self.start()
            if self.state is ParserState.ACCUMULATING:
                self._drop_or_finalize_open_commit()
            self.trace.write_summary(self.totals)
            self.trace.write_result(round(self.totals.total_man_hours, 3))
            self._closed = True
        return EstimationResult(totals=self.totals, commits=list(self.commits), experience=self.experience)

    def _open_commit(self, line):
        if self.state is ParserState.ACCUMULATING:
            self._drop_or_finalize_open_commit()

        commit_hash, date, message = (line.split("|", 2) + ["", ""])[:3]
        self._current = CommitRecord(hash=commit_hash, timestamp=parse_commit_date(date), message=message)
        self.state = ParserState.ACCUMULATING
        self.totals.total_commits += 1

    def _add_file(self, additions, deletions, filename):
        if self.state is not ParserState.ACCUMULATING:
            logger.debug(f"Ignoring numstat line for {filename} outside of a commit")
            return

        change = FileChange(filename=filename, additions=additions, deletions=deletions, weight=language_weight(filename))
        self._current.add_file(change)

        self.totals.total_lines_added += additions
        self.totals.total_lines_deleted += deletions
        self.totals.total_weighted_changes += change.weighted_changes

    def _drop_or_finalize_open_commit(self):
        if self.finalize_unterminated:
            self._finalize()
        else:
            logger.debug(f"Commit {self._current.hash[:7]} was not terminated by a blank line, skipping it")
            self._current = None
            self.state = ParserState.IDLE

    def _finalize(self):
        commit = self._current
        multiplier = commit_multiplier(commit.message)
        factor = self.experience.factor

        hours = commit.weighted_changes * (self.config.MINUTES_PER_WEIGHTED_LINE / 60.0)
        hours *= multiplier
        hours *= factor
        hours = max(hours, self.config.MINIMUM_COMMIT_HOURS)

        self.totals.total_man_hours += hours

        estimate = CommitEstimate(
            hash=commit.hash,
            timestamp=commit.timestamp,
            message=commit.message,
            lines_added=commit.lines_added,
            lines_deleted=commit.lines_deleted,
            weighted_changes=commit.weighted_changes,
            last_weight=commit.last_weight,
            multiplier=multiplier,
            experience_factor=factor,
            hours=hours,
            cumulative_hours=self.totals.total_man_hours,
            files=tuple(commit.files),
        )
        self.commits.append(estimate)
        self.trace.write_commit(estimate)

        self._current = None
        self.state = ParserState.IDLE
        return estimate


def estimate_hours(lines, experience=Experience.MID, trace=None, finalize_unterminated=True, config=None):
    """Estimates man hours from the lines of a commit log.

    Args:
        lines (Iterable[str]): Output of ``git log --pretty=format:%H|%ad|%s --date=iso --numstat``.
        experience (Union[str, Experience], optional): Developer experience level. Defaults to mid.
        trace (Optional[TraceLog]): Receives the readable trace.
        finalize_unterminated (bool, optional): See ``HoursEstimator``. Defaults to True.
        config (Optional[Config]): Formula constants.

    Returns:
        EstimationResult: The finalized commits and totals.
    """
    estimator = HoursEstimator(
        experience=experience,
        trace=trace,
        finalize_unterminated=finalize_unterminated,
        config=config,
    )
    return estimator.estimate(lines)
