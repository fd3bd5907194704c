"""
.. module:: trace
   :platform: Unix, Windows
   :synopsis: The human readable, fixed-width trace of an estimation run


"""

import os

from gitmanhours.logging import logger

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
RULE_WIDTH = 160

# (title, width) of each column in the commit table
COLUMNS = [
    ("Commit Hash", 40),
    ("Timestamp", 20),
    ("Lines Added", 12),
    ("Lines Deleted", 13),
    ("File Weight", 12),
    ("Weighted Changes", 16),
    ("Message Analysis", 16),
    ("Adjusted Time (H)", 16),
    ("Cumulative Total (H)", 16),
]

FILE_PREFIX = "  -> "
SEPARATOR = " | "


def _number(value):
    return f"{value:,.2f}"


def _row(cells, widths):
    return SEPARATOR.join(str(cell).ljust(width) for cell, width in zip(cells, widths))


def format_header():
    """Returns the column titles and the rule printed beneath them."""
    titles = [title for title, _ in COLUMNS]
    widths = [width for _, width in COLUMNS]
    return [_row(titles, widths), "-" * RULE_WIDTH]


def format_commit_row(commit):
    """Formats the summary row of a finalized commit.

    The "File Weight" cell holds the weight of the last file processed in the commit,
    not an aggregate over its files.
    """
    cells = [
        commit.short_hash,
        commit.timestamp.strftime(TIMESTAMP_FORMAT),
        commit.lines_added,
        commit.lines_deleted,
        _number(commit.last_weight),
        _number(commit.weighted_changes),
        _number(commit.multiplier),
        _number(commit.hours),
        _number(commit.cumulative_hours),
    ]
    return _row(cells, [width for _, width in COLUMNS])


def format_file_row(change):
    # the prefixed filename spans the hash and timestamp columns
    name_width = COLUMNS[0][1] + len(SEPARATOR) + COLUMNS[1][1] - len(FILE_PREFIX)
    cells = [
        change.filename,
        change.additions,
        change.deletions,
        _number(change.weight),
        _number(change.weighted_changes),
    ]
    widths = [name_width] + [width for _, width in COLUMNS[2:6]]
    return FILE_PREFIX + _row(cells, widths)


def format_summary(totals):
    return [
        "\nSummary Statistics:",
        "-" * 40,
        f"Total Commits: {totals.total_commits}",
        f"Total Lines Added: {totals.total_lines_added}",
        f"Total Lines Deleted: {totals.total_lines_deleted}",
        f"Total Weighted Changes: {_number(totals.total_weighted_changes)}",
        f"Total Estimated Man-Hours: {_number(totals.total_man_hours)}",
    ]


class TraceLog:
    """An append-only text log of an estimation run.

    Lines are always kept in memory. When ``path`` is given every line is also appended
    to that file as it is written, so a run that dies halfway still leaves its trace on
    disk.

    Args:
        path (Optional[str]): File to append the trace to. None keeps the trace in memory only.
        fresh (bool, optional): Remove an existing file at ``path`` before the first write.
            Defaults to False.

    Examples:
        >>> trace = TraceLog()
        >>> trace.write("hello")
        >>> trace.getvalue()
        'hello\\n'
    """

    def __init__(self, path=None, fresh=False):
        self.path = str(path) if path is not None else None
        self._lines = []

        if self.path is not None:
            directory = os.path.dirname(self.path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            if fresh and os.path.exists(self.path):
                logger.info(f"Removing previous trace log {self.path}")
                os.remove(self.path)

    def write(self, message):
        """Appends one line to the trace."""
        message = str(message)
        self._lines.append(message)
        if self.path is not None:
            with open(self.path, "a", encoding="utf-8") as f:
                f.write(message + "\n")

    @property
    def lines(self):
        return list(self._lines)

    def getvalue(self):
        """Returns the full trace.

        For a file-backed trace this is the file's contents, which includes anything
        appended to the file before this instance was created.
        """
        if self.path is not None:
            if not os.path.exists(self.path):
                return ""
            with open(self.path, encoding="utf-8") as f:
                return f.read()
        return "".join(line + "\n" for line in self._lines)

    def write_header(self):
        for line in format_header():
            self.write(line)

    def write_commit(self, commit):
        self.write(format_commit_row(commit))
        for change in commit.files:
            self.write(format_file_row(change))

    def write_summary(self, totals):
        for line in format_summary(totals):
            self.write(line)

    def write_result(self, hours):
        self.write(f"Estimated man hours: {hours}")

    def write_error(self, message):
        self.write(f"Error: {message}")

    def __str__(self):
        return self.getvalue()

    def __repr__(self):
        return f"TraceLog(path={self.path!r}, lines={len(self._lines)})"
