"""
.. module:: cli
   :platform: Unix, Windows
   :synopsis: The ``git-manhours`` command


"""

import argparse
import sys

from gitmanhours.config import Config
from gitmanhours.estimator import Experience
from gitmanhours.logging import add_stream_handler, set_log_level, verbosity_to_level
from gitmanhours.repository import Repository
from gitmanhours.runner import run
from gitmanhours.trace import TraceLog


def build_parser():
    parser = argparse.ArgumentParser(
        prog="git-manhours",
        description="Estimate the man hours behind a git repository's commit history",
    )
    parser.add_argument(
        "repo",
        nargs="?",
        default=None,
        help="Git repository URL or local path (default: $GITMANHOURS_REPO_URL or the built-in example)",
    )
    parser.add_argument(
        "-e",
        "--experience",
        choices=[e.value for e in Experience],
        default=None,
        help="Developer experience level (default: $GITMANHOURS_EXPERIENCE or mid)",
    )
    parser.add_argument("--log-dir", default=None, help="Directory for the trace log (default: ./logs)")
    parser.add_argument(
        "--skip-unterminated",
        action="store_true",
        help="Skip commits that are not followed by a blank line in the log instead of estimating them",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Log progress to stderr (-v for info, -vv for debug)",
    )
    return parser


def main(argv=None):
    """Runs one estimation, prints its trace and returns the exit code."""
    args = build_parser().parse_args(argv)

    if args.verbose:
        level = verbosity_to_level(args.verbose)
        set_log_level(level)
        add_stream_handler(level=level, stream=sys.stderr)

    config = Config.from_env(LOG_DIR=args.log_dir, DEFAULT_EXPERIENCE=args.experience)
    location = args.repo or config.DEFAULT_REPO_URL

    trace = TraceLog(config.log_path(Repository(location).repo_name), fresh=True)
    outcome = run(
        location,
        experience=config.DEFAULT_EXPERIENCE,
        trace=trace,
        finalize_unterminated=not args.skip_unterminated,
        config=config,
    )

    sys.stdout.write(outcome.output)
    return 0 if outcome.ok else 1


if __name__ == "__main__":
    sys.exit(main())
