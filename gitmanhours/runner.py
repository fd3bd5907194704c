"""
.. module:: runner
   :platform: Unix, Windows
   :synopsis: One estimation run, from repository location to trace


"""

from dataclasses import dataclass

from gitmanhours.config import Config
from gitmanhours.estimator import EstimationResult
from gitmanhours.logging import logger
from gitmanhours.repository import EstimationError, Repository
from gitmanhours.trace import TraceLog


@dataclass
class RunOutcome:
    """What a run produced.

    ``hours`` is None when the run failed, in which case ``error`` holds the reason and
    the trace ends with an ``Error:`` line.
    """

    trace: TraceLog
    hours: float | None = None
    result: EstimationResult | None = None
    error: EstimationError | None = None

    @property
    def ok(self):
        return self.error is None

    @property
    def output(self):
        return self.trace.getvalue()


def _estimate(location, experience, trace, finalize_unterminated, config):
    config = config if config is not None else Config()
    with Repository(location, tmp_dir=config.TMP_DIR) as repo:
        return repo.man_hours_estimate(
            experience=experience,
            trace=trace,
            finalize_unterminated=finalize_unterminated,
            config=config,
        )


def estimate_man_hours(location, experience="mid", trace=None, finalize_unterminated=True, config=None):
    """Clones a repository and estimates the man hours behind its history.

    Args:
        location (str): URL or local path of the repository.
        experience (Union[str, Experience], optional): Developer experience level.
            Defaults to 'mid'.
        trace (Optional[TraceLog]): Receives the readable trace.
        finalize_unterminated (bool, optional): See ``HoursEstimator``. Defaults to True.
        config (Optional[Config]): Clone directory and formula constants.

    Returns:
        float: The estimated man hours, rounded to three decimals.

    Raises:
        FetchError: If the repository cannot be cloned.
        LogError: If its commit log cannot be read.
    """
    result = _estimate(location, experience, trace, finalize_unterminated, config)
    return result.total_hours


def run(location, experience="mid", trace=None, finalize_unterminated=True, config=None):
    """Runs an estimation and records a failure in the trace instead of raising.

    Args:
        location (str): URL or local path of the repository.
        experience (Union[str, Experience], optional): Developer experience level.
            Defaults to 'mid'.
        trace (Optional[TraceLog]): Receives the readable trace. A new in-memory
            TraceLog is used when None.
        finalize_unterminated (bool, optional): See ``HoursEstimator``. Defaults to True.
        config (Optional[Config]): Clone directory and formula constants.

    Returns:
        RunOutcome: The hours (or the error) together with the trace.
    """
    trace = trace if trace is not None else TraceLog()
    logger.info(f"Starting man hours estimation for {location}")

    try:
        result = _estimate(location, experience, trace, finalize_unterminated, config)
    except EstimationError as e:
        logger.error(f"Man hours estimation for {location} failed: {e}")
        trace.write_error(e)
        return RunOutcome(trace=trace, error=e)

    logger.info(f"Finished man hours estimation for {location}: {result.total_hours} hours")
    return RunOutcome(trace=trace, hours=result.total_hours, result=result)
