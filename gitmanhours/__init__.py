from importlib.metadata import version

from gitmanhours.classifier import commit_multiplier
from gitmanhours.config import Config
from gitmanhours.estimator import EstimationResult, Experience, HoursEstimator, estimate_hours
from gitmanhours.repository import EstimationError, FetchError, LogError, Repository
from gitmanhours.runner import RunOutcome, estimate_man_hours, run
from gitmanhours.trace import TraceLog
from gitmanhours.weights import LANGUAGE_WEIGHTS, language_weight

__version__ = version("git-manhours")

__all__ = [
    "Config",
    "EstimationError",
    "EstimationResult",
    "Experience",
    "FetchError",
    "HoursEstimator",
    "LANGUAGE_WEIGHTS",
    "LogError",
    "Repository",
    "RunOutcome",
    "TraceLog",
    "commit_multiplier",
    "estimate_hours",
    "estimate_man_hours",
    "language_weight",
    "run",
]
