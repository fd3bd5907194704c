"""
.. module:: config
   :platform: Unix, Windows
   :synopsis: Defaults for an estimation run, overridable from the environment


"""

import os

ENV_PREFIX = "GITMANHOURS_"


class Config:
    """Settings for an estimation run.

    Class attributes hold the defaults. ``Config.from_env()`` returns an instance whose
    attributes are overridden by ``GITMANHOURS_*`` environment variables, and keyword
    arguments to the constructor override both.

    Attributes:
        DEFAULT_REPO_URL (str): Repository estimated when none is given.
        LOG_DIR (str): Directory the trace log is written to.
        DEFAULT_EXPERIENCE (str): One of 'junior', 'mid' or 'senior'.
        TMP_DIR (Optional[str]): Parent directory for clones, None for the system default.
        MINUTES_PER_WEIGHTED_LINE (float): Baseline effort for one weighted changed line.
        MINIMUM_COMMIT_HOURS (float): The least a finalized commit can cost.
    """

    DEFAULT_REPO_URL: str = "https://github.com/andyg2/estimate-repo-hours"
    LOG_DIR: str = "./logs"
    DEFAULT_EXPERIENCE: str = "mid"
    TMP_DIR: str | None = None

    MINUTES_PER_WEIGHTED_LINE: float = 1.0
    MINIMUM_COMMIT_HOURS: float = 0.25

    # attributes that may be set from the environment
    _ENV_KEYS = ("DEFAULT_REPO_URL", "LOG_DIR", "DEFAULT_EXPERIENCE", "TMP_DIR")
    _ENV_NAMES = {"DEFAULT_REPO_URL": "REPO_URL", "DEFAULT_EXPERIENCE": "EXPERIENCE"}

    def __init__(self, **overrides):
        for key, value in overrides.items():
            if not key.isupper() or key.startswith("_") or not hasattr(type(self), key):
                raise ValueError(f"Unknown configuration key: {key}")
            setattr(self, key, value)

    @classmethod
    def env_name(cls, key):
        return ENV_PREFIX + cls._ENV_NAMES.get(key, key)

    @classmethod
    def from_env(cls, environ=None, **overrides):
        """Builds a Config from ``GITMANHOURS_*`` variables.

        Args:
            environ (Optional[Mapping[str, str]]): Environment to read, defaults to os.environ.
            **overrides: Values that win over the environment.

        Returns:
            Config: The resolved configuration.
        """
        environ = os.environ if environ is None else environ
        values = {}
        for key in cls._ENV_KEYS:
            value = environ.get(cls.env_name(key))
            if value:
                values[key] = value
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    def log_path(self, repo_name):
        """Returns the trace log file for a repository name."""
        return os.path.join(self.LOG_DIR, f"{repo_name}.log")

    def __repr__(self):
        return (
            f"Config(DEFAULT_REPO_URL={self.DEFAULT_REPO_URL!r}, LOG_DIR={self.LOG_DIR!r}, "
            f"DEFAULT_EXPERIENCE={self.DEFAULT_EXPERIENCE!r}, TMP_DIR={self.TMP_DIR!r})"
        )
