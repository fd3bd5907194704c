"""
.. module:: classifier
   :platform: Unix, Windows
   :synopsis: Time multipliers derived from commit messages


"""

BUGFIX_MULTIPLIER = 0.8
REFACTOR_MULTIPLIER = 1.3
DEFAULT_MULTIPLIER = 1.0

BUGFIX_KEYWORDS = ("fix", "bug")
REFACTOR_KEYWORDS = ("refactor",)


def commit_multiplier(message: str) -> float:
    """Classifies a commit message into a time multiplier.

    Bug fixes are checked first, so a message mentioning both "fix" and "refactor"
    counts as a bug fix.

    Args:
        message: The commit subject line.

    Returns:
        float: 0.8 for bug fixes, 1.3 for refactors, 1.0 otherwise.
    """
    lowered = (message or "").lower()
    if any(keyword in lowered for keyword in BUGFIX_KEYWORDS):
        return BUGFIX_MULTIPLIER
    if any(keyword in lowered for keyword in REFACTOR_KEYWORDS):
        return REFACTOR_MULTIPLIER
    return DEFAULT_MULTIPLIER
