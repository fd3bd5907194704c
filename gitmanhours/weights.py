"""
.. module:: weights
   :platform: Unix, Windows
   :synopsis: Per-language complexity weights for changed lines


"""

from types import MappingProxyType

DEFAULT_WEIGHT = 1.0

# keys are matched case-sensitively, so "Main.JS" falls back to the default
LANGUAGE_WEIGHTS = MappingProxyType(
    {
        "html": 0.5,
        "css": 0.7,
        "js": 1.0,
        "php": 1.2,
        "py": 1.1,
        "java": 1.3,
        "c": 1.5,
        "cpp": 1.6,
        "h": 1.4,
        "hpp": 1.5,
        "cs": 1.3,
        "go": 1.2,
        "rb": 1.1,
        "swift": 1.4,
        "kt": 1.3,
        "scala": 1.4,
        "rs": 1.5,
        "asm": 2.0,
        "sql": 0.9,
        "yaml": 0.6,
        "json": 0.5,
        "xml": 0.7,
        "md": 0.3,
        "txt": 0.2,
    }
)


def file_extension(filename: str) -> str:
    """Returns the text after the last dot of the final path component, or an empty string."""
    basename = filename.replace("\\", "/").rsplit("/", 1)[-1]
    if "." not in basename:
        return ""
    return basename.rsplit(".", 1)[1]


def language_weight(filename: str) -> float:
    """Returns the complexity weight for a changed file.

    Args:
        filename: Path of the file as reported by ``git log --numstat``.

    Returns:
        float: The weight for the file's extension, or ``DEFAULT_WEIGHT`` when the
        extension is missing or not in ``LANGUAGE_WEIGHTS``.
    """
    return LANGUAGE_WEIGHTS.get(file_extension(filename), DEFAULT_WEIGHT)
