"""Error kinds reported for a single URL."""


class GoCloneError(RuntimeError):
    """Base class for per-URL failures."""

    kind = "Error"


class ParseError(GoCloneError):
    kind = "ParseFailure"


class PathError(GoCloneError):
    """Raised when a URL path cannot be turned into a safe destination."""

    kind = "PathError"


class PathTraversalError(PathError):
    kind = "PathTraversal"


class AbsolutePathError(PathError):
    kind = "AbsolutePath"


class PathEscapeError(PathError):
    kind = "PathEscape"


class DestinationExistsError(GoCloneError):
    kind = "DestinationExists"


class CloneError(GoCloneError):
    kind = "CloneFailure"


class CloneTimeoutError(GoCloneError):
    kind = "CloneTimeout"


class GitURLError(ValueError):
    """Raised when a string is not a recognizable Git URL."""


class ConfigError(ValueError):
    """Raised when the configuration file is unreadable or invalid."""
