"""Process a single Git URL: parse, pick a destination, clone."""
import math
import os
import queue
import threading
from typing import Protocol

import structlog

from .errors import (
    CloneError,
    CloneTimeoutError,
    DestinationExistsError,
    ParseError,
    PathError,
)
from .git_url import redact_url
from .path_utils import sanitize

logger = structlog.get_logger(logger_name=__name__)

CLONE_TIMEOUT = 5 * 60
CLONE_DEPTH = 1
# longest accepted wait, in seconds; must stay below threading.TIMEOUT_MAX
MAX_TIMEOUT = 7 * 24 * 60 * 60


class GitURLParserProtocol(Protocol):
    def parse(self, url): ...


class GitClonerProtocol(Protocol):
    def clone(self, path, url, depth=1, progress=None): ...


def clone_with_timeout(cloner, path, url, timeout=CLONE_TIMEOUT, depth=CLONE_DEPTH, progress=None):
    """Run ``cloner.clone`` on a worker thread and wait at most ``timeout`` seconds.

    The clone cannot be cancelled. When the timeout fires the worker is left
    running in the background; it is a daemon thread so it will not hold the
    process open at exit. Timeouts that are not finite or exceed
    MAX_TIMEOUT are clamped to MAX_TIMEOUT.
    """
    if not math.isfinite(timeout) or timeout > MAX_TIMEOUT:
        timeout = MAX_TIMEOUT
    done = queue.Queue(maxsize=1)

    def worker():
        try:
            cloner.clone(path, url, depth=depth, progress=progress)
        except Exception as e:
            done.put(e)
        else:
            done.put(None)

    threading.Thread(target=worker, name=f"clone:{path}", daemon=True).start()

    try:
        clone_err = done.get(timeout=timeout)
    except queue.Empty:
        raise CloneTimeoutError(f"clone timeout after {timeout:g} seconds") from None

    if clone_err is not None:
        raise CloneError(scrub(str(clone_err), url)) from clone_err


def process_url(
    raw_url: str,
    parser: GitURLParserProtocol,
    cloner: GitClonerProtocol,
    timeout=CLONE_TIMEOUT,
    depth=CLONE_DEPTH,
    progress=None,
) -> str:
    """Clone ``raw_url`` into a directory derived from its path.

    Returns the destination path. Raises a GoCloneError subclass describing
    why the URL failed; the error has already been logged.
    """
    redacted = redact_url(raw_url)
    log = logger.bind(url=redacted)
    log.info("processing")

    try:
        parsed = parser.parse(raw_url)
    except Exception as e:
        err = ParseError(scrub(str(e), raw_url))
        log.error("cannot parse", kind=err.kind, error=str(err))
        raise err from e
    if parsed is None:
        err = ParseError("url parse returned nil")
        log.error("url parse returned nil", kind=err.kind)
        raise err

    try:
        clone_path = sanitize(parsed.path)
    except PathError as e:
        log.error("invalid path", kind=e.kind, error=str(e), path=parsed.path)
        raise

    log = log.bind(clone_path=clone_path)

    if os.path.lexists(clone_path):
        err = DestinationExistsError(f"destination already exists: {clone_path}")
        log.error("cannot clone", kind=err.kind, error=str(err))
        raise err

    log.info("cloning repo", depth=depth or "full", platform=getattr(parsed, "platform", None))
    try:
        clone_with_timeout(cloner, clone_path, raw_url, timeout=timeout, depth=depth, progress=progress)
    except (CloneError, CloneTimeoutError) as e:
        log.error("cannot clone repo", kind=e.kind, error=str(e))
        raise

    log.info("cloned repo")
    return clone_path


def scrub(text, url):
    """Replace any copy of ``url`` in ``text`` with its redacted form."""
    if not url:
        return text
    return text.replace(url, redact_url(url))
