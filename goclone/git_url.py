"""Parsing of Git repository URLs and credential redaction for logging.

Three forms are understood, the same ones ``git clone`` accepts:

- scheme URLs such as ``https://host/org/repo.git`` or ``ssh://git@host/repo``
- SCP-like addresses such as ``git@github.com:org/repo.git``
- local paths such as ``/srv/git/repo.git`` (treated as ``file`` URLs)

:func:`parse_git_url` splits a URL into its parts. :class:`GitURLParser`
additionally runs it through giturlparse, which rejects web and SCP addresses
that do not name a repository and fills in the hosting platform.
"""
import re
from dataclasses import dataclass, replace
from urllib.parse import unquote, urlsplit

import giturlparse

from .errors import GitURLError

SCHEMES = frozenset(
    ["ssh", "git", "git+ssh", "ssh+git", "http", "https", "ftp", "ftps", "rsync", "file"]
)
# transports whose addresses giturlparse has patterns for
PLATFORM_SCHEMES = frozenset(["git", "http", "https"])
REDACTED_PASSWORD = "***"
INVALID_URL = "[invalid URL]"

_SCHEME_RE = re.compile(r"^([A-Za-z][A-Za-z0-9+.-]*)://")
_SCP_RE = re.compile(r"^(?:(?P<user>[^@/]+)@)?(?P<host>[^@/:]+):(?P<path>[^\\].*)$")


@dataclass(frozen=True)
class GitURL:
    scheme: str
    host: str
    path: str
    username: str | None = None
    password: str | None = None
    port: int | None = None
    query: str = ""
    fragment: str = ""
    form: str = "url"
    platform: str | None = None
    owner: str | None = None
    repo: str | None = None

    @property
    def credentials(self):
        if self.username is None and self.password is None:
            return None
        return self.username, self.password

    def redacted(self):
        """Render the URL with the password masked."""
        if self.form == "local":
            return self.path
        userinfo = ""
        if self.username is not None:
            userinfo = self.username
            if self.password is not None:
                userinfo += ":" + REDACTED_PASSWORD
            userinfo += "@"
        if self.form == "scp":
            return f"{userinfo}{self.host}:{self.path}"

        host = f"[{self.host}]" if ":" in self.host else self.host
        netloc = userinfo + host
        if self.port is not None:
            netloc += f":{self.port}"
        rendered = f"{self.scheme}://{netloc}{self.path}"
        if self.query:
            rendered += "?" + self.query
        if self.fragment:
            rendered += "#" + self.fragment
        return rendered


def _parse_scheme_url(url, scheme):
    if scheme not in SCHEMES:
        raise GitURLError(f"unsupported scheme {scheme!r}")
    try:
        parts = urlsplit(url)
        port = parts.port
    except ValueError as e:
        raise GitURLError("malformed host or port") from e

    host = parts.hostname or ""
    if not host and scheme != "file":
        raise GitURLError("missing host")

    username = unquote(parts.username) if parts.username is not None else None
    password = unquote(parts.password) if parts.password is not None else None
    return GitURL(
        scheme=scheme,
        host=host,
        path=parts.path,
        username=username,
        password=password,
        port=port,
        query=parts.query,
        fragment=parts.fragment,
    )


def parse_git_url(url):
    """Split ``url`` into a GitURL, raising GitURLError if it is not one.

    Error messages never contain the URL itself, so they are safe to log.
    """
    if not url or not url.strip():
        raise GitURLError("empty URL")
    if any(ord(c) < 0x20 or c == "\x7f" for c in url):
        raise GitURLError("control character in URL")

    if "://" in url:
        match = _SCHEME_RE.match(url)
        if match is None:
            raise GitURLError("invalid scheme")
        return _parse_scheme_url(url, match.group(1).lower())

    match = _SCP_RE.match(url)
    if match is not None:
        username, password = match.group("user"), None
        if username is not None and ":" in username:
            username, password = username.split(":", 1)
        return GitURL(
            scheme="ssh",
            host=match.group("host"),
            path=match.group("path"),
            username=username,
            password=password,
            form="scp",
        )

    return GitURL(scheme="file", host="", path=url, form="local")


def redact_url(url):
    """Return ``url`` safe for logging; never raises."""
    try:
        return parse_git_url(url).redacted()
    except GitURLError:
        return INVALID_URL


class GitURLParser:
    """Parse capability backed by giturlparse.

    giturlparse only knows the web, ``git://`` and SCP-like address forms;
    other transports (``ssh://``, ``file://``, local paths, ...) are accepted
    on the strength of :func:`parse_git_url` alone.
    """

    def parse(self, url):
        parsed = parse_git_url(url)
        if parsed.form == "local":
            return parsed

        info = giturlparse.parse(url)
        if not info.valid:
            if parsed.form == "scp" or parsed.scheme in PLATFORM_SCHEMES:
                raise GitURLError("not a recognizable Git repository URL")
            return parsed

        return replace(
            parsed,
            platform=getattr(info, "platform", None) or None,
            owner=getattr(info, "owner", None) or None,
            repo=getattr(info, "repo", None) or None,
        )
