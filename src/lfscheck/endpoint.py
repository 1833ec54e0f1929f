# src/lfscheck/endpoint.py
"""LFS API endpoint resolution.

An Endpoint is built once per run, either from an explicit API URL or from
a repository clone URL, and is shared read-only by every check.

Clone URL derivation:
    https://host/org/repo        -> https://host/org/repo.git/info/lfs
    https://host/org/repo.git    -> https://host/org/repo.git/info/lfs
    git@host:org/repo.git        -> https://host/org/repo.git/info/lfs
    ssh://git@host/org/repo.git  -> https://host/org/repo.git/info/lfs

SSH-style clone URLs also keep the user/host pair and path so a caller can
see which SSH identity the server would expect.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from urllib.parse import SplitResult, urlsplit, urlunsplit

from lfscheck.contracts.errors import ConfigurationError

_HTTP_SCHEMES = frozenset({"http", "https"})
_SSH_SCHEMES = frozenset({"ssh", "git+ssh", "ssh+git"})

# user@host:path with no scheme (scp-like syntax accepted by git)
_SCP_LIKE = re.compile(r"^(?:(?P<user>[^@/:]+)@)?(?P<host>[^@/:]+):(?P<path>[^/].*|/.+)$")

_LFS_SUFFIX = "/info/lfs"


def _lfs_path(repo_path: str) -> str:
    path = repo_path.rstrip("/")
    if not path.endswith(".git"):
        path += ".git"
    return path + _LFS_SUFFIX


def _strip_userinfo(netloc: str) -> str:
    return netloc.rpartition("@")[2]


def _split(url: str) -> SplitResult:
    try:
        parts = urlsplit(url)
        # urlsplit validates the port only when .port is read
        parts.port
    except ValueError as e:
        raise ConfigurationError(f"Malformed URL {url!r}: {e}") from e
    return parts


@dataclass(frozen=True)
class Endpoint:
    """Base URL of a Git LFS API.

    Use `from_api_url` or `from_clone_url` to create instances.
    """

    url: str
    ssh_user_and_host: str | None = None
    ssh_path: str | None = None

    @classmethod
    def from_api_url(cls, url: str) -> Endpoint:
        """Use an explicit API URL as-is (trailing slashes removed).

        Raises:
            ConfigurationError: If the URL is not an absolute http(s) URL or its
                port is not a number in 0-65535.
        """
        url = url.strip()
        parts = _split(url)
        if parts.scheme not in _HTTP_SCHEMES or not parts.hostname:
            raise ConfigurationError(f"API URL must be an absolute http(s) URL, got {url!r}")
        return cls(url=url.rstrip("/"))

    @classmethod
    def from_clone_url(cls, clone_url: str) -> Endpoint:
        """Derive the API URL from a repository clone URL.

        Raises:
            ConfigurationError: If the clone URL cannot be parsed.
        """
        clone_url = clone_url.strip()
        if not clone_url:
            raise ConfigurationError("Clone URL is empty")

        if "://" not in clone_url:
            match = _SCP_LIKE.match(clone_url)
            if match is None:
                raise ConfigurationError(f"Unrecognised clone URL: {clone_url!r}")
            host = match.group("host")
            user = match.group("user")
            path = match.group("path").lstrip("/")
            return cls(
                url=f"https://{host}/{_lfs_path(path)}",
                ssh_user_and_host=f"{user}@{host}" if user else host,
                ssh_path=path,
            )

        parts = _split(clone_url)
        if not parts.hostname:
            raise ConfigurationError(f"Clone URL has no host: {clone_url!r}")

        if parts.scheme in _HTTP_SCHEMES:
            return cls(url=urlunsplit((parts.scheme, parts.netloc, _lfs_path(parts.path), "", "")))

        if parts.scheme in _SSH_SCHEMES or parts.scheme == "git":
            path = parts.path.lstrip("/")
            host = parts.hostname
            user_and_host = f"{parts.username}@{host}" if parts.username else host
            is_ssh = parts.scheme in _SSH_SCHEMES
            return cls(
                url=f"https://{host}/{_lfs_path(path)}",
                ssh_user_and_host=user_and_host if is_ssh else None,
                ssh_path=path if is_ssh else None,
            )

        raise ConfigurationError(f"Unsupported clone URL scheme {parts.scheme!r} in {clone_url!r}")

    @property
    def batch_url(self) -> str:
        return f"{self.url}/objects/batch"

    @property
    def sanitized_url(self) -> str:
        """The API URL with any user:password section removed, for logging."""
        parts = urlsplit(self.url)
        if "@" not in parts.netloc:
            return self.url
        return urlunsplit((parts.scheme, _strip_userinfo(parts.netloc), parts.path, parts.query, parts.fragment))
