"""
Repository context detection.

Works out which GitHub repository backs the catalog from the URL the
dashboard is served at. GitHub Pages URLs look like
``https://<owner>.github.io/<repo>/<page>.html``; anything that cannot be
matched falls back to a configured default or to local mode.
"""

import re
from dataclasses import dataclass
from urllib.parse import urlsplit

import structlog

logger = structlog.get_logger(__name__)

_HTML_SUFFIX = re.compile(r"\.html$")
_PATH_PATTERN = re.compile(r"/([^/]+)/([^/?#]+)")


@dataclass(frozen=True)
class RepoContext:
    """The (owner, repo) pair identifying the backing store. Both None means local mode."""

    owner: str | None = None
    repo: str | None = None

    @property
    def is_remote(self) -> bool:
        return bool(self.owner and self.repo)

    @property
    def full_name(self) -> str | None:
        if not self.is_remote:
            return None
        return f"{self.owner}/{self.repo}"


LOCAL_CONTEXT = RepoContext()


def _strip_html(segment: str) -> str:
    return _HTML_SUFFIX.sub("", segment)


def _from_pages_host(host: str, path: str, pages_domain: str) -> RepoContext | None:
    suffix = f".{pages_domain}"
    if not host.endswith(suffix) or host == pages_domain:
        return None
    owner = host[: -len(suffix)].split(".")[0]
    segments = [part for part in path.split("/") if part]
    if not owner or not segments:
        return None
    return RepoContext(owner=owner, repo=_strip_html(segments[0]))


def _from_full_url(url: str, pages_domain: str) -> RepoContext | None:
    pattern = re.compile(rf"https?://([^./]+)\.{re.escape(pages_domain)}/([^/?#]+)")
    match = pattern.search(url)
    if not match:
        return None
    return RepoContext(owner=match.group(1), repo=_strip_html(match.group(2)))


def _from_path(path: str) -> RepoContext | None:
    match = _PATH_PATTERN.search(path)
    if not match:
        return None
    return RepoContext(owner=match.group(1), repo=_strip_html(match.group(2)))


def resolve_repo_context(
    url: str | None,
    pages_domain: str = "github.io",
    default_owner: str | None = None,
    default_repo: str | None = None,
) -> RepoContext:
    """
    Derive the backing repository from a page URL.

    Tries, in order: the pages host plus first path segment, a regex over the
    full URL, a ``/<owner>/<repo>`` regex over the path, and finally the
    configured default. Never raises; an unresolvable URL yields the default
    or local mode.
    """
    url = (url or "").strip()
    try:
        parts = urlsplit(url)
        host = (parts.hostname or "").lower()
        path = parts.path or ""
    except ValueError as e:
        logger.warning("context_url_unparseable", url=url, error=str(e))
        host, path = "", ""

    strategies = (
        ("pages_host", lambda: _from_pages_host(host, path, pages_domain)),
        ("full_url", lambda: _from_full_url(url, pages_domain)),
        ("path", lambda: _from_path(path)),
    )
    for name, strategy in strategies:
        context = strategy()
        if context is not None:
            logger.info("context_resolved", strategy=name, owner=context.owner, repo=context.repo)
            return context

    if default_owner and default_repo:
        logger.info("context_default_used", owner=default_owner, repo=default_repo)
        return RepoContext(owner=default_owner, repo=default_repo)

    logger.info("context_local_mode", url=url)
    return LOCAL_CONTEXT
