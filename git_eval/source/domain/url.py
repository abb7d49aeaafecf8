"""Repository reference parsing from user-supplied URLs."""

import re

from git_eval.core.errors import InvalidRepositoryUrlError
from git_eval.source.domain.metadata import RepositoryRef

# Accepted forms: https://github.com/o/r, github.com/o/r, o/r (optional .git suffix).
_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"^https?://(?:www\.)?github\.com/(?P<owner>[^/]+)/(?P<name>[^/#?]+)"),
    re.compile(r"^(?:www\.)?github\.com/(?P<owner>[^/]+)/(?P<name>[^/#?]+)"),
    re.compile(r"^(?P<owner>[^/\s:]+)/(?P<name>[^/#?\s]+)/?$"),
)

_GIT_SUFFIX = ".git"


def parse_repository_url(url: str) -> RepositoryRef:
    """Return the owner/name pair addressed by *url*.

    Raises:
        InvalidRepositoryUrlError: if *url* matches none of the accepted forms.
    """
    candidate = url.strip()
    for pattern in _PATTERNS:
        match = pattern.match(candidate)
        if match is None:
            continue
        name = match.group("name").removesuffix(_GIT_SUFFIX)
        if not name:
            break
        return RepositoryRef(owner=match.group("owner"), name=name)
    raise InvalidRepositoryUrlError(url=url)


def repository_url(ref: RepositoryRef) -> str:
    return f"https://github.com/{ref.owner}/{ref.name}"
