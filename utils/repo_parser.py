"""Parse user-supplied repository locators into Repository values."""

import re
from typing import Optional

from models.data_models import Repository
from utils.exceptions import RepositoryValidationError

GITHUB_HOST_MARKER = "github.com/"

_SHORT_FORM = re.compile(r"^([^/\s]+)/([^/\s]+)$")


def _strip_git_suffix(name: str) -> str:
    if name.endswith(".git"):
        return name[: -len(".git")]
    return name


def _build(owner: str, name: str) -> Optional[Repository]:
    name = _strip_git_suffix(name)
    if not owner or not name:
        return None
    return Repository(owner=owner, name=name)


def parse_repository(text: str) -> Optional[Repository]:
    """
    Parse repository URL or owner/repo format.

    Accepted forms, first match wins:
        "https://github.com/owner/repo"   (anything after a github.com/ marker)
        "github.com/owner/repo.git"
        "owner/repo"                      (exactly one slash)

    A trailing ".git" is stripped from the repository name. The host marker
    matches in any case; owner and name keep the case they were given in.

    Args:
        text: Raw user input

    Returns:
        Repository, or None if the input is empty or matches neither form

    Examples:
        "facebook/react" -> Repository(owner="facebook", name="react")
        "https://github.com/facebook/react/pulls" -> Repository(owner="facebook", name="react")
        "facebook" -> None
    """
    if not text or not text.strip():
        return None
    text = text.strip()

    marker = text.lower().find(GITHUB_HOST_MARKER)
    if marker != -1:
        # https://github.com/owner/repo/pull/1?x=y -> ["owner", "repo", "pull", "1"]
        path = re.split(r"[?#]", text[marker + len(GITHUB_HOST_MARKER):], maxsplit=1)[0]
        segments = [s for s in path.split("/") if s]
        if len(segments) < 2:
            return None
        return _build(segments[0], segments[1])

    match = _SHORT_FORM.match(text)
    if not match:
        return None
    return _build(match.group(1), match.group(2))


def require_repository(text: str) -> Repository:
    """Like parse_repository, but raises RepositoryValidationError on bad input."""
    repo = parse_repository(text)
    if repo is None:
        raise RepositoryValidationError(text)
    return repo
