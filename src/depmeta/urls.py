"""URL selection from project metadata."""
from __future__ import annotations

from typing import Iterable, List, Optional

from yarl import URL

from .resolution.types import Info

# Git transport URLs are not browsable links.
_REJECTED_PREFIXES = ("git@", "git:")


def url_candidates(info: Info) -> List[str]:
    """Return the SCM URL (when present) followed by the homepage."""
    candidates = []
    if info.scm_url is not None:
        candidates.append(info.scm_url)
    candidates.append(info.homepage)
    return candidates


def first_usable_url(candidates: Iterable[str]) -> Optional[URL]:
    """Return the first candidate that parses as a URL with a scheme."""
    for candidate in candidates:
        if not candidate or candidate.startswith(_REJECTED_PREFIXES):
            continue
        try:
            url = URL(candidate)
        except (ValueError, TypeError):
            continue
        if url.scheme:
            return url
    return None


def select_url(info: Info) -> Optional[URL]:
    """Pick the SCM URL or homepage of a project, if one is usable."""
    return first_usable_url(url_candidates(info))
