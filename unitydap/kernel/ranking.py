"""
Orders remote and local candidates into the sequence the resolver attempts.
"""
import os
from typing import Callable, Iterable, Optional

from packaging import version as pkg_version

from unitydap.kernel.artifacts import Candidate, Remote, version_of

LEXICOGRAPHIC = "lexicographic"
SEMANTIC = "semantic"

OrderKey = Callable[[str], tuple]


def lexicographic_key(directory_name: str) -> tuple:
    # Plain string order over the full name: "...-1.9.0" sorts above "...-1.10.0".
    return (directory_name,)


def semantic_key(directory_name: str) -> tuple:
    """
    Orders by the parsed version suffix. Names that are not valid versions
    sort below every parseable one, by string among themselves.
    """
    try:
        parsed = pkg_version.Version(version_of(directory_name).lstrip("v"))
    except pkg_version.InvalidVersion:
        return (0, pkg_version.Version("0"), directory_name)
    return (1, parsed, directory_name)


_ORDERINGS: dict[str, OrderKey] = {
    LEXICOGRAPHIC: lexicographic_key,
    SEMANTIC: semantic_key,
}


def ordering_from_env() -> str:
    name = os.environ.get("UNITYDAP_VERSION_ORDER", LEXICOGRAPHIC).strip().lower()
    return name if name in _ORDERINGS else LEXICOGRAPHIC


def rank(
    remote: Optional[Candidate],
    local: Iterable[Candidate],
    ordering: str = LEXICOGRAPHIC,
) -> list[Candidate]:
    """
    Merges the (at most one) remote candidate with all local candidates.

    Sorted descending by directory name under the chosen ordering; on equal
    names a local candidate comes before a remote one. Pure, and independent
    of the input order.
    """
    key = _ORDERINGS[ordering]
    candidates = list(local)
    if remote is not None:
        candidates.append(remote)

    def sort_key(candidate: Candidate) -> tuple:
        url = candidate.source.url if isinstance(candidate.source, Remote) else ""
        return (key(candidate.directory_name), candidate.source.priority, url)

    return sorted(candidates, key=sort_key, reverse=True)
