"""
Decomposition and re-encoding of module ``source`` strings.

A source string such as::

    git::ssh://git@example.com/network/modules.git//vpc?depth=1&ref=v1.2.0

is split into the getters forced in front of it (``git``), the canonical
repository URL (``ssh://git@example.com/network/modules.git``), the
subfolder inside the repository (``vpc``), the pinned ref (``v1.2.0``) and
the remaining query pieces (``depth=1``). Encoding puts the pieces back
together in the same places, so an unmodified reference encodes to exactly
the text it was decoded from.

Only git sources are recognised. A source is considered git when:

- a ``git::`` getter is forced in front of it, or
- it uses scp-like syntax (``git@github.com:org/repo.git``), or
- it is a URL with an ``ssh``, ``git`` or ``git+ssh`` scheme, or
- it is an http(s) URL whose repository path ends in ``.git`` or whose host
  is one of the well known git hosting services.

Sources forcing any other getter (``s3::``, ``hg::``, ...), registry
addresses, bare ``github.com/org/repo`` shorthands and local paths are not
git sources.
"""

import re
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

_FORCED_GETTER_RE = re.compile(r"^([A-Za-z0-9]+)::(.+)$")
_SCP_RE = re.compile(
    r"^(?P<authority>[A-Za-z0-9_.+-]+@[A-Za-z0-9.-]+):(?P<path>(?!//)[^?]*)$"
)
_URL_RE = re.compile(
    r"^(?P<scheme>[A-Za-z][A-Za-z0-9+.-]*)://(?P<authority>[^/?]*)(?P<path>[^?]*)$"
)

NON_GIT_GETTERS = frozenset({"file", "gcs", "hg", "http", "https", "s3"})
GIT_SCHEMES = frozenset({"file", "git", "git+ssh", "http", "https", "ssh"})
SSH_SCHEMES = frozenset({"git", "git+ssh", "ssh"})
KNOWN_GIT_HOSTS = frozenset({"bitbucket.org", "github.com", "gitlab.com"})

SUBDIR_MARKER = "//"
REF_PARAMETER = "ref"


class NotAGitSource(ValueError):
    """Raised when a source string does not reference a git repository."""

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"'{source}' is not a git source: {reason}")


@dataclass
class SourceReference:
    """
    A decomposed git source string.

    ``getters`` is ordered innermost first: ``git::ssh::<url>`` is stored as
    ``["ssh", "git"]`` and each getter is prefixed in turn when encoding.
    ``query`` holds the raw ``key=value`` pieces other than ``ref``; it is
    ``None`` when the source had no ``?`` at all. ``ref_index`` remembers where
    the ``ref`` piece sat among them.
    """

    remote_url: str
    getters: List[str] = field(default_factory=list)
    subdir: Optional[str] = None
    ref: Optional[str] = None
    query: Optional[List[str]] = None
    ref_index: Optional[int] = None

    @property
    def canonical_url(self) -> str:
        """Repository URL without getters, subfolder or query."""
        return self.remote_url

    def with_ref(self, ref: str) -> "SourceReference":
        """Return a copy of this reference pinned to *ref*."""
        return SourceReference(
            remote_url=self.remote_url,
            getters=list(self.getters),
            subdir=self.subdir,
            ref=ref,
            query=None if self.query is None else list(self.query),
            ref_index=self.ref_index,
        )

    def encode(self) -> str:
        return encode(self)


def split_getters(source: str) -> Tuple[List[str], str]:
    """
    Strip forced getters (``token::``) from the front of *source*.

    Returns the getters, innermost first, and the remaining text.
    """
    getters: List[str] = []
    rest = source
    match = _FORCED_GETTER_RE.match(rest)
    while match:
        getters.insert(0, match.group(1))
        rest = match.group(2)
        match = _FORCED_GETTER_RE.match(rest)
    return getters, rest


def _split_query(text: str) -> Tuple[str, Optional[List[str]]]:
    location, marker, query = text.partition("?")
    if not marker:
        return location, None
    return location, query.split("&") if query else []


def _extract_ref(
    pieces: Optional[List[str]],
) -> Tuple[Optional[str], Optional[List[str]], Optional[int]]:
    """Pull every ``ref`` piece out of *pieces*, keeping the first value."""
    if pieces is None:
        return None, None, None

    ref = None
    ref_index = None
    kept = []
    for piece in pieces:
        key, _, value = piece.partition("=")
        if key == REF_PARAMETER:
            if ref_index is None:
                ref = value
                ref_index = len(kept)
            continue
        kept.append(piece)
    return ref, kept, ref_index


def _hostname(authority: str) -> str:
    host = authority.rsplit("@", 1)[-1]
    return re.sub(r":\d*$", "", host).lower()


def _split_subdir(path: str) -> Tuple[str, Optional[str]]:
    repo_path, marker, subdir = path.partition(SUBDIR_MARKER)
    if not marker:
        return path, None
    return repo_path, subdir


def decompose(source: str) -> SourceReference:
    """
    Decompose a raw ``source`` attribute value into a SourceReference.

    Raises:
        NotAGitSource: If the value does not reference a git repository
    """
    getters, rest = split_getters(source)

    forced = [getter for getter in getters if getter.lower() in NON_GIT_GETTERS]
    if forced:
        raise NotAGitSource(source, f"forced getter '{forced[0]}'")
    git_forced = any(getter.lower() == "git" for getter in getters)

    location, pieces = _split_query(rest)

    scp = _SCP_RE.match(location)
    url = _URL_RE.match(location)
    if scp:
        repo_path, subdir = _split_subdir(scp.group("path"))
        if not repo_path:
            raise NotAGitSource(source, "empty repository path")
        remote_url = f"{scp.group('authority')}:{repo_path}"
    elif url:
        scheme = url.group("scheme").lower()
        authority = url.group("authority")
        if scheme not in GIT_SCHEMES:
            raise NotAGitSource(source, f"unsupported scheme '{scheme}'")
        if scheme == "file" and not git_forced:
            raise NotAGitSource(source, "file URLs need a forced git getter")
        if not authority and scheme != "file":
            raise NotAGitSource(source, "missing host")

        repo_path, subdir = _split_subdir(url.group("path"))
        if not repo_path.strip("/"):
            raise NotAGitSource(source, "empty repository path")

        looks_like_git = (
            git_forced
            or scheme in SSH_SCHEMES
            or repo_path.endswith(".git")
            or _hostname(authority) in KNOWN_GIT_HOSTS
        )
        if not looks_like_git:
            raise NotAGitSource(source, "no git marker in URL")
        remote_url = f"{url.group('scheme')}://{authority}{repo_path}"
    else:
        raise NotAGitSource(source, "not a URL")

    ref, query, ref_index = _extract_ref(pieces)

    return SourceReference(
        remote_url=remote_url,
        getters=getters,
        subdir=subdir,
        ref=ref,
        query=query,
        ref_index=ref_index,
    )


def encode(reference: SourceReference) -> str:
    """
    Render a SourceReference back into a source string.

    Getters are re-attached in front, then the repository URL, the subfolder
    and finally the query with ``ref`` at its original position (or last,
    for a reference that was not pinned before).
    """
    text = reference.remote_url
    if reference.subdir is not None:
        text += SUBDIR_MARKER + reference.subdir

    pieces = list(reference.query or [])
    if reference.ref is not None:
        index = reference.ref_index
        if index is None or index > len(pieces):
            index = len(pieces)
        pieces.insert(index, f"{REF_PARAMETER}={reference.ref}")
    if pieces or reference.query is not None:
        text += "?" + "&".join(pieces)

    for getter in reference.getters:
        text = f"{getter}::{text}"
    return text
