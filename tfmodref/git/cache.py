"""
Process-wide cache of remote repository tags.

Every module source pointing at the same repository shares the same tag
history, whatever getters, subfolder or ref its source string carries, so
tags are listed once per canonical repository URL and reused for the rest of
the run. Entries are never invalidated: the process is short lived and lists
tags again on the next invocation.

Thread Safety:
    The cache keeps one lock per repository URL, so concurrent resolvers
    list each repository only once and never observe a half-built entry.

Usage:
    resolver = TagResolver(TagCache())
    tag_set = resolver.resolve("https://github.com/org/repo.git")
    tag_set.latest  # -> Version('v5.0.0')
"""

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from tfmodref.git.remote import list_remote_tags
from tfmodref.versioning.exceptions import MalformedTagError, VersionFormatError
from tfmodref.versioning.version import Version, parse_version

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RemoteTagSet:
    """The semantic version tags of one repository, in ascending order."""

    url: str
    versions: Tuple[Version, ...] = ()

    @classmethod
    def from_tags(cls, url: str, tags: Iterable[str]) -> "RemoteTagSet":
        """
        Build a tag set from raw tag names.

        Tags that parse to the same version (``v1.0.0`` and ``1.0.0``) are
        kept once, preferring the name that sorts first.

        Raises:
            MalformedTagError: On the first tag that is not a semantic version
        """
        versions: List[Version] = []
        seen = set()
        for tag in sorted(tags):
            try:
                version = parse_version(tag)
            except VersionFormatError as e:
                raise MalformedTagError(url, tag) from e
            if version in seen:
                continue
            seen.add(version)
            versions.append(version)

        return cls(url=url, versions=tuple(sorted(versions)))

    @property
    def latest(self) -> Optional[Version]:
        """The highest version, or None for a repository without tags."""
        return self.versions[-1] if self.versions else None

    def __len__(self) -> int:
        return len(self.versions)


class TagCache:
    """Tag sets keyed by canonical repository URL."""

    def __init__(self):
        self._entries: Dict[str, RemoteTagSet] = {}
        self._locks: Dict[str, threading.Lock] = {}
        self._locks_lock = threading.Lock()

    def lock_for(self, url: str) -> threading.Lock:
        """
        Get or create the lock guarding the entry of a repository URL.

        Args:
            url: Canonical repository URL

        Returns:
            Thread lock for this repository
        """
        with self._locks_lock:
            if url not in self._locks:
                self._locks[url] = threading.Lock()
            return self._locks[url]

    def get(self, url: str) -> Optional[RemoteTagSet]:
        return self._entries.get(url)

    def set(self, url: str, tag_set: RemoteTagSet) -> None:
        self._entries[url] = tag_set

    def __contains__(self, url: str) -> bool:
        return url in self._entries

    def __len__(self) -> int:
        return len(self._entries)


class TagResolver:
    """
    Resolves repository URLs to their tag sets, listing each one only once.

    Args:
        cache: Cache shared by every resolver of the run
        transport: Callable listing the tag names of a repository URL
    """

    def __init__(
        self,
        cache: Optional[TagCache] = None,
        transport: Callable[[str], List[str]] = list_remote_tags,
    ):
        self.cache = cache if cache is not None else TagCache()
        self.transport = transport

    def resolve(self, url: str) -> RemoteTagSet:
        """
        Return the tag set of *url*, listing the remote on a cache miss.

        A failed listing leaves the cache untouched.

        Raises:
            TransportError: If the remote cannot be listed
            MalformedTagError: If any tag is not a semantic version
        """
        with self.cache.lock_for(url):
            cached = self.cache.get(url)
            if cached is not None:
                logger.debug(f"Using cached tags for {url}")
                return cached

            tag_set = RemoteTagSet.from_tags(url, self.transport(url))
            self.cache.set(url, tag_set)
            logger.debug(
                f"Cached {len(tag_set)} versions for {url} (latest: {tag_set.latest})"
            )
            return tag_set
