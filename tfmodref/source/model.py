"""
Version state of a single module source.

A ModuleSource wraps a decomposed SourceReference together with the state of
its local pin and, once resolved, the tags available in its repository.
"""

from dataclasses import dataclass
from typing import Any, Optional, Union

from tfmodref.git.cache import RemoteTagSet, TagResolver
from tfmodref.source.reference import SourceReference, encode
from tfmodref.versioning.exceptions import VersionFormatError
from tfmodref.versioning.version import Constraint, Version, parse_version


@dataclass(frozen=True)
class Unpinned:
    """The source floats on the default branch of its repository."""

    def __str__(self) -> str:
        return "HEAD"


@dataclass(frozen=True)
class Pinned:
    """The source is pinned to a semantic version."""

    version: Version

    def __str__(self) -> str:
        return str(self.version)


@dataclass(frozen=True)
class UnversionedRef:
    """The source is pinned to a branch or commit rather than a version."""

    ref: str

    def __str__(self) -> str:
        return self.ref


VersionState = Union[Unpinned, Pinned, UnversionedRef]

UNPINNED = Unpinned()


def _state_from_ref(ref: Optional[str]) -> VersionState:
    if ref is None:
        return UNPINNED
    try:
        return Pinned(parse_version(ref))
    except VersionFormatError:
        return UnversionedRef(ref)


class ModuleSource:
    """
    A git module source found in a configuration file.

    Attributes:
        name: Display name, the file path optionally followed by ``[label]``
        reference: The decomposed source string
        block: Opaque handle of the block the source came from
        remote_tags: Tags of the repository, once resolved
    """

    def __init__(self, name: str, reference: SourceReference, block: Any = None):
        self.name = name
        self.reference = reference
        self.block = block
        self.remote_tags: Optional[RemoteTagSet] = None
        self._state = _state_from_ref(reference.ref)

    def __repr__(self) -> str:
        return f"ModuleSource('{self.name}', '{self.render()}')"

    @property
    def repository_url(self) -> str:
        return self.reference.canonical_url

    @property
    def latest_remote_version(self) -> Optional[Version]:
        if self.remote_tags is None:
            return None
        return self.remote_tags.latest

    def current_version(self) -> VersionState:
        return self._state

    def local_version_string(self) -> str:
        """Return ``HEAD`` for an unpinned source, otherwise the pinned ref."""
        return str(self._state)

    def is_at_version(self, version: Version) -> bool:
        """True only when pinned to a version numerically equal to *version*."""
        if isinstance(self._state, Pinned):
            return self._state.version == version
        return False

    def would_downgrade(self, version: Version) -> bool:
        """True only when pinned to a version greater than *version*."""
        if isinstance(self._state, Pinned):
            return self._state.version > version
        return False

    def pin_to(self, version: Version) -> None:
        """Pin the source to *version*, replacing any previous pin."""
        self._state = Pinned(version)
        self.reference = self.reference.with_ref(str(version))

    def latest_matching(
        self, constraint: Constraint, tag_set: Optional[RemoteTagSet] = None
    ) -> Optional[Version]:
        """
        Find the highest tag satisfying *constraint*.

        Args:
            constraint: Constraint the tag must satisfy
            tag_set: Tags to search, defaults to the resolved remote tags

        Returns:
            The matching version, or None when no tag matches
        """
        if tag_set is None:
            tag_set = self.remote_tags
        if tag_set is None:
            return None

        for version in reversed(tag_set.versions):
            if constraint.check(version):
                return version
        return None

    def update_remote_tags(self, resolver: TagResolver) -> RemoteTagSet:
        """
        Resolve the tags of this source's repository through *resolver*.

        Raises:
            TransportError: If the tags cannot be listed
            MalformedTagError: If a tag is not a semantic version
        """
        self.remote_tags = resolver.resolve(self.repository_url)
        return self.remote_tags

    def render(self) -> str:
        """Encode the (possibly re-pinned) source back into a string."""
        return encode(self.reference)
