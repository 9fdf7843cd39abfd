"""
Update policy and decision engine.

Given the state of a ModuleSource and an UpdatePolicy, ``decide`` returns one
of three outcomes:

- ``Skip(reason)``: the source must not be touched, with a reason to report
- ``NoOp()``: the source already points at the target version
- ``Apply(target)``: the source should be pinned to ``target``

Rules are evaluated in order and the first one that applies wins:

1. a source pinned to a branch or commit is skipped
2. an unpinned source is skipped unless the policy includes unpinned sources
3. the target is the explicit version if one was requested, otherwise the
   latest remote tag, refined by the constraint when a tag satisfies it
4. a source already at the target is a no-op
5. a source that would move backwards is skipped unless downgrades are allowed
6. anything else is applied

``apply`` is the only place a source's pin is changed.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from tfmodref.source.model import ModuleSource, Unpinned, UnversionedRef
from tfmodref.versioning.exceptions import RemoteStateError
from tfmodref.versioning.version import (
    Constraint,
    Version,
    parse_constraint,
    parse_version,
)

logger = logging.getLogger(__name__)

SKIP_UNPINNED = "unpinned, not requested"
SKIP_DOWNGRADE = "would downgrade"
SKIP_NO_TAGS = "no semantic version tags found"


class UpdateMode(Enum):
    """How the target version is chosen."""

    EXPLICIT = "explicit"
    CONSTRAINT = "constraint"
    LATEST = "latest"


@dataclass(frozen=True)
class UpdatePolicy:
    """
    What an update run should do, built once from the command line.

    Attributes:
        version: Explicit target version; takes precedence over everything
        constraint: Range refining the latest remote version
        allow_downgrade: Allow moving a source to a lower version
        include_unpinned: Allow pinning sources that track the default branch
    """

    version: Optional[Version] = None
    constraint: Optional[Constraint] = None
    allow_downgrade: bool = False
    include_unpinned: bool = False

    @classmethod
    def from_options(
        cls,
        version: Optional[str] = None,
        constraint: Optional[str] = None,
        allow_downgrade: bool = False,
        include_unpinned: bool = False,
    ) -> "UpdatePolicy":
        """
        Build a policy from raw option values.

        Raises:
            VersionFormatError: If the explicit version is invalid
            ConstraintError: If the constraint is invalid
        """
        return cls(
            version=parse_version(version) if version else None,
            constraint=parse_constraint(constraint),
            allow_downgrade=allow_downgrade,
            include_unpinned=include_unpinned,
        )

    @property
    def mode(self) -> UpdateMode:
        if self.version is not None:
            return UpdateMode.EXPLICIT
        if self.constraint is not None:
            return UpdateMode.CONSTRAINT
        return UpdateMode.LATEST

    @property
    def needs_remote(self) -> bool:
        """Whether deciding requires the remote tags of each source."""
        return self.version is None


@dataclass(frozen=True)
class Skip:
    reason: str
    target: Optional[Version] = None


@dataclass(frozen=True)
class Apply:
    target: Version


@dataclass(frozen=True)
class NoOp:
    pass


Decision = Union[Skip, Apply, NoOp]


def _candidate(module: ModuleSource, policy: UpdatePolicy) -> Optional[Version]:
    if policy.version is not None:
        return policy.version

    if module.remote_tags is None:
        raise RemoteStateError(module.name)

    candidate = module.remote_tags.latest
    if candidate is None or policy.constraint is None:
        return candidate

    matched = module.latest_matching(policy.constraint)
    if matched is None:
        logger.warning(
            f"No tag of {module.repository_url} satisfies '{policy.constraint}', "
            f"falling back to latest ({candidate})"
        )
        return candidate
    return matched


def decide(module: ModuleSource, policy: UpdatePolicy) -> Decision:
    """
    Decide what to do with *module* under *policy*.

    Raises:
        RemoteStateError: If the policy needs remote tags and the module's
            tags were never resolved
    """
    state = module.current_version()
    if isinstance(state, UnversionedRef):
        return Skip(f"pinned to non-semver ref '{state.ref}'")
    if isinstance(state, Unpinned) and not policy.include_unpinned:
        return Skip(SKIP_UNPINNED)

    target = _candidate(module, policy)
    if target is None:
        return Skip(SKIP_NO_TAGS)

    if module.is_at_version(target):
        return NoOp()

    if module.would_downgrade(target) and not policy.allow_downgrade:
        return Skip(SKIP_DOWNGRADE, target)

    return Apply(target)


def needs_remote_tags(module: ModuleSource, policy: UpdatePolicy) -> bool:
    """Whether *module*'s tags must be resolved before deciding."""
    if not policy.needs_remote:
        return False
    state = module.current_version()
    if isinstance(state, UnversionedRef):
        return False
    if isinstance(state, Unpinned):
        return policy.include_unpinned
    return True


def apply(module: ModuleSource, decision: Decision) -> bool:
    """
    Carry out *decision* on *module*.

    Returns:
        True if the module's pin changed
    """
    if not isinstance(decision, Apply):
        return False
    module.pin_to(decision.target)
    return True
