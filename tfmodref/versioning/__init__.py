"""
Versioning module for tfmodref.

Two layers live here:

1. **Core version logic** (version.py): semantic versions as found in git tags
   and ``ref`` pins, and the range constraints used to filter them.

2. **Update decisions** (policy.py): the UpdatePolicy built from the command
   line and the ordered rules deciding whether a module source is skipped,
   left alone or re-pinned.

All errors raised while parsing versions, listing tags or deciding updates
derive from VersioningError (exceptions.py).

policy.py depends on the source model and is imported explicitly:

    from tfmodref.versioning.policy import UpdatePolicy, decide
"""

from .exceptions import (
    VersioningError,
    VersionFormatError,
    ConstraintError,
    TransportError,
    MalformedTagError,
    RemoteStateError,
)
from .version import Version, Constraint, parse_version, parse_constraint

__all__ = [
    "Version",
    "Constraint",
    "parse_version",
    "parse_constraint",
    "VersioningError",
    "VersionFormatError",
    "ConstraintError",
    "TransportError",
    "MalformedTagError",
    "RemoteStateError",
]
