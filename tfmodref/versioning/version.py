"""
Version utility module for tag and constraint handling.

This module provides utilities for working with the semantic versions found in
git tags and ``ref`` pins, using the semantic_version library for precedence
and range matching.
"""

import re
from typing import List, Optional, Tuple

import semantic_version

from .exceptions import ConstraintError, VersionFormatError

_VERSION_RE = re.compile(
    r"^[vV]?(?P<major>\d+)(?:\.(?P<minor>\d+))?(?:\.(?P<patch>\d+))?"
    r"(?:-(?P<prerelease>[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?"
    r"(?:\+(?P<build>[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?$"
)


class Version:
    """
    A semantic version parsed from a tag or a ``ref`` value.

    Parsing is lenient in the way git tags are usually written: a leading
    ``v`` is accepted and missing minor/patch components default to zero.
    The original text is kept and used when the version is written back into
    a source string, so ``v5.0.0`` stays ``v5.0.0``. Comparison is numeric:
    ``Version("v3.0.0") == Version("3.0")``.
    """

    def __init__(self, version_string: str):
        """
        Initialize a Version from a string.

        Args:
            version_string: Version string such as "1.2.3", "v1.2" or "2.0.0-rc.1"

        Raises:
            VersionFormatError: If version string is invalid
        """
        self._original_string = str(version_string).strip()

        match = _VERSION_RE.match(self._original_string)
        if not match:
            raise VersionFormatError(self._original_string)

        prerelease = match.group("prerelease")
        build = match.group("build")
        try:
            self._version = semantic_version.Version(
                major=int(match.group("major")),
                minor=int(match.group("minor") or 0),
                patch=int(match.group("patch") or 0),
                prerelease=tuple(prerelease.split(".")) if prerelease else (),
                build=tuple(build.split(".")) if build else (),
            )
        except ValueError as e:
            raise VersionFormatError(self._original_string) from e

    @property
    def major(self) -> int:
        return self._version.major

    @property
    def minor(self) -> int:
        return self._version.minor

    @property
    def patch(self) -> int:
        return self._version.patch

    @property
    def prerelease(self) -> Tuple[str, ...]:
        return tuple(self._version.prerelease)

    @property
    def semver(self) -> semantic_version.Version:
        """The normalized semantic_version representation."""
        return self._version

    def __str__(self) -> str:
        """Return the version as originally written."""
        return self._original_string

    def __repr__(self) -> str:
        return f"Version('{self._original_string}')"

    def _key(self):
        return (self.major, self.minor, self.patch, self.prerelease)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Version):
            return False
        return self._key() == other._key()

    def __lt__(self, other) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._version < other._version

    def __le__(self, other) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self < other or self == other

    def __gt__(self, other) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._version > other._version

    def __ge__(self, other) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self > other or self == other

    def __hash__(self) -> int:
        return hash(self._key())


def parse_version(version_string: str) -> Version:
    """
    Parse a version string into a Version object.

    Raises:
        VersionFormatError: If version string is invalid
    """
    return Version(version_string)


# "> = 1.2" style gaps between an operator and its operand
_OPERATOR_GAP_RE = re.compile(r"(~>|=>|=<|<=|>=|!=|[<>=~^])\s+")
# Masterminds spellings without an npm equivalent
_OPERATOR_ALIASES = {"~>": "~", "=>": ">=", "=<": "<="}
_OPERATOR_ALIAS_RE = re.compile(r"(^|\s)(~>|=>|=<)")
_V_PREFIX_RE = re.compile(r"(^|[\s<>=~^])[vV](?=\d)")
_EXCLUSION_RE = re.compile(r"^!=(?P<version>\S+)$")


class Constraint:
    """
    A version range such as ``>= 1.x < 3.0.1`` or ``~1.2 || ^2.0``.

    The accepted syntax is the npm/Masterminds range syntax: whitespace or
    commas join clauses, ``||`` separates alternatives, and ``!=`` excludes a
    single version. The Masterminds spellings ``~>``, ``=>`` and ``=<`` are
    read as ``~``, ``>=`` and ``<=``. Pre-release versions only match clauses
    that themselves name a pre-release.
    """

    def __init__(self, constraint_string: str):
        self._original_string = str(constraint_string).strip()
        if not self._original_string:
            raise ConstraintError(self._original_string, "empty constraint")

        self._groups: List[Tuple[semantic_version.NpmSpec, List[Version]]] = []
        for alternative in self._original_string.split("||"):
            self._groups.append(self._parse_alternative(alternative))

    def _parse_alternative(
        self, alternative: str
    ) -> Tuple[semantic_version.NpmSpec, List[Version]]:
        expression = alternative.replace(",", " ").strip()
        expression = _OPERATOR_GAP_RE.sub(r"\1", expression)
        expression = _OPERATOR_ALIAS_RE.sub(
            lambda m: m.group(1) + _OPERATOR_ALIASES[m.group(2)], expression
        )
        expression = _V_PREFIX_RE.sub(r"\1", expression)

        clauses = []
        exclusions = []
        for clause in expression.split():
            excluded = _EXCLUSION_RE.match(clause)
            if excluded:
                try:
                    exclusions.append(Version(excluded.group("version")))
                except VersionFormatError as e:
                    raise ConstraintError(self._original_string, str(e)) from e
            else:
                clauses.append(clause)

        try:
            spec = semantic_version.NpmSpec(" ".join(clauses) or "*")
        except ValueError as e:
            raise ConstraintError(self._original_string, str(e)) from e

        return spec, exclusions

    def check(self, version: Version) -> bool:
        """Return True if *version* satisfies the constraint."""
        for spec, exclusions in self._groups:
            if version in exclusions:
                continue
            if spec.match(version.semver):
                return True
        return False

    def __str__(self) -> str:
        return self._original_string

    def __repr__(self) -> str:
        return f"Constraint('{self._original_string}')"


def parse_constraint(constraint_string: Optional[str]) -> Optional[Constraint]:
    """
    Parse a constraint string, returning None for an empty or missing value.

    Raises:
        ConstraintError: If the constraint cannot be parsed
    """
    if constraint_string is None or not str(constraint_string).strip():
        return None
    return Constraint(constraint_string)
