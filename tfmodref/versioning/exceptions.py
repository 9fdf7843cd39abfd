"""
Exception classes for the versioning module.
"""


class VersioningError(Exception):
    """Base exception for all versioning-related errors."""

    pass


class VersionFormatError(VersioningError):
    """Raised when a version string has an invalid format."""

    def __init__(
        self, version_string: str, expected_format: str = "[v]MAJOR[.MINOR[.PATCH]]"
    ):
        self.version_string = version_string
        self.expected_format = expected_format
        super().__init__(
            f"Invalid version format: '{version_string}'. "
            f"Expected format: {expected_format}"
        )


class ConstraintError(VersioningError):
    """Raised when a version constraint cannot be parsed."""

    def __init__(self, constraint_string: str, reason: str = ""):
        self.constraint_string = constraint_string
        if reason:
            super().__init__(
                f"Invalid version constraint: '{constraint_string}' ({reason})"
            )
        else:
            super().__init__(f"Invalid version constraint: '{constraint_string}'")


class TransportError(VersioningError):
    """Raised when the tags of a remote repository cannot be listed."""

    def __init__(self, url: str, message: str = ""):
        self.url = url
        if message:
            super().__init__(f"Could not list tags for {url}: {message}")
        else:
            super().__init__(f"Could not list tags for {url}")


class MalformedTagError(VersioningError):
    """Raised when a remote tag is not a semantic version."""

    def __init__(self, url: str, tag: str):
        self.url = url
        self.tag = tag
        super().__init__(f"Tag '{tag}' of {url} is not a semantic version")


class RemoteStateError(VersioningError):
    """Raised when a decision needs remote tags that were never resolved."""

    def __init__(self, module: str):
        self.module = module
        super().__init__(f"Remote versions of {module} have not been resolved")
