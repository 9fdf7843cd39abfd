"""
Git operations module for tfmodref.

Tags are read straight from the remote with dulwich (no clone) and kept in a
cache keyed by canonical repository URL for the lifetime of the process.
"""

from .remote import list_remote_tags
from .cache import RemoteTagSet, TagCache, TagResolver

__all__ = [
    "list_remote_tags",
    "RemoteTagSet",
    "TagCache",
    "TagResolver",
]
