from .reference import (
    NotAGitSource,
    SourceReference,
    decompose,
    encode,
    split_getters,
)
from .model import ModuleSource, Pinned, Unpinned, UnversionedRef, VersionState
from .scan import find_module_sources, write_module_source

__all__ = [
    "NotAGitSource",
    "SourceReference",
    "decompose",
    "encode",
    "split_getters",
    "ModuleSource",
    "Pinned",
    "Unpinned",
    "UnversionedRef",
    "VersionState",
    "find_module_sources",
    "write_module_source",
]
