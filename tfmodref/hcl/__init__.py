from .document import (
    DocumentError,
    HclDocument,
    SourceBlock,
    find_source_blocks,
)

__all__ = [
    "DocumentError",
    "HclDocument",
    "SourceBlock",
    "find_source_blocks",
]
