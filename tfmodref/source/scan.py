import logging
from typing import List

from tfmodref.hcl.document import HclDocument
from tfmodref.source.model import ModuleSource
from tfmodref.source.reference import NotAGitSource, decompose

logger = logging.getLogger(__name__)


def find_module_sources(document: HclDocument) -> List[ModuleSource]:
    """
    Build a ModuleSource for every git source declared in *document*.

    Blocks whose source is not a git repository (registry modules, local
    paths, archives) are skipped silently.
    """
    sources = []
    for block in document.source_blocks():
        name = document.module_name(block)
        try:
            reference = decompose(block.value)
        except NotAGitSource as e:
            logger.debug(f"Ignoring {name}: {e.reason}")
            continue
        sources.append(ModuleSource(name, reference, block))
    return sources


def write_module_source(document: HclDocument, module: ModuleSource) -> None:
    """Splice the module's current source string back into *document*."""
    document.replace_source(module.block, module.render())
