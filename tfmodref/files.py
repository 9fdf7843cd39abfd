"""Locating the configuration files to process"""

import os
from pathlib import Path
from typing import Iterable, List, Optional, Union

DEFAULT_EXTENSIONS = (".hcl", ".tf")

# Terraform and Terragrunt download module copies into these; they must never
# be rewritten.
DEFAULT_EXCLUDE_DIRS = (".git", ".terraform", ".terragrunt-cache")


class FileExtensions:
    """A set of file extensions, normalized to start with a dot."""

    def __init__(self, extensions: Iterable[str] = DEFAULT_EXTENSIONS):
        self._extensions = set()
        for extension in extensions:
            for part in str(extension).split(","):
                part = part.strip()
                if not part:
                    continue
                self._extensions.add(part if part.startswith(".") else f".{part}")

    def contains(self, extension: str) -> bool:
        return extension in self._extensions

    def __contains__(self, extension: str) -> bool:
        return self.contains(extension)

    def __len__(self) -> int:
        return len(self._extensions)

    def as_comma_separated_string(self) -> str:
        return ", ".join(sorted(self._extensions))


def find_terraform_files(
    base_path: Union[str, Path],
    extensions: FileExtensions,
    exclude_dirs: Optional[Iterable[str]] = None,
) -> List[Path]:
    """
    Find the files under *base_path* with one of the given extensions.

    Args:
        base_path: Directory to walk, or a single file
        extensions: Extensions of the files to return
        exclude_dirs: Directory names not to descend into

    Returns:
        Sorted absolute paths

    Raises:
        FileNotFoundError: If base_path does not exist
    """
    base_path = Path(base_path)
    if not base_path.exists():
        raise FileNotFoundError(f"No such file or directory: '{base_path}'")

    if base_path.is_file():
        if extensions.contains(base_path.suffix):
            return [base_path.resolve()]
        return []

    excluded = set(DEFAULT_EXCLUDE_DIRS if exclude_dirs is None else exclude_dirs)

    paths = []
    for root, dirs, files in os.walk(base_path):
        dirs[:] = [d for d in dirs if d not in excluded]
        for name in files:
            if extensions.contains(os.path.splitext(name)[1]):
                paths.append((Path(root) / name).resolve())

    return sorted(paths)
