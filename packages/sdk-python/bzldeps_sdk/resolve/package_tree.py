"""
Package Tree
============

A trie over path segments that understands sub-package boundaries.

Globs never reach into a nested package: any directory holding its own build
file is marked as a boundary when its node is created and is skipped, with
everything beneath it, when the tree is flattened. Since nodes are shared,
adding the same path twice is a no-op, which deduplicates overlapping
include patterns for free.
"""

import posixpath
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Union

from bzldeps_common import PythonDefaults

PackagePredicate = Callable[[str], bool]


def build_file_predicate(
    repo_root: Union[str, Path],
    build_file_names: Iterable[str] = PythonDefaults.BUILD_FILE_NAMES,
) -> PackagePredicate:
    """
    Create a predicate telling whether a repo-relative directory is a package.

    Args:
        repo_root: Absolute path of the repository root
        build_file_names: File names that mark a directory as a package

    Returns:
        Callable taking a directory relative to ``repo_root``
    """
    root = Path(repo_root)
    names = tuple(build_file_names)

    def is_package(directory: str) -> bool:
        dir_path = root / directory
        return any((dir_path / name).is_file() for name in names)

    return is_package


class PackageTree:
    """
    Tree of file paths rooted at a package directory.

    Example:
        >>> tree = PackageTree("app", is_package=lambda d: d == "app/nested")
        >>> tree.add_path(["main.py"])
        >>> tree.add_path(["nested", "inner.py"])
        >>> tree.paths()
        ['main.py']
    """

    def __init__(
        self,
        pkg: str,
        is_package: Optional[PackagePredicate] = None,
        *,
        is_boundary: bool = False,
        is_file: bool = False,
    ):
        self.pkg = pkg
        self.is_package = is_package or (lambda _directory: False)
        self.branches: Dict[str, "PackageTree"] = {}
        self.is_boundary = is_boundary
        self.is_file = is_file

    def add_path(self, parts: Sequence[str]) -> None:
        """Insert one file path given as its segments."""
        branches = self.branches
        for i, part in enumerate(parts):
            branch = branches.get(part)
            if branch is None:
                # Leaves are classified too: a glob may match a directory itself.
                directory = posixpath.join(self.pkg, *parts[: i + 1])
                branch = PackageTree(
                    self.pkg,
                    self.is_package,
                    is_boundary=self.is_package(directory),
                    is_file=i == len(parts) - 1,
                )
                branches[part] = branch
            branches = branch.branches

    def paths(self) -> List[str]:
        """Flatten the tree into paths, skipping sub-package subtrees."""
        result: List[str] = []
        for part in sorted(self.branches):
            branch = self.branches[part]
            if branch.is_boundary:
                continue
            if branch.is_file:
                result.append(part)
            result.extend(posixpath.join(part, child) for child in branch.paths())
        return result
