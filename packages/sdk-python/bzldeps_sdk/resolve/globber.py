"""
Glob Engine
===========

Implements the ``glob`` built-in available inside ``srcs`` expressions:

    glob(include, exclude=[], exclude_directories=0, allow_empty=True)

Patterns are expanded against the package directory with recursive ``**``
support, excludes are subtracted, and the remaining matches go through a
PackageTree so sub-packages are filtered out and duplicates collapse.
"""

from pathlib import Path
from typing import Any, List, Optional, Set, Union

from bzldeps_common import GlobError
from bzldeps_common.logger import get_logger

from .package_tree import PackagePredicate, PackageTree, build_file_predicate

logger = get_logger(__name__)

_KNOWN_KWARGS = ("include", "exclude", "exclude_directories", "allow_empty")


class Globber:
    """
    Callable glob bound to one package of a repository.

    Example:
        >>> globber = Globber("/repo", "app")
        >>> globber(["**/*.py"], exclude=["*_test.py"])
        ['main.py', 'util/helpers.py']
    """

    def __init__(
        self,
        repo_root: Union[str, Path],
        pkg: str,
        is_package: Optional[PackagePredicate] = None,
    ):
        self.repo_root = Path(repo_root)
        self.pkg = pkg
        self.is_package = is_package or build_file_predicate(self.repo_root)

    @property
    def package_dir(self) -> Path:
        return self.repo_root / self.pkg if self.pkg else self.repo_root

    def __call__(self, *args: Any, **kwargs: Any) -> List[str]:
        return self.glob(*args, **kwargs)

    def glob(self, *args: Any, **kwargs: Any) -> List[str]:
        """
        Expand include/exclude patterns relative to the package directory.

        Returns:
            Deduplicated paths relative to the package, sub-packages removed

        Raises:
            GlobError: On invalid arguments, or an empty result with
                ``allow_empty=False``
        """
        if len(args) > 1:
            raise GlobError("only 1 positional argument is allowed")

        include_arg = args[0] if args else None
        for key in kwargs:
            if key not in _KNOWN_KWARGS:
                raise GlobError(f"invalid syntax: kwarg {key!r} not recognized")
        if "include" in kwargs:
            if args:
                raise GlobError("invalid syntax: cannot use include as kwarg and arg")
            include_arg = kwargs["include"]

        exclude_arg = kwargs.get("exclude")

        if "exclude_directories" in kwargs:
            exclude_directories = kwargs["exclude_directories"]
            if (
                isinstance(exclude_directories, bool)
                or not isinstance(exclude_directories, int)
                or exclude_directories not in (0, 1)
            ):
                raise GlobError("invalid syntax: exclude_directories must be 0 or 1")
            logger.warning(
                "the 'exclude_directories' attribute of 'glob' was set but is not supported",
                package=self.pkg,
            )

        allow_empty = kwargs.get("allow_empty", True)
        if not isinstance(allow_empty, bool):
            raise GlobError("invalid syntax: allow_empty must be a boolean")

        excluded: Set[str] = set()
        if exclude_arg is not None:
            if not isinstance(exclude_arg, list):
                raise GlobError("exclude is not a list")
            for pattern in exclude_arg:
                if not isinstance(pattern, str):
                    raise GlobError("exclude pattern must be a string")
                excluded.update(self._expand(pattern))

        if not isinstance(include_arg, list):
            raise GlobError("include is not a list")

        tree = PackageTree(self.pkg, self.is_package)
        for pattern in include_arg:
            if not isinstance(pattern, str):
                raise GlobError("include pattern must be a string")
            for match in self._expand(pattern):
                if match not in excluded:
                    tree.add_path(match.split("/"))

        result = tree.paths()
        if not allow_empty and not result:
            raise GlobError("'allow_empty' was set and the result was empty")
        return result

    def _expand(self, pattern: str) -> List[str]:
        """Expand one pattern to package-relative POSIX paths."""
        package_dir = self.package_dir
        patterns = [pattern]
        if pattern == "**" or pattern.endswith("/**"):
            # pathlib only yields directories for a trailing "**"
            patterns.append(pattern + "/*")
        try:
            matches = [path for p in patterns for path in package_dir.glob(p)]
        except (ValueError, NotImplementedError) as e:
            raise GlobError(f"invalid pattern {pattern!r}: {e}") from e

        relative: List[str] = []
        for path in dict.fromkeys(matches):
            try:
                rel_path = path.relative_to(package_dir).as_posix()
            except ValueError:
                # Patterns with ".." can leave the package.
                continue
            if rel_path != ".":
                relative.append(rel_path)
        return relative
