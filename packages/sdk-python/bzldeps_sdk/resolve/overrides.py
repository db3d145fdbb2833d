"""
Override Directives
===================

User-authored ``resolve`` directives mapping an exact import name to a label.
A directive applies to the package declaring it and to all of its
sub-packages; the nearest declaring package wins.

In build files they are written as comments:

    # gazelle:resolve py yaml @pip//:pypi__pyyaml
"""

import posixpath
from pathlib import Path
from typing import Dict, Iterable, Optional, Tuple, Union

from bzldeps_common import DirectiveNames, LabelError, PythonDefaults, ValidationError

from .label import Label


class Overrides:
    """
    Per-package store of ``resolve`` directives.

    Example:
        >>> overrides = Overrides()
        >>> overrides.add("", "yaml", "@pip//:pypi__pyyaml")
        >>> str(overrides.find("app/sub", "yaml"))
        '@pip//:pypi__pyyaml'
    """

    def __init__(self) -> None:
        self._directives: Dict[Tuple[str, str, str], Label] = {}

    def add(
        self,
        pkg: str,
        imp: str,
        label: Union[str, Label],
        lang: str = PythonDefaults.LANGUAGE_NAME,
    ) -> None:
        if isinstance(label, str):
            label = Label.parse(label)
        # A relative label is relative to the package declaring the directive.
        self._directives[(pkg.strip("/"), lang, imp)] = label.abs("", pkg.strip("/"))

    def find(
        self,
        pkg: str,
        imp: str,
        lang: str = PythonDefaults.LANGUAGE_NAME,
    ) -> Optional[Label]:
        current = pkg.strip("/")
        while True:
            label = self._directives.get((current, lang, imp))
            if label is not None:
                return label
            if not current:
                return None
            current = posixpath.dirname(current)

    def merge(self, other: "Overrides") -> None:
        """Add every directive of ``other``, replacing same-package duplicates."""
        self._directives.update(other._directives)

    def __len__(self) -> int:
        return len(self._directives)


def load_build_file_directives(
    repo_root: Union[str, Path],
    build_file_names: Iterable[str] = PythonDefaults.BUILD_FILE_NAMES,
) -> Overrides:
    """
    Parse ``resolve`` directives from every build file under ``repo_root``.

    Raises:
        ValidationError: If a build file holds a malformed directive
    """
    root = Path(repo_root)
    overrides = Overrides()
    for name in build_file_names:
        for build_file in sorted(root.rglob(name)):
            if not build_file.is_file():
                continue
            pkg = build_file.parent.relative_to(root).as_posix()
            if pkg == ".":
                pkg = ""
            try:
                parse_directives(pkg, build_file.read_text(encoding="utf-8"), overrides)
            except ValidationError as e:
                raise ValidationError(f"{build_file}: {e.message}") from e
    return overrides


def parse_directives(pkg: str, text: str, overrides: Optional[Overrides] = None) -> Overrides:
    """
    Collect ``resolve`` directives from build file text.

    Args:
        pkg: Package of the build file
        text: Build file contents
        overrides: Store to add to; a new one is created when omitted

    Returns:
        The store holding the parsed directives

    Raises:
        ValidationError: If a resolve directive is malformed
    """
    overrides = overrides if overrides is not None else Overrides()
    prefix = DirectiveNames.PREFIX + DirectiveNames.RESOLVE
    for line_number, line in enumerate(text.splitlines(), start=1):
        stripped = line.strip()
        if not stripped.startswith("#"):
            continue
        body = stripped.lstrip("#").strip()
        if not body.startswith(prefix):
            continue
        rest = body[len(prefix):]
        if rest and not rest[0].isspace():
            # e.g. resolve_regexp, not ours
            continue
        args = rest.split()
        if len(args) == 2:
            lang = PythonDefaults.LANGUAGE_NAME
            imp, label = args
        elif len(args) == 3:
            lang, imp, label = args
        else:
            raise ValidationError(
                f"line {line_number}: resolve directive expects "
                f"'[lang] import label', got {' '.join(args)!r}"
            )
        try:
            overrides.add(pkg, imp, label, lang=lang)
        except LabelError as e:
            raise ValidationError(f"line {line_number}: {e.message}") from e
    return overrides
