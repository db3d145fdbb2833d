"""
ImportSpec Derivation
=====================

Computes the dotted module identifiers a source file provides, given the
import root (Python project root) it is importable from.
"""

import posixpath
from dataclasses import dataclass
from typing import List

from bzldeps_common import ImportSpecError, PythonDefaults


@dataclass(frozen=True)
class ImportSpec:
    """A (language, identifier) fact published by a rule and searched in the rule index."""

    lang: str
    imp: str


def import_specs_from_src(project_root: str, pkg: str, src: str) -> List[ImportSpec]:
    """
    Determine the identifiers under which ``src`` can be imported.

    Args:
        project_root: Import root relative to the repository (``""`` for the root)
        pkg: Package containing the source file
        src: Source path relative to ``pkg``

    Returns:
        ImportSpecs provided by the file. An ``__init__.py`` inside a
        non-root package provides the package name instead of a module.

    Raises:
        ImportSpecError: If the file is not located under ``project_root``

    Examples:
        >>> [s.imp for s in import_specs_from_src("", "pkg", "sub/mod.py")]
        ['pkg.sub.mod']
        >>> [s.imp for s in import_specs_from_src("", "pkg", "sub/__init__.py")]
        ['pkg.sub']
    """
    python_pkg_dir = posixpath.normpath(posixpath.join(pkg, posixpath.dirname(src)))
    rel_dir = posixpath.relpath(python_pkg_dir, project_root or ".")
    if rel_dir == ".":
        rel_dir = ""
    if rel_dir == ".." or rel_dir.startswith("../"):
        raise ImportSpecError(
            f"source {posixpath.join(pkg, src)!r} is not under import root {project_root!r}"
        )

    python_pkg = rel_dir.replace("/", ".")
    filename = posixpath.basename(src)
    lang = PythonDefaults.LANGUAGE_NAME

    if filename == PythonDefaults.LIBRARY_ENTRYPOINT_FILENAME and python_pkg:
        return [ImportSpec(lang, python_pkg)]

    module_name = filename
    if module_name.endswith(PythonDefaults.SOURCE_EXTENSION):
        module_name = module_name[: -len(PythonDefaults.SOURCE_EXTENSION)]
    imp = f"{python_pkg}.{module_name}" if python_pkg else module_name
    return [ImportSpec(lang, imp)]
