"""
Build Labels
============

Parsing, relativization and rendering of target labels such as
``@pip//:pypi__requests``, ``//libs/util:util`` or ``:lib``.
"""

import re
from dataclasses import dataclass
from typing import Optional

from bzldeps_common import LabelError

_REPO_RE = re.compile(r"^@?[A-Za-z0-9_.~+-]*$")
_PKG_RE = re.compile(r"^[A-Za-z0-9_.~+\-/@ ]*$")
_NAME_RE = re.compile(r"^[^:\s][^:]*$")


@dataclass(frozen=True)
class Label:
    """
    A fully qualified (or package-relative) build target address.

    Attributes:
        repo: External repository name, empty for the main repository
        pkg: Package path relative to the repository root
        name: Target name within the package
        relative: True for ``:name`` labels relative to the current package
    """

    repo: str = ""
    pkg: str = ""
    name: str = ""
    relative: bool = False

    @classmethod
    def parse(cls, value: str) -> "Label":
        """
        Parse a label string.

        Examples:
            >>> Label.parse("@pip//:pypi__numpy")
            Label(repo='pip', pkg='', name='pypi__numpy', relative=False)
            >>> Label.parse("//libs/util")
            Label(repo='', pkg='libs/util', name='util', relative=False)
            >>> Label.parse(":lib")
            Label(repo='', pkg='', name='lib', relative=True)
        """
        if not isinstance(value, str) or not value.strip():
            raise LabelError(f"label must be a non-empty string, got {value!r}")
        text = value.strip()

        repo = ""
        if text.startswith("@"):
            if "//" not in text:
                raise LabelError(f"label {value!r} has a repository but no package")
            repo, text = text.split("//", 1)
            repo = repo[1:]
            text = "//" + text
            if not _REPO_RE.match(repo):
                raise LabelError(f"invalid repository name in label {value!r}")

        if text.startswith("//"):
            body = text[2:]
            if ":" in body:
                pkg, name = body.split(":", 1)
            else:
                pkg = body
                name = pkg.rsplit("/", 1)[-1] if pkg else repo
            pkg = pkg.rstrip("/")
            if not _PKG_RE.match(pkg) or pkg.startswith("/"):
                raise LabelError(f"invalid package in label {value!r}")
            if not name or not _NAME_RE.match(name):
                raise LabelError(f"invalid target name in label {value!r}")
            return cls(repo=repo, pkg=pkg, name=name)

        name = text[1:] if text.startswith(":") else text
        if not name or not _NAME_RE.match(name):
            raise LabelError(f"invalid target name in label {value!r}")
        return cls(name=name, relative=True)

    def rel(self, repo: str, pkg: str) -> "Label":
        """
        Return this label as seen from inside ``repo``/``pkg``.

        Drops the repository when it matches ``repo`` and becomes a relative
        ``:name`` label when the package matches too.
        """
        if self.relative or self.repo != repo:
            return self
        if self.pkg == pkg:
            return Label(name=self.name, relative=True)
        return Label(pkg=self.pkg, name=self.name)

    def abs(self, repo: str, pkg: str) -> "Label":
        """Resolve a relative label against ``repo``/``pkg``."""
        if not self.relative:
            return self
        return Label(repo=repo, pkg=pkg, name=self.name)

    def with_repo(self, repo: Optional[str]) -> "Label":
        return Label(repo=repo or "", pkg=self.pkg, name=self.name, relative=self.relative)

    def __str__(self) -> str:
        if self.relative:
            return f":{self.name}"
        repo = f"@{self.repo}" if self.repo else ""
        return f"{repo}//{self.pkg}:{self.name}"
