"""
Rule Model
==========

Typed per-rule context consumed by the resolver: the rule's address, its
``srcs`` expression, declared import roots, the imports recorded for its
sources and the dependencies that were already resolved while the rule was
generated.
"""

import sys
from dataclasses import dataclass, field
from typing import List, Optional

from .deps import DependencySet
from .label import Label
from .srcs_eval import SrcsExpr


@dataclass(frozen=True)
class Module:
    """One import statement occurrence in a source file."""

    name: str
    """Dotted module name, e.g. 'requests' or 'libs.util.strings'"""

    filepath: str
    """File containing the import, relative to the repository root"""

    line_number: int = 0
    """Line of the import statement"""


@dataclass
class Rule:
    """
    A build target participating in indexing and resolution.

    Example:
        >>> rule = Rule(kind="py_library", name="util", pkg="libs/util", srcs='glob(["*.py"])')
        >>> str(rule.label)
        '//libs/util:util'
    """

    kind: str
    name: str
    pkg: str = ""
    repo: str = ""

    srcs: Optional[SrcsExpr] = None
    """List of files or a srcs expression; None means the rule has no srcs"""

    imports: List[str] = field(default_factory=list)
    """Import roots relative to the package (the 'imports' attribute)"""

    library_uuid: Optional[str] = None
    """Synthetic identifier linking a test/binary to a library in the same package"""

    modules: List[Module] = field(default_factory=list)
    """Imports recorded for this rule's sources"""

    resolved_deps: DependencySet = field(default_factory=DependencySet)
    """Dependencies always included in 'deps' without resolution"""

    deps: Optional[List[str]] = None
    """The resolved 'deps' attribute, unset until resolution produced something"""

    @property
    def label(self) -> Label:
        return Label(repo=self.repo, pkg=self.pkg, name=self.name)


def is_std_module(module: Module) -> bool:
    """
    Tell whether ``module`` belongs to the Python standard library.

    Only the top-level name is considered, so ``os.path`` and
    ``xml.etree.ElementTree`` are standard library modules.
    """
    top_level = module.name.split(".", 1)[0]
    return top_level == "__future__" or top_level in sys.stdlib_module_names
