"""bzldeps SDK - dependency resolution for Python build rules.

This package provides tools for:
- Expanding ``srcs`` expressions, including ``glob`` with sub-package filtering
- Deriving the module names a rule provides
- Resolving a rule's imports into its ``deps`` attribute

Example:
    >>> from bzldeps_sdk import Resolver, Rule, Module, build_index
    >>> from bzldeps_schema import PythonConfig
    >>> resolver = Resolver()
    >>> index = build_index(rules, resolver, "/repo")
    >>> result = resolver.resolve(PythonConfig(), index, rules[0])
"""

from .resolve import (
    DependencySet,
    Diagnostic,
    Globber,
    ImportSpec,
    Label,
    Module,
    Overrides,
    PackageTree,
    Resolver,
    ResolveResult,
    Rule,
    RuleIndex,
    build_index,
    evaluate_srcs,
    import_specs_from_src,
    parse_directives,
)
from .workspace import (
    RunReport,
    collect_provides,
    overrides_from_manifest,
    resolve_manifest,
    rules_from_manifest,
)

__version__ = "0.1.0"

__all__ = [
    # Core types
    "Label",
    "Rule",
    "Module",
    "ImportSpec",
    "DependencySet",

    # srcs evaluation
    "evaluate_srcs",
    "Globber",
    "PackageTree",

    # Indexing and resolution
    "import_specs_from_src",
    "RuleIndex",
    "build_index",
    "Overrides",
    "parse_directives",
    "Resolver",
    "ResolveResult",
    "Diagnostic",

    # Manifest runs
    "rules_from_manifest",
    "overrides_from_manifest",
    "collect_provides",
    "resolve_manifest",
    "RunReport",
]
