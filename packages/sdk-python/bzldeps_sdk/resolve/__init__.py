"""
bzldeps Resolution Core
=======================

Provides the two halves of dependency resolution for Python build rules:

- srcs evaluation (static lists, ``glob`` with sub-package filtering)
- import -> label resolution (overrides, third-party mapping, rule index)

Usage:
    from bzldeps_sdk.resolve import Resolver, build_index

    resolver = Resolver()
    index = build_index(rules, resolver, repo_root)
    for rule in rules:
        result = resolver.resolve(config, index, rule, overrides=overrides)
        if result.fatal:
            break
"""

from .deps import DependencySet
from .globber import Globber
from .import_spec import ImportSpec, import_specs_from_src
from .label import Label
from .overrides import Overrides, load_build_file_directives, parse_directives
from .package_tree import PackageTree, build_file_predicate
from .resolver import (
    AMBIGUOUS_IMPORT,
    INVALID_IMPORT,
    Diagnostic,
    Resolver,
    ResolveResult,
    build_index,
    distribution_target_name,
)
from .rule_index import FindResult, RuleIndex
from .rules import Module, Rule, is_std_module
from .srcs_eval import ExpressionEvaluator, evaluate_srcs, parse_srcs_expr

__all__ = [
    # Labels and dependency sets
    "Label",
    "DependencySet",
    # srcs evaluation
    "PackageTree",
    "build_file_predicate",
    "Globber",
    "ExpressionEvaluator",
    "evaluate_srcs",
    "parse_srcs_expr",
    # Indexing
    "ImportSpec",
    "import_specs_from_src",
    "RuleIndex",
    "FindResult",
    # Resolution
    "Module",
    "Rule",
    "is_std_module",
    "Overrides",
    "parse_directives",
    "load_build_file_directives",
    "Resolver",
    "ResolveResult",
    "Diagnostic",
    "INVALID_IMPORT",
    "AMBIGUOUS_IMPORT",
    "build_index",
    "distribution_target_name",
]
