"""
Workspace Resolution
====================

Drives indexing and resolution for every rule of a manifest:

1. Convert manifest rule specs into typed ``Rule`` objects
2. Index the ImportSpecs each rule publishes
3. Resolve rules one at a time, stopping after the first rule with a fatal
   result unless ``keep_going`` is set
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Union

from bzldeps_common.logger import get_logger
from bzldeps_schema import Manifest

from .resolve import (
    DependencySet,
    ImportSpec,
    Module,
    Overrides,
    Resolver,
    ResolveResult,
    Rule,
    build_index,
)

logger = get_logger(__name__)


@dataclass
class RunReport:
    """Result of resolving a whole manifest."""

    results: List[ResolveResult] = field(default_factory=list)
    """Results in resolution order"""

    stopped_early: bool = False
    """True when remaining rules were skipped after a fatal result"""

    @property
    def fatal(self) -> bool:
        return any(result.fatal for result in self.results)

    def deps_by_target(self) -> Dict[str, List[str]]:
        """Resolved deps per target; targets without deps are left out."""
        return {result.target: result.deps for result in self.results if result.deps}


def rules_from_manifest(manifest: Manifest) -> List[Rule]:
    """Build typed rules from the manifest's rule specs."""
    rules: List[Rule] = []
    for spec in manifest.rules:
        rules.append(
            Rule(
                kind=spec.kind,
                name=spec.name,
                pkg=spec.package,
                srcs=spec.srcs,
                imports=list(spec.imports),
                library_uuid=spec.library_uuid,
                modules=[
                    Module(name=m.name, filepath=m.filepath, line_number=m.line_number)
                    for m in spec.modules
                ],
                resolved_deps=DependencySet(spec.deps),
            )
        )
    return rules


def overrides_from_manifest(manifest: Manifest) -> Overrides:
    """Collect the manifest's ``resolve`` directives."""
    overrides = Overrides()
    for directive in manifest.resolve:
        overrides.add(directive.package, directive.import_, directive.label, lang=directive.lang)
    return overrides


def collect_provides(
    rules: List[Rule],
    repo_root: Union[str, Path],
    resolver: Optional[Resolver] = None,
) -> Dict[str, Optional[List[ImportSpec]]]:
    """ImportSpecs published by each rule, keyed by label."""
    resolver = resolver or Resolver()
    return {str(rule.label): resolver.imports(rule, repo_root) for rule in rules}


def resolve_manifest(
    manifest: Manifest,
    repo_root: Union[str, Path],
    keep_going: bool = False,
    resolver: Optional[Resolver] = None,
    overrides: Optional[Overrides] = None,
) -> RunReport:
    """
    Index and resolve every rule of ``manifest``.

    Args:
        manifest: Validated manifest
        repo_root: Repository root on disk, used for glob expansion
        keep_going: Resolve remaining rules after a fatal result
        resolver: Resolver to use, a default one when omitted
        overrides: Extra ``resolve`` directives, merged after the manifest's

    Returns:
        RunReport with one ResolveResult per processed rule

    Raises:
        SrcsExpressionError: If a rule's srcs expression does not parse
    """
    resolver = resolver or Resolver()
    rules = rules_from_manifest(manifest)
    directives = overrides_from_manifest(manifest)
    if overrides is not None:
        directives.merge(overrides)

    index = build_index(rules, resolver, repo_root)
    logger.debug("indexed rules", rules=len(rules), imports=len(index))

    report = RunReport()
    for position, rule in enumerate(rules):
        config = manifest.config_for(rule.pkg)
        result = resolver.resolve(config, index, rule, overrides=directives)
        report.results.append(result)
        if result.fatal and not keep_going:
            report.stopped_early = position < len(rules) - 1
            break
    return report
