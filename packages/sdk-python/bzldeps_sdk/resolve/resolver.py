"""
Dependency Resolver
===================

Turns the imports recorded for a rule into its ``deps`` attribute.

For every imported module exactly one source is consulted, in this order:

1. a ``resolve`` override directive,
2. the third-party module -> distribution mapping,
3. the first-party rule index (standard library modules are skipped when
   nothing in the index provides them).

Problems with single modules (unknown imports under validation, ambiguous
first-party matches) do not stop the loop: they are collected as diagnostics
so one run reports everything wrong with a rule. The caller looks at
``ResolveResult.fatal`` to decide whether to carry on with other rules.
"""

import os
import posixpath
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Union

from bzldeps_common import (
    EXPLAIN_DEPENDENCY_ENV_VAR,
    DirectiveNames,
    ImportSpecError,
    PythonDefaults,
    SrcsExpressionError,
)
from bzldeps_common.logger import get_logger
from bzldeps_schema import PythonConfig

from .deps import DependencySet
from .import_spec import ImportSpec, import_specs_from_src
from .label import Label
from .overrides import Overrides
from .package_tree import PackagePredicate
from .rule_index import FindResult, RuleIndex
from .rules import Module, Rule, is_std_module
from .srcs_eval import evaluate_srcs

logger = get_logger(__name__)

INVALID_IMPORT = "invalid_import"
AMBIGUOUS_IMPORT = "ambiguous_import"

_RESOLVE = DirectiveNames.PREFIX + DirectiveNames.RESOLVE
_IGNORE = DirectiveNames.PREFIX + DirectiveNames.IGNORE


@dataclass
class Diagnostic:
    """A module of a rule that could not be resolved."""

    kind: str
    """INVALID_IMPORT or AMBIGUOUS_IMPORT"""

    target: str
    module: str
    filepath: str
    line_number: int
    message: str


@dataclass
class ResolveResult:
    """Outcome of resolving one rule."""

    target: str
    deps: List[str] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)

    @property
    def fatal(self) -> bool:
        return bool(self.diagnostics)


def distribution_target_name(distribution: str) -> str:
    """
    Target name of a third-party distribution in the pip repository.

    Example:
        >>> distribution_target_name("Typing-Extensions")
        'pypi__typing_extensions'
    """
    return PythonDefaults.DISTRIBUTION_PREFIX + distribution.lower().replace("-", "_")


def _under_project_root(pkg: str, project_root: str) -> bool:
    """
    Whether pkg lies at or below project_root.

    Compares whole path segments rather than a plain string prefix, so a
    project root of "src" does not claim the package "srcgen".
    """
    if not project_root:
        return True
    return pkg == project_root or pkg.startswith(project_root + "/")


class Resolver:
    """
    Indexes and resolves Python rules.

    Example:
        >>> resolver = Resolver()
        >>> index = build_index(rules, resolver, repo_root)
        >>> result = resolver.resolve(PythonConfig(), index, rules[0])
        >>> result.deps
        ['//libs/util:util', '@pip//:pypi__requests']
    """

    def __init__(
        self,
        std_module_predicate: Callable[[Module], bool] = is_std_module,
        is_package: Optional[PackagePredicate] = None,
    ):
        self.is_std_module = std_module_predicate
        self.is_package = is_package

    def name(self) -> str:
        return PythonDefaults.LANGUAGE_NAME

    def imports(self, rule: Rule, repo_root: Union[str, Path]) -> Optional[List[ImportSpec]]:
        """
        ImportSpecs under which ``rule`` can be imported.

        Returns:
            None when the rule must not be indexed (no srcs, or nothing
            importable), otherwise the published specs

        Raises:
            SrcsExpressionError: If the rule's srcs expression does not parse
        """
        if rule.srcs is None:
            return None
        try:
            srcs = evaluate_srcs(rule.srcs, repo_root, rule.pkg, self.is_package)
        except SrcsExpressionError as e:
            logger.error(
                "failed to process imports",
                target=rule.name,
                package=rule.pkg,
                error=e.message,
            )
            raise

        import_roots = rule.imports or [""]
        provides: List[ImportSpec] = []
        for src in srcs:
            if posixpath.splitext(src)[1] != PythonDefaults.SOURCE_EXTENSION:
                continue
            for import_root in import_roots:
                python_path = posixpath.normpath(posixpath.join(rule.pkg, import_root))
                if python_path == ".":
                    python_path = ""
                try:
                    provides.extend(import_specs_from_src(python_path, rule.pkg, src))
                except ImportSpecError as e:
                    logger.debug(
                        "skipping source outside import root",
                        target=str(rule.label),
                        error=e.message,
                    )

        if rule.library_uuid is not None:
            provides.append(ImportSpec(self.name(), rule.library_uuid))

        return provides or None

    def embeds(self, rule: Rule, from_label: Label) -> List[Label]:
        """Rules embedded by ``rule``; Python rules embed nothing."""
        return []

    def resolve(
        self,
        config: PythonConfig,
        index: RuleIndex,
        rule: Rule,
        modules: Optional[Iterable[Module]] = None,
        overrides: Optional[Overrides] = None,
    ) -> ResolveResult:
        """
        Resolve the imports of ``rule`` into its ``deps`` attribute.

        Args:
            config: Python configuration of the rule's package
            index: Index of every rule's published ImportSpecs
            rule: Rule being resolved; ``rule.deps`` is set on success
            modules: Imports to resolve, defaults to ``rule.modules``
            overrides: ``resolve`` directives

        Returns:
            ResolveResult with sorted deps and any diagnostics
        """
        from_label = rule.label
        target = str(from_label)
        result = ResolveResult(target=target)
        deps = DependencySet()
        explain = os.environ.get(EXPLAIN_DEPENDENCY_ENV_VAR)
        rule_logger = logger.with_context(target=target)

        def add(label: Label, mod: Module, branch: str) -> None:
            dep = str(label.rel(from_label.repo, from_label.pkg))
            deps.add(dep)
            if explain and explain == dep:
                rule_logger.warning(
                    "explaining dependency",
                    dependency=explain,
                    file=mod.filepath,
                    imported=mod.name,
                    line=mod.line_number,
                    branch=branch,
                )

        if modules is None:
            modules = rule.modules
        ordered = sorted(set(modules), key=lambda m: (m.name, m.filepath, m.line_number))

        for mod in ordered:
            override = overrides.find(rule.pkg, mod.name, self.name()) if overrides else None
            if override is not None:
                if not override.repo:
                    override = override.with_repo(from_label.repo)
                if override != from_label:
                    add(override, mod, "override")
                continue

            distribution = config.modules_mapping.get(mod.name)
            if distribution is not None:
                label = Label(
                    repo=config.pip_repository,
                    pkg="",
                    name=distribution_target_name(distribution),
                )
                add(label, mod, "third_party")
                continue

            matches = index.find_rules_by_import(ImportSpec(self.name(), mod.name))
            if any(match.is_self_import(from_label) for match in matches):
                continue

            if not matches:
                if self.is_std_module(mod):
                    continue
                if config.validate_import_statements:
                    self._report(result, INVALID_IMPORT, mod, self._invalid_message(mod))
                continue

            if len(matches) > 1:
                same_root = [
                    match
                    for match in matches
                    if _under_project_root(match.label.pkg, config.project_root)
                ]
                if len(same_root) != 1:
                    self._report(result, AMBIGUOUS_IMPORT, mod, self._ambiguous_message(mod, matches))
                    continue
                matches = same_root

            add(matches[0].label, mod, "first_party")

        deps.update(rule.resolved_deps)
        result.deps = deps.to_list()
        if result.fatal:
            return result
        if deps:
            rule.deps = result.deps
        return result

    def _report(self, result: ResolveResult, kind: str, mod: Module, message: str) -> None:
        result.diagnostics.append(
            Diagnostic(
                kind=kind,
                target=result.target,
                module=mod.name,
                filepath=mod.filepath,
                line_number=mod.line_number,
                message=message,
            )
        )
        logger.error(
            "failed to validate dependencies for target",
            target=result.target,
            kind=kind,
            error=message,
        )

    @staticmethod
    def _invalid_message(mod: Module) -> str:
        return (
            f"{mod.name!r} at line {mod.line_number} from {mod.filepath!r} is an invalid dependency: "
            "possible solutions:\n"
            "\t1. Add it as a dependency in the requirements.txt file.\n"
            f"\t2. Resolve it to a known dependency using the '{_RESOLVE}' directive.\n"
            f"\t3. Ignore it with a comment '# {_IGNORE} {mod.name}' in the Python file.\n"
        )

    @staticmethod
    def _ambiguous_message(mod: Module, matches: List[FindResult]) -> str:
        targets = ", ".join(str(match.label) for match in matches)
        return (
            f"multiple targets ({targets}) may be imported with {mod.name!r} at line "
            f"{mod.line_number} in {mod.filepath!r} - this must be fixed using the "
            f"'{_RESOLVE}' directive"
        )


def build_index(
    rules: Iterable[Rule],
    resolver: Resolver,
    repo_root: Union[str, Path],
) -> RuleIndex:
    """
    Index every rule that publishes ImportSpecs.

    Raises:
        SrcsExpressionError: If a rule's srcs expression does not parse
    """
    index = RuleIndex()
    for rule in rules:
        specs = resolver.imports(rule, repo_root)
        if specs is not None:
            index.add_rule(rule, specs)
    return index
