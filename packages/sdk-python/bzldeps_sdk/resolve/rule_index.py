"""
Rule Index
==========

In-memory index from published ImportSpecs to the rules that provide them.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List

from .import_spec import ImportSpec
from .label import Label
from .rules import Rule


@dataclass(frozen=True)
class FindResult:
    """A rule found in the index for an import."""

    label: Label

    def is_self_import(self, from_label: Label) -> bool:
        """True when the match is the rule doing the lookup."""
        return self.label == from_label


class RuleIndex:
    """
    Maps ImportSpecs to the labels of the rules publishing them.

    Several rules may publish the same ImportSpec; lookups return all of them
    in indexing order and leave disambiguation to the resolver.
    """

    def __init__(self) -> None:
        self._by_import: Dict[ImportSpec, List[FindResult]] = {}

    def add_rule(self, rule: Rule, specs: Iterable[ImportSpec]) -> None:
        result = FindResult(rule.label)
        for spec in specs:
            matches = self._by_import.setdefault(spec, [])
            if result not in matches:
                matches.append(result)

    def find_rules_by_import(self, spec: ImportSpec) -> List[FindResult]:
        return list(self._by_import.get(spec, []))

    def __len__(self) -> int:
        return len(self._by_import)
