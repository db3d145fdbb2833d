"""
Dependency Sets
===============

Sorted, duplicate-free collections of label strings and their rendering as
a build-file list expression.
"""

from typing import Iterable, Iterator, List, Set, Union

from .label import Label


class DependencySet:
    """
    Ordered-unique set of dependency labels.

    Iteration is always lexicographic, independent of insertion order, so two
    resolutions of the same imports produce byte-identical ``deps``.

    Example:
        >>> deps = DependencySet(["//b:b", "//a:a"])
        >>> deps.add("//a:a")
        >>> list(deps)
        ['//a:a', '//b:b']
    """

    def __init__(self, labels: Iterable[Union[str, Label]] = ()):
        self._labels: Set[str] = set()
        self.update(labels)

    def add(self, label: Union[str, Label]) -> None:
        self._labels.add(str(label))

    def update(self, labels: Iterable[Union[str, Label]]) -> None:
        for label in labels:
            self.add(label)

    def to_list(self) -> List[str]:
        return sorted(self._labels)

    def to_expr(self) -> str:
        """
        Render the set as a build-file list expression.

        A single label stays on one line; longer lists get one label per line
        with a trailing comma, the way buildifier formats ``deps``.
        """
        labels = self.to_list()
        if not labels:
            return "[]"
        if len(labels) == 1:
            return f'["{labels[0]}"]'
        body = "".join(f'    "{label}",\n' for label in labels)
        return f"[\n{body}]"

    def __iter__(self) -> Iterator[str]:
        return iter(self.to_list())

    def __len__(self) -> int:
        return len(self._labels)

    def __contains__(self, label: object) -> bool:
        return str(label) in self._labels

    def __bool__(self) -> bool:
        return bool(self._labels)

    def __repr__(self) -> str:
        return f"DependencySet({self.to_list()!r})"
