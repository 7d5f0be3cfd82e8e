"""Graph algorithms for incremental builds."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from errors import ConsistencyError, UnresolvedImportError

if TYPE_CHECKING:
    from collections.abc import Collection, Iterable

    from registry.models import Source


@dataclass
class DependencyGraph:
    """Directed graph over source paths; an edge ``a -> b`` means a imports b."""

    vertices: dict[str, Source] = field(default_factory=dict)
    adjacency: dict[str, set[str]] = field(default_factory=dict)
    # importer -> import targets that are not vertices
    unresolved: dict[str, list[str]] = field(default_factory=dict)

    def add_vertex(self, source: Source) -> None:
        self.vertices[source.path] = source
        self.adjacency.setdefault(source.path, set())

    def add_edge(self, src: str, dst: str) -> None:
        if src not in self.vertices:
            msg = f"edge source {src!r} is not a vertex"
            raise KeyError(msg)
        if dst not in self.vertices:
            msg = f"edge target {dst!r} of {src!r} is not a vertex"
            raise ConsistencyError(msg)
        self.adjacency[src].add(dst)

    def edges(self) -> list[tuple[str, str]]:
        return sorted(
            (src, dst) for src, targets in self.adjacency.items() for dst in targets
        )

    def check_imports(self, paths: Iterable[str]) -> None:
        """Fail on the first unresolved import declared by any of ``paths``.

        Raises:
            UnresolvedImportError: If a source imports a path that is
                neither on disk nor kept in the graph.
        """
        for path in paths:
            for target in self.unresolved.get(path, ()):
                raise UnresolvedImportError(path, target)


def build_dependency_graph(
    sources: Iterable[Source],
    *,
    exclude: Collection[str] = (),
) -> DependencyGraph:
    """Build the import graph over every known source.

    Args:
        sources: All sources currently in the registry
        exclude: Source paths left out of the graph (e.g. deleted this run)

    Returns:
        DependencyGraph with one vertex per source and one edge per resolved
        import. Imports of paths that are not vertices (missing on disk or
        excluded) are recorded in ``unresolved`` and create no edge, so they
        only fail the build once their importer is selected.
    """
    graph = DependencyGraph()
    included = [source for source in sources if source.path not in exclude]
    for source in included:
        graph.add_vertex(source)
    for source in included:
        for target in source.imports:
            if target in graph.vertices:
                graph.add_edge(source.path, target)
            else:
                graph.unresolved.setdefault(source.path, []).append(target)
    return graph


class _DisjointSet:
    """Union-find over vertex names with path halving and union by size."""

    def __init__(self, items: Iterable[str]) -> None:
        self.parent: dict[str, str] = {item: item for item in items}
        self.size: dict[str, int] = dict.fromkeys(self.parent, 1)

    def find(self, item: str) -> str:
        parent = self.parent
        while parent[item] != item:
            parent[item] = parent[parent[item]]
            item = parent[item]
        return item

    def union(self, a: str, b: str) -> None:
        root_a, root_b = self.find(a), self.find(b)
        if root_a == root_b:
            return
        if self.size[root_a] < self.size[root_b]:
            root_a, root_b = root_b, root_a
        self.parent[root_b] = root_a
        self.size[root_a] += self.size[root_b]


def find_components(graph: DependencyGraph) -> list[list[str]]:
    """Partition the graph into weakly connected components.

    Edge direction is ignored: two sources belong together when one can be
    reached from the other through imports in either direction.

    Returns:
        Components as sorted lists of source paths, ordered by their first
        path. Every vertex appears in exactly one component.
    """
    components = _DisjointSet(graph.vertices)
    for src, targets in graph.adjacency.items():
        for dst in targets:
            components.union(src, dst)

    groups: dict[str, list[str]] = {}
    for vertex in graph.vertices:
        groups.setdefault(components.find(vertex), []).append(vertex)

    return sorted(sorted(group) for group in groups.values())


__all__ = [
    "DependencyGraph",
    "build_dependency_graph",
    "find_components",
]
