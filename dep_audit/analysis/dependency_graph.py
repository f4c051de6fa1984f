"""Dependency graph model — resolved crate nodes indexed by crate identity."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from dep_audit.analysis.metadata import CargoMetadata
from dep_audit.errors import CrateNotFoundError
from dep_audit.models import Crate, ResolveNode

logger = logging.getLogger(__name__)


class DependencyGraph:
    """Immutable view of one `cargo metadata` resolve.

    Nodes are indexed by crate once at construction. A node belongs to a crate
    when its raw id starts with ``crate.id_str()``; when the snapshot lists
    package names, the id-to-name mapping is used instead so that ids in the
    newer ``source#name@version`` form still resolve. Every version of a
    crate is kept under the one identity; its edges are the union of theirs.
    """

    def __init__(self, nodes: Iterable[ResolveNode], names: dict[str, str] | None = None):
        self._nodes: tuple[ResolveNode, ...] = tuple(nodes)
        self._names: dict[str, str] = dict(names or {})
        self._index: dict[Crate, list[ResolveNode]] = {}

        for node in self._nodes:
            crate = self.resolve_ref(node.id)
            versions = self._index.setdefault(crate, [])
            if versions:
                logger.debug("Additional node for %s: %s", crate, node.id)
            versions.append(node)

    @classmethod
    def from_metadata(cls, metadata: CargoMetadata) -> DependencyGraph:
        nodes = [
            ResolveNode(id=n.id, dependencies=tuple(n.dependencies))
            for n in metadata.resolve.nodes
        ]
        names = {p.id: p.name for p in metadata.packages}
        graph = cls(nodes, names)
        logger.info("Built dependency graph: %d nodes, %d crates", len(nodes), len(graph))
        return graph

    def resolve_ref(self, raw: str) -> Crate:
        """Map a raw node id or dependency reference to its crate."""
        name = self._names.get(raw)
        if name is not None:
            return Crate(name)
        return Crate.from_str(raw)

    def find_nodes(self, crate: Crate) -> list[ResolveNode]:
        """Every node for *crate*, one per resolved version, in snapshot order."""
        try:
            return self._index[crate]
        except KeyError:
            raise CrateNotFoundError(crate) from None

    def find_node(self, crate: Crate) -> ResolveNode:
        return self.find_nodes(crate)[0]

    def dependencies_of(self, crate: Crate) -> list[Crate]:
        """Union of the dependencies of every version of *crate*, first-seen order."""
        deps: dict[Crate, None] = {}
        for node in self.find_nodes(crate):
            for dep in node.dependencies:
                deps.setdefault(self.resolve_ref(dep))
        return list(deps)

    def crates(self) -> list[Crate]:
        return sorted(self._index)

    @property
    def nodes(self) -> tuple[ResolveNode, ...]:
        return self._nodes

    def __contains__(self, crate: object) -> bool:
        return crate in self._index

    def __len__(self) -> int:
        return len(self._index)
