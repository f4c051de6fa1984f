"""Whitelist traversal — find crates reachable from the roots that are not approved."""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable

from dep_audit.analysis.dependency_graph import DependencyGraph
from dep_audit.models import Crate

logger = logging.getLogger(__name__)


class WhitelistWalk:
    """State for one traversal run, shared across every root.

    ``visited`` is checked before a crate's edges are walked, so each crate is
    expanded at most once per run even with diamonds or accidental cycles.
    """

    def __init__(self, graph: DependencyGraph, allow: Iterable[Crate]):
        self.graph = graph
        self.allow = frozenset(allow)
        self.visited: set[Crate] = set()
        self.unapproved: set[Crate] = set()
        self.expansions: Counter[Crate] = Counter()

    def expand(self, root: Crate) -> set[Crate]:
        """Walk everything reachable from *root* not yet visited.

        Returns the unapproved crates found in this subtree. Depth-first with
        an explicit stack so long dependency chains cannot exhaust the
        interpreter's recursion limit.
        """
        found: set[Crate] = set()
        stack = [root]
        while stack:
            crate = stack.pop()
            if crate in self.visited:
                continue
            self.visited.add(crate)

            if crate not in self.allow:
                found.add(crate)

            # Raises CrateNotFoundError for crates missing from the resolve
            deps = self.graph.dependencies_of(crate)
            self.expansions[crate] += 1
            stack.extend(reversed(deps))

        self.unapproved |= found
        return found

    def run(self, roots: Iterable[Crate]) -> list[Crate]:
        for root in roots:
            found = self.expand(root)
            if found:
                logger.debug("Unapproved dependencies via %s: %s", root, sorted(found))
        return sorted(self.unapproved)


def check_whitelist(
    roots: Iterable[Crate],
    graph: DependencyGraph,
    allow: Iterable[Crate],
) -> list[Crate]:
    """Return the sorted crates reachable from *roots* that are not in *allow*."""
    return WhitelistWalk(graph, allow).run(roots)
