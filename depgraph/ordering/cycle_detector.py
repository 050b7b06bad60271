"""
Cycle Detector
==============

Finds circular dependencies with a depth-first search over every component of
the graph. The search uses an explicit stack, so deep dependency chains do not
hit the interpreter's recursion limit.
"""

from typing import Iterator, List, Set, Tuple
import logging

from depgraph.ordering.graph_store import GraphStore, tiebreak_key
from depgraph.ordering.results import CycleReport, NodeId

logger = logging.getLogger(__name__)

_EXHAUSTED = object()


class CycleDetector:
    """Detects dependency cycles in a GraphStore."""

    def __init__(self, store: GraphStore):
        self.store = store

    def _sorted_dependencies(self, node_id: NodeId) -> Iterator[NodeId]:
        return iter(sorted(self.store.dependency_set(node_id), key=tiebreak_key))

    def detect_cycles(self) -> CycleReport:
        """
        Detect every cycle reachable from any start node.

        A cycle is recorded each time the search follows an edge back to a node
        still on the current path; it is reported as the closed sub-path from
        that node, e.g. ['a', 'b', 'a']. Scanning continues after a cycle is
        found, so cycles in separate components are all reported.

        Returns:
            CycleReport with has_cycles and the list of cycles
        """
        cycles: List[List[NodeId]] = []
        visited: Set[NodeId] = set()

        for start in self.store.nodes():
            if start in visited:
                continue

            path: List[NodeId] = [start]
            on_path: Set[NodeId] = {start}
            stack: List[Tuple[NodeId, Iterator[NodeId]]] = [
                (start, self._sorted_dependencies(start))
            ]
            visited.add(start)

            while stack:
                node_id, deps = stack[-1]
                dep = next(deps, _EXHAUSTED)

                if dep is _EXHAUSTED:
                    stack.pop()
                    path.pop()
                    on_path.discard(node_id)
                    continue

                if dep in on_path:
                    cycle_start = path.index(dep)
                    cycles.append(path[cycle_start:] + [dep])
                    continue

                if dep in visited:
                    continue

                visited.add(dep)
                on_path.add(dep)
                path.append(dep)
                stack.append((dep, self._sorted_dependencies(dep)))

        if cycles:
            logger.warning(f"Detected {len(cycles)} dependency cycle(s): {cycles}")

        return CycleReport(has_cycles=len(cycles) > 0, cycles=cycles)
