"""
Topological Sorter
==================

Priority-aware topological ordering using Kahn's algorithm.

Nodes whose dependencies are all placed wait in a binary heap keyed by
(priority descending, id ascending), so the highest-priority ready node is
always placed next and ties resolve the same way on every run.
"""

from typing import Dict, List, Tuple
import heapq
import itertools
import logging

from depgraph.ordering.cycle_detector import CycleDetector
from depgraph.ordering.graph_store import GraphStore
from depgraph.ordering.results import NodeId, OrderingFailure, TopologicalOrder

logger = logging.getLogger(__name__)


class TopologicalSorter:
    """
    Computes a dependency-respecting execution order.

    Cycle detection runs first; a cyclic graph is rejected with the offending
    cycles rather than partially ordered.
    """

    def __init__(self, store: GraphStore, cycle_detector: CycleDetector | None = None):
        self.store = store
        self.cycle_detector = cycle_detector or CycleDetector(store)

    def get_topological_order(self) -> TopologicalOrder:
        """
        Order all nodes so every dependency precedes its dependents.

        Returns:
            TopologicalOrder; on failure success is False and failure names
            the reason (cycles are included when a cycle was found)
        """
        report = self.cycle_detector.detect_cycles()
        if report.has_cycles:
            logger.error(f"Circular dependencies detected: {report.cycles}")
            return TopologicalOrder(
                success=False,
                order=[],
                cycles=report.cycles,
                failure=OrderingFailure.CYCLE_DETECTED
            )

        pending: Dict[NodeId, int] = {
            node_id: len(deps) for node_id, deps in self.store.iter_dependencies()
        }

        # Heap entries: (-priority, id string, sequence, node id)
        sequence = itertools.count()
        ready: List[Tuple[float, str, int, NodeId]] = []
        for node_id, count in pending.items():
            if count == 0:
                ready.append((*self.store.priority_key(node_id), next(sequence), node_id))
        heapq.heapify(ready)

        order: List[NodeId] = []
        while ready:
            _, _, _, node_id = heapq.heappop(ready)
            order.append(node_id)

            for dependent in self.store.dependent_set(node_id):
                pending[dependent] -= 1
                if pending[dependent] == 0:
                    heapq.heappush(
                        ready, (*self.store.priority_key(dependent), next(sequence), dependent)
                    )

        total = len(self.store)
        if len(order) != total:
            logger.error(
                f"Failed to process all nodes in topological sort: "
                f"processed={len(order)}, total={total}"
            )
            return TopologicalOrder(
                success=False,
                order=order,
                failure=OrderingFailure.INCOMPLETE_ORDERING
            )

        logger.info(f"Topological order calculated for {len(order)} nodes")
        logger.debug(f"Topological order: {order}")
        return TopologicalOrder(success=True, order=order)
