"""
Graph Statistics
================

Diagnostic counters and critical-path analysis for dashboards and debugging.
Nothing here is part of the scheduling contract.
"""

from typing import Dict, List, Tuple
import logging

from depgraph.ordering.graph_store import GraphStore, tiebreak_key
from depgraph.ordering.level_partitioner import LevelPartitioner
from depgraph.ordering.results import GraphStats, NodeId

logger = logging.getLogger(__name__)


class GraphStatistics:
    """Computes GraphStats and the critical path of a GraphStore."""

    def __init__(self, store: GraphStore, partitioner: LevelPartitioner | None = None):
        self.store = store
        self.partitioner = partitioner or LevelPartitioner(store)

    def get_stats(self) -> GraphStats:
        """
        Summarise the graph.

        Returns:
            GraphStats; max_depth is the number of dependency levels, or 0
            when the graph cannot be levelled (cycles)
        """
        node_count = len(self.store)
        edge_count = 0
        leaf_nodes: List[NodeId] = []
        root_nodes: List[NodeId] = []

        for node_id, deps in self.store.iter_dependencies():
            edge_count += len(deps)
            if not deps:
                leaf_nodes.append(node_id)
            if not self.store.dependent_set(node_id):
                root_nodes.append(node_id)

        levels = self.partitioner.get_dependency_levels()
        max_depth = len(levels.levels) if levels.success else 0

        return GraphStats(
            node_count=node_count,
            edge_count=edge_count,
            leaf_nodes=leaf_nodes,
            root_nodes=root_nodes,
            max_depth=max_depth,
            average_dependencies=edge_count / node_count if node_count > 0 else 0.0
        )

    def get_critical_path(self) -> List[NodeId]:
        """
        Identify the longest dependency chain.

        Uses dynamic programming over the topological order.

        Returns:
            Node ids from the chain's leaf to its final dependent; empty when
            the graph is empty or cannot be ordered
        """
        topo = self.partitioner.sorter.get_topological_order()
        if not topo.success or not topo.order:
            return []

        # chain[node] = (length of longest chain ending at node, previous node)
        chain: Dict[NodeId, Tuple[int, NodeId | None]] = {}
        for node_id in topo.order:
            best_length = 0
            best_prev = None
            for dep in sorted(self.store.dependency_set(node_id), key=tiebreak_key):
                if chain[dep][0] + 1 > best_length:
                    best_length = chain[dep][0] + 1
                    best_prev = dep
            chain[node_id] = (best_length, best_prev)

        end = topo.order[0]
        for node_id in topo.order:
            if chain[node_id][0] > chain[end][0]:
                end = node_id

        path = []
        current = end
        while current is not None:
            path.append(current)
            current = chain[current][1]
        path.reverse()

        logger.info(f"Critical path length: {len(path)} nodes")
        return path
