"""
Level Partitioner
=================

Groups the topological order into parallel-execution levels. Leaf nodes sit
at level 0 and every other node sits one level above its deepest dependency,
so a whole level can run in parallel once all earlier levels are complete.
"""

from typing import Dict, List
import logging

from depgraph.ordering.graph_store import GraphStore
from depgraph.ordering.results import DependencyLevels, NodeId
from depgraph.ordering.topological_sorter import TopologicalSorter

logger = logging.getLogger(__name__)


class LevelPartitioner:
    """Partitions a graph into dependency levels."""

    def __init__(self, store: GraphStore, sorter: TopologicalSorter | None = None):
        self.store = store
        self.sorter = sorter or TopologicalSorter(store)

    def get_dependency_levels(self) -> DependencyLevels:
        """
        Compute dependency levels.

        A failed topological order is propagated unchanged (empty levels,
        same cycles and failure reason). Nodes within a level are sorted by
        priority, highest first, ties by ascending id.

        Returns:
            DependencyLevels with levels[i] listing the nodes at level i
        """
        topo = self.sorter.get_topological_order()
        if not topo.success:
            return DependencyLevels(
                success=False,
                levels=[],
                cycles=topo.cycles,
                failure=topo.failure
            )

        node_level: Dict[NodeId, int] = {}
        levels: List[List[NodeId]] = []

        for node_id in topo.order:
            deps = self.store.dependency_set(node_id)
            level = 1 + max((node_level[dep] for dep in deps), default=-1)
            node_level[node_id] = level

            while len(levels) <= level:
                levels.append([])
            levels[level].append(node_id)

        levels = [self.store.sort_by_priority(level) for level in levels]

        logger.info(
            f"Dependency levels calculated: {len(levels)} levels, "
            f"sizes={[len(level) for level in levels]}"
        )
        return DependencyLevels(success=True, levels=levels)
