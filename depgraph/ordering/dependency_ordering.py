"""
Dependency Ordering
===================

Dependency-based ordering of stories (tasks): the graph plus every query an
executor needs.

Typical usage:

    ordering = create_ordering_from_stories(stories)

    # One-shot planning
    levels = ordering.get_dependency_levels()
    if not levels.success:
        reject(levels.cycles)

    # Online execution
    completed = set()
    while ready := ordering.get_ready_nodes(completed):
        ...run ready nodes, add finished ids to completed...

Planning failures (cycles, incomplete orderings) come back as result values
with success=False; they are never raised. Instances are not thread-safe; see
SynchronizedDependencyOrdering for shared use.
"""

from typing import AbstractSet, Any, Dict, Iterable, List, Optional, Union
import dataclasses
import logging

from depgraph.config import OrderingConfig
from depgraph.ordering.builder import GraphBuilder, StoryDescriptor
from depgraph.ordering.cycle_detector import CycleDetector
from depgraph.ordering.graph_store import GraphStore
from depgraph.ordering.level_partitioner import LevelPartitioner
from depgraph.ordering.readiness import ReadinessTracker
from depgraph.ordering.results import (
    CycleReport,
    DependencyLevels,
    GraphStats,
    NodeId,
    TopologicalOrder,
)
from depgraph.ordering.stats import GraphStatistics
from depgraph.ordering.topological_sorter import TopologicalSorter
from depgraph.ordering.visualization import GraphVisualizer

logger = logging.getLogger(__name__)


class DependencyOrdering(GraphStore):
    """
    Dependency graph with ordering, levelling and readiness queries.

    Mutation primitives (add_node, add_dependency, remove_dependency,
    remove_node, clear) come from GraphStore.
    """

    def __init__(self, config: Optional[OrderingConfig] = None):
        super().__init__(config)
        self._cycle_detector = CycleDetector(self)
        self._sorter = TopologicalSorter(self, self._cycle_detector)
        self._partitioner = LevelPartitioner(self, self._sorter)
        self._readiness = ReadinessTracker(self)
        self._builder = GraphBuilder(self)
        self._statistics = GraphStatistics(self, self._partitioner)
        self._visualizer = GraphVisualizer(self, self._partitioner)

    # =========================================================================
    # Planning
    # =========================================================================

    def detect_cycles(self) -> CycleReport:
        return self._cycle_detector.detect_cycles()

    def get_topological_order(self) -> TopologicalOrder:
        return self._sorter.get_topological_order()

    def get_dependency_levels(self) -> DependencyLevels:
        return self._partitioner.get_dependency_levels()

    # =========================================================================
    # Online execution
    # =========================================================================

    def get_ready_nodes(self, completed: Optional[AbstractSet[NodeId]] = None) -> List[NodeId]:
        """
        Nodes ready to run given the executor's completed set.

        A dependency that never completes blocks its dependents forever; the
        graph does not time out, retry or propagate failures.
        """
        return self._readiness.get_ready_nodes(completed)

    def get_blocked_nodes(
        self,
        completed: Optional[AbstractSet[NodeId]] = None
    ) -> Dict[NodeId, List[NodeId]]:
        return self._readiness.get_blocked_nodes(completed)

    # =========================================================================
    # Construction
    # =========================================================================

    def build_from_stories(
        self,
        stories: Iterable[Union[StoryDescriptor, Dict[str, Any]]],
        strict: Optional[bool] = None
    ) -> None:
        """Replace the graph with the given stories (see GraphBuilder)."""
        self._builder.build_from_stories(stories, strict=strict)

    def clone(self) -> "DependencyOrdering":
        """Deep, independent copy of nodes, metadata and edges."""
        cloned = DependencyOrdering(dataclasses.replace(self.config))
        self.copy_into(cloned)
        return cloned

    # =========================================================================
    # Diagnostics
    # =========================================================================

    def get_stats(self) -> GraphStats:
        return self._statistics.get_stats()

    def get_critical_path(self) -> List[NodeId]:
        return self._statistics.get_critical_path()

    def export_to_dot(self) -> str:
        return self._visualizer.to_dot()

    def to_mermaid(self) -> str:
        return self._visualizer.to_mermaid()

    def to_ascii(self) -> str:
        return self._visualizer.to_ascii()


def create_dependency_ordering(config: Optional[OrderingConfig] = None) -> DependencyOrdering:
    return DependencyOrdering(config)


def create_ordering_from_stories(
    stories: Iterable[Union[StoryDescriptor, Dict[str, Any]]],
    config: Optional[OrderingConfig] = None,
    strict: Optional[bool] = None
) -> DependencyOrdering:
    """Build a new DependencyOrdering populated from story descriptors."""
    ordering = DependencyOrdering(config)
    ordering.build_from_stories(stories, strict=strict)
    return ordering
