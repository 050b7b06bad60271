"""
Synchronized Dependency Ordering
================================

Single-writer guard for a DependencyOrdering shared between threads.

Every public call runs under one re-entrant lock, so a coordinator thread can
mutate the graph while worker threads poll get_ready_nodes(). Results are
fresh objects built under the lock and safe to use after it is released.
"""

from typing import AbstractSet, Any, Dict, Iterable, List, Optional, Union
import logging
import threading

from depgraph.config import OrderingConfig
from depgraph.ordering.builder import StoryDescriptor
from depgraph.ordering.dependency_ordering import DependencyOrdering
from depgraph.ordering.results import (
    CycleReport,
    DependencyLevels,
    GraphStats,
    NodeId,
    TopologicalOrder,
)

logger = logging.getLogger(__name__)


class SynchronizedDependencyOrdering:
    """Thread-safe wrapper delegating to a DependencyOrdering."""

    def __init__(
        self,
        ordering: Optional[DependencyOrdering] = None,
        config: Optional[OrderingConfig] = None
    ):
        self._ordering = ordering if ordering is not None else DependencyOrdering(config)
        self._lock = threading.RLock()

    @property
    def lock(self) -> threading.RLock:
        """The guard lock, for callers that need several calls to be atomic."""
        return self._lock

    # Mutation

    def add_node(self, node_id: NodeId, metadata: Optional[Dict[str, Any]] = None) -> None:
        with self._lock:
            self._ordering.add_node(node_id, metadata)

    def add_dependency(self, node_id: NodeId, depends_on: NodeId) -> None:
        with self._lock:
            self._ordering.add_dependency(node_id, depends_on)

    def remove_dependency(self, node_id: NodeId, depends_on: NodeId) -> None:
        with self._lock:
            self._ordering.remove_dependency(node_id, depends_on)

    def remove_node(self, node_id: NodeId) -> None:
        with self._lock:
            self._ordering.remove_node(node_id)

    def clear(self) -> None:
        with self._lock:
            self._ordering.clear()

    def build_from_stories(
        self,
        stories: Iterable[Union[StoryDescriptor, Dict[str, Any]]],
        strict: Optional[bool] = None
    ) -> None:
        stories = list(stories)
        with self._lock:
            self._ordering.build_from_stories(stories, strict=strict)

    # Queries

    def __len__(self) -> int:
        with self._lock:
            return len(self._ordering)

    def __contains__(self, node_id: NodeId) -> bool:
        with self._lock:
            return node_id in self._ordering

    def has_node(self, node_id: NodeId) -> bool:
        with self._lock:
            return self._ordering.has_node(node_id)

    def priority_of(self, node_id: NodeId) -> float:
        with self._lock:
            return self._ordering.priority_of(node_id)

    def nodes(self) -> List[NodeId]:
        with self._lock:
            return self._ordering.nodes()

    def get_dependencies(self, node_id: NodeId) -> List[NodeId]:
        with self._lock:
            return self._ordering.get_dependencies(node_id)

    def get_dependents(self, node_id: NodeId) -> List[NodeId]:
        with self._lock:
            return self._ordering.get_dependents(node_id)

    def get_metadata(self, node_id: NodeId) -> Dict[str, Any]:
        with self._lock:
            return self._ordering.get_metadata(node_id)

    def detect_cycles(self) -> CycleReport:
        with self._lock:
            return self._ordering.detect_cycles()

    def get_topological_order(self) -> TopologicalOrder:
        with self._lock:
            return self._ordering.get_topological_order()

    def get_dependency_levels(self) -> DependencyLevels:
        with self._lock:
            return self._ordering.get_dependency_levels()

    def get_ready_nodes(self, completed: Optional[AbstractSet[NodeId]] = None) -> List[NodeId]:
        # Snapshot so a caller mutating its set concurrently cannot break iteration
        snapshot = frozenset(completed) if completed is not None else None
        with self._lock:
            return self._ordering.get_ready_nodes(snapshot)

    def get_blocked_nodes(
        self,
        completed: Optional[AbstractSet[NodeId]] = None
    ) -> Dict[NodeId, List[NodeId]]:
        snapshot = frozenset(completed) if completed is not None else None
        with self._lock:
            return self._ordering.get_blocked_nodes(snapshot)

    def get_stats(self) -> GraphStats:
        with self._lock:
            return self._ordering.get_stats()

    def get_critical_path(self) -> List[NodeId]:
        with self._lock:
            return self._ordering.get_critical_path()

    def export_to_dot(self) -> str:
        with self._lock:
            return self._ordering.export_to_dot()

    def to_mermaid(self) -> str:
        with self._lock:
            return self._ordering.to_mermaid()

    def to_ascii(self) -> str:
        with self._lock:
            return self._ordering.to_ascii()

    def validate(self) -> Dict[str, Any]:
        with self._lock:
            return self._ordering.validate()

    def snapshot(self) -> DependencyOrdering:
        """Independent unsynchronized copy of the current graph."""
        with self._lock:
            return self._ordering.clone()

    def clone(self) -> "SynchronizedDependencyOrdering":
        with self._lock:
            return SynchronizedDependencyOrdering(self._ordering.clone())
