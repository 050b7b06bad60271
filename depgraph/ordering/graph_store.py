"""
Graph Store
===========

In-memory storage for the dependency graph.

Every edge is recorded twice so both directions can be traversed directly:

- dependencies[node] holds the nodes `node` requires first
- dependents[node] holds the nodes that require `node`

The two maps are always mirror images, and the node sets of the dependency,
dependent and metadata maps are always identical. Mutations never raise:
adding an existing node or removing an unknown node or edge is a no-op.
"""

from typing import Any, Dict, Iterator, List, Optional, Set, Tuple
import copy
import logging

from depgraph.config import OrderingConfig
from depgraph.ordering.results import NodeId

logger = logging.getLogger(__name__)


def tiebreak_key(node_id: NodeId) -> str:
    """Deterministic secondary ordering for nodes of equal priority."""
    return str(node_id)


def copy_metadata(metadata: Dict[str, Any]) -> Dict[str, Any]:
    """
    Deep-copy a metadata dict value by value.

    Values that cannot be copied (locks, connections, futures) are shared
    by reference; the dict itself is always new.
    """
    copied = {}
    for key, value in metadata.items():
        try:
            copied[key] = copy.deepcopy(value)
        except (TypeError, copy.Error) as e:
            logger.debug(f"Sharing uncopyable metadata value {key!r}: {e}")
            copied[key] = value
    return copied


class GraphStore:
    """
    Node, metadata and edge storage with mutation primitives.

    Not thread-safe: callers must serialise access, or use
    SynchronizedDependencyOrdering.
    """

    def __init__(self, config: Optional[OrderingConfig] = None):
        self.config = config or OrderingConfig()
        self._dependencies: Dict[NodeId, Set[NodeId]] = {}
        self._dependents: Dict[NodeId, Set[NodeId]] = {}
        self._metadata: Dict[NodeId, Dict[str, Any]] = {}

    # =========================================================================
    # Mutation
    # =========================================================================

    def add_node(self, node_id: NodeId, metadata: Optional[Dict[str, Any]] = None) -> None:
        """
        Add a node to the graph.

        Idempotent: if the node already exists its original metadata is kept.

        Args:
            node_id: Unique node identifier
            metadata: Optional metadata dict (priority plus caller fields)
        """
        if node_id in self._dependencies:
            return

        self._dependencies[node_id] = set()
        self._dependents[node_id] = set()
        self._metadata[node_id] = dict(metadata) if metadata else {}
        logger.debug(f"Node added to dependency graph: {node_id} {self._metadata[node_id]}")

    def add_dependency(self, node_id: NodeId, depends_on: NodeId) -> None:
        """
        Record that `node_id` requires `depends_on` first.

        Both endpoints are created when missing.
        """
        self.add_node(node_id)
        self.add_node(depends_on)

        self._dependencies[node_id].add(depends_on)
        self._dependents[depends_on].add(node_id)
        logger.debug(f"Dependency added: {node_id} -> {depends_on}")

    def remove_dependency(self, node_id: NodeId, depends_on: NodeId) -> None:
        """Remove the edge from both maps; no-op if it does not exist."""
        if node_id in self._dependencies:
            self._dependencies[node_id].discard(depends_on)
        if depends_on in self._dependents:
            self._dependents[depends_on].discard(node_id)
        logger.debug(f"Dependency removed: {node_id} -> {depends_on}")

    def remove_node(self, node_id: NodeId) -> None:
        """
        Remove a node and every edge that references it.

        Outgoing and incoming edges are stripped from both maps before the
        node itself is deleted, so no dangling references remain.
        """
        if node_id not in self._dependencies:
            return

        for dep in list(self._dependencies[node_id]):
            self.remove_dependency(node_id, dep)

        for dependent in list(self._dependents[node_id]):
            self.remove_dependency(dependent, node_id)

        del self._dependencies[node_id]
        del self._dependents[node_id]
        del self._metadata[node_id]
        logger.debug(f"Node removed from dependency graph: {node_id}")

    def clear(self) -> None:
        """Remove all nodes and edges."""
        self._dependencies.clear()
        self._dependents.clear()
        self._metadata.clear()

    def copy_into(self, other: "GraphStore") -> None:
        """Deep-copy nodes, metadata and edges into another (empty) store."""
        for node_id, metadata in self._metadata.items():
            other.add_node(node_id, copy_metadata(metadata))
        for node_id, deps in self._dependencies.items():
            for dep in deps:
                other.add_dependency(node_id, dep)

    # =========================================================================
    # Queries
    # =========================================================================

    def has_node(self, node_id: NodeId) -> bool:
        return node_id in self._dependencies

    def __contains__(self, node_id: NodeId) -> bool:
        return self.has_node(node_id)

    def __len__(self) -> int:
        return len(self._dependencies)

    def nodes(self) -> List[NodeId]:
        """All node ids in insertion order."""
        return list(self._dependencies)

    def iter_dependencies(self) -> Iterator[Tuple[NodeId, Set[NodeId]]]:
        """Iterate (node, dependency set) pairs without copying."""
        return iter(self._dependencies.items())

    def dependency_set(self, node_id: NodeId) -> Set[NodeId]:
        """Internal view of a node's dependencies (do not mutate)."""
        return self._dependencies.get(node_id, set())

    def dependent_set(self, node_id: NodeId) -> Set[NodeId]:
        """Internal view of a node's dependents (do not mutate)."""
        return self._dependents.get(node_id, set())

    def get_dependencies(self, node_id: NodeId) -> List[NodeId]:
        """Nodes that `node_id` depends on, sorted by id."""
        return sorted(self.dependency_set(node_id), key=tiebreak_key)

    def get_dependents(self, node_id: NodeId) -> List[NodeId]:
        """Nodes that depend on `node_id`, sorted by id."""
        return sorted(self.dependent_set(node_id), key=tiebreak_key)

    def metadata_view(self, node_id: NodeId) -> Dict[str, Any]:
        """Internal view of a node's metadata (do not mutate)."""
        return self._metadata.get(node_id, {})

    def get_metadata(self, node_id: NodeId) -> Dict[str, Any]:
        """Copy of a node's metadata (empty for unknown nodes)."""
        return copy_metadata(self.metadata_view(node_id))

    def edge_count(self) -> int:
        return sum(len(deps) for deps in self._dependencies.values())

    def priority_of(self, node_id: NodeId) -> float:
        """
        Priority of a node, falling back to the configured default.

        Missing, None or non-numeric priorities read as the default.
        """
        value = self._metadata.get(node_id, {}).get("priority")
        if value is None or isinstance(value, bool):
            return self.config.default_priority
        if isinstance(value, (int, float)):
            return value
        try:
            return float(value)
        except (TypeError, ValueError):
            logger.warning(f"Node {node_id} has non-numeric priority {value!r}, using default")
            return self.config.default_priority

    def priority_key(self, node_id: NodeId) -> Tuple[float, str]:
        """Sort key: highest priority first, then ascending id."""
        return (-self.priority_of(node_id), tiebreak_key(node_id))

    def sort_by_priority(self, node_ids) -> List[NodeId]:
        return sorted(node_ids, key=self.priority_key)

    # =========================================================================
    # Diagnostics
    # =========================================================================

    def validate(self) -> Dict[str, Any]:
        """
        Check the storage invariants.

        Returns:
            {"valid": bool, "issues": [...]} where each issue is a dict with
            a "type" and a "message". Any issue indicates a bug.
        """
        issues = []

        node_sets = (set(self._dependencies), set(self._dependents), set(self._metadata))
        if not (node_sets[0] == node_sets[1] == node_sets[2]):
            issues.append({
                "type": "node_set_mismatch",
                "message": "dependency, dependent and metadata maps hold different nodes"
            })

        for node_id, deps in self._dependencies.items():
            for dep in deps:
                if node_id not in self._dependents.get(dep, set()):
                    issues.append({
                        "type": "missing_reverse_edge",
                        "edge": (node_id, dep),
                        "message": f"{node_id} -> {dep} has no mirror in dependents"
                    })

        for node_id, dependents in self._dependents.items():
            for dependent in dependents:
                if node_id not in self._dependencies.get(dependent, set()):
                    issues.append({
                        "type": "missing_forward_edge",
                        "edge": (dependent, node_id),
                        "message": f"{dependent} -> {node_id} has no mirror in dependencies"
                    })

        if issues:
            logger.error(f"Dependency graph failed validation with {len(issues)} issue(s)")

        return {"valid": len(issues) == 0, "issues": issues}
