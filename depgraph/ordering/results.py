"""
Ordering Results
================

Result values returned by the ordering engine. Planning failures are reported
through these objects (success flag plus payload) rather than raised.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Hashable, List, Optional

NodeId = Hashable


class OrderingFailure(Enum):
    """Why a planning query could not produce a complete ordering."""
    CYCLE_DETECTED = "cycle_detected"
    INCOMPLETE_ORDERING = "incomplete_ordering"


@dataclass
class CycleReport:
    """
    Result of cycle detection.

    Attributes:
        has_cycles: Whether at least one cycle exists
        cycles: Each cycle as a closed path, e.g. ['a', 'b', 'a']
    """
    has_cycles: bool
    cycles: List[List[NodeId]] = field(default_factory=list)


@dataclass
class TopologicalOrder:
    """
    Result of topological sorting.

    Attributes:
        success: Whether every node was ordered
        order: Node ids, dependencies before dependents
        cycles: Offending cycles when a cycle blocked the ordering
        failure: Failure reason when success is False
    """
    success: bool
    order: List[NodeId] = field(default_factory=list)
    cycles: Optional[List[List[NodeId]]] = None
    failure: Optional[OrderingFailure] = None


@dataclass
class DependencyLevels:
    """
    Result of level partitioning.

    Attributes:
        success: Whether the levels cover the whole graph
        levels: levels[i] holds the nodes that can run in parallel at step i
        cycles: Offending cycles propagated from the topological order
        failure: Failure reason propagated from the topological order
    """
    success: bool
    levels: List[List[NodeId]] = field(default_factory=list)
    cycles: Optional[List[List[NodeId]]] = None
    failure: Optional[OrderingFailure] = None


@dataclass
class GraphStats:
    """
    Diagnostic counters for a dependency graph.

    Attributes:
        node_count: Number of nodes
        edge_count: Number of dependency edges
        leaf_nodes: Nodes with no dependencies
        root_nodes: Nodes nothing depends on
        max_depth: Number of dependency levels (0 when levels cannot be computed)
        average_dependencies: Edges per node (average out-degree)
    """
    node_count: int
    edge_count: int
    leaf_nodes: List[NodeId]
    root_nodes: List[NodeId]
    max_depth: int
    average_dependencies: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "node_count": self.node_count,
            "edge_count": self.edge_count,
            "leaf_nodes": list(self.leaf_nodes),
            "root_nodes": list(self.root_nodes),
            "max_depth": self.max_depth,
            "average_dependencies": self.average_dependencies,
        }
