"""
Dependency Ordering Module
==========================

This module computes safe execution orders for interdependent stories (tasks):
full topological orders, parallel-execution levels, and the set of stories
ready to run given what has already completed.

Main Components:
- DependencyOrdering: The dependency graph and all ordering queries
- SynchronizedDependencyOrdering: Lock-guarded wrapper for shared use
- StoryDescriptor: Validated input descriptor for bulk construction

Usage:
    from depgraph.ordering import create_ordering_from_stories

    ordering = create_ordering_from_stories([
        {'id': 'schema', 'priority': 5},
        {'id': 'api', 'dependencies': ['schema']},
    ])
    result = ordering.get_topological_order()
"""

from depgraph.ordering.builder import (
    GraphBuilder,
    InvalidStoryError,
    OrderingError,
    StoryDescriptor,
    UndeclaredDependencyError,
)
from depgraph.ordering.cycle_detector import CycleDetector
from depgraph.ordering.dependency_ordering import (
    DependencyOrdering,
    create_dependency_ordering,
    create_ordering_from_stories,
)
from depgraph.ordering.graph_store import GraphStore
from depgraph.ordering.level_partitioner import LevelPartitioner
from depgraph.ordering.readiness import ReadinessTracker
from depgraph.ordering.results import (
    CycleReport,
    DependencyLevels,
    GraphStats,
    OrderingFailure,
    TopologicalOrder,
)
from depgraph.ordering.synchronized import SynchronizedDependencyOrdering
from depgraph.ordering.topological_sorter import TopologicalSorter

__all__ = [
    'DependencyOrdering',
    'SynchronizedDependencyOrdering',
    'create_dependency_ordering',
    'create_ordering_from_stories',
    'GraphStore',
    'CycleDetector',
    'TopologicalSorter',
    'LevelPartitioner',
    'ReadinessTracker',
    'GraphBuilder',
    'StoryDescriptor',
    'CycleReport',
    'TopologicalOrder',
    'DependencyLevels',
    'GraphStats',
    'OrderingFailure',
    'OrderingError',
    'InvalidStoryError',
    'UndeclaredDependencyError',
]
