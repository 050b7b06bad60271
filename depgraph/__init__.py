"""
depgraph
========

Dependency-ordering engine for interdependent stories and tasks.
"""

from depgraph.config import OrderingConfig, configure_logging
from depgraph.ordering import (
    DependencyOrdering,
    SynchronizedDependencyOrdering,
    create_dependency_ordering,
    create_ordering_from_stories,
)

__all__ = [
    'OrderingConfig',
    'configure_logging',
    'DependencyOrdering',
    'SynchronizedDependencyOrdering',
    'create_dependency_ordering',
    'create_ordering_from_stories',
]
