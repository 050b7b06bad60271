"""
Readiness Tracker
=================

Answers "what can run now?" for an executor that polls the graph as work
completes.

The tracker holds no state of its own: the caller owns the set of completed
node ids and passes it in on every call. It also never decides that a task
has failed. A dependency that never completes keeps its dependents out of
the ready list indefinitely; whether to cancel, retry or skip them is the
executor's decision (get_blocked_nodes() shows what each node still waits on).
"""

from typing import AbstractSet, Dict, List, Optional
import logging

from depgraph.ordering.graph_store import GraphStore
from depgraph.ordering.results import NodeId

logger = logging.getLogger(__name__)


class ReadinessTracker:
    """Stateless readiness queries over a GraphStore."""

    def __init__(self, store: GraphStore):
        self.store = store

    def get_ready_nodes(self, completed: Optional[AbstractSet[NodeId]] = None) -> List[NodeId]:
        """
        Nodes that are not completed and whose dependencies all are.

        Args:
            completed: Node ids the executor has finished (not mutated)

        Returns:
            Ready node ids, highest priority first, ties by ascending id
        """
        completed = completed if completed is not None else frozenset()

        ready = [
            node_id
            for node_id, deps in self.store.iter_dependencies()
            if node_id not in completed and all(dep in completed for dep in deps)
        ]
        logger.debug(f"{len(ready)} ready node(s) with {len(completed)} completed")
        return self.store.sort_by_priority(ready)

    def get_blocked_nodes(
        self,
        completed: Optional[AbstractSet[NodeId]] = None
    ) -> Dict[NodeId, List[NodeId]]:
        """
        Nodes still waiting on at least one dependency.

        Args:
            completed: Node ids the executor has finished (not mutated)

        Returns:
            Mapping of blocked node id to its outstanding dependency ids
        """
        completed = completed if completed is not None else frozenset()

        blocked: Dict[NodeId, List[NodeId]] = {}
        for node_id in self.store.nodes():
            if node_id in completed:
                continue
            outstanding = [
                dep for dep in self.store.get_dependencies(node_id) if dep not in completed
            ]
            if outstanding:
                blocked[node_id] = outstanding
        return blocked
