"""
Execution Plan Builder
======================

Turns the dependency levels of a graph into an execution plan: an ordered list
of batches, each of which may run in parallel once the previous batch has
finished. This is the static-planning output handed to an executor; the plan
carries no execution state of its own.
"""

import logging
from dataclasses import dataclass, field, asdict
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from uuid import UUID, uuid4

from depgraph.ordering.dependency_ordering import DependencyOrdering
from depgraph.ordering.results import NodeId

logger = logging.getLogger(__name__)


@dataclass
class ExecutionBatch:
    """
    A batch of nodes that can run together.

    Attributes:
        batch_id: Position of the batch in the plan
        node_ids: Nodes in this batch, highest priority first
        can_parallel: Whether the batch holds more than one node
        depends_on: Batch ids that must complete before this batch
    """
    batch_id: int
    node_ids: List[NodeId]
    can_parallel: bool = True
    depends_on: List[int] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ExecutionPlan:
    """
    Complete execution plan for a dependency graph.

    Attributes:
        plan_id: Identifier of this plan
        created_at: When the plan was created
        batches: Execution batches in order
        success: False when the graph could not be levelled
        metadata: Counters, plus failure details for failed plans
    """
    plan_id: UUID
    created_at: datetime
    batches: List[ExecutionBatch]
    success: bool = True
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to JSON-serializable dictionary."""
        return {
            "plan_id": str(self.plan_id),
            "created_at": self.created_at.isoformat(),
            "batches": [b.to_dict() for b in self.batches],
            "success": self.success,
            "metadata": self.metadata
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExecutionPlan":
        """Create ExecutionPlan from dictionary."""
        return cls(
            plan_id=UUID(data["plan_id"]),
            created_at=datetime.fromisoformat(data["created_at"]),
            batches=[ExecutionBatch(**b) for b in data["batches"]],
            success=data.get("success", True),
            metadata=data.get("metadata", {})
        )

    @property
    def total_nodes(self) -> int:
        """Total number of nodes in the plan."""
        return sum(len(b.node_ids) for b in self.batches)

    @property
    def parallel_batches(self) -> int:
        """Number of batches that can run in parallel."""
        return sum(1 for b in self.batches if b.can_parallel)


def build_execution_plan(ordering: DependencyOrdering, plan_id: Optional[UUID] = None) -> ExecutionPlan:
    """
    Build an execution plan from the graph's dependency levels.

    Args:
        ordering: Graph to plan
        plan_id: Optional plan identifier (generated when omitted)

    Returns:
        ExecutionPlan with one batch per level; an empty, unsuccessful plan
        whose metadata names the failure and cycles when levelling fails
    """
    plan_id = plan_id or uuid4()
    created_at = datetime.now(timezone.utc)

    levels = ordering.get_dependency_levels()
    if not levels.success:
        logger.error(f"Cannot build execution plan {plan_id}: {levels.failure}")
        return ExecutionPlan(
            plan_id=plan_id,
            created_at=created_at,
            batches=[],
            success=False,
            metadata={
                "reason": levels.failure.value if levels.failure else "unknown",
                "cycles": [[str(n) for n in cycle] for cycle in (levels.cycles or [])]
            }
        )

    batches = [
        ExecutionBatch(
            batch_id=index,
            node_ids=list(level),
            can_parallel=len(level) > 1,
            depends_on=[index - 1] if index > 0 else []
        )
        for index, level in enumerate(levels.levels)
    ]

    plan = ExecutionPlan(
        plan_id=plan_id,
        created_at=created_at,
        batches=batches,
        metadata={
            "total_nodes": sum(len(b.node_ids) for b in batches),
            "total_batches": len(batches),
            "parallel_possible": sum(1 for b in batches if b.can_parallel),
            "edge_count": ordering.edge_count()
        }
    )

    logger.info(f"Execution plan built: {plan.total_nodes} nodes in "
                f"{len(plan.batches)} batches, {plan.parallel_batches} parallel")
    return plan


def validate_plan(plan: ExecutionPlan) -> Dict[str, Any]:
    """
    Validate an execution plan for issues.

    Args:
        plan: ExecutionPlan to validate

    Returns:
        Validation result with any issues found
    """
    issues = []

    if not plan.success:
        issues.append({
            "type": "planning_failed",
            "reason": plan.metadata.get("reason"),
            "message": "Graph could not be ordered"
        })

    seen: Dict[NodeId, int] = {}
    for batch in plan.batches:
        if not batch.node_ids:
            issues.append({
                "type": "empty_batch",
                "batch_id": batch.batch_id,
                "message": "Batch has no nodes"
            })
        for node_id in batch.node_ids:
            if node_id in seen:
                issues.append({
                    "type": "duplicate_node",
                    "node_id": node_id,
                    "batch_ids": [seen[node_id], batch.batch_id],
                    "message": f"Node {node_id} appears in more than one batch"
                })
            else:
                seen[node_id] = batch.batch_id

        if any(dep >= batch.batch_id for dep in batch.depends_on):
            issues.append({
                "type": "forward_batch_dependency",
                "batch_id": batch.batch_id,
                "message": "Batch depends on itself or a later batch"
            })

    return {
        "valid": len(issues) == 0,
        "issues": issues
    }
