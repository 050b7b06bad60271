"""
Tests for execution plan building.

Tests cover:
- Building plans for empty graphs
- Building plans with a single batch (no dependencies)
- Building plans with multiple batches (dependencies)
- Failed plans for cyclic graphs
- Serialization round trip and plan validation
"""

import sys
from pathlib import Path
from uuid import uuid4

sys.path.insert(0, str(Path(__file__).parent.parent))

from depgraph.execution_plan import (
    ExecutionBatch,
    ExecutionPlan,
    build_execution_plan,
    validate_plan,
)
from depgraph.ordering import DependencyOrdering, create_ordering_from_stories


def test_build_plan_empty_graph():
    """Plan for an empty graph has no batches."""
    plan = build_execution_plan(DependencyOrdering())

    assert plan.success, "Empty plan is still a successful plan"
    assert plan.batches == [], f"Expected 0 batches, got {len(plan.batches)}"
    assert plan.total_nodes == 0


def test_build_plan_single_batch():
    """Stories with no dependencies form a single parallel batch."""
    print("\n=== Test: Single Batch (No Dependencies) ===")

    ordering = create_ordering_from_stories([
        {"id": "s1", "priority": 1},
        {"id": "s2", "priority": 3},
        {"id": "s3", "priority": 2},
    ])
    plan = build_execution_plan(ordering)

    assert len(plan.batches) == 1, f"Expected 1 batch, got {len(plan.batches)}"
    assert plan.batches[0].node_ids == ["s2", "s3", "s1"], f"Got {plan.batches[0].node_ids}"
    assert plan.batches[0].can_parallel, "Batch should be parallelizable"
    assert plan.batches[0].depends_on == []

    print(f"[PASS] Single batch with {len(plan.batches[0].node_ids)} stories")


def test_build_plan_multiple_batches():
    """Dependencies produce one batch per level, each waiting on the previous."""
    ordering = create_ordering_from_stories([
        {"id": "A"},
        {"id": "B", "dependencies": ["A"]},
        {"id": "C", "dependencies": ["A"]},
        {"id": "D", "dependencies": ["B", "C"]},
    ])
    plan_id = uuid4()
    plan = build_execution_plan(ordering, plan_id=plan_id)

    assert plan.plan_id == plan_id
    assert [b.node_ids for b in plan.batches] == [["A"], ["B", "C"], ["D"]]
    assert [b.can_parallel for b in plan.batches] == [False, True, False]
    assert [b.depends_on for b in plan.batches] == [[], [0], [1]]
    assert plan.parallel_batches == 1
    assert plan.metadata["total_nodes"] == 4
    assert plan.metadata["total_batches"] == 3
    assert plan.metadata["edge_count"] == 4
    assert validate_plan(plan)["valid"]


def test_build_plan_with_cycle_fails():
    """A cyclic graph yields an empty, unsuccessful plan with the cycle attached."""
    ordering = DependencyOrdering()
    ordering.add_dependency("A", "B")
    ordering.add_dependency("B", "A")

    plan = build_execution_plan(ordering)

    assert not plan.success
    assert plan.batches == []
    assert plan.metadata["reason"] == "cycle_detected"
    assert plan.metadata["cycles"] == [["A", "B", "A"]]

    result = validate_plan(plan)
    assert not result["valid"]
    assert result["issues"][0]["type"] == "planning_failed"


def test_plan_serialization():
    """to_dict/from_dict preserve the plan."""
    ordering = create_ordering_from_stories([
        {"id": "A"},
        {"id": "B", "dependencies": ["A"]},
    ])
    plan = build_execution_plan(ordering)

    restored = ExecutionPlan.from_dict(plan.to_dict())

    assert restored.plan_id == plan.plan_id
    assert restored.created_at == plan.created_at
    assert restored.batches == plan.batches
    assert restored.metadata == plan.metadata
    assert isinstance(plan.to_dict()["plan_id"], str)


def test_validate_plan_detects_problems():
    plan = build_execution_plan(DependencyOrdering())
    plan.batches = [
        ExecutionBatch(batch_id=0, node_ids=["A"]),
        ExecutionBatch(batch_id=1, node_ids=[], depends_on=[0]),
        ExecutionBatch(batch_id=2, node_ids=["A"], depends_on=[2]),
    ]

    issue_types = {issue["type"] for issue in validate_plan(plan)["issues"]}
    assert issue_types == {"empty_batch", "duplicate_node", "forward_batch_dependency"}, issue_types
